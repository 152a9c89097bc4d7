"""Post-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from reveal.services.content import PostListing


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")


class PostCreated(BaseModel):
    """Identifiers returned after a post is stored."""

    id: uuid.UUID
    created_at: datetime


class PostResponse(BaseModel):
    """Schema for a post in the public feed."""

    id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    flagged: bool
    upvotes: int
    downvotes: int
    score: int
    user_vote: str = ""

    @classmethod
    def from_listing(cls, listing: PostListing) -> "PostResponse":
        post, tally = listing.post, listing.tally
        return cls(
            id=post.id,
            title=post.title,
            content=post.body,
            created_at=post.created_at,
            flagged=post.hidden,
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            score=tally.score,
            user_vote=tally.user_vote.value if tally.user_vote else "",
        )

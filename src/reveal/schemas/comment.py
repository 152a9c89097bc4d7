"""Comment-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from reveal.services.content import CommentListing


class CommentCreate(BaseModel):
    """Schema for creating a comment on a post."""

    content: str = Field(..., description="Comment body")


class CommentCreated(BaseModel):
    """Comment returned right after creation."""

    id: uuid.UUID
    post_id: uuid.UUID
    content: str = Field(validation_alias="body")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    """Schema for a comment in a post's thread."""

    id: uuid.UUID
    post_id: uuid.UUID
    content: str
    created_at: datetime
    flagged: bool
    upvotes: int
    downvotes: int
    score: int
    user_vote: str = ""

    @classmethod
    def from_listing(cls, listing: CommentListing) -> "CommentResponse":
        comment, tally = listing.comment, listing.tally
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            content=comment.body,
            created_at=comment.created_at,
            flagged=comment.hidden,
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            score=tally.score,
            user_vote=tally.user_vote.value if tally.user_vote else "",
        )

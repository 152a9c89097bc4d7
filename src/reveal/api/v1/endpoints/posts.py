"""Post-related endpoints for the Reveal API."""

import uuid

from fastapi import APIRouter, Query, status

from reveal.api.v1.dependencies import (
    ContentStoreDep,
    FlagEscalatorDep,
    IdentityDep,
    RequestLimitDep,
    SessionDep,
)
from reveal.api.v1.errors import ERROR_RESPONSES
from reveal.models import Target
from reveal.schemas.moderation import FlagRequest, FlagResponse
from reveal.schemas.post import PostCreate, PostCreated, PostResponse

router = APIRouter(prefix="/posts", tags=["posts"], responses=ERROR_RESPONSES)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PostCreated,
    dependencies=[RequestLimitDep],
)
async def create_post(
    post_data: PostCreate,
    identity: IdentityDep,
    db: SessionDep,
    content: ContentStoreDep,
) -> PostCreated:
    """Submit a post anonymously."""
    post = content.create_post(db, post_data.title, post_data.content, identity)
    return PostCreated(id=post.id, created_at=post.created_at)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    identity: IdentityDep,
    db: SessionDep,
    content: ContentStoreDep,
    limit: int | None = Query(None, description="Page size, default 50, capped at 100"),
) -> list[PostResponse]:
    """List recent posts visible to the caller, newest first."""
    listings = content.list_visible_posts(db, identity, limit)
    return [PostResponse.from_listing(listing) for listing in listings]


@router.post(
    "/{post_id}/flag",
    response_model=FlagResponse,
    dependencies=[RequestLimitDep],
)
async def flag_post(
    post_id: uuid.UUID,
    flag_data: FlagRequest,
    identity: IdentityDep,
    db: SessionDep,
    escalator: FlagEscalatorDep,
) -> FlagResponse:
    """Flag a post as inappropriate."""
    outcome = escalator.file_flag(
        db, Target.post(post_id), identity, flag_data.reason, flag_data.details
    )
    return FlagResponse(
        message="Post flagged successfully",
        flag_count=outcome.flag_count,
        hidden=outcome.hidden,
    )

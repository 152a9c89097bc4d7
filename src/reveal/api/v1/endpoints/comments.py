"""Comment-related endpoints for the Reveal API."""

import uuid

from fastapi import APIRouter, status

from reveal.api.v1.dependencies import (
    ContentStoreDep,
    FlagEscalatorDep,
    IdentityDep,
    RequestLimitDep,
    SessionDep,
)
from reveal.api.v1.errors import ERROR_RESPONSES
from reveal.models import Target
from reveal.schemas.comment import CommentCreate, CommentCreated, CommentResponse
from reveal.schemas.moderation import FlagRequest, FlagResponse

router = APIRouter(tags=["comments"], responses=ERROR_RESPONSES)


@router.post(
    "/posts/{post_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model=CommentCreated,
    dependencies=[RequestLimitDep],
)
async def create_comment(
    post_id: uuid.UUID,
    comment_data: CommentCreate,
    identity: IdentityDep,
    db: SessionDep,
    content: ContentStoreDep,
) -> CommentCreated:
    """Add a comment to a post."""
    comment = content.create_comment(db, post_id, comment_data.content, identity)
    return CommentCreated.model_validate(comment)


@router.get("/posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: uuid.UUID,
    identity: IdentityDep,
    db: SessionDep,
    content: ContentStoreDep,
) -> list[CommentResponse]:
    """List a post's comments visible to the caller, oldest first."""
    listings = content.list_visible_comments(db, post_id, identity)
    return [CommentResponse.from_listing(listing) for listing in listings]


@router.post(
    "/comments/{comment_id}/flag",
    response_model=FlagResponse,
    dependencies=[RequestLimitDep],
)
async def flag_comment(
    comment_id: uuid.UUID,
    flag_data: FlagRequest,
    identity: IdentityDep,
    db: SessionDep,
    escalator: FlagEscalatorDep,
) -> FlagResponse:
    """Flag a comment as inappropriate."""
    outcome = escalator.file_flag(
        db, Target.comment(comment_id), identity, flag_data.reason, flag_data.details
    )
    return FlagResponse(
        message="Comment flagged successfully",
        flag_count=outcome.flag_count,
        hidden=outcome.hidden,
    )

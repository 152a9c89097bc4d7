"""Vote-related endpoints for the Reveal API.

Posts and comments share the same toggle semantics; each route builds the
matching target and hands it to the vote ledger.
"""

import uuid

from fastapi import APIRouter

from reveal.api.v1.dependencies import IdentityDep, RequestLimitDep, SessionDep, VoteLedgerDep
from reveal.api.v1.errors import ERROR_RESPONSES
from reveal.models import Target
from reveal.schemas.vote import VoteRequest, VoteResponse

router = APIRouter(tags=["votes"], responses=ERROR_RESPONSES)


@router.post(
    "/posts/{post_id}/vote",
    response_model=VoteResponse,
    dependencies=[RequestLimitDep],
)
async def vote_on_post(
    post_id: uuid.UUID,
    vote_data: VoteRequest,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Cast, switch or toggle off the caller's vote on a post."""
    result = ledger.cast_vote(db, Target.post(post_id), identity, vote_data.vote_type)
    return VoteResponse.from_tally(result.tally)


@router.delete("/posts/{post_id}/vote", response_model=VoteResponse)
async def remove_post_vote(
    post_id: uuid.UUID,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Remove the caller's vote on a post."""
    target = Target.post(post_id)
    ledger.remove_vote(db, target, identity)
    return VoteResponse.from_tally(ledger.get_tallies(db, target, identity))


@router.get("/posts/{post_id}/votes", response_model=VoteResponse)
async def get_post_votes(
    post_id: uuid.UUID,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Get vote counts for a post."""
    target = Target.post(post_id)
    ledger.content.get_target(db, target)
    return VoteResponse.from_tally(ledger.get_tallies(db, target, identity))


@router.post(
    "/comments/{comment_id}/vote",
    response_model=VoteResponse,
    dependencies=[RequestLimitDep],
)
async def vote_on_comment(
    comment_id: uuid.UUID,
    vote_data: VoteRequest,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Cast, switch or toggle off the caller's vote on a comment."""
    result = ledger.cast_vote(db, Target.comment(comment_id), identity, vote_data.vote_type)
    return VoteResponse.from_tally(result.tally)


@router.delete("/comments/{comment_id}/vote", response_model=VoteResponse)
async def remove_comment_vote(
    comment_id: uuid.UUID,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Remove the caller's vote on a comment."""
    target = Target.comment(comment_id)
    ledger.remove_vote(db, target, identity)
    return VoteResponse.from_tally(ledger.get_tallies(db, target, identity))


@router.get("/comments/{comment_id}/votes", response_model=VoteResponse)
async def get_comment_votes(
    comment_id: uuid.UUID,
    identity: IdentityDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Get vote counts for a comment."""
    target = Target.comment(comment_id)
    ledger.content.get_target(db, target)
    return VoteResponse.from_tally(ledger.get_tallies(db, target, identity))

"""Read-side vote aggregation shared by listings and the vote ledger."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from reveal.models import Target, TargetKind, Vote, VoteKind


@dataclass(frozen=True)
class VoteTally:
    """Aggregate votes on a target plus the requester's own vote."""

    upvotes: int = 0
    downvotes: int = 0
    user_vote: VoteKind | None = None

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes


def _target_column(kind: TargetKind):
    return Vote.post_id if kind is TargetKind.POST else Vote.comment_id


def get_tallies(db: Session, target: Target, requester_hash: str | None) -> VoteTally:
    """Return the tally for one target.

    Counts are grouped by vote kind; the score is derived, never stored.
    """
    return tallies_for(db, target.kind, [target.id], requester_hash)[target.id]


def tallies_for(
    db: Session,
    kind: TargetKind,
    target_ids: Iterable[uuid.UUID],
    requester_hash: str | None,
) -> dict[uuid.UUID, VoteTally]:
    """Return tallies for many targets of the same kind in two queries."""
    ids = list(target_ids)
    if not ids:
        return {}

    column = _target_column(kind)
    counts: dict[uuid.UUID, dict[str, int]] = {target_id: {} for target_id in ids}
    rows = db.execute(
        select(column, Vote.vote_type, func.count())
        .where(column.in_(ids))
        .group_by(column, Vote.vote_type)
    ).all()
    for target_id, vote_type, count in rows:
        counts[target_id][vote_type] = int(count)

    mine: dict[uuid.UUID, VoteKind] = {}
    if requester_hash:
        for target_id, vote_type in db.execute(
            select(column, Vote.vote_type).where(
                column.in_(ids),
                Vote.ip_hash == requester_hash,
            )
        ).all():
            mine[target_id] = VoteKind(vote_type)

    return {
        target_id: VoteTally(
            upvotes=counts[target_id].get(VoteKind.UPVOTE.value, 0),
            downvotes=counts[target_id].get(VoteKind.DOWNVOTE.value, 0),
            user_vote=mine.get(target_id),
        )
        for target_id in ids
    }

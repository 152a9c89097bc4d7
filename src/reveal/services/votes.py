"""Toggleable vote ledger for posts and comments.

Each (target, identity) pair is in one of three states: no vote, upvoted or
downvoted. Casting a kind moves the pair as follows::

    no vote   --K-->          create row with kind K
    K         --K-->          delete row (toggle off)
    K         --opposite-->   overwrite kind and timestamp in place

The unique constraints on ``votes`` are the hard guard against a second row;
the lookup before insert is only an optimization. When two requests race, the
loser's insert fails inside a SAVEPOINT and the transition is applied to the
winner's row instead.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reveal.db.time import utcnow
from reveal.models import Target, TargetKind, Vote, VoteKind
from reveal.services.content import ContentStore
from reveal.services.errors import InvalidArgumentError, VoteNotFoundError
from reveal.services.tally import VoteTally, get_tallies
from reveal.services.throttle import ThrottleAction, ThrottleGate

logger = logging.getLogger(__name__)


class VoteTransition(str, enum.Enum):
    """What a cast did to the (target, identity) row."""

    CREATED = "created"
    SWITCHED = "switched"
    REMOVED = "removed"


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a cast: the transition taken and the fresh tally."""

    transition: VoteTransition
    tally: VoteTally


def parse_vote_kind(value: str | VoteKind) -> VoteKind:
    """Return the VoteKind for `value` or raise InvalidArgumentError."""
    if isinstance(value, VoteKind):
        return value
    try:
        return VoteKind(value)
    except ValueError as err:
        raise InvalidArgumentError(
            "Invalid vote type. Must be 'upvote' or 'downvote'"
        ) from err


def _pair_filter(target: Target, identity_hash: str):
    column = Vote.post_id if target.kind is TargetKind.POST else Vote.comment_id
    return column == target.id, Vote.ip_hash == identity_hash


class VoteLedger:
    """Apply the toggle state machine and report tallies."""

    def __init__(
        self,
        content: ContentStore | None = None,
        throttle: ThrottleGate | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.content = content or ContentStore()
        self.throttle = throttle or self.content.throttle
        self._clock = clock

    def find_vote(self, db: Session, target: Target, identity_hash: str) -> Vote | None:
        """Return the pair's row, if any."""
        return db.scalars(
            select(Vote).where(*_pair_filter(target, identity_hash)).with_for_update()
        ).first()

    def cast_vote(
        self,
        db: Session,
        target: Target,
        identity_hash: str,
        kind: str | VoteKind,
    ) -> VoteResult:
        """Create, switch or toggle off the identity's vote on a target.

        Args:
            db: Database session
            target: Post or comment being voted on
            identity_hash: Pseudonymous identity of the voter
            kind: ``upvote`` or ``downvote``

        Returns:
            The transition taken and the tally after it

        Raises:
            InvalidArgumentError: `kind` is not a vote kind
            NotFoundError: The target does not exist
            RateLimitedError: The identity exceeded the vote-cast window
        """
        vote_kind = parse_vote_kind(kind)
        self.content.get_target(db, target)
        self.throttle.check(db, identity_hash, ThrottleAction.VOTE_CAST)

        transition = self._apply(db, target, identity_hash, vote_kind)
        db.commit()

        logger.debug("Vote %s on %s %s", transition.value, target.kind.value, target.id)
        return VoteResult(transition=transition, tally=get_tallies(db, target, identity_hash))

    def _apply(
        self,
        db: Session,
        target: Target,
        identity_hash: str,
        kind: VoteKind,
    ) -> VoteTransition:
        existing = self.find_vote(db, target, identity_hash)
        if existing is None:
            try:
                with db.begin_nested():
                    db.add(
                        Vote(
                            target_type=target.kind.value,
                            post_id=target.post_id,
                            comment_id=target.comment_id,
                            vote_type=kind.value,
                            ip_hash=identity_hash,
                            created_at=self._clock(),
                        )
                    )
                    db.flush()
                return VoteTransition.CREATED
            except IntegrityError:
                logger.info(
                    "Concurrent vote on %s %s; applying transition to existing row",
                    target.kind.value,
                    target.id,
                )
                existing = self.find_vote(db, target, identity_hash)
                if existing is None:
                    raise

        if existing.vote_type == kind.value:
            db.delete(existing)
            db.flush()
            return VoteTransition.REMOVED

        existing.vote_type = kind.value
        existing.created_at = self._clock()
        db.flush()
        return VoteTransition.SWITCHED

    def remove_vote(self, db: Session, target: Target, identity_hash: str) -> None:
        """Delete the identity's vote on a target.

        Raises:
            VoteNotFoundError: The identity has no vote on the target
        """
        existing = self.find_vote(db, target, identity_hash)
        if existing is None:
            raise VoteNotFoundError()
        db.delete(existing)
        db.commit()

    @staticmethod
    def get_tallies(db: Session, target: Target, requester_hash: str | None) -> VoteTally:
        """Return up/down counts and the requester's vote for a target."""
        return get_tallies(db, target, requester_hash)

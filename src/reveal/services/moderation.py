"""Community flagging and threshold-triggered hiding."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reveal.core.settings import settings
from reveal.db.time import utcnow
from reveal.models import FLAG_REASON_LABELS, Flag, FlagReason, Target, TargetKind
from reveal.services.content import ContentStore
from reveal.services.errors import AlreadyFlaggedError, InvalidReasonError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagOutcome:
    """Result of an accepted flag."""

    flag: Flag
    flag_count: int
    hidden: bool
    # True only for the flag that pushed the target over its threshold.
    escalated: bool


def flag_reasons() -> dict[str, str]:
    """Return every accepted reason with a human-readable label."""
    return {reason.value: FLAG_REASON_LABELS[reason] for reason in FlagReason}


def parse_flag_reason(reason: str | FlagReason, details: str | None) -> tuple[FlagReason, str]:
    """Validate a reason and its details.

    Raises:
        InvalidReasonError: Unknown reason, or ``other`` without details
    """
    try:
        parsed = reason if isinstance(reason, FlagReason) else FlagReason(reason)
    except ValueError as err:
        raise InvalidReasonError("Invalid flag reason") from err

    details = (details or "").strip()
    if parsed is FlagReason.OTHER and not details:
        raise InvalidReasonError("Details required when reason is 'other'")
    return parsed, details


def _flag_filter(target: Target):
    if target.kind is TargetKind.POST:
        return Flag.post_id == target.id
    return Flag.comment_id == target.id


class FlagEscalator:
    """Record flags and hide targets once enough identities flag them.

    Posts and comments escalate at separate thresholds.
    """

    def __init__(
        self,
        content: ContentStore | None = None,
        thresholds: Mapping[TargetKind, int] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.content = content or ContentStore()
        if thresholds is None:
            thresholds = {
                TargetKind(kind): count for kind, count in settings.flag_thresholds.items()
            }
        self.thresholds = dict(thresholds)
        self._clock = clock

    def has_flagged(self, db: Session, target: Target, identity_hash: str) -> bool:
        stmt = select(Flag.id).where(_flag_filter(target), Flag.ip_hash == identity_hash)
        return db.scalars(stmt).first() is not None

    def count_flags(self, db: Session, target: Target) -> int:
        stmt = select(func.count()).select_from(Flag).where(_flag_filter(target))
        return int(db.scalar(stmt) or 0)

    def file_flag(
        self,
        db: Session,
        target: Target,
        identity_hash: str,
        reason: str | FlagReason,
        details: str | None = None,
    ) -> FlagOutcome:
        """Record a flag and hide the target when its threshold is reached.

        Args:
            db: Database session
            target: Post or comment being flagged
            identity_hash: Pseudonymous identity of the flagger
            reason: One of the enumerated flag reasons
            details: Free text, required when the reason is ``other``

        Returns:
            The stored flag, the target's flag count and its hidden state

        Raises:
            AlreadyFlaggedError: The identity already flagged this target
            NotFoundError: The target does not exist
            InvalidReasonError: Bad reason, or ``other`` without details
        """
        if self.has_flagged(db, target, identity_hash):
            raise AlreadyFlaggedError(f"You have already flagged this {target.kind.value}")

        # Concurrent flags on one target serialize here so the count below sees them all.
        row = self.content.get_target(db, target, lock=True)
        parsed_reason, details = parse_flag_reason(reason, details)

        flag = Flag(
            flag_type=target.kind.value,
            post_id=target.post_id,
            comment_id=target.comment_id,
            ip_hash=identity_hash,
            reason=parsed_reason.value,
            details=details,
            created_at=self._clock(),
        )
        try:
            with db.begin_nested():
                db.add(flag)
                db.flush()
        except IntegrityError as err:
            raise AlreadyFlaggedError(
                f"You have already flagged this {target.kind.value}"
            ) from err

        flag_count = self.count_flags(db, target)
        escalated = False
        if flag_count >= self.thresholds[target.kind]:
            escalated = self.content.hide(db, row)
        db.commit()

        if escalated:
            logger.info(
                "Hid %s %s after %d flags",
                target.kind.value,
                target.id,
                flag_count,
            )
        return FlagOutcome(flag=flag, flag_count=flag_count, hidden=row.hidden, escalated=escalated)

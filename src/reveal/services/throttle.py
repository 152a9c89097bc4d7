"""Per-identity action throttles derived from existing rows.

The gate keeps no counters of its own: it counts the identity's posts,
comments or votes created inside a trailing window. Counts are read without
locking, so a concurrent burst can overshoot a limit slightly, and the window
boundary allows a burst of up to twice the limit.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from reveal.core.settings import Settings, settings
from reveal.db.time import utcnow
from reveal.models import Comment, Post, Vote
from reveal.services.errors import RateLimitedError

logger = logging.getLogger(__name__)


class ThrottleAction(str, enum.Enum):
    """Classes of actions with their own window and limit."""

    POST_CREATE = "post_create"
    COMMENT_CREATE = "comment_create"
    VOTE_CAST = "vote_cast"


_ACTION_MODELS: dict[ThrottleAction, type[Post] | type[Comment] | type[Vote]] = {
    ThrottleAction.POST_CREATE: Post,
    ThrottleAction.COMMENT_CREATE: Comment,
    ThrottleAction.VOTE_CAST: Vote,
}

_RATE_LIMIT_MESSAGES: dict[ThrottleAction, str] = {
    ThrottleAction.POST_CREATE: (
        "You're posting too frequently. Please wait a moment before posting again."
    ),
    ThrottleAction.COMMENT_CREATE: (
        "You're commenting too frequently. Please wait a moment."
    ),
    ThrottleAction.VOTE_CAST: "You're voting too frequently. Please wait a moment.",
}


@dataclass(frozen=True)
class ThrottleRule:
    """At most `limit` actions inside the trailing `window`."""

    limit: int
    window: timedelta


def rules_from_settings(config: Settings) -> dict[ThrottleAction, ThrottleRule]:
    """Build throttle rules from configuration."""
    return {
        ThrottleAction(name): ThrottleRule(limit=limit, window=timedelta(seconds=seconds))
        for name, (limit, seconds) in config.throttle_limits.items()
    }


class ThrottleGate:
    """Answer whether an identity may perform another action of a class."""

    def __init__(
        self,
        rules: Mapping[ThrottleAction, ThrottleRule] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.rules = dict(rules) if rules is not None else rules_from_settings(settings)
        self._clock = clock

    def count_recent(self, db: Session, identity_hash: str, action: ThrottleAction) -> int:
        """Return how many actions the identity recorded inside the window."""
        rule = self.rules[action]
        model = _ACTION_MODELS[action]
        cutoff = self._clock() - rule.window
        stmt = (
            select(func.count())
            .select_from(model)
            .where(model.ip_hash == identity_hash, model.created_at > cutoff)
        )
        return int(db.scalar(stmt) or 0)

    def allow(self, db: Session, identity_hash: str, action: ThrottleAction) -> bool:
        """Return False once the identity already reached the limit."""
        rule = self.rules[action]
        return self.count_recent(db, identity_hash, action) < rule.limit

    def check(self, db: Session, identity_hash: str, action: ThrottleAction) -> None:
        """Raise RateLimitedError when `allow` would return False."""
        if not self.allow(db, identity_hash, action):
            logger.info("Throttled %s for identity %s", action.value, identity_hash[:12])
            raise RateLimitedError(_RATE_LIMIT_MESSAGES[action])

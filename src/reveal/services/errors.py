"""Exceptions raised by the Reveal services.

Every expected outcome that is not a success has its own class so callers
can branch on type. Storage failures are left as the underlying
``SQLAlchemyError`` and are never retried here.
"""

from __future__ import annotations


class RevealError(Exception):
    """Base class for expected, user-facing service failures."""

    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NotFoundError(RevealError):
    """The referenced post or comment does not exist."""

    default_message = "Target not found"


class VoteNotFoundError(NotFoundError):
    """The identity has no vote on the target to remove."""

    default_message = "Vote not found"


class RateLimitedError(RevealError):
    """The identity exceeded a throttle window or the request burst limit."""

    default_message = "Rate limit exceeded"


class AlreadyFlaggedError(RevealError):
    """The identity has already flagged this target."""

    default_message = "Target already flagged by this client"


class InvalidArgumentError(RevealError):
    """Malformed vote kind, reason or content."""

    default_message = "Invalid argument"


class InvalidReasonError(InvalidArgumentError):
    """Unknown flag reason, or reason ``other`` without details."""

    default_message = "Invalid flag reason"


class ContentTooLongError(InvalidArgumentError):
    """Title or body exceeds its configured maximum length."""

    default_message = "Content too long"

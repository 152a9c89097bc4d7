"""SQLAlchemy models for the Reveal application."""

from .comment import Comment
from .flag import FLAG_REASON_LABELS, Flag, FlagReason
from .post import Post
from .target import Target, TargetKind
from .vote import Vote, VoteKind

__all__ = [
    "Comment",
    "Flag", "FlagReason", "FLAG_REASON_LABELS",
    "Post",
    "Target", "TargetKind",
    "Vote", "VoteKind",
]

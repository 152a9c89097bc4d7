"""Models capturing up/down votes on posts and comments."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reveal.db.session import Base
from reveal.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .post import Post


class VoteKind(str, enum.Enum):
    """Polarity of a vote."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Vote(Base):
    """One identity's vote on one post or comment.

    The unique constraints keep a single row per (target, identity); the
    vote ledger updates or deletes that row instead of inserting another.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_votes_vote_type"),
        CheckConstraint(
            "(target_type = 'post' AND post_id IS NOT NULL AND comment_id IS NULL)"
            " OR (target_type = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name="ck_votes_single_target",
        ),
        UniqueConstraint("post_id", "ip_hash", name="uq_votes_post_ip_hash"),
        UniqueConstraint("comment_id", "ip_hash", name="uq_votes_comment_ip_hash"),
        Index("ix_votes_ip_hash_created_at", "ip_hash", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)
    ip_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    # Refreshed when the vote switches polarity.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post: Mapped[Post | None] = relationship(back_populates="votes")
    comment: Mapped[Comment | None] = relationship(back_populates="votes")

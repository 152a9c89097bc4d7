"""Models recording community flags against posts and comments."""

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
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reveal.db.session import Base
from reveal.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .post import Post


class FlagReason(str, enum.Enum):
    """Reasons a client may give when flagging content."""

    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    HATE_SPEECH = "hate_speech"
    HARASSMENT = "harassment"
    VIOLENCE = "violence"
    OTHER = "other"


FLAG_REASON_LABELS: dict[FlagReason, str] = {
    FlagReason.SPAM: "Spam or unwanted content",
    FlagReason.INAPPROPRIATE: "Inappropriate content",
    FlagReason.HATE_SPEECH: "Hate speech or discrimination",
    FlagReason.HARASSMENT: "Harassment or bullying",
    FlagReason.VIOLENCE: "Violence or threats",
    FlagReason.OTHER: "Other (please specify)",
}


class Flag(Base):
    """Audit record of one identity flagging one target.

    Flags are immutable; hidden content keeps collecting them.
    """

    __tablename__ = "flags"
    __table_args__ = (
        CheckConstraint(
            "(flag_type = 'post' AND post_id IS NOT NULL AND comment_id IS NULL)"
            " OR (flag_type = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name="ck_flags_single_target",
        ),
        UniqueConstraint("post_id", "ip_hash", name="uq_flags_post_ip_hash"),
        UniqueConstraint("comment_id", "ip_hash", name="uq_flags_comment_ip_hash"),
        Index("ix_flags_ip_hash", "ip_hash"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    flag_type: Mapped[str] = mapped_column(String(20), nullable=False)
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
    ip_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post: Mapped[Post | None] = relationship(back_populates="flags")
    comment: Mapped[Comment | None] = relationship(back_populates="flags")

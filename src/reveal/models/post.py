"""SQLAlchemy models for posts."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reveal.db.session import Base
from reveal.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .flag import Flag
    from .vote import Vote


class Post(Base):
    """Anonymous top-level message.

    Posts are never deleted in normal operation; the only mutation is the
    one-way ``hidden`` flag set by flag escalation.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_ip_hash_created_at", "ip_hash", "created_at"),
        Index("ix_posts_hidden_created_at", "hidden", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Salted SHA-256 of the creator's network address, hex encoded.
    ip_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    comments: Mapped[list[Comment]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes: Mapped[list[Vote]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    flags: Mapped[list[Flag]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

"""initial schema: posts, comments, votes, flags

Revision ID: 5f2c9a1e7b30
Revises:
Create Date: 2026-10-18 09:12:44.318211

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5f2c9a1e7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_SINGLE_TARGET = (
    "({kind} = 'post' AND post_id IS NOT NULL AND comment_id IS NULL)"
    " OR ({kind} = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)"
)


def upgrade() -> None:
    """Create the four relations with their uniqueness and cascade rules."""
    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_posts_ip_hash_created_at", "posts", ["ip_hash", "created_at"])
    op.create_index("ix_posts_hidden_created_at", "posts", ["hidden", "created_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_post_id_created_at", "comments", ["post_id", "created_at"])
    op.create_index("ix_comments_ip_hash_created_at", "comments", ["ip_hash", "created_at"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("target_type", sa.String(length=20), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=True),
        sa.Column("comment_id", sa.Uuid(), nullable=True),
        sa.Column("vote_type", sa.String(length=10), nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_votes_vote_type"),
        sa.CheckConstraint(_SINGLE_TARGET.format(kind="target_type"), name="ck_votes_single_target"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "ip_hash", name="uq_votes_post_ip_hash"),
        sa.UniqueConstraint("comment_id", "ip_hash", name="uq_votes_comment_ip_hash"),
    )
    op.create_index("ix_votes_ip_hash_created_at", "votes", ["ip_hash", "created_at"])

    op.create_table(
        "flags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("flag_type", sa.String(length=20), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=True),
        sa.Column("comment_id", sa.Uuid(), nullable=True),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("reason", sa.String(length=100), nullable=False),
        sa.Column("details", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(_SINGLE_TARGET.format(kind="flag_type"), name="ck_flags_single_target"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "ip_hash", name="uq_flags_post_ip_hash"),
        sa.UniqueConstraint("comment_id", "ip_hash", name="uq_flags_comment_ip_hash"),
    )
    op.create_index("ix_flags_ip_hash", "flags", ["ip_hash"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_flags_ip_hash", table_name="flags")
    op.drop_table("flags")
    op.drop_index("ix_votes_ip_hash_created_at", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_comments_ip_hash_created_at", table_name="comments")
    op.drop_index("ix_comments_post_id_created_at", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_posts_hidden_created_at", table_name="posts")
    op.drop_index("ix_posts_ip_hash_created_at", table_name="posts")
    op.drop_table("posts")

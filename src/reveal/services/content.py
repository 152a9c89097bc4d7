"""Posts and comments: creation, lookup and requester-relative listings."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from reveal.core.settings import Settings, settings
from reveal.models import Comment, Flag, Post, Target, TargetKind
from reveal.services.errors import ContentTooLongError, InvalidArgumentError, NotFoundError
from reveal.services.tally import VoteTally, tallies_for
from reveal.services.throttle import ThrottleAction, ThrottleGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostListing:
    """A visible post annotated with its vote tally."""

    post: Post
    tally: VoteTally


@dataclass(frozen=True)
class CommentListing:
    """A visible comment annotated with its vote tally."""

    comment: Comment
    tally: VoteTally


class ContentStore:
    """Owns posts and comments and their one-way hidden flag."""

    def __init__(
        self,
        throttle: ThrottleGate | None = None,
        config: Settings | None = None,
    ) -> None:
        self.throttle = throttle or ThrottleGate()
        self.config = config or settings

    # --- Lookups -------------------------------------------------------------------
    @staticmethod
    def get_post(db: Session, post_id: uuid.UUID, *, lock: bool = False) -> Post:
        """Return a post regardless of its hidden flag.

        With `lock`, the row is held ``FOR UPDATE`` until the transaction ends.

        Raises:
            NotFoundError: If no post has this id.
        """
        post = db.get(Post, post_id, with_for_update=lock or None)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    @staticmethod
    def get_comment(db: Session, comment_id: uuid.UUID, *, lock: bool = False) -> Comment:
        """Return a comment regardless of its hidden flag.

        Raises:
            NotFoundError: If no comment has this id.
        """
        comment = db.get(Comment, comment_id, with_for_update=lock or None)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def get_target(self, db: Session, target: Target, *, lock: bool = False) -> Post | Comment:
        """Return the row a target points at or raise NotFoundError."""
        if target.kind is TargetKind.POST:
            return self.get_post(db, target.id, lock=lock)
        return self.get_comment(db, target.id, lock=lock)

    # --- Writes --------------------------------------------------------------------
    def create_post(self, db: Session, title: str, body: str, identity_hash: str) -> Post:
        """Validate and persist a new post.

        Args:
            db: Database session
            title: Post title; surrounding whitespace is removed
            body: Post body; surrounding whitespace is removed
            identity_hash: Pseudonymous identity of the author

        Returns:
            The committed post with its id and creation timestamp

        Raises:
            InvalidArgumentError: Empty title, or empty or too short body
            ContentTooLongError: Title or body over its maximum length
            RateLimitedError: The identity exceeded the post-create window
        """
        title = (title or "").strip()
        body = (body or "").strip()
        if not title:
            raise InvalidArgumentError("Title cannot be empty")
        if not body:
            raise InvalidArgumentError("Content cannot be empty")
        if len(title) > self.config.post_title_max_length:
            raise ContentTooLongError(
                f"Title too long (max {self.config.post_title_max_length} characters)"
            )
        if len(body) > self.config.post_body_max_length:
            raise ContentTooLongError(
                f"Content too long (max {self.config.post_body_max_length} characters)"
            )
        if len(body) < self.config.post_body_min_length:
            raise InvalidArgumentError(
                f"Content must be at least {self.config.post_body_min_length} characters long"
            )

        self.throttle.check(db, identity_hash, ThrottleAction.POST_CREATE)

        post = Post(title=title, body=body, ip_hash=identity_hash, hidden=False)
        db.add(post)
        db.commit()
        db.refresh(post)
        logger.debug("Created post %s", post.id)
        return post

    def create_comment(
        self,
        db: Session,
        post_id: uuid.UUID,
        body: str,
        identity_hash: str,
    ) -> Comment:
        """Validate and persist a comment on an existing post.

        Hidden posts still accept comments.

        Raises:
            InvalidArgumentError: Body empty after trimming
            ContentTooLongError: Body over the maximum length
            NotFoundError: The post does not exist
            RateLimitedError: The identity exceeded the comment-create window
        """
        body = (body or "").strip()
        if not body:
            raise InvalidArgumentError("Comment cannot be empty")
        if len(body) > self.config.comment_body_max_length:
            raise ContentTooLongError(
                f"Comment too long (max {self.config.comment_body_max_length} characters)"
            )

        self.get_post(db, post_id)
        self.throttle.check(db, identity_hash, ThrottleAction.COMMENT_CREATE)

        comment = Comment(post_id=post_id, body=body, ip_hash=identity_hash, hidden=False)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        logger.debug("Created comment %s on post %s", comment.id, post_id)
        return comment

    @staticmethod
    def hide(db: Session, row: Post | Comment) -> bool:
        """Set the hidden flag; return True if it changed.

        The flag never goes back to False.
        """
        if row.hidden:
            return False
        row.hidden = True
        return True

    # --- Listings ------------------------------------------------------------------
    def resolve_limit(self, limit: int | None) -> int:
        """Apply the default page size and the hard cap."""
        if limit is None or limit <= 0:
            return self.config.feed_default_limit
        return min(limit, self.config.feed_max_limit)

    def list_visible_posts(
        self,
        db: Session,
        requester_hash: str,
        limit: int | None = None,
    ) -> list[PostListing]:
        """Return posts visible to the requester, newest first."""
        flagged_by_requester = exists().where(
            Flag.post_id == Post.id,
            Flag.ip_hash == requester_hash,
        )
        posts = list(
            db.scalars(
                select(Post)
                .where(Post.hidden.is_(False), ~flagged_by_requester)
                .order_by(Post.created_at.desc(), Post.id)
                .limit(self.resolve_limit(limit))
            )
        )
        tallies = tallies_for(db, TargetKind.POST, [post.id for post in posts], requester_hash)
        return [PostListing(post=post, tally=tallies[post.id]) for post in posts]

    def list_visible_comments(
        self,
        db: Session,
        post_id: uuid.UUID,
        requester_hash: str,
    ) -> list[CommentListing]:
        """Return a post's comments visible to the requester, oldest first.

        Raises:
            NotFoundError: The post does not exist
        """
        self.get_post(db, post_id)
        flagged_by_requester = exists().where(
            Flag.comment_id == Comment.id,
            Flag.ip_hash == requester_hash,
        )
        comments = list(
            db.scalars(
                select(Comment)
                .where(
                    Comment.post_id == post_id,
                    Comment.hidden.is_(False),
                    ~flagged_by_requester,
                )
                .order_by(Comment.created_at.asc(), Comment.id)
            )
        )
        tallies = tallies_for(
            db, TargetKind.COMMENT, [comment.id for comment in comments], requester_hash
        )
        return [
            CommentListing(comment=comment, tally=tallies[comment.id]) for comment in comments
        ]

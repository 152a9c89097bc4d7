"""Pydantic schemas for request/response validation."""

from .comment import CommentCreate, CommentCreated, CommentResponse
from .common import ErrorResponse
from .moderation import FlagReasonsResponse, FlagRequest, FlagResponse
from .post import PostCreate, PostCreated, PostResponse
from .vote import VoteRequest, VoteResponse

__all__ = [
    "CommentCreate",
    "CommentCreated",
    "CommentResponse",
    "ErrorResponse",
    "FlagReasonsResponse",
    "FlagRequest",
    "FlagResponse",
    "PostCreate",
    "PostCreated",
    "PostResponse",
    "VoteRequest",
    "VoteResponse",
]

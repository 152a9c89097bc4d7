"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .posts import router as posts_router
from .system import router as system_router
from .votes import router as votes_router

__all__ = [
    "comments_router",
    "posts_router",
    "system_router",
    "votes_router",
]

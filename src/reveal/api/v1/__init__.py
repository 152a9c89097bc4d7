"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    posts_router,
    system_router,
    votes_router,
)

__all__ = [
    "comments_router",
    "posts_router",
    "system_router",
    "votes_router",
]

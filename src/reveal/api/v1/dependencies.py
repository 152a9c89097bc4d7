"""Shared API dependencies for identity derivation and services."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from reveal.core.settings import settings
from reveal.db.session import get_db
from reveal.services.content import ContentStore
from reveal.services.errors import RateLimitedError
from reveal.services.moderation import FlagEscalator
from reveal.services.request_limiter import RequestLimiter, get_request_limiter
from reveal.services.votes import VoteLedger
from reveal.utils.hash import IdentityHasher, get_identity_hasher

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

UNKNOWN_CLIENT = "unknown"


def get_client_address(request: Request) -> str:
    """Return the caller's network address.

    The first ``X-Forwarded-For`` hop is used only when the deployment sits
    behind a trusted proxy.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def get_identity_hash(
    address: Annotated[str, Depends(get_client_address)],
    hasher: Annotated[IdentityHasher, Depends(get_identity_hasher)],
) -> str:
    """Return the pseudonymous identity for the current request."""
    return hasher.digest(address)


IdentityDep = Annotated[str, Depends(get_identity_hash)]


def get_request_limiter_dep() -> RequestLimiter:
    """Return the shared request limiter."""
    return get_request_limiter()


def enforce_request_limit(
    identity: IdentityDep,
    limiter: Annotated[RequestLimiter, Depends(get_request_limiter_dep)],
) -> None:
    """Reject bursts from one identity before any work is done."""
    if settings.request_limit_enabled and not limiter.allow(identity):
        raise RateLimitedError("Rate limit exceeded. Please wait a moment before trying again.")


def get_content_store() -> ContentStore:
    """Return a content store bound to current settings."""
    return ContentStore()


def get_vote_ledger(
    content: Annotated[ContentStore, Depends(get_content_store)],
) -> VoteLedger:
    """Return a vote ledger sharing the request's content store."""
    return VoteLedger(content=content)


def get_flag_escalator(
    content: Annotated[ContentStore, Depends(get_content_store)],
) -> FlagEscalator:
    """Return a flag escalator sharing the request's content store."""
    return FlagEscalator(content=content)


ContentStoreDep = Annotated[ContentStore, Depends(get_content_store)]
VoteLedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]
FlagEscalatorDep = Annotated[FlagEscalator, Depends(get_flag_escalator)]
RequestLimitDep = Depends(enforce_request_limit)

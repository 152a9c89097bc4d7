"""Business logic services for the Reveal application."""

from .content import CommentListing, ContentStore, PostListing
from .moderation import FlagEscalator, FlagOutcome
from .request_limiter import RequestLimiter
from .tally import VoteTally
from .throttle import ThrottleAction, ThrottleGate, ThrottleRule
from .votes import VoteLedger, VoteResult, VoteTransition

__all__ = [
    "CommentListing",
    "ContentStore",
    "FlagEscalator",
    "FlagOutcome",
    "PostListing",
    "RequestLimiter",
    "ThrottleAction",
    "ThrottleGate",
    "ThrottleRule",
    "VoteLedger",
    "VoteResult",
    "VoteTally",
    "VoteTransition",
]

"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from reveal.services.tally import VoteTally


class VoteRequest(BaseModel):
    """Schema for casting a vote on a post or comment.

    The kind is validated by the vote ledger so that a bad value is reported
    as an invalid argument rather than a schema error.
    """

    vote_type: str = Field(..., description="'upvote' or 'downvote'")


class VoteResponse(BaseModel):
    """Vote counts for a target plus the caller's own vote."""

    upvotes: int
    downvotes: int
    user_vote: str = Field("", description="Caller's vote, empty when none")
    score: int

    @classmethod
    def from_tally(cls, tally: VoteTally) -> "VoteResponse":
        return cls(
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            user_vote=tally.user_vote.value if tally.user_vote else "",
            score=tally.score,
        )

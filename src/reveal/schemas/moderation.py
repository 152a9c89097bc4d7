"""Flag-related Pydantic schemas."""

from pydantic import BaseModel, Field


class FlagRequest(BaseModel):
    """Schema for flagging a post or comment."""

    reason: str = Field(..., description="One of the values from /flag-reasons")
    details: str = Field("", description="Required when reason is 'other'")


class FlagResponse(BaseModel):
    """Acknowledgement of an accepted flag."""

    message: str
    flag_count: int
    hidden: bool


class FlagReasonsResponse(BaseModel):
    """Enumerated flag reasons with labels."""

    reasons: dict[str, str]

"""Tagged reference to the content a vote or flag points at."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass


class TargetKind(str, enum.Enum):
    """Kind tag stored next to the dual post/comment foreign key."""

    POST = "post"
    COMMENT = "comment"


@dataclass(frozen=True, slots=True)
class Target:
    """A post or a comment, never both and never neither.

    Build instances through :meth:`post` and :meth:`comment`.
    """

    kind: TargetKind
    id: uuid.UUID

    @classmethod
    def post(cls, post_id: uuid.UUID) -> Target:
        return cls(TargetKind.POST, post_id)

    @classmethod
    def comment(cls, comment_id: uuid.UUID) -> Target:
        return cls(TargetKind.COMMENT, comment_id)

    @property
    def post_id(self) -> uuid.UUID | None:
        return self.id if self.kind is TargetKind.POST else None

    @property
    def comment_id(self) -> uuid.UUID | None:
        return self.id if self.kind is TargetKind.COMMENT else None

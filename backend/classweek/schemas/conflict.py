from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from classweek.schemas.session import SessionOut


class ConflictReason(str, Enum):
    same_teacher = "same_teacher"
    same_room = "same_room"


class ConflictResult(BaseModel):
    has_conflict: bool = Field(alias="hasConflict")
    reason: ConflictReason | None = None
    with_session: SessionOut | None = Field(default=None, alias="withSession")
    owner_description: str | None = Field(default=None, alias="ownerDescription")
    message: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def no_conflict(cls) -> "ConflictResult":
        return cls(has_conflict=False, message="No conflict")

    @classmethod
    def conflict(cls, with_session: SessionOut, reason: ConflictReason, owner_description: str, message: str) -> "ConflictResult":
        return cls(
            has_conflict=True,
            reason=reason,
            with_session=with_session,
            owner_description=owner_description,
            message=message,
        )

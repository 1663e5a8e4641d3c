from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from classweek.schemas.conflict import ConflictResult
from classweek.schemas.session import SessionOut


class BatchRejection(BaseModel):
    index: int = Field(ge=0)
    message: str
    conflict: ConflictResult | None = None


class SessionBatchResult(BaseModel):
    created: list[SessionOut] = Field(default_factory=list)
    rejected: list[BatchRejection] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

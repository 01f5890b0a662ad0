from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import CompletionStatus


class CompletedWorkoutBase(BaseModel):
    week: int = Field(ge=1)
    day_of_week: int = Field(ge=0, le=6)
    session_id: Optional[str] = None
    actual_duration: Optional[int] = Field(default=None, ge=0)
    rpe: Optional[int] = Field(default=None, ge=1, le=10)
    completion_status: CompletionStatus = CompletionStatus.FULL
    percent_complete: int = Field(default=100, ge=0, le=100)


class CompletedWorkoutCreate(CompletedWorkoutBase):
    pass


class CompletedWorkoutRecord(CompletedWorkoutBase):
    completed_at: datetime

    model_config = {"frozen": True, "from_attributes": True}

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.enums import FitnessLevel
from .history import CompletedWorkoutRecord
from .program import GeneratedProgram, ProgramSummary, WeekDefinition, WorkoutSlot


class UserProgramCreate(BaseModel):
    # Left loosely typed so every validation problem can be reported at once.
    personalization: Dict[str, Any]
    start_date: Optional[date] = None


class UserProgramRead(BaseModel):
    id: int
    program_id: str
    start_date: date
    race_date: Optional[date] = None
    fitness_level: Optional[FitnessLevel] = None
    days_per_week: Optional[int] = None
    weak_areas: List[str] = []
    intensity_modifier: float = 1.0
    adaptation: str
    program: GeneratedProgram
    adapted_schedule: Optional[List[WeekDefinition]] = None
    summary: ProgramSummary
    completed_workouts: List[CompletedWorkoutRecord] = []
    created_at: datetime


class AdaptRequest(BaseModel):
    modifier: Optional[float] = Field(default=None, gt=0)


class AdaptationRead(BaseModel):
    intensity_modifier: float
    description: str
    adapted: bool
    missed_workout_count: int
    schedule: List[WeekDefinition]


class MakeupRequest(BaseModel):
    week: int = Field(ge=1)
    day_of_week: int = Field(ge=0, le=6)


class MakeupRead(BaseModel):
    days_late: int
    workout: WorkoutSlot

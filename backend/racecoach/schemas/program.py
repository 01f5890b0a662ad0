from datetime import date, datetime
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from ..core.enums import FitnessLevel, QuickFocus, StrengthFocus

DEFAULT_WEAK_AREAS: Tuple[str, ...] = (
    "burpee_broad_jump",
    "sandbag_lunges",
    "farmers_carry",
    "wall_balls",
)


class FrozenModel(BaseModel):
    model_config = {"frozen": True}


class MakeupInfo(FrozenModel):
    original_week: int = Field(ge=1)
    original_day_of_week: int = Field(ge=0, le=6)
    condense_factor: float


class StrengthExercise(FrozenModel):
    name: str
    sets: int = Field(ge=0)
    reps: str
    notes: Optional[str] = None


class SteadyRun(FrozenModel):
    kind: Literal["zone2", "tempo"]
    duration: int = Field(ge=0)
    hr_zone: Optional[str] = None


class IntervalRun(FrozenModel):
    kind: Literal["intervals"] = "intervals"
    duration: int = Field(ge=0)
    reps: int = Field(ge=0)
    distance: int = Field(ge=0)
    rest: int = Field(ge=0, description="Rest between reps in seconds.")


RunSpec = Annotated[Union[SteadyRun, IntervalRun], Field(discriminator="kind")]


class SlotBase(FrozenModel):
    day_of_week: int = Field(ge=0, le=6, description="0 is Sunday, 6 is Saturday.")
    day_name: str
    estimated_minutes: int = Field(ge=0)
    makeup: Optional[MakeupInfo] = None


class RestSlot(SlotBase):
    type: Literal["rest"] = "rest"


class QuickSlot(SlotBase):
    type: Literal["quick"] = "quick"
    duration: int = Field(ge=0)
    focus: QuickFocus = QuickFocus.MIXED


class StationSlot(SlotBase):
    type: Literal["station"] = "station"
    stations: Tuple[str, ...]
    sets: int = Field(ge=0)


class CoverageSlot(SlotBase):
    type: Literal["coverage"] = "coverage"
    coverage: int = Field(ge=0, description="Percent of full race distance and reps.")


class FullSlot(SlotBase):
    type: Literal["full"] = "full"


class RunSlot(SlotBase):
    type: Literal["run"] = "run"
    run: RunSpec


class StrengthSlot(SlotBase):
    type: Literal["strength"] = "strength"
    focus: StrengthFocus
    exercises: Tuple[StrengthExercise, ...]
    station_work: Tuple[str, ...] = ()


WorkoutSlot = Annotated[
    Union[RestSlot, QuickSlot, StationSlot, CoverageSlot, FullSlot, RunSlot, StrengthSlot],
    Field(discriminator="type"),
]


class WeekDefinition(FrozenModel):
    week: int = Field(ge=1)
    phase: str
    theme: str
    is_deload: bool = False
    workouts: Tuple[WorkoutSlot, ...]

    @field_validator("workouts")
    @classmethod
    def _days_strictly_ascending(cls, workouts):
        days = [workout.day_of_week for workout in workouts]
        if any(later <= earlier for earlier, later in zip(days, days[1:])):
            raise ValueError("Workouts must have unique days in ascending order.")
        return workouts


class PersonalizationInput(FrozenModel):
    race_date: Optional[date] = None
    fitness_level: FitnessLevel
    days_per_week: int
    weak_areas: Tuple[str, ...] = DEFAULT_WEAK_AREAS
    target_finish_minutes: Optional[int] = Field(default=None, ge=0)


class ProgramTemplate(FrozenModel):
    id: str
    name: str
    description: str
    weeks: int
    target_level: FitnessLevel
    default_days_per_week: int
    schedule: Tuple[WeekDefinition, ...]


class GeneratedProgram(FrozenModel):
    id: str
    name: str
    description: str
    weeks: int
    days_per_week: int
    schedule: Tuple[WeekDefinition, ...]
    personalization: PersonalizationInput
    created_at: datetime


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = []


class ProgramSummary(BaseModel):
    total_workouts: int = 0
    run_workouts: int = 0
    strength_workouts: int = 0
    station_workouts: int = 0
    coverage_workouts: int = 0
    quick_workouts: int = 0
    full_simulations: int = 0
    rest_days: int = 0

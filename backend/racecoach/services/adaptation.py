import logging
import re
from typing import Iterable

from ..core.rounding import clamp, round_half_up
from ..schemas.analysis import MissedWorkoutRecord
from ..schemas.program import (
    CoverageSlot,
    FullSlot,
    GeneratedProgram,
    IntervalRun,
    MakeupInfo,
    QuickSlot,
    RunSlot,
    StationSlot,
    SteadyRun,
    StrengthSlot,
    WeekDefinition,
    WorkoutSlot,
)

logger = logging.getLogger(__name__)

MIN_MODIFIER = 0.7
MAX_MODIFIER = 1.3

_STEPS_PATTERN = re.compile(r"^(\d+)\s*(steps|each side|per side|per leg)$", re.IGNORECASE)
_RANGE_PATTERN = re.compile(r"^(\d+)-(\d+)$")
_SINGLE_PATTERN = re.compile(r"^(\d+)$")


def scale_value(value: float, modifier: float, lower: int | None = None, upper: int | None = None) -> int:
    scaled = round_half_up(value * modifier)
    if lower is not None:
        scaled = max(lower, scaled)
    if upper is not None:
        scaled = min(upper, scaled)
    return scaled


def scale_rep_string(reps: str, modifier: float) -> str:
    """Scale a rep prescription such as ``"8-10"`` or ``"20 steps"``.

    A harder modifier means heavier loads and therefore fewer reps, so every
    recognised shape is scaled by ``2 - modifier``. Unrecognised text and
    ``max``/``amrap`` are returned unchanged.
    """
    if reps.lower() in ("max", "amrap"):
        return reps

    inverse = 2 - modifier

    steps = _STEPS_PATTERN.match(reps)
    if steps:
        return f"{scale_value(int(steps.group(1)), inverse, 10, 40)} {steps.group(2)}"

    rep_range = _RANGE_PATTERN.match(reps)
    if rep_range:
        low = scale_value(int(rep_range.group(1)), inverse, 4, 20)
        high = scale_value(int(rep_range.group(2)), inverse, 6, 25)
        return f"{low}-{high}"

    single = _SINGLE_PATTERN.match(reps)
    if single:
        return str(scale_value(int(single.group(1)), inverse, 4, 25))

    return reps


def _scale_run(slot: RunSlot, modifier: float) -> RunSlot:
    run = slot.run
    if isinstance(run, SteadyRun):
        duration = scale_value(run.duration, modifier, 15, 75)
        return slot.model_copy(
            update={"run": run.model_copy(update={"duration": duration}), "estimated_minutes": duration}
        )
    if isinstance(run, IntervalRun):
        scaled = run.model_copy(
            update={
                "reps": scale_value(run.reps, modifier, 3, 12),
                "distance": scale_value(run.distance, modifier, 200, 800),
                "rest": scale_value(run.rest, 2 - modifier, 60, 180),
            }
        )
        return slot.model_copy(update={"run": scaled})
    return slot


def _scale_strength(slot: StrengthSlot, modifier: float) -> StrengthSlot:
    exercises = tuple(
        exercise.model_copy(
            update={
                "sets": scale_value(exercise.sets, modifier, 2, 5),
                "reps": scale_rep_string(exercise.reps, modifier),
            }
        )
        for exercise in slot.exercises
    )
    return slot.model_copy(
        update={
            "exercises": exercises,
            "estimated_minutes": scale_value(slot.estimated_minutes, modifier, 30, 75),
        }
    )


def apply_intensity_modifier(slot: WorkoutSlot, modifier: float) -> WorkoutSlot:
    """Return a copy of ``slot`` scaled by ``modifier`` clamped to [0.7, 1.3]."""
    modifier = clamp(modifier, MIN_MODIFIER, MAX_MODIFIER)

    if isinstance(slot, CoverageSlot):
        return slot.model_copy(
            update={
                "coverage": scale_value(slot.coverage, modifier, 25, 150),
                "estimated_minutes": scale_value(slot.estimated_minutes, modifier, 20, 90),
            }
        )
    if isinstance(slot, RunSlot):
        return _scale_run(slot, modifier)
    if isinstance(slot, StationSlot):
        return slot.model_copy(
            update={
                "sets": scale_value(slot.sets, modifier, 1, 3),
                "estimated_minutes": scale_value(slot.estimated_minutes, modifier, 15, 60),
            }
        )
    if isinstance(slot, StrengthSlot):
        return _scale_strength(slot, modifier)
    if isinstance(slot, FullSlot):
        return slot.model_copy(
            update={"estimated_minutes": scale_value(slot.estimated_minutes, modifier, 60, 120)}
        )
    if isinstance(slot, QuickSlot):
        duration = scale_value(slot.duration, modifier, 15, 45)
        return slot.model_copy(update={"duration": duration, "estimated_minutes": duration})
    # Rest days are never scaled.
    return slot


def condense_factor_for(days_late: int) -> float:
    if days_late <= 3:
        return 0.75
    if days_late <= 7:
        return 0.5
    return 0.35


def generate_makeup_workout(missed: MissedWorkoutRecord, days_late: int) -> WorkoutSlot:
    """Build a shorter version of a missed slot.

    The stored ``condense_factor`` is the nominal one; the slot itself is
    scaled through ``apply_intensity_modifier`` and so never drops below the
    0.7 floor.
    """
    condense_factor = condense_factor_for(days_late)
    condensed = apply_intensity_modifier(missed.workout, condense_factor)
    logger.info(
        "Makeup for week %d day %d, %d days late, condense factor %.2f",
        missed.week,
        missed.day_of_week,
        days_late,
        condense_factor,
    )
    return condensed.model_copy(
        update={
            "makeup": MakeupInfo(
                original_week=missed.week,
                original_day_of_week=missed.day_of_week,
                condense_factor=condense_factor,
            )
        }
    )


def apply_to_schedule(schedule: Iterable[WeekDefinition], modifier: float) -> tuple[WeekDefinition, ...]:
    return tuple(
        week.model_copy(
            update={"workouts": tuple(apply_intensity_modifier(slot, modifier) for slot in week.workouts)}
        )
        for week in schedule
    )


def recalculate_program(program: GeneratedProgram, modifier: float) -> GeneratedProgram:
    logger.info("Recalculating %s with intensity modifier %.2f", program.id, modifier)
    return program.model_copy(update={"schedule": apply_to_schedule(program.schedule, modifier)})


def is_adapted(slot: WorkoutSlot, modifier: float) -> bool:
    return abs(modifier - 1.0) > 0.01


def describe_adaptation(modifier: float) -> str:
    if modifier < 0.85:
        return "Reduced intensity (recovery focus)"
    if modifier < 0.95:
        return "Slightly reduced intensity"
    if modifier > 1.15:
        return "Increased intensity (challenge mode)"
    if modifier > 1.05:
        return "Slightly increased intensity"
    return "Standard intensity"

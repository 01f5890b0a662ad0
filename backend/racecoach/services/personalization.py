import logging
import math
import secrets
from collections import Counter
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..core.clock import today
from ..core.enums import FitnessLevel, SlotType
from ..core.rounding import round_half_up
from ..schemas.program import (
    CoverageSlot,
    GeneratedProgram,
    IntervalRun,
    PersonalizationInput,
    ProgramSummary,
    ProgramTemplate,
    RunSlot,
    StationSlot,
    StrengthSlot,
    ValidationResult,
    WeekDefinition,
)
from .catalog import get_template_by_length, get_template_for_weeks

logger = logging.getLogger(__name__)

# Lower number is kept first when a week is trimmed. Saturday carries the
# long simulation, Wednesday and Sunday are the usual rest days.
DAY_PRIORITY = {6: 1, 1: 2, 4: 3, 2: 4, 5: 5, 3: 6, 0: 7}

ALLOWED_DAYS_PER_WEEK = (3, 4, 5, 6)


def weeks_until_race(race_date: Optional[date], now: datetime) -> Optional[int]:
    if race_date is None:
        return None
    days_until = (race_date - today(now)).days
    return max(0, math.ceil(days_until / 7))


def select_template(weeks_until: Optional[int], fitness_level: FitnessLevel) -> ProgramTemplate:
    if weeks_until is None:
        return get_template_by_length(12 if fitness_level == FitnessLevel.BEGINNER else 8)
    return get_template_for_weeks(weeks_until)


def fit_to_days_per_week(week: WeekDefinition, days_per_week: int) -> WeekDefinition:
    by_priority = sorted(week.workouts, key=lambda slot: DAY_PRIORITY.get(slot.day_of_week, 99))
    selected = by_priority[:days_per_week]

    # Four days or fewer favour training over rest.
    if days_per_week >= 5 and not any(slot.type == SlotType.REST for slot in selected):
        rest_day = next((slot for slot in week.workouts if slot.type == SlotType.REST), None)
        if rest_day is not None and len(selected) >= days_per_week:
            selected[-1] = rest_day

    selected.sort(key=lambda slot: slot.day_of_week)
    return week.model_copy(update={"workouts": tuple(selected)})


def apply_weak_area_focus(
    schedule: Iterable[WeekDefinition], weak_areas: Iterable[str]
) -> tuple[WeekDefinition, ...]:
    schedule = tuple(schedule)
    weak_areas = tuple(weak_areas)
    if not weak_areas:
        return schedule

    rotation = 0
    focused: list[WeekDefinition] = []
    for week in schedule:
        if week.is_deload:
            focused.append(week)
            continue

        week_modified = False
        workouts = []
        for slot in week.workouts:
            if isinstance(slot, StationSlot) and slot.stations:
                missing = [area for area in weak_areas if area not in slot.stations]
                if missing:
                    area = missing[rotation % len(missing)]
                    slot = slot.model_copy(
                        update={
                            "stations": slot.stations + (area,),
                            "estimated_minutes": slot.estimated_minutes + 5,
                        }
                    )
                    week_modified = True
            elif isinstance(slot, StrengthSlot) and slot.station_work:
                missing = [area for area in weak_areas if area not in slot.station_work]
                if missing:
                    area = missing[rotation % len(missing)]
                    slot = slot.model_copy(update={"station_work": slot.station_work + (area,)})
                    week_modified = True
            workouts.append(slot)

        if week_modified:
            rotation += 1
        focused.append(week.model_copy(update={"workouts": tuple(workouts)}))
    return tuple(focused)


def _scale_for_level(slot, coverage_delta: int, minutes_factor: float, reps_delta: int):
    if isinstance(slot, CoverageSlot):
        return slot.model_copy(
            update={
                "coverage": min(150, max(25, slot.coverage + coverage_delta)),
                "estimated_minutes": round_half_up(slot.estimated_minutes * minutes_factor),
            }
        )
    if isinstance(slot, RunSlot) and isinstance(slot.run, IntervalRun):
        run = slot.run.model_copy(update={"reps": max(3, slot.run.reps + reps_delta)})
        return slot.model_copy(update={"run": run})
    return slot


def apply_fitness_level_scaling(
    schedule: Iterable[WeekDefinition], fitness_level: FitnessLevel
) -> tuple[WeekDefinition, ...]:
    schedule = tuple(schedule)
    if fitness_level == FitnessLevel.BEGINNER:
        adjustment = (-25, 0.8, -2)
    elif fitness_level == FitnessLevel.ADVANCED:
        adjustment = (25, 1.2, 2)
    else:
        return schedule

    return tuple(
        week.model_copy(
            update={"workouts": tuple(_scale_for_level(slot, *adjustment) for slot in week.workouts)}
        )
        for week in schedule
    )


def generate_program(personalization: PersonalizationInput, now: datetime) -> GeneratedProgram:
    weeks_until = weeks_until_race(personalization.race_date, now)
    template = select_template(weeks_until, personalization.fitness_level)

    schedule = tuple(
        fit_to_days_per_week(week, personalization.days_per_week) for week in template.schedule
    )
    schedule = apply_weak_area_focus(schedule, personalization.weak_areas)
    schedule = apply_fitness_level_scaling(schedule, personalization.fitness_level)

    program_id = f"personalized-{int(now.timestamp() * 1000)}-{secrets.token_hex(3)}"
    logger.info(
        "Generated %s from template %s (%s, %d days/week, %s weeks to race)",
        program_id,
        template.id,
        personalization.fitness_level.value,
        personalization.days_per_week,
        weeks_until,
    )
    return GeneratedProgram(
        id=program_id,
        name=template.name,
        description=template.description,
        weeks=template.weeks,
        days_per_week=personalization.days_per_week,
        schedule=schedule,
        personalization=personalization,
        created_at=now,
    )


def _parse_race_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def validate_personalization(
    personalization: Mapping[str, Any] | PersonalizationInput, now: datetime
) -> ValidationResult:
    """Collect every problem with ``personalization`` instead of stopping at the first."""
    if isinstance(personalization, PersonalizationInput):
        personalization = personalization.model_dump(mode="json")
    errors: list[str] = []

    fitness_level = personalization.get("fitness_level")
    if not fitness_level:
        errors.append("Fitness level is required")
    elif fitness_level not in tuple(level.value for level in FitnessLevel):
        errors.append("Invalid fitness level")

    days_per_week = personalization.get("days_per_week")
    if not days_per_week:
        errors.append("Days per week is required")
    elif isinstance(days_per_week, bool) or days_per_week not in ALLOWED_DAYS_PER_WEEK:
        errors.append("Days per week must be between 3 and 6")

    raw_race_date = personalization.get("race_date")
    if raw_race_date:
        race_date = _parse_race_date(raw_race_date)
        if race_date is None:
            errors.append("Invalid race date")
        elif race_date <= today(now):
            errors.append("Race date must be in the future")

    return ValidationResult(valid=not errors, errors=errors)


def program_summary(program: GeneratedProgram) -> ProgramSummary:
    counts = Counter(slot.type for week in program.schedule for slot in week.workouts)
    return ProgramSummary(
        total_workouts=sum(counts.values()),
        run_workouts=counts[SlotType.RUN.value],
        strength_workouts=counts[SlotType.STRENGTH.value],
        station_workouts=counts[SlotType.STATION.value],
        coverage_workouts=counts[SlotType.COVERAGE.value],
        quick_workouts=counts[SlotType.QUICK.value],
        full_simulations=counts[SlotType.FULL.value],
        rest_days=counts[SlotType.REST.value],
    )

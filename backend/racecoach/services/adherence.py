import logging
from datetime import date, datetime, timedelta
from typing import Iterable

from ..core.clock import js_day_of_week, today
from ..core.enums import Importance, RecoveryAction, SlotType
from ..core.rounding import round_half_up
from ..schemas.analysis import MissedWorkoutRecord, MissedWorkoutSummary
from ..schemas.history import CompletedWorkoutRecord
from ..schemas.program import GeneratedProgram
from .catalog import slot_type_label

logger = logging.getLogger(__name__)

IMPORTANCE_BY_TYPE = {
    SlotType.FULL: Importance.CRITICAL,
    SlotType.COVERAGE: Importance.HIGH,
    SlotType.STATION: Importance.MEDIUM,
    SlotType.QUICK: Importance.MEDIUM,
    SlotType.RUN: Importance.LOW,
    SlotType.STRENGTH: Importance.LOW,
}

IMPORTANCE_ORDER = {
    Importance.CRITICAL: 0,
    Importance.HIGH: 1,
    Importance.MEDIUM: 2,
    Importance.LOW: 3,
}

BASE_READINESS_IMPACT = {
    Importance.CRITICAL: -20,
    Importance.HIGH: -12,
    Importance.MEDIUM: -7,
    Importance.LOW: -4,
}


def current_week(start_date: date, total_weeks: int, now: datetime) -> int:
    days_since_start = (today(now) - start_date).days
    week = days_since_start // 7 + 1
    return max(1, min(week, total_weeks))


def workout_date(start_date: date, week: int, day_of_week: int) -> date:
    """Calendar date of a slot, counting weeks from the program start date."""
    offset = (day_of_week - js_day_of_week(start_date)) % 7
    return start_date + timedelta(days=(week - 1) * 7 + offset)


def days_since_missed(start_date: date, week: int, day_of_week: int, now: datetime) -> int:
    return max(0, (today(now) - workout_date(start_date, week, day_of_week)).days)


def workout_importance(slot_type: str) -> Importance:
    try:
        return IMPORTANCE_BY_TYPE.get(SlotType(slot_type), Importance.LOW)
    except ValueError:
        return Importance.LOW


def readiness_impact(importance: Importance, days_missed: int) -> int:
    impact = BASE_READINESS_IMPACT[importance]
    # Older misses weigh less; there has been time to absorb them.
    if days_missed > 14:
        impact = round_half_up(impact * 0.5)
    elif days_missed > 7:
        impact = round_half_up(impact * 0.75)
    return impact


def recovery_action(importance: Importance, days_missed: int) -> RecoveryAction:
    if days_missed > 7:
        return RecoveryAction.SKIP
    if importance == Importance.CRITICAL:
        return RecoveryAction.MAKEUP_FULL if days_missed <= 3 else RecoveryAction.MAKEUP_CONDENSED
    if importance == Importance.HIGH:
        return RecoveryAction.MAKEUP_FULL if days_missed <= 2 else RecoveryAction.MAKEUP_CONDENSED
    if importance == Importance.MEDIUM:
        return RecoveryAction.MAKEUP_CONDENSED if days_missed <= 3 else RecoveryAction.SKIP
    return RecoveryAction.MAKEUP_CONDENSED if days_missed <= 1 else RecoveryAction.SKIP


def find_missed_workouts(
    start_date: date,
    program: GeneratedProgram,
    completed: Iterable[CompletedWorkoutRecord],
    now: datetime,
) -> list[MissedWorkoutRecord]:
    week_now = current_week(start_date, program.weeks, now)
    current_day = today(now)
    today_day_of_week = js_day_of_week(current_day)
    completed_keys = {(record.week, record.day_of_week) for record in completed}

    missed: list[MissedWorkoutRecord] = []
    for week in program.schedule:
        if week.week > week_now:
            continue
        for slot in week.workouts:
            if slot.type == SlotType.REST:
                continue
            if week.week == week_now and slot.day_of_week >= today_day_of_week:
                continue
            if workout_date(start_date, week.week, slot.day_of_week) >= current_day:
                continue
            if (week.week, slot.day_of_week) in completed_keys:
                continue

            days_missed = days_since_missed(start_date, week.week, slot.day_of_week, now)
            importance = workout_importance(slot.type)
            missed.append(
                MissedWorkoutRecord(
                    week=week.week,
                    day_of_week=slot.day_of_week,
                    day_name=slot.day_name,
                    label=slot_type_label(slot.type),
                    workout=slot,
                    days_since_missed=days_missed,
                    importance=importance,
                    suggested_action=recovery_action(importance, days_missed),
                    impact_on_readiness=readiness_impact(importance, days_missed),
                )
            )

    missed.sort(key=lambda record: (IMPORTANCE_ORDER[record.importance], record.days_since_missed))
    return missed


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def generate_recommendations(missed: list[MissedWorkoutRecord]) -> list[str]:
    if not missed:
        return []

    recommendations: list[str] = []
    critical = [record for record in missed if record.importance == Importance.CRITICAL]
    high = [record for record in missed if record.importance == Importance.HIGH]
    recent = [record for record in missed if record.days_since_missed <= 3]

    if critical:
        recommendations.append(
            f"You have {len(critical)} critical workout{_plural(len(critical))} (full simulations) "
            "missed. These are essential for race preparation."
        )
    if high:
        recommendations.append(
            f"{len(high)} race coverage workout{_plural(len(high))} missed. "
            "Consider doing condensed versions to maintain fitness."
        )
    if 0 < len(recent) <= 3:
        recommendations.append(
            "You can still make up recent workouts. Focus on the most important ones first."
        )
    if len(missed) > 5:
        recommendations.append(
            "Many workouts missed. Consider reducing program intensity and focusing on consistency."
        )
    if all(record.importance == Importance.LOW for record in missed):
        recommendations.append(
            "Missed workouts are low priority. Focus on upcoming key sessions instead."
        )
    return recommendations


def summarize(
    start_date: date,
    program: GeneratedProgram,
    completed: Iterable[CompletedWorkoutRecord],
    now: datetime,
) -> MissedWorkoutSummary:
    missed = find_missed_workouts(start_date, program, completed, now)
    logger.debug("Program %s: %d missed workouts", program.id, len(missed))
    return MissedWorkoutSummary(
        missed_workouts=missed,
        total_missed=len(missed),
        readiness_impact=sum(record.impact_on_readiness for record in missed),
        recommendations=generate_recommendations(missed),
    )

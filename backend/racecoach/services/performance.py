import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..core.clock import ensure_utc
from ..core.enums import AlertSeverity, AlertType, CompletionStatus, Trend
from ..core.rounding import clamp, round_half_up, round_to
from ..schemas.analysis import (
    PerformanceAlert,
    PerformanceAnalysis,
    ProgramAnalysis,
    ProgramProgress,
    RaceReadinessFactors,
    RaceReadinessScore,
)
from ..schemas.history import CompletedWorkoutRecord
from ..schemas.program import CoverageSlot, FullSlot, GeneratedProgram, WorkoutSlot
from .adherence import current_week
from .personalization import weeks_until_race

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 7
FREQUENCY_WINDOW_DAYS = 3
CONSISTENCY_WINDOW_DAYS = 14
KEY_COVERAGE_THRESHOLD = 75

READINESS_WEIGHTS = {
    "program_completion": 0.30,
    "key_workout_completion": 0.25,
    "performance_trend": 0.20,
    "weekly_consistency": 0.15,
    "fatigue_management": 0.10,
}

TREND_SCORES = {Trend.IMPROVING: 100, Trend.STABLE: 75, Trend.DECLINING: 40}


def recent_workouts(
    workouts: Iterable[CompletedWorkoutRecord], days: int, now: datetime
) -> list[CompletedWorkoutRecord]:
    cutoff = ensure_utc(now) - timedelta(days=days)
    return [workout for workout in workouts if ensure_utc(workout.completed_at) >= cutoff]


def sort_chronologically(workouts: Iterable[CompletedWorkoutRecord]) -> list[CompletedWorkoutRecord]:
    return sorted(workouts, key=lambda workout: ensure_utc(workout.completed_at))


def average_rpe(workouts: Iterable[CompletedWorkoutRecord]) -> Optional[float]:
    ratings = [workout.rpe for workout in workouts if workout.rpe is not None]
    if not ratings:
        return None
    return round_to(sum(ratings) / len(ratings), 1)


def fatigue_score(
    recent: Sequence[CompletedWorkoutRecord], weeks_in_program: int, now: datetime
) -> int:
    """0 is fresh, 100 is exhausted."""
    if not recent:
        return 0

    avg_rpe = average_rpe(recent)
    if avg_rpe is None:
        return 30

    rpe_fatigue = max(0.0, (avg_rpe - 4) * 15)
    frequency_fatigue = min(len(recent_workouts(recent, FREQUENCY_WINDOW_DAYS, now)) * 10, 30)
    # The first two weeks are an adaptation period.
    week_modifier = 0.7 if weeks_in_program <= 2 else 1.0
    return clamp(round_half_up((rpe_fatigue + frequency_fatigue) * week_modifier), 0, 100)


def _full_completion_rate(workouts: Sequence[CompletedWorkoutRecord]) -> float:
    full = sum(1 for workout in workouts if workout.completion_status == CompletionStatus.FULL)
    return full / len(workouts)


def performance_trend(workouts: Sequence[CompletedWorkoutRecord]) -> Trend:
    """Compare the earlier and later halves of a chronologically sorted history."""
    if len(workouts) < 4:
        return Trend.STABLE

    midpoint = len(workouts) // 2
    earlier, later = workouts[:midpoint], workouts[midpoint:]

    completion_delta = _full_completion_rate(later) - _full_completion_rate(earlier)
    rpe_delta = (average_rpe(later) or 5) - (average_rpe(earlier) or 5)

    if completion_delta > 0.1 and rpe_delta <= 0.5:
        return Trend.IMPROVING
    if completion_delta < -0.15 or rpe_delta > 1.5:
        return Trend.DECLINING
    return Trend.STABLE


def suggested_intensity_modifier(
    avg_rpe: Optional[float], completion_rate: float, fatigue: int
) -> float:
    modifier = 1.0

    if completion_rate < 50:
        modifier -= 0.2
    elif completion_rate < 70:
        modifier -= 0.1

    if avg_rpe is not None:
        if avg_rpe > 8:
            modifier -= 0.1
        elif avg_rpe < 5 and completion_rate > 90:
            modifier += 0.05

    if fatigue > 85:
        modifier -= 0.15
    elif fatigue > 70:
        modifier -= 0.1

    return clamp(round_to(modifier, 2), 0.7, 1.3)


def build_alerts(
    avg_rpe: Optional[float],
    completion_rate: float,
    fatigue: int,
    recent: Sequence[CompletedWorkoutRecord],
) -> list[PerformanceAlert]:
    alerts: list[PerformanceAlert] = []

    if fatigue > 85:
        alerts.append(
            PerformanceAlert(
                type=AlertType.HIGH_FATIGUE,
                severity=AlertSeverity.CRITICAL,
                message="Very high fatigue detected. Consider taking an extra rest day.",
            )
        )
    elif fatigue > 70:
        alerts.append(
            PerformanceAlert(
                type=AlertType.HIGH_FATIGUE,
                severity=AlertSeverity.WARNING,
                message="Elevated fatigue levels. Focus on recovery and sleep.",
            )
        )

    if completion_rate < 40:
        alerts.append(
            PerformanceAlert(
                type=AlertType.LOW_COMPLETION,
                severity=AlertSeverity.CRITICAL,
                message="Workout completion is very low. Consider adjusting your program.",
            )
        )
    elif completion_rate < 60:
        alerts.append(
            PerformanceAlert(
                type=AlertType.LOW_COMPLETION,
                severity=AlertSeverity.WARNING,
                message="Some workouts are being missed. Try to maintain consistency.",
            )
        )

    if avg_rpe is not None and avg_rpe > 7.5 and fatigue > 60:
        alerts.append(
            PerformanceAlert(
                type=AlertType.OVERTRAINING,
                severity=AlertSeverity.WARNING,
                message="Signs of potential overtraining. Prioritize rest and recovery.",
            )
        )

    hard_sessions = sum(1 for workout in recent if workout.rpe is not None and workout.rpe >= 8)
    if hard_sessions >= 3:
        alerts.append(
            PerformanceAlert(
                type=AlertType.OVERTRAINING,
                severity=AlertSeverity.CRITICAL,
                message="Multiple consecutive hard workouts. A deload may be needed.",
            )
        )
    return alerts


def _recommendations(
    trend: Trend,
    recent_completion_rate: int,
    avg_rpe: Optional[float],
    fatigue: int,
    modifier: float,
) -> list[str]:
    recommendations: list[str] = []
    if fatigue > 60:
        recommendations.append("Prioritize 8+ hours of sleep for recovery")
        recommendations.append("Consider light stretching or foam rolling")
    if avg_rpe is not None and avg_rpe < 5:
        recommendations.append("Workouts feel easy - consider increasing intensity")
    if recent_completion_rate < 70:
        recommendations.append("Schedule workouts at consistent times to build habit")
    if trend == Trend.IMPROVING:
        recommendations.append("Great progress! Stay consistent with your current approach")
    if trend == Trend.DECLINING:
        recommendations.append("Focus on completing workouts rather than intensity")
        recommendations.append("Review sleep, nutrition, and stress levels")
    if modifier < 1:
        recommendations.append("Intensity has been automatically reduced to aid recovery")
    return recommendations


def analyze_recent_performance(
    history: Sequence[CompletedWorkoutRecord],
    total_scheduled: int,
    weeks_in_program: int,
    now: datetime,
) -> PerformanceAnalysis:
    ordered = sort_chronologically(history)
    recent = recent_workouts(ordered, RECENT_WINDOW_DAYS, now)

    overall_rate = round_half_up(len(history) / total_scheduled * 100) if total_scheduled > 0 else 0

    # Roughly one session a day is expected in the recent window, minus what
    # was already done before it.
    recent_expected = min(RECENT_WINDOW_DAYS, total_scheduled - (len(history) - len(recent)))
    if recent_expected > 0:
        recent_rate = round_half_up(len(recent) / recent_expected * 100)
    else:
        recent_rate = 100 if history else 0

    avg_rpe = average_rpe(recent)
    fatigue = fatigue_score(recent, weeks_in_program, now)
    trend = performance_trend(ordered)
    modifier = suggested_intensity_modifier(avg_rpe, recent_rate, fatigue)
    alerts = build_alerts(avg_rpe, recent_rate, fatigue, recent)

    recent_rate = min(100, recent_rate)
    logger.debug(
        "Performance: trend=%s recent=%d%% fatigue=%d modifier=%.2f",
        trend.value,
        recent_rate,
        fatigue,
        modifier,
    )
    return PerformanceAnalysis(
        overall_trend=trend,
        recent_completion_rate=recent_rate,
        overall_completion_rate=min(100, overall_rate),
        average_rpe=avg_rpe,
        fatigue_score=fatigue,
        suggested_intensity_modifier=modifier,
        alerts=alerts,
        recommendations=_recommendations(trend, recent_rate, avg_rpe, fatigue, modifier),
    )


def _readiness_message(score: int, weeks_until: Optional[int]) -> str:
    if weeks_until is not None and weeks_until <= 1:
        if score >= 80:
            return "Race ready! Focus on rest and mental preparation."
        if score >= 60:
            return "Race week! Trust your training and stay positive."
        return "Race is near. Focus on what you can control."
    if score >= 90:
        return "Excellent race readiness. Stay consistent!"
    if score >= 75:
        return "On track for race day. Keep up the good work."
    if score >= 60:
        return "Making progress. Prioritize key workouts."
    return "Behind schedule. Focus on consistency over intensity."


def calculate_race_readiness(
    history: Sequence[CompletedWorkoutRecord],
    total_scheduled: int,
    key_workouts_completed: int,
    total_key_workouts: int,
    weeks_until: Optional[int],
    weeks_in_program: int,
    now: datetime,
) -> RaceReadinessScore:
    program_completion = (
        min(100, round_half_up(len(history) / total_scheduled * 100)) if total_scheduled > 0 else 0
    )
    key_workout_completion = (
        min(100, round_half_up(key_workouts_completed / total_key_workouts * 100))
        if total_key_workouts > 0
        else 100
    )

    ordered = sort_chronologically(history)
    trend_score = TREND_SCORES[performance_trend(ordered)]

    fortnight = recent_workouts(ordered, CONSISTENCY_WINDOW_DAYS, now)
    consistency = 80 if len(fortnight) >= 4 else len(fortnight) * 20
    fatigue_management = max(0, 100 - fatigue_score(fortnight, weeks_in_program, now))

    factors = RaceReadinessFactors(
        program_completion=program_completion,
        key_workout_completion=key_workout_completion,
        performance_trend=trend_score,
        weekly_consistency=consistency,
        fatigue_management=fatigue_management,
    )
    weighted = sum(getattr(factors, name) * weight for name, weight in READINESS_WEIGHTS.items())
    score = clamp(round_half_up(weighted), 0, 100)
    return RaceReadinessScore(score=score, factors=factors, message=_readiness_message(score, weeks_until))


def is_key_workout(slot: WorkoutSlot) -> bool:
    """Full simulations and high-coverage sessions count towards readiness."""
    if isinstance(slot, FullSlot):
        return True
    return isinstance(slot, CoverageSlot) and slot.coverage >= KEY_COVERAGE_THRESHOLD


def count_scheduled_to_date(program: GeneratedProgram, week_now: int) -> int:
    return sum(
        1
        for week in program.schedule[:week_now]
        for slot in week.workouts
        if slot.type != "rest"
    )


def count_key_workouts(program: GeneratedProgram) -> int:
    return sum(1 for week in program.schedule for slot in week.workouts if is_key_workout(slot))


def count_key_workouts_completed(
    program: GeneratedProgram, history: Iterable[CompletedWorkoutRecord]
) -> int:
    slots = {
        (week.week, slot.day_of_week): slot for week in program.schedule for slot in week.workouts
    }
    return sum(
        1
        for record in history
        if (record.week, record.day_of_week) in slots
        and is_key_workout(slots[(record.week, record.day_of_week)])
    )


def analyze_program(
    program: GeneratedProgram,
    start_date: date,
    race_date: Optional[date],
    history: Sequence[CompletedWorkoutRecord],
    now: datetime,
) -> ProgramAnalysis:
    """Run the performance and readiness analysis for one stored program."""
    week_now = current_week(start_date, program.weeks, now)
    scheduled = count_scheduled_to_date(program, week_now)
    key_expected = math.ceil(count_key_workouts(program) * week_now / program.weeks)

    analysis = analyze_recent_performance(history, scheduled, week_now, now)
    readiness = calculate_race_readiness(
        history,
        scheduled,
        count_key_workouts_completed(program, history),
        key_expected,
        weeks_until_race(race_date, now),
        week_now,
        now,
    )
    return ProgramAnalysis(
        analysis=analysis,
        race_readiness=readiness,
        program_progress=ProgramProgress(
            current_week=week_now,
            total_weeks=program.weeks,
            completed_workouts=len(history),
            total_workouts=scheduled,
        ),
    )

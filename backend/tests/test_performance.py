from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from racecoach.core.enums import AlertSeverity, AlertType, CompletionStatus, FitnessLevel, Trend
from racecoach.schemas.history import CompletedWorkoutRecord
from racecoach.schemas.program import PersonalizationInput
from racecoach.services import catalog, performance, personalization

NOW = datetime(2025, 2, 10, 9, 0, tzinfo=timezone.utc)


def workout(
    days_ago: float,
    rpe: Optional[int] = None,
    status: CompletionStatus = CompletionStatus.FULL,
    week: int = 1,
    day_of_week: int = 1,
) -> CompletedWorkoutRecord:
    return CompletedWorkoutRecord(
        week=week,
        day_of_week=day_of_week,
        rpe=rpe,
        completion_status=status,
        completed_at=NOW - timedelta(days=days_ago),
    )


def test_recent_workouts_window():
    history = [workout(1), workout(6.9), workout(7.5)]
    assert len(performance.recent_workouts(history, 7, NOW)) == 2


def test_average_rpe():
    assert performance.average_rpe([workout(1)]) is None
    assert performance.average_rpe([workout(1, 6), workout(2, 7), workout(3, 7)]) == 6.7


def test_fatigue_score():
    assert performance.fatigue_score([], 5, NOW) == 0
    assert performance.fatigue_score([workout(1), workout(2)], 5, NOW) == 30

    hard_week = [workout(0.5, 8), workout(1, 8), workout(2, 8), workout(5, 8)]
    assert performance.fatigue_score(hard_week, 5, NOW) == 90
    # Weeks one and two are an adaptation period.
    assert performance.fatigue_score(hard_week, 2, NOW) == 63


def test_fatigue_score_is_capped():
    brutal = [workout(day / 4, 10) for day in range(8)]
    assert performance.fatigue_score(brutal, 6, NOW) == 100


def test_trend_needs_four_workouts():
    assert performance.performance_trend([workout(3), workout(2), workout(1)]) == Trend.STABLE


def test_trend_improving_and_declining():
    improving = [
        workout(8, 6, CompletionStatus.PARTIAL),
        workout(6, 6, CompletionStatus.SKIPPED),
        workout(4, 6),
        workout(2, 6),
    ]
    assert performance.performance_trend(improving) == Trend.IMPROVING

    declining = [workout(8, 5), workout(6, 5), workout(4, 8), workout(2, 8)]
    assert performance.performance_trend(declining) == Trend.DECLINING

    steady = [workout(8, 6), workout(6, 6), workout(4, 6), workout(2, 7)]
    assert performance.performance_trend(steady) == Trend.STABLE


@pytest.mark.parametrize(
    "avg_rpe, completion_rate, fatigue, expected",
    [
        (None, 100, 0, 1.0),
        (None, 40, 0, 0.8),
        (None, 60, 0, 0.9),
        (4.0, 95, 0, 1.05),
        (9.0, 80, 0, 0.9),
        (6.0, 80, 75, 0.9),
        (6.0, 80, 90, 0.85),
        (9.0, 40, 90, 0.7),
    ],
)
def test_suggested_intensity_modifier(avg_rpe, completion_rate, fatigue, expected):
    assert performance.suggested_intensity_modifier(avg_rpe, completion_rate, fatigue) == expected


def test_alerts():
    alerts = performance.build_alerts(8.0, 30, 90, [workout(1, 8), workout(2, 9), workout(3, 8)])
    assert [(a.type, a.severity) for a in alerts] == [
        (AlertType.HIGH_FATIGUE, AlertSeverity.CRITICAL),
        (AlertType.LOW_COMPLETION, AlertSeverity.CRITICAL),
        (AlertType.OVERTRAINING, AlertSeverity.WARNING),
        (AlertType.OVERTRAINING, AlertSeverity.CRITICAL),
    ]

    mild = performance.build_alerts(6.0, 55, 72, [])
    assert [(a.type, a.severity) for a in mild] == [
        (AlertType.HIGH_FATIGUE, AlertSeverity.WARNING),
        (AlertType.LOW_COMPLETION, AlertSeverity.WARNING),
    ]

    assert performance.build_alerts(None, 100, 0, []) == []


def test_analysis_of_empty_history():
    analysis = performance.analyze_recent_performance([], 0, 1, NOW)

    assert analysis.overall_trend == Trend.STABLE
    assert analysis.recent_completion_rate == 0
    assert analysis.overall_completion_rate == 0
    assert analysis.average_rpe is None
    assert analysis.fatigue_score == 0
    assert analysis.suggested_intensity_modifier == 0.8
    assert analysis.alerts[0].type == AlertType.LOW_COMPLETION
    assert "Intensity has been automatically reduced to aid recovery" in analysis.recommendations


def test_analysis_of_a_comfortable_week():
    history = [workout(6, 4), workout(4, 4), workout(2, 4), workout(1, 4)]
    analysis = performance.analyze_recent_performance(history, 4, 3, NOW)

    assert analysis.recent_completion_rate == 100
    assert analysis.overall_completion_rate == 100
    assert analysis.average_rpe == 4.0
    assert analysis.fatigue_score == 20
    assert analysis.suggested_intensity_modifier == 1.05
    assert analysis.alerts == []
    assert analysis.recommendations == ["Workouts feel easy - consider increasing intensity"]


def test_completion_rates_are_capped():
    history = [workout(day, 5) for day in range(1, 7)]
    analysis = performance.analyze_recent_performance(history, 4, 3, NOW)

    assert analysis.overall_completion_rate == 100
    assert analysis.recent_completion_rate == 100


def test_race_readiness_without_history():
    readiness = performance.calculate_race_readiness([], 0, 0, 0, 5, 1, NOW)

    assert readiness.factors.program_completion == 0
    assert readiness.factors.key_workout_completion == 100
    assert readiness.factors.performance_trend == 75
    assert readiness.factors.weekly_consistency == 0
    assert readiness.factors.fatigue_management == 100
    assert readiness.score == 50
    assert readiness.message == "Behind schedule. Focus on consistency over intensity."


def test_race_readiness_close_to_race():
    history = [workout(day, 5) for day in (1, 3, 5, 8, 10, 12)]
    readiness = performance.calculate_race_readiness(history, 6, 2, 2, 1, 6, NOW)

    assert readiness.factors.program_completion == 100
    assert readiness.factors.key_workout_completion == 100
    assert readiness.factors.weekly_consistency == 80
    assert readiness.score >= 80
    assert readiness.message == "Race ready! Focus on rest and mental preparation."


def test_key_workouts():
    assert performance.is_key_workout(catalog.full_simulation(6)) is True
    assert performance.is_key_workout(catalog.coverage(6, 75, 55)) is True
    assert performance.is_key_workout(catalog.coverage(6, 50, 45)) is False
    assert performance.is_key_workout(catalog.zone2(1, 30)) is False


def test_analyze_program():
    program = personalization.generate_program(
        PersonalizationInput(
            race_date=date(2025, 4, 20), fitness_level=FitnessLevel.INTERMEDIATE, days_per_week=4
        ),
        NOW,
    )
    assert performance.count_key_workouts(program) == 4

    history = [
        workout(5, 6, week=1, day_of_week=1),
        workout(4, 6, week=1, day_of_week=2),
        workout(2, 7, week=1, day_of_week=6),
    ]
    assert performance.count_key_workouts_completed(program, history) == 0

    result = performance.analyze_program(program, date(2025, 2, 3), date(2025, 4, 20), history, NOW)
    assert result.program_progress.current_week == 2
    assert result.program_progress.total_workouts == 8
    assert result.program_progress.completed_workouts == 3
    assert result.analysis.overall_completion_rate == 38
    assert result.analysis.average_rpe == 6.3
    assert result.race_readiness.factors.key_workout_completion == 0

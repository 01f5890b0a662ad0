from typing import Optional

from pydantic import BaseModel

from ..core.enums import AlertSeverity, AlertType, Importance, RecoveryAction, Trend
from .program import WorkoutSlot


class MissedWorkoutRecord(BaseModel):
    week: int
    day_of_week: int
    day_name: str
    label: str
    workout: WorkoutSlot
    days_since_missed: int
    importance: Importance
    suggested_action: RecoveryAction
    impact_on_readiness: int


class MissedWorkoutSummary(BaseModel):
    missed_workouts: list[MissedWorkoutRecord]
    total_missed: int
    readiness_impact: int
    recommendations: list[str]


class PerformanceAlert(BaseModel):
    type: AlertType
    severity: AlertSeverity
    message: str


class PerformanceAnalysis(BaseModel):
    overall_trend: Trend
    recent_completion_rate: int
    overall_completion_rate: int
    average_rpe: Optional[float]
    fatigue_score: int
    suggested_intensity_modifier: float
    alerts: list[PerformanceAlert]
    recommendations: list[str]


class RaceReadinessFactors(BaseModel):
    program_completion: int
    key_workout_completion: int
    performance_trend: int
    weekly_consistency: int
    fatigue_management: int


class RaceReadinessScore(BaseModel):
    score: int
    factors: RaceReadinessFactors
    message: str


class ProgramProgress(BaseModel):
    current_week: int
    total_weeks: int
    completed_workouts: int
    total_workouts: int


class ProgramAnalysis(BaseModel):
    analysis: PerformanceAnalysis
    race_readiness: RaceReadinessScore
    program_progress: ProgramProgress

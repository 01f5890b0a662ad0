from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProgram(Base):
    """The single active program of a user, stored as a JSON snapshot."""

    __tablename__ = "user_programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_key: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    program_id: Mapped[str] = mapped_column(String(80), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    race_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    fitness_level: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    days_per_week: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weak_areas: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    program_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    intensity_modifier: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)
    adapted_schedule: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    missed_workout_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    completed_workouts: Mapped[list["CompletedProgramWorkout"]] = relationship(
        back_populates="user_program",
        cascade="all, delete-orphan",
        order_by="CompletedProgramWorkout.completed_at",
    )


class CompletedProgramWorkout(Base):
    __tablename__ = "completed_program_workouts"
    __table_args__ = (
        UniqueConstraint(
            "user_program_id", "week", "day_of_week", name="completed_program_workout_slot_unique"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_program_id: Mapped[int] = mapped_column(
        ForeignKey("user_programs.id", ondelete="CASCADE"), index=True
    )
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    session_id: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    actual_duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rpe: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completion_status: Mapped[str] = mapped_column(String(20), default="full", nullable=False)
    percent_complete: Mapped[int] = mapped_column(Integer, default=100, nullable=False)

    user_program: Mapped[UserProgram] = relationship(back_populates="completed_workouts")

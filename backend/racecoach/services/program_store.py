import logging
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..core.clock import ensure_utc
from ..models.program import CompletedProgramWorkout, UserProgram
from ..schemas.history import CompletedWorkoutCreate, CompletedWorkoutRecord
from ..schemas.program import GeneratedProgram, WeekDefinition

logger = logging.getLogger(__name__)


def load_program(db: Session, user_key: str) -> Optional[UserProgram]:
    return db.query(UserProgram).filter(UserProgram.user_key == user_key).first()


def save_program(
    db: Session, user_key: str, program: GeneratedProgram, start_date: date
) -> UserProgram:
    """Store ``program`` as the user's active program, replacing any previous one."""
    delete_program(db, user_key, commit=False)
    personalization = program.personalization
    user_program = UserProgram(
        user_key=user_key,
        program_id=program.id,
        start_date=start_date,
        race_date=personalization.race_date,
        fitness_level=personalization.fitness_level.value,
        days_per_week=personalization.days_per_week,
        weak_areas=list(personalization.weak_areas),
        program_data=program.model_dump(mode="json"),
    )
    db.add(user_program)
    db.commit()
    db.refresh(user_program)
    logger.info("Saved program %s for %s starting %s", program.id, user_key, start_date)
    return user_program


def delete_program(db: Session, user_key: str, commit: bool = True) -> bool:
    existing = load_program(db, user_key)
    if existing is None:
        return False
    db.delete(existing)
    if commit:
        db.commit()
    else:
        db.flush()
    logger.info("Deleted program %s for %s", existing.program_id, user_key)
    return True


def to_generated_program(user_program: UserProgram) -> GeneratedProgram:
    return GeneratedProgram.model_validate(user_program.program_data)


def adapted_schedule(user_program: UserProgram) -> Optional[tuple[WeekDefinition, ...]]:
    if not user_program.adapted_schedule:
        return None
    return tuple(WeekDefinition.model_validate(week) for week in user_program.adapted_schedule)


def append_completed_workout(
    db: Session,
    user_program: UserProgram,
    payload: CompletedWorkoutCreate,
    completed_at: datetime,
) -> CompletedWorkoutRecord:
    workout = (
        db.query(CompletedProgramWorkout)
        .filter(
            CompletedProgramWorkout.user_program_id == user_program.id,
            CompletedProgramWorkout.week == payload.week,
            CompletedProgramWorkout.day_of_week == payload.day_of_week,
        )
        .first()
    )
    if workout is None:
        workout = CompletedProgramWorkout(
            user_program_id=user_program.id,
            week=payload.week,
            day_of_week=payload.day_of_week,
        )
        db.add(workout)

    workout.session_id = payload.session_id
    workout.completed_at = completed_at
    workout.actual_duration = payload.actual_duration
    workout.rpe = payload.rpe
    workout.completion_status = payload.completion_status.value
    workout.percent_complete = payload.percent_complete
    db.commit()
    db.refresh(workout)
    logger.info(
        "Recorded week %d day %d for program %s", payload.week, payload.day_of_week, user_program.program_id
    )
    return _to_record(workout)


def load_completed_workouts(user_program: UserProgram) -> list[CompletedWorkoutRecord]:
    return [_to_record(workout) for workout in user_program.completed_workouts]


def save_adaptation(
    db: Session,
    user_program: UserProgram,
    modifier: float,
    schedule: Iterable[WeekDefinition],
    missed_workout_count: int,
) -> UserProgram:
    user_program.intensity_modifier = modifier
    user_program.adapted_schedule = [week.model_dump(mode="json") for week in schedule]
    user_program.missed_workout_count = missed_workout_count
    db.commit()
    db.refresh(user_program)
    return user_program


def _to_record(workout: CompletedProgramWorkout) -> CompletedWorkoutRecord:
    return CompletedWorkoutRecord(
        week=workout.week,
        day_of_week=workout.day_of_week,
        session_id=workout.session_id,
        completed_at=ensure_utc(workout.completed_at),
        actual_duration=workout.actual_duration,
        rpe=workout.rpe,
        completion_status=workout.completion_status,
        percent_complete=workout.percent_complete,
    )

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from racecoach.core.clock import today
from racecoach.core.enums import CompletionStatus, FitnessLevel
from racecoach.core.security import create_access_token
from racecoach.database import Base, SessionLocal, engine
from racecoach.models.program import UserProgram
from racecoach.schemas.history import CompletedWorkoutCreate
from racecoach.schemas.program import PersonalizationInput
from racecoach.services import personalization, program_store

DEMO_USER_KEY = "demo-athlete"


def ensure_program(db: Session, *, user_key: str, now: datetime) -> UserProgram:
    existing = program_store.load_program(db, user_key)
    if existing:
        return existing

    program = personalization.generate_program(
        PersonalizationInput(
            race_date=today(now) + timedelta(days=60),
            fitness_level=FitnessLevel.INTERMEDIATE,
            days_per_week=4,
        ),
        now,
    )
    return program_store.save_program(db, user_key, program, today(now) - timedelta(days=14))


def seed_completed_workouts(db: Session, *, user_program: UserProgram, now: datetime) -> None:
    if user_program.completed_workouts:
        return

    first_week = program_store.to_generated_program(user_program).schedule[0]
    for offset, slot in enumerate(first_week.workouts[:3]):
        program_store.append_completed_workout(
            db,
            user_program,
            CompletedWorkoutCreate(
                week=1,
                day_of_week=slot.day_of_week,
                actual_duration=slot.estimated_minutes,
                rpe=6 + offset,
                completion_status=CompletionStatus.FULL if offset < 2 else CompletionStatus.PARTIAL,
                percent_complete=100 if offset < 2 else 70,
            ),
            now - timedelta(days=13 - offset * 2),
        )


def main() -> None:
    Base.metadata.create_all(bind=engine)
    now = datetime.now(timezone.utc)
    db = SessionLocal()
    try:
        user_program = ensure_program(db, user_key=DEMO_USER_KEY, now=now)
        seed_completed_workouts(db, user_program=user_program, now=now)
        db.refresh(user_program)
        token = create_access_token({"sub": DEMO_USER_KEY})
        print(f"Seed data ready. Program {user_program.program_id} for {DEMO_USER_KEY}")
        print(f"Bearer token: {token}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.clock import Clock, get_clock, today
from ..core.rounding import clamp
from ..database import get_db
from ..dependencies import get_current_user_key
from ..models.program import UserProgram
from ..schemas.analysis import MissedWorkoutSummary, ProgramAnalysis
from ..schemas.history import CompletedWorkoutCreate, CompletedWorkoutRecord
from ..schemas.program import PersonalizationInput
from ..schemas.user_program import (
    AdaptationRead,
    AdaptRequest,
    MakeupRead,
    MakeupRequest,
    UserProgramCreate,
    UserProgramRead,
)
from ..services import adaptation, adherence, performance, personalization, program_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-program", tags=["user-program"])


@router.get("", response_model=Optional[UserProgramRead])
def read_user_program(
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
) -> Optional[UserProgramRead]:
    user_program = program_store.load_program(db, user_key)
    if user_program is None:
        return None
    return _to_read(user_program)


@router.post("", response_model=UserProgramRead, status_code=status.HTTP_201_CREATED)
def create_user_program(
    payload: UserProgramCreate,
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> UserProgramRead:
    now = clock.now()
    validation = personalization.validate_personalization(payload.personalization, now)
    if not validation.valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=", ".join(validation.errors))
    try:
        personalization_input = PersonalizationInput.model_validate(payload.personalization)
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid personalization.")

    program = personalization.generate_program(personalization_input, now)
    user_program = program_store.save_program(
        db, user_key, program, payload.start_date or today(now)
    )
    return _to_read(user_program)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_program(
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
) -> Response:
    program_store.delete_program(db, user_key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/complete-workout", response_model=CompletedWorkoutRecord)
def complete_workout(
    payload: CompletedWorkoutCreate,
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CompletedWorkoutRecord:
    user_program = _get_user_program(db, user_key)
    program = program_store.to_generated_program(user_program)
    if payload.week > program.weeks:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Week is outside the program.")
    return program_store.append_completed_workout(db, user_program, payload, clock.now())


@router.get("/missed-workouts", response_model=MissedWorkoutSummary)
def missed_workouts(
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MissedWorkoutSummary:
    user_program = _get_user_program(db, user_key)
    return adherence.summarize(
        user_program.start_date,
        program_store.to_generated_program(user_program),
        program_store.load_completed_workouts(user_program),
        clock.now(),
    )


@router.get("/analysis", response_model=ProgramAnalysis)
def program_analysis(
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ProgramAnalysis:
    user_program = _get_user_program(db, user_key)
    return performance.analyze_program(
        program_store.to_generated_program(user_program),
        user_program.start_date,
        user_program.race_date,
        program_store.load_completed_workouts(user_program),
        clock.now(),
    )


@router.post("/adapt", response_model=AdaptationRead)
def adapt_user_program(
    payload: AdaptRequest,
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AdaptationRead:
    now = clock.now()
    user_program = _get_user_program(db, user_key)
    program = program_store.to_generated_program(user_program)
    history = program_store.load_completed_workouts(user_program)

    modifier = payload.modifier
    if modifier is None:
        analysis = performance.analyze_program(
            program, user_program.start_date, user_program.race_date, history, now
        )
        modifier = analysis.analysis.suggested_intensity_modifier
    modifier = clamp(modifier, adaptation.MIN_MODIFIER, adaptation.MAX_MODIFIER)

    missed = adherence.find_missed_workouts(user_program.start_date, program, history, now)
    adapted_program = adaptation.recalculate_program(program, modifier)
    program_store.save_adaptation(db, user_program, modifier, adapted_program.schedule, len(missed))
    logger.info("Adapted program %s for %s to %.2f", program.id, user_key, modifier)
    return AdaptationRead(
        intensity_modifier=modifier,
        description=adaptation.describe_adaptation(modifier),
        adapted=any(
            adaptation.is_adapted(slot, modifier)
            for week in adapted_program.schedule
            for slot in week.workouts
        ),
        missed_workout_count=len(missed),
        schedule=list(adapted_program.schedule),
    )


@router.post("/makeup", response_model=MakeupRead)
def makeup_workout(
    payload: MakeupRequest,
    user_key: str = Depends(get_current_user_key),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MakeupRead:
    user_program = _get_user_program(db, user_key)
    program = program_store.to_generated_program(user_program)
    scheduled = any(
        week.week == payload.week and slot.day_of_week == payload.day_of_week
        for week in program.schedule
        for slot in week.workouts
    )
    if not scheduled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found.")

    missed = adherence.find_missed_workouts(
        user_program.start_date,
        program,
        program_store.load_completed_workouts(user_program),
        clock.now(),
    )
    record = next(
        (m for m in missed if m.week == payload.week and m.day_of_week == payload.day_of_week),
        None,
    )
    if record is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workout was not missed.")
    return MakeupRead(
        days_late=record.days_since_missed,
        workout=adaptation.generate_makeup_workout(record, record.days_since_missed),
    )


def _get_user_program(db: Session, user_key: str) -> UserProgram:
    user_program = program_store.load_program(db, user_key)
    if user_program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active program found.")
    return user_program


def _to_read(user_program: UserProgram) -> UserProgramRead:
    program = program_store.to_generated_program(user_program)
    adapted = program_store.adapted_schedule(user_program)
    return UserProgramRead(
        id=user_program.id,
        program_id=user_program.program_id,
        start_date=user_program.start_date,
        race_date=user_program.race_date,
        fitness_level=user_program.fitness_level,
        days_per_week=user_program.days_per_week,
        weak_areas=user_program.weak_areas or [],
        intensity_modifier=user_program.intensity_modifier,
        adaptation=adaptation.describe_adaptation(user_program.intensity_modifier),
        program=program,
        adapted_schedule=list(adapted) if adapted is not None else None,
        summary=personalization.program_summary(program),
        completed_workouts=program_store.load_completed_workouts(user_program),
        created_at=user_program.created_at,
    )

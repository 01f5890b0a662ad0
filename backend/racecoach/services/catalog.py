import math

from ..core.enums import FitnessLevel, SlotType, StrengthFocus
from ..schemas.program import (
    CoverageSlot,
    FullSlot,
    IntervalRun,
    ProgramTemplate,
    RestSlot,
    RunSlot,
    StationSlot,
    SteadyRun,
    StrengthExercise,
    StrengthSlot,
    WeekDefinition,
)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

ZONE2_HR = "65-75% max HR"
TEMPO_HR = "80-85% max HR"

LOWER_BODY_SESSION = (
    StrengthExercise(name="Back Squat", sets=4, reps="8", notes="Focus on depth and controlled tempo"),
    StrengthExercise(
        name="Romanian Deadlift", sets=3, reps="10", notes="Maintain flat back, feel hamstring stretch"
    ),
    StrengthExercise(name="Walking Lunges", sets=3, reps="20 steps", notes="Knee touches ground each rep"),
    StrengthExercise(name="Calf Raises", sets=3, reps="15", notes="Full range, pause at top"),
)

UPPER_BODY_SESSION = (
    StrengthExercise(name="Bench Press", sets=4, reps="8", notes="Control the weight, full range of motion"),
    StrengthExercise(
        name="Bent Over Row", sets=4, reps="8", notes="Pull to lower chest, squeeze shoulder blades"
    ),
    StrengthExercise(name="Overhead Press", sets=3, reps="10", notes="Brace core, full lockout overhead"),
    StrengthExercise(name="Pull-ups", sets=3, reps="max", notes="Full dead hang to chin over bar"),
)

FULL_BODY_SESSION = (
    StrengthExercise(name="Deadlift", sets=4, reps="5", notes="Maintain neutral spine, drive through heels"),
    StrengthExercise(name="Clean and Press", sets=3, reps="6", notes="Explosive clean, controlled press"),
    StrengthExercise(name="Kettlebell Swings", sets=4, reps="15", notes="Hip hinge, power from glutes"),
    StrengthExercise(name="Burpees", sets=3, reps="10", notes="Full chest to floor, jump at top"),
)

STRENGTH_SESSIONS = {
    StrengthFocus.LOWER: LOWER_BODY_SESSION,
    StrengthFocus.UPPER: UPPER_BODY_SESSION,
    StrengthFocus.FULL: FULL_BODY_SESSION,
}

STRENGTH_MINUTES = {
    StrengthFocus.LOWER: 45,
    StrengthFocus.UPPER: 45,
    StrengthFocus.FULL: 50,
}

SLOT_TYPE_LABELS = {
    SlotType.RUN: "Running",
    SlotType.STRENGTH: "Strength",
    SlotType.QUICK: "Quick Workout",
    SlotType.STATION: "Station Practice",
    SlotType.COVERAGE: "Race Coverage",
    SlotType.FULL: "Full Simulation",
    SlotType.REST: "Rest Day",
}


def interval_minutes(reps: int, distance: int, rest: int) -> int:
    return math.ceil(reps * (distance / 200 + rest / 60) + 10)


def zone2(day: int, minutes: int) -> RunSlot:
    return RunSlot(
        day_of_week=day,
        day_name=DAY_NAMES[day],
        estimated_minutes=minutes,
        run=SteadyRun(kind="zone2", duration=minutes, hr_zone=ZONE2_HR),
    )


def tempo(day: int, minutes: int) -> RunSlot:
    return RunSlot(
        day_of_week=day,
        day_name=DAY_NAMES[day],
        estimated_minutes=minutes,
        run=SteadyRun(kind="tempo", duration=minutes, hr_zone=TEMPO_HR),
    )


def intervals(day: int, reps: int, distance: int, rest: int) -> RunSlot:
    minutes = interval_minutes(reps, distance, rest)
    return RunSlot(
        day_of_week=day,
        day_name=DAY_NAMES[day],
        estimated_minutes=minutes,
        run=IntervalRun(duration=minutes, reps=reps, distance=distance, rest=rest),
    )


def strength(
    day: int,
    focus: StrengthFocus,
    station_work: tuple[str, ...],
    exercise_count: int | None = None,
) -> StrengthSlot:
    exercises = STRENGTH_SESSIONS[focus]
    if exercise_count is not None:
        exercises = exercises[:exercise_count]
    return StrengthSlot(
        day_of_week=day,
        day_name=DAY_NAMES[day],
        estimated_minutes=STRENGTH_MINUTES[focus],
        focus=focus,
        exercises=exercises,
        station_work=station_work,
    )


def stations(day: int, names: tuple[str, ...], sets: int, minutes: int) -> StationSlot:
    return StationSlot(
        day_of_week=day, day_name=DAY_NAMES[day], estimated_minutes=minutes, stations=names, sets=sets
    )


def coverage(day: int, percent: int, minutes: int) -> CoverageSlot:
    return CoverageSlot(day_of_week=day, day_name=DAY_NAMES[day], estimated_minutes=minutes, coverage=percent)


def full_simulation(day: int) -> FullSlot:
    return FullSlot(day_of_week=day, day_name=DAY_NAMES[day], estimated_minutes=75)


def rest(day: int) -> RestSlot:
    return RestSlot(day_of_week=day, day_name=DAY_NAMES[day], estimated_minutes=0)


def _week(number: int, phase: str, theme: str, workouts: tuple, is_deload: bool = False) -> WeekDefinition:
    return WeekDefinition(week=number, phase=phase, theme=theme, is_deload=is_deload, workouts=workouts)


LOWER, UPPER, FULL = StrengthFocus.LOWER, StrengthFocus.UPPER, StrengthFocus.FULL

EIGHT_WEEK_SCHEDULE = (
    _week(1, "Specificity", "Build Race Fitness", (
        strength(1, LOWER, ("sled_push",)),
        stations(2, ("burpee_broad_jump", "wall_balls"), 2, 30),
        rest(3),
        strength(4, UPPER, ("sled_pull", "farmers_carry")),
        intervals(5, 6, 400, 90),
        coverage(6, 50, 45),
    )),
    _week(2, "Specificity", "Build Race Fitness", (
        strength(1, LOWER, ("sandbag_lunges",)),
        stations(2, ("skierg", "rowing"), 2, 30),
        rest(3),
        strength(4, UPPER, ("wall_balls",)),
        tempo(5, 30),
        coverage(6, 50, 45),
    )),
    _week(3, "Specificity", "Increase Intensity", (
        strength(1, FULL, ("sled_push", "sled_pull")),
        stations(2, ("burpee_broad_jump", "sandbag_lunges", "wall_balls"), 2, 35),
        rest(3),
        intervals(4, 8, 400, 90),
        stations(5, ("farmers_carry", "rowing"), 2, 25),
        coverage(6, 75, 55),
    )),
    _week(4, "Specificity", "Deload Week", (
        zone2(1, 25),
        stations(2, ("skierg", "wall_balls"), 1, 20),
        rest(3),
        zone2(4, 25),
        rest(5),
        coverage(6, 50, 35),
    ), is_deload=True),
    _week(5, "Peak", "Race Simulations", (
        strength(1, FULL, ("sled_push", "burpee_broad_jump")),
        stations(2, ("skierg", "sled_pull", "rowing", "wall_balls"), 2, 40),
        rest(3),
        intervals(4, 5, 1000, 180),
        rest(5),
        coverage(6, 100, 70),
    )),
    _week(6, "Peak", "Race Simulations", (
        strength(1, LOWER, ("sandbag_lunges",)),
        stations(2, ("burpee_broad_jump", "farmers_carry", "wall_balls"), 2, 35),
        rest(3),
        tempo(4, 35),
        rest(5),
        full_simulation(6),
    )),
    _week(7, "Peak", "Final Push", (
        strength(1, UPPER, ("sled_pull",)),
        stations(2, ("skierg", "rowing", "wall_balls"), 2, 30),
        rest(3),
        intervals(4, 4, 1000, 180),
        rest(5),
        full_simulation(6),
    )),
    _week(8, "Taper", "Race Ready", (
        zone2(1, 20),
        stations(2, ("skierg", "wall_balls"), 1, 15),
        rest(3),
        zone2(4, 15),
        rest(5),
        coverage(6, 50, 30),
    ), is_deload=True),
)

TWELVE_WEEK_SCHEDULE = (
    _week(1, "Base", "Foundation", (
        zone2(1, 30),
        stations(2, ("skierg", "wall_balls"), 2, 25),
        rest(3),
        strength(4, LOWER, ("sled_push",), exercise_count=3),
        rest(5),
        coverage(6, 25, 30),
    )),
    _week(2, "Base", "Foundation", (
        zone2(1, 30),
        stations(2, ("rowing", "burpee_broad_jump"), 2, 25),
        rest(3),
        strength(4, UPPER, ("sled_pull",), exercise_count=3),
        rest(5),
        coverage(6, 25, 30),
    )),
    _week(3, "Base", "Build Endurance", (
        zone2(1, 35),
        stations(2, ("farmers_carry", "sandbag_lunges"), 2, 30),
        rest(3),
        strength(4, FULL, ("wall_balls",), exercise_count=3),
        zone2(5, 25),
        coverage(6, 25, 35),
    )),
    _week(4, "Base", "Deload", (
        zone2(1, 20),
        stations(2, ("skierg", "rowing"), 1, 15),
        rest(3),
        zone2(4, 20),
        rest(5),
        coverage(6, 25, 25),
    ), is_deload=True),
    _week(5, "Pace", "Build Speed", (
        strength(1, LOWER, ("sled_push", "sandbag_lunges")),
        stations(2, ("burpee_broad_jump", "wall_balls", "skierg"), 2, 35),
        rest(3),
        tempo(4, 30),
        stations(5, ("farmers_carry",), 2, 20),
        coverage(6, 50, 45),
    )),
    _week(6, "Pace", "Build Speed", (
        strength(1, UPPER, ("sled_pull", "wall_balls")),
        stations(2, ("rowing", "sled_push", "sled_pull"), 2, 35),
        rest(3),
        intervals(4, 6, 400, 90),
        stations(5, ("sandbag_lunges",), 2, 20),
        coverage(6, 50, 45),
    )),
    _week(7, "Pace", "Half Simulations", (
        strength(1, FULL, ("burpee_broad_jump",)),
        stations(2, ("skierg", "sled_push", "rowing", "wall_balls"), 2, 40),
        rest(3),
        tempo(4, 35),
        rest(5),
        coverage(6, 50, 50),
    )),
    _week(8, "Pace", "Deload", (
        zone2(1, 25),
        stations(2, ("wall_balls", "burpee_broad_jump"), 1, 20),
        rest(3),
        zone2(4, 25),
        rest(5),
        coverage(6, 50, 35),
    ), is_deload=True),
    _week(9, "Accelerate", "Race Intensity", (
        strength(1, FULL, ("sled_push", "sled_pull")),
        stations(2, ("skierg", "burpee_broad_jump", "rowing", "farmers_carry", "wall_balls"), 2, 45),
        rest(3),
        intervals(4, 5, 1000, 180),
        rest(5),
        coverage(6, 75, 55),
    )),
    _week(10, "Accelerate", "Full Simulations", (
        strength(1, LOWER, ("sandbag_lunges",)),
        stations(2, ("sled_push", "sled_pull", "burpee_broad_jump", "wall_balls"), 2, 40),
        rest(3),
        tempo(4, 30),
        rest(5),
        full_simulation(6),
    )),
    _week(11, "Prime", "Technical Polish", (
        zone2(1, 30),
        stations(2, ("burpee_broad_jump", "sandbag_lunges", "wall_balls"), 2, 35),
        rest(3),
        intervals(4, 4, 800, 120),
        rest(5),
        full_simulation(6),
    )),
    _week(12, "Taper", "Race Ready", (
        zone2(1, 20),
        stations(2, ("skierg", "wall_balls"), 1, 15),
        rest(3),
        zone2(4, 15),
        rest(5),
        coverage(6, 50, 30),
    ), is_deload=True),
)

PROGRAM_TEMPLATES = (
    ProgramTemplate(
        id="personalized-8-week",
        name="8-Week Race Prep",
        description=(
            "Intensive 8-week program for intermediate athletes with race-specific training, "
            "running, and strength work."
        ),
        weeks=8,
        target_level=FitnessLevel.INTERMEDIATE,
        default_days_per_week=6,
        schedule=EIGHT_WEEK_SCHEDULE,
    ),
    ProgramTemplate(
        id="personalized-12-week",
        name="12-Week Complete",
        description=(
            "Comprehensive 12-week program building from base fitness to race day. "
            "Includes running, strength, and station work."
        ),
        weeks=12,
        target_level=FitnessLevel.BEGINNER,
        default_days_per_week=6,
        schedule=TWELVE_WEEK_SCHEDULE,
    ),
)


def get_template_by_length(weeks: int) -> ProgramTemplate:
    return next(template for template in PROGRAM_TEMPLATES if template.weeks == weeks)


def get_template_for_weeks(weeks_until_race: int) -> ProgramTemplate:
    # A race more than ten weeks out leaves room for the full 12-week arc.
    return get_template_by_length(8 if weeks_until_race <= 10 else 12)


def slot_type_label(slot_type: str) -> str:
    try:
        return SLOT_TYPE_LABELS[SlotType(slot_type)]
    except ValueError:
        return slot_type

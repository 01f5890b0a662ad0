from datetime import date, datetime, timezone

import pytest

from racecoach.core.enums import FitnessLevel
from racecoach.schemas.program import IntervalRun, PersonalizationInput, StationSlot
from racecoach.services import catalog, personalization

NOW = datetime(2025, 2, 10, 9, 0, tzinfo=timezone.utc)


def make_input(**overrides) -> PersonalizationInput:
    values = {
        "race_date": date(2025, 4, 20),
        "fitness_level": FitnessLevel.INTERMEDIATE,
        "days_per_week": 4,
    }
    values.update(overrides)
    return PersonalizationInput(**values)


def days_of(week) -> list[int]:
    return [slot.day_of_week for slot in week.workouts]


def test_weeks_until_race_rounds_up_and_never_goes_negative():
    assert personalization.weeks_until_race(None, NOW) is None
    assert personalization.weeks_until_race(date(2025, 2, 17), NOW) == 1
    assert personalization.weeks_until_race(date(2025, 2, 18), NOW) == 2
    assert personalization.weeks_until_race(date(2025, 2, 1), NOW) == 0


@pytest.mark.parametrize(
    "weeks_until, fitness_level, expected_weeks",
    [
        (None, FitnessLevel.BEGINNER, 12),
        (None, FitnessLevel.INTERMEDIATE, 8),
        (None, FitnessLevel.ADVANCED, 8),
        (6, FitnessLevel.BEGINNER, 8),
        (10, FitnessLevel.INTERMEDIATE, 8),
        (11, FitnessLevel.INTERMEDIATE, 12),
    ],
)
def test_select_template(weeks_until, fitness_level, expected_weeks):
    assert personalization.select_template(weeks_until, fitness_level).weeks == expected_weeks


def test_template_lookup():
    assert catalog.get_template_by_length(12).name == "12-Week Complete"
    assert catalog.get_template_for_weeks(10).id == "personalized-8-week"
    assert catalog.slot_type_label("full") == "Full Simulation"
    assert catalog.slot_type_label("mystery") == "mystery"


def test_fit_to_days_per_week_prefers_key_days():
    week = catalog.EIGHT_WEEK_SCHEDULE[0]

    assert days_of(personalization.fit_to_days_per_week(week, 3)) == [1, 4, 6]
    assert days_of(personalization.fit_to_days_per_week(week, 4)) == [1, 2, 4, 6]
    assert days_of(personalization.fit_to_days_per_week(week, 6)) == [1, 2, 3, 4, 5, 6]


def test_five_days_keeps_a_rest_day():
    trimmed = personalization.fit_to_days_per_week(catalog.EIGHT_WEEK_SCHEDULE[0], 5)

    assert days_of(trimmed) == [1, 2, 3, 4, 6]
    assert trimmed.workouts[2].type == "rest"


def test_weak_area_focus_skips_deload_weeks():
    schedule = personalization.apply_weak_area_focus(catalog.EIGHT_WEEK_SCHEDULE, ("farmers_carry",))

    deload = schedule[3]
    assert deload == catalog.EIGHT_WEEK_SCHEDULE[3]

    station = schedule[0].workouts[1]
    assert isinstance(station, StationSlot)
    assert station.stations == ("burpee_broad_jump", "wall_balls", "farmers_carry")
    assert station.estimated_minutes == 35

    # Already present on Thursday of week 1, so nothing is added there.
    assert schedule[0].workouts[3].station_work == ("sled_pull", "farmers_carry")


def test_weak_area_focus_rotates_between_weeks():
    areas = ("sandbag_lunges", "farmers_carry")
    schedule = personalization.apply_weak_area_focus(catalog.EIGHT_WEEK_SCHEDULE, areas)

    assert schedule[0].workouts[1].stations[-1] == "sandbag_lunges"
    assert schedule[1].workouts[1].stations[-1] == "farmers_carry"


def test_no_weak_areas_leaves_schedule_alone():
    schedule = personalization.apply_weak_area_focus(catalog.EIGHT_WEEK_SCHEDULE, ())
    assert schedule == catalog.EIGHT_WEEK_SCHEDULE


def test_fitness_level_scaling():
    beginner = personalization.apply_fitness_level_scaling(catalog.EIGHT_WEEK_SCHEDULE, FitnessLevel.BEGINNER)
    advanced = personalization.apply_fitness_level_scaling(catalog.EIGHT_WEEK_SCHEDULE, FitnessLevel.ADVANCED)
    intermediate = personalization.apply_fitness_level_scaling(
        catalog.EIGHT_WEEK_SCHEDULE, FitnessLevel.INTERMEDIATE
    )

    assert intermediate == catalog.EIGHT_WEEK_SCHEDULE

    assert beginner[0].workouts[5].coverage == 25
    assert beginner[0].workouts[5].estimated_minutes == 36
    assert advanced[0].workouts[5].coverage == 75
    assert advanced[0].workouts[5].estimated_minutes == 54

    assert isinstance(beginner[0].workouts[4].run, IntervalRun)
    assert beginner[0].workouts[4].run.reps == 4
    assert advanced[0].workouts[4].run.reps == 8
    # Four reps in week 7 would drop to two; three is the floor.
    assert beginner[6].workouts[3].run.reps == 3


def test_generate_program():
    program = personalization.generate_program(make_input(days_per_week=3), NOW)

    assert program.id.startswith("personalized-")
    assert program.weeks == 8
    assert program.days_per_week == 3
    assert program.created_at == NOW
    for week in program.schedule:
        assert len(week.workouts) == 3
        assert days_of(week) == sorted(days_of(week))


def test_generate_program_without_race_date_uses_fitness_level():
    beginner = personalization.generate_program(
        make_input(race_date=None, fitness_level=FitnessLevel.BEGINNER), NOW
    )
    assert beginner.weeks == 12
    assert beginner.name == "12-Week Complete"


def test_generated_ids_are_unique():
    first = personalization.generate_program(make_input(), NOW)
    second = personalization.generate_program(make_input(), NOW)
    assert first.id != second.id


def test_validate_personalization_accepts_good_input():
    result = personalization.validate_personalization(make_input(), NOW)
    assert result.valid is True
    assert result.errors == []

    no_race = personalization.validate_personalization(
        {"fitness_level": "advanced", "days_per_week": 6}, NOW
    )
    assert no_race.valid is True


@pytest.mark.parametrize(
    "payload, errors",
    [
        ({}, ["Fitness level is required", "Days per week is required"]),
        ({"fitness_level": "pro", "days_per_week": 4}, ["Invalid fitness level"]),
        ({"fitness_level": "beginner", "days_per_week": 2}, ["Days per week must be between 3 and 6"]),
        (
            {"fitness_level": "beginner", "days_per_week": 4, "race_date": "not a date"},
            ["Invalid race date"],
        ),
        (
            {"fitness_level": "beginner", "days_per_week": 4, "race_date": "2025-02-10"},
            ["Race date must be in the future"],
        ),
    ],
)
def test_validate_personalization_collects_errors(payload, errors):
    result = personalization.validate_personalization(payload, NOW)
    assert result.valid is False
    assert result.errors == errors


def test_program_summary_counts_slot_types():
    program = personalization.generate_program(make_input(days_per_week=6), NOW)
    summary = personalization.program_summary(program)

    assert summary.total_workouts == 48
    assert summary.rest_days == 13
    assert summary.full_simulations == 2
    assert summary.coverage_workouts == 6

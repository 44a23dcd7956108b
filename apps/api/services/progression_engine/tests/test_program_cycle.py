"""
Program Cycle Tests

Runs complete 21-week programs through the Workout aggregate and checks
that the output makes training sense: blocks and deloads land where they
should, loads stay on the plate increment, and the Training Max only moves
on AMRAP weeks.
"""

import pytest
from decimal import Decimal

from services.progression_engine import (
    CompletedSet,
    DayNumber,
    EquipmentType,
    Exercise,
    ExerciseCategory,
    ExercisePerformanceInput,
    ProgramVariant,
    RepRange,
    TrainingMax,
    Weight,
    WeightUnit,
    Workout,
    WorkoutStatus,
    is_deload_week,
)


def main_lift(name, day, tm):
    return Exercise.create_with_linear_progression(
        name=name,
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber(day),
        order_in_day=1,
        training_max=TrainingMax.create(tm, WeightUnit.KILOGRAMS),
    )


def accessory(name, day):
    return Exercise.create_with_reps_per_set_progression(
        name=name,
        equipment=EquipmentType.DUMBBELL,
        assigned_day=DayNumber(day),
        order_in_day=2,
        rep_range=RepRange(10, 12, 15),
        starting_weight=Weight.kilograms(14),
        starting_sets=3,
        target_sets=5,
    )


def run_program(workout, amrap_delta):
    """Complete every assigned day of every week exactly as planned."""
    weekly_tms = []
    while workout.status == WorkoutStatus.ACTIVE:
        weekly_tms.append({
            e.name: e.training_max.value for e in workout.exercises if e.training_max is not None
        })
        for day in range(1, workout.days_per_week + 1):
            inputs = []
            for exercise_id, planned in workout.planned_sets_for_day(DayNumber(day)).items():
                completed = [
                    CompletedSet(
                        s.set_number,
                        s.weight,
                        s.target_reps + (amrap_delta if s.is_amrap else 0),
                        was_amrap=s.is_amrap,
                    )
                    for s in planned
                ]
                inputs.append(ExercisePerformanceInput(exercise_id, completed))
            if inputs:
                workout.complete_day(DayNumber(day), inputs)
    return weekly_tms


@pytest.fixture
def four_day_program():
    workout = Workout.create(
        "lifter",
        "A2S 4-Day",
        ProgramVariant.FOUR_DAY,
        [
            main_lift("Squat", 1, 140), accessory("Lunge", 1),
            main_lift("Bench Press", 2, 100), accessory("Row", 2),
            main_lift("Deadlift", 3, 180),
            main_lift("Overhead Press", 4, 60),
        ],
    )
    workout.start()
    return workout


class TestFullCycle:
    """A complete program run"""

    def test_program_completes_after_21_weeks(self, four_day_program):
        run_program(four_day_program, amrap_delta=2)

        assert four_day_program.status == WorkoutStatus.COMPLETED
        assert four_day_program.current_week == 21
        assert len(four_day_program.completed_activities) == 21 * 4

    def test_blocks_and_deloads_in_history(self, four_day_program):
        run_program(four_day_program, amrap_delta=0)

        for activity in four_day_program.completed_activities:
            expected_block = (activity.week_number - 1) // 7 + 1
            assert activity.block_number == expected_block, (
                f"Week {activity.week_number} logged in block {activity.block_number}"
            )
            assert activity.is_deload_week() == is_deload_week(activity.week_number)

    def test_deloads_are_never_amrap(self, four_day_program):
        run_program(four_day_program, amrap_delta=3)

        for activity in four_day_program.completed_activities:
            if activity.is_deload_week():
                for performance in activity.performances:
                    assert not any(s.is_amrap for s in performance.planned_sets), (
                        f"AMRAP planned in deload week {activity.week_number}"
                    )

    def test_loads_stay_on_plate_increment(self, four_day_program):
        run_program(four_day_program, amrap_delta=1)
        main_lifts = {e.id for e in four_day_program.exercises if e.training_max is not None}

        for activity in four_day_program.completed_activities:
            for performance in activity.performances:
                if performance.exercise_id not in main_lifts:
                    continue
                for s in performance.planned_sets:
                    assert s.weight.value % Decimal("2.5") == 0, (
                        f"Week {activity.week_number}: {s}"
                    )

    def test_training_max_only_moves_on_amrap_weeks(self, four_day_program):
        weekly_tms = run_program(four_day_program, amrap_delta=2)

        for week in range(1, 21):
            before, after = weekly_tms[week - 1], weekly_tms[week]
            for lift, value in before.items():
                if is_deload_week(week):
                    assert after[lift] == value, f"{lift} TM moved in deload week {week}"
                else:
                    assert after[lift] >= value, f"{lift} TM dropped in week {week}"

        squat = next(e for e in four_day_program.exercises if e.name == "Squat")
        assert squat.training_max.value > Decimal("140")

    def test_missed_amraps_lower_training_max(self, four_day_program):
        run_program(four_day_program, amrap_delta=-2)

        for exercise in four_day_program.exercises:
            if exercise.training_max is not None:
                assert exercise.training_max.value > 0
        squat = next(e for e in four_day_program.exercises if e.name == "Squat")
        assert squat.training_max.value < Decimal("140")

    def test_accessories_hold_when_reps_in_range(self, four_day_program):
        run_program(four_day_program, amrap_delta=0)

        lunge = next(e for e in four_day_program.exercises if e.name == "Lunge")
        assert lunge.current_set_count == 3
        assert lunge.current_weight == Weight.kilograms(14)


class TestVariants:

    @pytest.mark.parametrize("variant,days", [
        (ProgramVariant.FOUR_DAY, 4),
        (ProgramVariant.FIVE_DAY, 5),
        (ProgramVariant.SIX_DAY, 6),
    ])
    def test_one_activity_per_day_per_week(self, variant, days):
        exercises = [main_lift(f"Lift {day}", day, 100) for day in range(1, days + 1)]
        workout = Workout.create("lifter", "A2S", variant, exercises)
        workout.start()

        run_program(workout, amrap_delta=1)

        assert workout.status == WorkoutStatus.COMPLETED
        assert len(workout.completed_activities) == 21 * days

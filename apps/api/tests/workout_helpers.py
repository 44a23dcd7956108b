"""
Helpers for driving a Workout through training days in tests.

Completed sets mirror the plan exactly, except the AMRAP set which can be
offset from its target with amrap_delta.
"""
from typing import List, Optional

from services.progression_engine import (
    CompletedSet,
    DayCompletion,
    DayNumber,
    ExercisePerformanceInput,
    PlannedSet,
    TrainingMax,
    Weight,
    WeightUnit,
    Workout,
)


def kg(value) -> Weight:
    return Weight.create(value, WeightUnit.KILOGRAMS)


def tm_kg(value) -> TrainingMax:
    return TrainingMax.create(value, WeightUnit.KILOGRAMS)


def sets_as_planned(
    planned: List[PlannedSet],
    amrap_delta: int = 0,
    reps: Optional[int] = None,
) -> List[CompletedSet]:
    completed = []
    for s in planned:
        actual = reps if reps is not None else s.target_reps
        if s.is_amrap:
            actual = s.target_reps + amrap_delta
        completed.append(CompletedSet(s.set_number, s.weight, actual, was_amrap=s.is_amrap))
    return completed


def complete_day_as_planned(workout: Workout, day, amrap_delta: int = 0) -> DayCompletion:
    day = DayNumber(day)
    inputs = [
        ExercisePerformanceInput(exercise_id, sets_as_planned(planned, amrap_delta))
        for exercise_id, planned in workout.planned_sets_for_day(day).items()
    ]
    return workout.complete_day(day, inputs)


def complete_week(workout: Workout, amrap_delta: int = 0) -> List[DayCompletion]:
    return [
        complete_day_as_planned(workout, day, amrap_delta)
        for day in range(1, workout.days_per_week + 1)
        if workout.exercises_for_day(DayNumber(day))
    ]

"""
Pytest configuration and fixtures

Every test gets a freshly loaded periodization table and an empty event
registry, so tests that override settings or subscribe handlers cannot
leak into each other.
"""
import pytest
import sys
import os

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core import events
from core.config import settings
from services.progression_engine import (
    DayNumber,
    EquipmentType,
    Exercise,
    ExerciseCategory,
    PeriodizationConfig,
    ProgramVariant,
    RepRange,
    Workout,
)
from tests.workout_helpers import kg, tm_kg


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    """Reset cached configuration and event subscriptions around each test."""
    monkeypatch.setattr(settings, "PERIODIZATION_CONFIG_PATH", None)
    monkeypatch.setattr(settings, "WEIGHT_ROUNDING_MODE", "half_even")
    PeriodizationConfig.reset()
    events.clear_handlers()
    yield
    PeriodizationConfig.reset()
    events.clear_handlers()


@pytest.fixture
def squat():
    return Exercise.create_with_linear_progression(
        name="Squat",
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_1,
        order_in_day=1,
        training_max=tm_kg(140),
    )


@pytest.fixture
def barbell_row():
    return Exercise.create_with_reps_per_set_progression(
        name="Barbell Row",
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_1,
        order_in_day=2,
        rep_range=RepRange(8, 10, 12),
        starting_weight=kg(60),
        starting_sets=3,
        target_sets=5,
    )


@pytest.fixture
def bench():
    return Exercise.create_with_linear_progression(
        name="Bench Press",
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_2,
        order_in_day=1,
        training_max=tm_kg(100),
    )


@pytest.fixture
def dips():
    return Exercise.create_with_minimal_sets_progression(
        name="Dips",
        equipment=EquipmentType.BODYWEIGHT,
        assigned_day=DayNumber.DAY_2,
        order_in_day=2,
        starting_weight=kg(0),
        target_total_reps=40,
        starting_sets=6,
    )


@pytest.fixture
def deadlift():
    return Exercise.create_with_linear_progression(
        name="Deadlift",
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_3,
        order_in_day=1,
        training_max=tm_kg(180),
    )


@pytest.fixture
def overhead_press():
    return Exercise.create_with_linear_progression(
        name="Overhead Press",
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_4,
        order_in_day=1,
        training_max=tm_kg(60),
    )


@pytest.fixture
def four_day_exercises(squat, barbell_row, bench, dips, deadlift, overhead_press):
    return [squat, barbell_row, bench, dips, deadlift, overhead_press]


@pytest.fixture
def workout(four_day_exercises):
    """A four-day program that has not been started."""
    return Workout.create("user-1", "A2S Hypertrophy", ProgramVariant.FOUR_DAY, four_day_exercises)


@pytest.fixture
def active_workout(workout):
    workout.start()
    workout.clear_events()
    return workout

"""
Constants for the progression engine.

These are DEFAULTS that can be overridden by config (see config.py).
They exist here for type safety and documentation.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple


class WeightUnit(str, Enum):
    """Unit of measurement for weights."""
    KILOGRAMS = "kg"
    POUNDS = "lbs"


class ExerciseCategory(str, Enum):
    """Category of exercise, determines which progressions are allowed."""
    MAIN_LIFT = "main_lift"      # Squat, Bench, Deadlift, OHP - linear + AMRAP
    AUXILIARY = "auxiliary"      # Front Squat, Incline Bench - linear, AMRAP optional
    ACCESSORY = "accessory"      # Rows, Curls, Raises - reps per set / minimal sets


class EquipmentType(str, Enum):
    """Equipment used for an exercise. Drives weight increments."""
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    CABLE = "cable"
    MACHINE = "machine"
    BODYWEIGHT = "bodyweight"


class DayNumber(int, Enum):
    """Training day within a week."""
    DAY_1 = 1
    DAY_2 = 2
    DAY_3 = 3
    DAY_4 = 4
    DAY_5 = 5
    DAY_6 = 6


class ProgramVariant(str, Enum):
    """Program variant, defined by training days per week."""
    FOUR_DAY = "four_day"
    FIVE_DAY = "five_day"
    SIX_DAY = "six_day"

    @property
    def days_per_week(self) -> int:
        return DAYS_PER_WEEK[self]


class WorkoutStatus(str, Enum):
    """Lifecycle status of a workout program."""
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


DAYS_PER_WEEK = {
    ProgramVariant.FOUR_DAY: 4,
    ProgramVariant.FIVE_DAY: 5,
    ProgramVariant.SIX_DAY: 6,
}

# Program structure
WEEKS_PER_BLOCK = 7
TOTAL_BLOCKS = 3
PROGRAM_WEEKS = WEEKS_PER_BLOCK * TOTAL_BLOCKS  # 21

# Pounds per kilogram
LBS_PER_KG = Decimal("2.20462")

# Loading increment for percentage-based lifts
WEIGHT_INCREMENTS = {
    WeightUnit.KILOGRAMS: Decimal("2.5"),
    WeightUnit.POUNDS: Decimal("5"),
}

# Intensity bounds accepted by TrainingMax.calculate_working_weight
MAX_INTENSITY = Decimal("1.5")

# Week-by-week programming: week -> (intensity, sets, target_reps, is_deload)
# Block 1 - Volume, Block 2 - Intensity, Block 3 - Peak.
# Every 7th week is a deload at 65% for 5x10, not taken to failure.
WEEKLY_PROGRAM: Dict[int, Tuple[str, int, int, bool]] = {
    # Block 1 - Volume Phase
    1: ("0.75", 5, 10, False),
    2: ("0.85", 4, 8, False),
    3: ("0.90", 3, 6, False),
    4: ("0.80", 5, 9, False),
    5: ("0.85", 4, 7, False),
    6: ("0.90", 3, 5, False),
    7: ("0.65", 5, 10, True),

    # Block 2 - Intensity Phase
    8: ("0.85", 4, 8, False),
    9: ("0.90", 3, 6, False),
    10: ("0.95", 2, 4, False),
    11: ("0.85", 4, 7, False),
    12: ("0.90", 3, 5, False),
    13: ("0.95", 2, 3, False),
    14: ("0.65", 5, 10, True),

    # Block 3 - Peak Phase
    15: ("0.90", 3, 6, False),
    16: ("0.95", 2, 4, False),
    17: ("1.00", 1, 2, False),
    18: ("0.95", 2, 4, False),
    19: ("1.00", 1, 2, False),
    20: ("1.05", 1, 2, False),
    21: ("0.65", 5, 10, True),
}

# AMRAP delta -> Training Max adjustment (fraction). Deltas above the top
# key use the top key, deltas below the bottom key use the bottom key.
AMRAP_ADJUSTMENTS: Dict[int, str] = {
    5: "0.03",
    4: "0.02",
    3: "0.015",
    2: "0.01",
    1: "0.005",
    0: "0",
    -1: "-0.02",
    -2: "-0.05",
}

# Reps per set defaults
REPS_PER_SET_MAX_SETS_BILATERAL = 5
REPS_PER_SET_MAX_SETS_UNILATERAL = 3  # per side
REPS_PER_SET_SET_LIMIT = 10

# Dumbbells jump in smaller steps below this weight
DUMBBELL_LIGHT_THRESHOLD = Decimal("10")
DUMBBELL_LIGHT_INCREMENT = Decimal("1")
DUMBBELL_HEAVY_INCREMENT = Decimal("2")

# Minimal sets bounds
MINIMAL_SETS_TOTAL_REPS_RANGE = (10, 200)
MINIMAL_SETS_SET_LIMIT = 20

# Linear progression bounds
LINEAR_BASE_SETS_RANGE = (3, 8)

# Rep range span limit
REP_RANGE_MAX_SPAN = 10

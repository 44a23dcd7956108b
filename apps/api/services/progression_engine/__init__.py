# A2S Progression Engine
#
# Computes what to lift each week of a 21-week A2S program, compares it with
# what was actually lifted, and moves each exercise's progression state and
# the program's week/block cursor forward.
#
# Architecture:
# - Immutable value objects for weights, rep ranges and sets
# - Three progression strategies (linear, reps per set, minimal sets)
# - Config-driven periodization table (YAML override)
# - Workout aggregate owns lifecycle, day completion and week advancement
# - Exercise template library for building programs

from .constants import (
    DayNumber,
    EquipmentType,
    ExerciseCategory,
    ProgramVariant,
    WeightUnit,
    WorkoutStatus,
)
from .weights import AdjustmentType, TrainingMax, TrainingMaxAdjustment, Weight
from .rep_range import RepRange
from .periodization import WeekParameters, week_parameters, block_for_week, is_deload_week
from .config import PeriodizationConfig
from .sets import PlannedSet, CompletedSet
from .performance import ExercisePerformance
from .strategies import (
    ChangeKind,
    LinearProgression,
    MinimalSetsProgression,
    ProgressionChange,
    ProgressionStrategy,
    ProgressionSummary,
    ProgressionType,
    RepsPerSetProgression,
)
from .exercise import Exercise
from .exercise_library import ExerciseTemplate, all_templates, filter_by_equipment, get_template
from .activity import WorkoutActivity
from .workout import (
    DayCompletion,
    ExercisePerformanceInput,
    ExerciseProgressionResult,
    ProgressSnapshot,
    Workout,
)

__all__ = [
    # Value objects
    'Weight',
    'TrainingMax',
    'TrainingMaxAdjustment',
    'AdjustmentType',
    'RepRange',
    'PlannedSet',
    'CompletedSet',
    'ExercisePerformance',

    # Periodization
    'WeekParameters',
    'week_parameters',
    'block_for_week',
    'is_deload_week',
    'PeriodizationConfig',

    # Progression strategies
    'ProgressionType',
    'ProgressionStrategy',
    'ProgressionChange',
    'ProgressionSummary',
    'ChangeKind',
    'LinearProgression',
    'RepsPerSetProgression',
    'MinimalSetsProgression',

    # Entities / aggregate
    'Exercise',
    'ExerciseTemplate',
    'all_templates',
    'get_template',
    'filter_by_equipment',
    'WorkoutActivity',
    'Workout',
    'ExercisePerformanceInput',
    'ExerciseProgressionResult',
    'DayCompletion',
    'ProgressSnapshot',

    # Constants
    'WeightUnit',
    'ExerciseCategory',
    'EquipmentType',
    'DayNumber',
    'ProgramVariant',
    'WorkoutStatus',
]

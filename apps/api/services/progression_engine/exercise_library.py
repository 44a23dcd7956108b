"""
Exercise Template Library

Predefined movements a lifter can pick from when building a program.
Templates carry metadata only (equipment, default rep range, default set
count); category, progression type, day and order are chosen when the
exercise is added to a workout.

Usage:
    template = get_template("bench press")
    template.default_rep_range   # RepRange(6, 8, 10)
    dumbbell_work = filter_by_equipment(EquipmentType.DUMBBELL)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .constants import EquipmentType
from .rep_range import MEDIUM, MEDIUM_HIGH, MEDIUM_LOW, RepRange


@dataclass(frozen=True)
class ExerciseTemplate:
    name: str
    equipment: EquipmentType
    default_rep_range: Optional[RepRange] = None
    default_sets: Optional[int] = None
    description: str = ""


# =============================================================================
# TEMPLATES
# =============================================================================

_B = EquipmentType.BARBELL
_D = EquipmentType.DUMBBELL
_C = EquipmentType.CABLE
_M = EquipmentType.MACHINE
_BW = EquipmentType.BODYWEIGHT

EXERCISE_TEMPLATES: List[ExerciseTemplate] = [
    # Main compound lifts
    ExerciseTemplate("Squat", _B, MEDIUM_LOW, 4, "Back Squat - primary lower body compound movement"),
    ExerciseTemplate("Bench Press", _B, MEDIUM_LOW, 4, "Barbell Bench Press - primary pushing movement"),
    ExerciseTemplate("Deadlift", _B, MEDIUM_LOW, 4, "Conventional Deadlift - primary pulling movement"),
    ExerciseTemplate("Overhead Press", _B, MEDIUM_LOW, 4, "Standing Barbell Overhead Press - vertical pressing movement"),

    # Compound variations
    ExerciseTemplate("Front Squat", _B, MEDIUM_LOW, 4, "Front-loaded squat variation"),
    ExerciseTemplate("Incline Bench Press", _B, MEDIUM_LOW, 4, "Incline variation for upper chest emphasis"),
    ExerciseTemplate("Romanian Deadlift", _B, MEDIUM, 3, "Hip-hinge movement targeting hamstrings"),
    ExerciseTemplate("Close-Grip Bench Press", _B, MEDIUM_LOW, 4, "Narrow grip variation for triceps emphasis"),
    ExerciseTemplate("Sumo Deadlift", _B, MEDIUM_LOW, 4, "Wide-stance deadlift variation"),
    ExerciseTemplate("Barbell Row", _B, MEDIUM, 3, "Bent-over barbell row for back thickness"),

    # Machine and dumbbell compounds
    ExerciseTemplate("Leg Press", _M, MEDIUM, 3, "Machine-based leg exercise"),
    ExerciseTemplate("Dumbbell Bench Press", _D, MEDIUM, 3, "Dumbbell variation for increased range of motion"),
    ExerciseTemplate("Dumbbell Row", _D, MEDIUM, 3, "Single-arm dumbbell row"),
    ExerciseTemplate("Dumbbell Shoulder Press", _D, MEDIUM, 3, "Seated or standing dumbbell press"),

    # Back and pulling
    ExerciseTemplate("Lat Pulldown", _C, MEDIUM, 3, "Cable lat pulldown for back width"),
    ExerciseTemplate("Cable Row", _C, MEDIUM, 3, "Seated cable row for back thickness"),
    ExerciseTemplate("Face Pull", _C, MEDIUM_HIGH, 3, "Cable face pull for rear deltoids"),
    ExerciseTemplate("Pull-Up", _BW, MEDIUM_LOW, 3, "Bodyweight vertical pull"),
    ExerciseTemplate("Chin-Up", _BW, MEDIUM_LOW, 3, "Underhand grip vertical pull"),

    # Shoulders
    ExerciseTemplate("Lateral Raise", _D, MEDIUM_HIGH, 3, "Dumbbell lateral raises for side delts"),
    ExerciseTemplate("Rear Delt Fly", _D, MEDIUM_HIGH, 3, "Dumbbell rear delt flys"),
    ExerciseTemplate("Front Raise", _D, MEDIUM_HIGH, 3, "Front delt isolation"),

    # Arms
    ExerciseTemplate("Bicep Curl", _D, MEDIUM, 3, "Dumbbell bicep curls"),
    ExerciseTemplate("Hammer Curl", _D, MEDIUM, 3, "Hammer curls for brachialis and forearms"),
    ExerciseTemplate("Tricep Extension", _C, MEDIUM, 3, "Cable tricep extensions"),
    ExerciseTemplate("Tricep Pushdown", _C, MEDIUM, 3, "Cable tricep pushdowns"),
    ExerciseTemplate("Dumbbell Tricep Extension", _D, MEDIUM, 3, "Overhead dumbbell tricep extension"),

    # Legs
    ExerciseTemplate("Leg Curl", _M, MEDIUM, 3, "Machine leg curl for hamstrings"),
    ExerciseTemplate("Leg Extension", _M, MEDIUM, 3, "Machine leg extension for quadriceps"),
    ExerciseTemplate("Calf Raise", _M, MEDIUM_HIGH, 3, "Standing or seated calf raises"),
    ExerciseTemplate("Hip Thrust", _B, MEDIUM, 3, "Barbell hip thrust for glutes"),
    ExerciseTemplate("Bulgarian Split Squat", _D, MEDIUM, 3, "Single-leg squat variation"),
    ExerciseTemplate("Lunges", _D, MEDIUM, 3, "Walking or stationary lunges"),

    # Core
    ExerciseTemplate("Ab Wheel", _BW, MEDIUM, 3, "Ab wheel rollouts"),
    ExerciseTemplate("Plank", _BW, MEDIUM, 3, "Front plank hold"),
    ExerciseTemplate("Cable Crunch", _C, MEDIUM, 3, "Cable crunches for abs"),
    ExerciseTemplate("Hanging Leg Raise", _BW, MEDIUM, 3, "Hanging leg raises for lower abs"),
]

# Lookup is case-insensitive
_BY_NAME: Dict[str, ExerciseTemplate] = {t.name.lower(): t for t in EXERCISE_TEMPLATES}

if len(_BY_NAME) != len(EXERCISE_TEMPLATES):
    raise ValueError("Duplicate exercise template names")


# =============================================================================
# LOOKUP
# =============================================================================

def all_templates() -> List[ExerciseTemplate]:
    return list(EXERCISE_TEMPLATES)


def get_template(name: str) -> Optional[ExerciseTemplate]:
    """Template by name, ignoring case and surrounding whitespace."""
    return _BY_NAME.get(name.strip().lower())


def filter_by_equipment(equipment: EquipmentType) -> List[ExerciseTemplate]:
    return [t for t in EXERCISE_TEMPLATES if t.equipment == equipment]

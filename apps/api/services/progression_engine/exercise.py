"""
Exercise Entity

Binds a movement (name, category, equipment) to a training day slot and
exactly one progression strategy. The strategy object is owned by the
exercise and survives renames and substitutions unchanged.

Usage:
    squat = Exercise.create_with_linear_progression(
        name="Squat",
        category=ExerciseCategory.MAIN_LIFT,
        equipment=EquipmentType.BARBELL,
        assigned_day=DayNumber.DAY_1,
        order_in_day=1,
        training_max=TrainingMax.create(140, WeightUnit.KILOGRAMS),
    )
    squat.planned_sets(week=1, block=1)
"""

import logging
from typing import List, Optional
from uuid import UUID, uuid4

from core.exceptions import BusinessRuleViolation, ValidationError

from .constants import DayNumber, EquipmentType, ExerciseCategory
from .performance import ExercisePerformance
from .rep_range import RepRange
from .sets import PlannedSet
from .strategies import (
    LinearProgression,
    MinimalSetsProgression,
    ProgressionChange,
    ProgressionStrategy,
    ProgressionSummary,
    ProgressionType,
    RepsPerSetProgression,
)
from .weights import TrainingMax, Weight

logger = logging.getLogger(__name__)


class Exercise:
    """An exercise in a program, with its progression state."""

    def __init__(
        self,
        name: str,
        category: ExerciseCategory,
        equipment: EquipmentType,
        assigned_day: DayNumber,
        order_in_day: int,
        progression: ProgressionStrategy,
        external_template_id: Optional[str] = None,
        id: Optional[UUID] = None,
    ):
        if not name or not name.strip():
            raise ValidationError("Exercise name is required", field="name")
        if order_in_day < 1:
            raise ValidationError("Order in day must be at least 1", field="order_in_day")
        if progression is None:
            raise ValidationError("Progression strategy is required", field="progression")

        self.id = id or uuid4()
        self.name = name.strip()
        self.category = ExerciseCategory(category)
        self.equipment = EquipmentType(equipment)
        self.assigned_day = DayNumber(assigned_day)
        self.order_in_day = order_in_day
        self.progression = progression
        self.external_template_id = external_template_id

    # =========================================================================
    # FACTORIES
    # =========================================================================

    @classmethod
    def create_with_linear_progression(
        cls,
        name: str,
        category: ExerciseCategory,
        equipment: EquipmentType,
        assigned_day: DayNumber,
        order_in_day: int,
        training_max: TrainingMax,
        use_amrap: bool = True,
        base_sets_per_exercise: Optional[int] = None,
        external_template_id: Optional[str] = None,
    ) -> "Exercise":
        if ExerciseCategory(category) == ExerciseCategory.ACCESSORY:
            raise BusinessRuleViolation(
                rule="linear_progression_category",
                detail="Linear progression is only for main lifts and auxiliary exercises",
                entity=name,
            )
        progression = LinearProgression(training_max, use_amrap, base_sets_per_exercise)
        return cls(
            name, category, equipment, assigned_day, order_in_day, progression,
            external_template_id=external_template_id,
        )

    @classmethod
    def create_with_reps_per_set_progression(
        cls,
        name: str,
        equipment: EquipmentType,
        assigned_day: DayNumber,
        order_in_day: int,
        rep_range: RepRange,
        starting_weight: Weight,
        starting_sets: int = 2,
        target_sets: int = 4,
        is_unilateral: bool = False,
        category: ExerciseCategory = ExerciseCategory.ACCESSORY,
        external_template_id: Optional[str] = None,
    ) -> "Exercise":
        progression = RepsPerSetProgression(
            rep_range=rep_range,
            current_weight=starting_weight,
            equipment=equipment,
            starting_sets=starting_sets,
            target_sets=target_sets,
            is_unilateral=is_unilateral,
        )
        return cls(
            name, category, equipment, assigned_day, order_in_day, progression,
            external_template_id=external_template_id,
        )

    @classmethod
    def create_with_minimal_sets_progression(
        cls,
        name: str,
        equipment: EquipmentType,
        assigned_day: DayNumber,
        order_in_day: int,
        starting_weight: Weight,
        target_total_reps: int,
        starting_sets: int,
        minimum_sets: int = 2,
        maximum_sets: int = 10,
        category: ExerciseCategory = ExerciseCategory.ACCESSORY,
        external_template_id: Optional[str] = None,
    ) -> "Exercise":
        progression = MinimalSetsProgression(
            current_weight=starting_weight,
            target_total_reps=target_total_reps,
            starting_sets=starting_sets,
            equipment=equipment,
            minimum_sets=minimum_sets,
            maximum_sets=maximum_sets,
        )
        return cls(
            name, category, equipment, assigned_day, order_in_day, progression,
            external_template_id=external_template_id,
        )

    # =========================================================================
    # PROGRESSION
    # =========================================================================

    @property
    def progression_type(self) -> ProgressionType:
        return self.progression.progression_type

    def planned_sets(self, week: int, block: int) -> List[PlannedSet]:
        return self.progression.plan(week, block)

    def apply_progression(self, performance: ExercisePerformance) -> ProgressionChange:
        if performance.exercise_id != self.id:
            raise BusinessRuleViolation(
                rule="performance_exercise_mismatch",
                detail=f"Performance for exercise {performance.exercise_id} cannot be applied to {self.name}",
                entity=str(self.id),
            )
        if performance.skip_progression:
            logger.debug(f"{self.name}: progression skipped (temporary substitution)")
            return ProgressionChange.skipped()

        change = self.progression.apply(performance)
        logger.debug(f"{self.name}: {change.description}")
        return change

    def substitute(self, new_name: str, new_external_template_id: Optional[str] = None) -> str:
        """
        Swap the movement while keeping its progression. Returns the old name.
        """
        if not new_name or not new_name.strip():
            raise ValidationError("Substitute name is required", field="name")
        original_name = self.name
        self.name = new_name.strip()
        self.external_template_id = new_external_template_id
        return original_name

    def update_training_max(self, training_max: TrainingMax) -> TrainingMax:
        if self.progression_type != ProgressionType.LINEAR:
            raise BusinessRuleViolation(
                rule="training_max_requires_linear",
                detail=f"{self.name} does not use linear progression",
                entity=str(self.id),
            )
        return self.progression.update_training_max(training_max)

    def update_weight(self, weight: Weight) -> Weight:
        if self.progression_type == ProgressionType.LINEAR:
            raise BusinessRuleViolation(
                rule="weight_requires_fixed_load",
                detail=f"{self.name} uses a Training Max; adjust the Training Max instead",
                entity=str(self.id),
            )
        return self.progression.update_weight(weight)

    def update_rep_range(self, rep_range: RepRange):
        if self.progression_type != ProgressionType.REPS_PER_SET:
            raise BusinessRuleViolation(
                rule="rep_range_requires_reps_per_set",
                detail=f"{self.name} does not use reps per set progression",
                entity=str(self.id),
            )
        self.progression.update_rep_range(rep_range)

    def change_assigned_day(self, day: DayNumber, order_in_day: int):
        if order_in_day < 1:
            raise ValidationError("Order in day must be at least 1", field="order_in_day")
        self.assigned_day = DayNumber(day)
        self.order_in_day = order_in_day

    # =========================================================================
    # READ VIEWS
    # =========================================================================

    @property
    def training_max(self) -> Optional[TrainingMax]:
        if self.progression_type == ProgressionType.LINEAR:
            return self.progression.training_max
        return None

    @property
    def current_weight(self) -> Optional[Weight]:
        progression_type = self.progression_type
        if progression_type == ProgressionType.LINEAR:
            return None
        if progression_type in (ProgressionType.REPS_PER_SET, ProgressionType.MINIMAL_SETS):
            return self.progression.current_weight
        raise ValueError(f"Unhandled progression type: {progression_type}")

    @property
    def current_set_count(self) -> Optional[int]:
        progression_type = self.progression_type
        if progression_type == ProgressionType.LINEAR:
            return None
        if progression_type in (ProgressionType.REPS_PER_SET, ProgressionType.MINIMAL_SETS):
            return self.progression.current_set_count
        raise ValueError(f"Unhandled progression type: {progression_type}")

    def progression_summary(self) -> ProgressionSummary:
        return self.progression.summary()

    def __repr__(self) -> str:
        return f"<Exercise {self.name!r} day={int(self.assigned_day)} order={self.order_in_day}>"

"""
Progression Strategies

The closed set of progression rules an exercise can follow:

- LINEAR:        Training Max driven, percentage-of-max loading from the
                 periodization table, TM adjusted from the AMRAP set.
- REPS_PER_SET:  fixed weight; add sets until the target set count, then add
                 weight and drop back to the starting set count.
- MINIMAL_SETS:  fixed weight; hit a total rep target in as few sets as
                 possible.

Each strategy owns mutable progression state. The state only changes through
apply() (automatic, after a completed day) or the explicit update_* methods
(manual corrections). Consumers that need variant-specific behaviour switch
on `progression_type`; there are no other variants.

Usage:
    strategy = LinearProgression(TrainingMax.create(100, WeightUnit.KILOGRAMS))
    planned = strategy.plan(week=1, block=1)
    change = strategy.apply(performance)
    change.description   # "TM increased 2%"
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from core.config import settings
from core.exceptions import ValidationError

from .constants import (
    AMRAP_ADJUSTMENTS,
    DUMBBELL_HEAVY_INCREMENT,
    DUMBBELL_LIGHT_INCREMENT,
    DUMBBELL_LIGHT_THRESHOLD,
    EquipmentType,
    LINEAR_BASE_SETS_RANGE,
    MINIMAL_SETS_SET_LIMIT,
    MINIMAL_SETS_TOTAL_REPS_RANGE,
    REPS_PER_SET_MAX_SETS_BILATERAL,
    REPS_PER_SET_MAX_SETS_UNILATERAL,
    REPS_PER_SET_SET_LIMIT,
)
from .performance import ExercisePerformance
from .periodization import week_parameters
from .rep_range import RepRange
from .sets import PlannedSet
from .weights import TrainingMax, TrainingMaxAdjustment, Weight, increment_for

logger = logging.getLogger(__name__)


class ProgressionType(str, Enum):
    LINEAR = "linear"
    REPS_PER_SET = "reps_per_set"
    MINIMAL_SETS = "minimal_sets"


class ChangeKind(str, Enum):
    """What an application of a strategy did to its state."""
    NONE = "none"
    SKIPPED = "skipped"
    TRAINING_MAX_INCREASED = "training_max_increased"
    TRAINING_MAX_DECREASED = "training_max_decreased"
    SET_ADDED = "set_added"
    SET_REMOVED = "set_removed"
    SETS_REDUCED = "sets_reduced"
    WEIGHT_INCREASED = "weight_increased"
    WEIGHT_DECREASED = "weight_decreased"


@dataclass(frozen=True)
class ProgressionChange:
    kind: ChangeKind
    description: str
    before: Dict[str, Any] = field(default_factory=dict)
    after: Dict[str, Any] = field(default_factory=dict)
    adjustment: Optional[TrainingMaxAdjustment] = None
    amrap_delta: Optional[int] = None

    @property
    def changed(self) -> bool:
        return self.kind not in (ChangeKind.NONE, ChangeKind.SKIPPED)

    @classmethod
    def skipped(cls, reason: str = "Skipped (temporary substitution)") -> "ProgressionChange":
        return cls(ChangeKind.SKIPPED, reason)


@dataclass(frozen=True)
class ProgressionSummary:
    """Progression state formatted for display."""
    type: str
    details: Dict[str, str]


def adjustment_for_amrap_delta(delta: int) -> TrainingMaxAdjustment:
    """
    Training Max adjustment for an AMRAP delta.

    +5 or more: +3.0%   +4: +2.0%   +3: +1.5%   +2: +1.0%   +1: +0.5%
     0: no change       -1: -2.0%   -2 or worse: -5.0%
    """
    top = max(AMRAP_ADJUSTMENTS)
    bottom = min(AMRAP_ADJUSTMENTS)
    key = min(max(delta, bottom), top)
    fraction = Decimal(AMRAP_ADJUSTMENTS[key])
    if fraction == 0:
        return TrainingMaxAdjustment.none()
    return TrainingMaxAdjustment.percentage(fraction)


def _percent_label(fraction: Decimal) -> str:
    return f"{(abs(fraction) * 100).normalize():f}%"


class ProgressionStrategy(ABC):
    """Base for the three progression variants."""

    progression_type: ProgressionType

    def __init__(self, id: Optional[UUID] = None):
        self.id = id or uuid4()

    @abstractmethod
    def plan(self, week: int, block: int) -> List[PlannedSet]:
        """Planned sets for a program week/block."""

    @abstractmethod
    def apply(self, performance: ExercisePerformance) -> ProgressionChange:
        """Update progression state from a completed performance."""

    @abstractmethod
    def summary(self) -> ProgressionSummary:
        """Current state for display."""

    @abstractmethod
    def snapshot(self) -> Dict[str, Any]:
        """Numeric progression state (for reporting and comparisons)."""

    def adopt_state(self, staged: "ProgressionStrategy"):
        """
        Take over the state of a staged copy of this strategy.

        The object itself stays the one its Exercise owns; only its
        attributes are replaced.
        """
        if type(staged) is not type(self) or staged.id != self.id:
            raise ValueError(f"{staged!r} is not a staged copy of {self!r}")
        self.__dict__.update(staged.__dict__)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.snapshot()}>"


# =============================================================================
# LINEAR
# =============================================================================

class LinearProgression(ProgressionStrategy):
    """
    Linear progression for main and auxiliary lifts (Reps To Failure).

    Loading comes from the periodization table as a percentage of the
    Training Max. With AMRAP enabled, the last set of every non-deload week
    is taken to failure and the rep delta adjusts the Training Max.
    """

    progression_type = ProgressionType.LINEAR

    def __init__(
        self,
        training_max: TrainingMax,
        use_amrap: bool = True,
        base_sets_per_exercise: Optional[int] = None,
        id: Optional[UUID] = None,
    ):
        super().__init__(id)
        if base_sets_per_exercise is None:
            base_sets_per_exercise = settings.DEFAULT_LINEAR_BASE_SETS
        low, high = LINEAR_BASE_SETS_RANGE
        if not (low <= base_sets_per_exercise <= high):
            raise ValidationError(
                f"Base sets must be between {low} and {high}", field="base_sets_per_exercise"
            )
        self.training_max = training_max
        self.use_amrap = use_amrap
        self.base_sets_per_exercise = base_sets_per_exercise

    def plan(self, week: int, block: int) -> List[PlannedSet]:
        # The table is keyed by program week; block is implied by the week.
        params = week_parameters(week)
        working_weight = self.training_max.calculate_working_weight(params.intensity)

        sets = []
        for set_number in range(1, params.sets + 1):
            # Deloads are fixed-effort, never tested to failure
            is_amrap = self.use_amrap and not params.is_deload and set_number == params.sets
            reps = params.target_reps if is_amrap else params.normal_reps
            sets.append(PlannedSet(set_number, working_weight, reps, is_amrap))
        return sets

    def apply(self, performance: ExercisePerformance) -> ProgressionChange:
        if not self.use_amrap:
            return ProgressionChange(ChangeKind.NONE, "No change (AMRAP disabled)")
        if not performance.has_amrap_result():
            return ProgressionChange(ChangeKind.NONE, "No change (no AMRAP set)")

        delta = performance.amrap_delta()
        adjustment = adjustment_for_amrap_delta(delta)
        if adjustment.is_none:
            return ProgressionChange(
                ChangeKind.NONE, "No change", adjustment=adjustment, amrap_delta=delta
            )

        previous = self.training_max
        adjusted = previous.apply_adjustment(adjustment)
        if adjusted.value == previous.value:
            logger.debug(f"AMRAP delta {delta:+d}: {adjustment.describe()} rounds back to {previous}")
            return ProgressionChange(
                ChangeKind.NONE,
                "No change (rounds to same TM)",
                adjustment=adjustment,
                amrap_delta=delta,
            )
        self.training_max = adjusted

        if adjustment.amount > 0:
            kind = ChangeKind.TRAINING_MAX_INCREASED
            description = f"TM increased {_percent_label(adjustment.amount)}"
        else:
            kind = ChangeKind.TRAINING_MAX_DECREASED
            description = f"TM decreased {_percent_label(adjustment.amount)}"

        logger.debug(f"AMRAP delta {delta:+d}: {previous} -> {self.training_max}")
        return ProgressionChange(
            kind,
            description,
            before={"training_max": previous.value},
            after={"training_max": self.training_max.value},
            adjustment=adjustment,
            amrap_delta=delta,
        )

    def update_training_max(self, training_max: TrainingMax) -> TrainingMax:
        """Manual override. Returns the previous Training Max."""
        previous = self.training_max
        self.training_max = training_max
        return previous

    def summary(self) -> ProgressionSummary:
        return ProgressionSummary(
            type="Linear (RTF)",
            details={
                "Training Max": str(self.training_max),
                "Uses AMRAP": "Yes" if self.use_amrap else "No",
                "Sets per Exercise": str(self.base_sets_per_exercise),
            },
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "training_max": self.training_max.value,
            "unit": self.training_max.unit.value,
            "use_amrap": self.use_amrap,
            "base_sets_per_exercise": self.base_sets_per_exercise,
        }


# =============================================================================
# REPS PER SET
# =============================================================================

def equipment_increment(equipment: EquipmentType, current_weight: Weight) -> Weight:
    """
    Weight step for an equipment type.

    - Bodyweight: 0 (progression via sets only)
    - Dumbbell: 1 below 10, else 2
    - Barbell / Cable / Machine: 2.5kg or 5lbs
    """
    if equipment == EquipmentType.BODYWEIGHT:
        return Weight.zero(current_weight.unit)
    if equipment == EquipmentType.DUMBBELL:
        step = (
            DUMBBELL_LIGHT_INCREMENT
            if current_weight.value < DUMBBELL_LIGHT_THRESHOLD
            else DUMBBELL_HEAVY_INCREMENT
        )
        return Weight(step, current_weight.unit)
    return Weight(increment_for(current_weight.unit), current_weight.unit)


class RepsPerSetProgression(ProgressionStrategy):
    """
    Reps Per Set progression for accessories.

    - SUCCESS (every set at the range maximum): add a set; at the set cap,
      add weight and drop back to the starting set count
    - FAILED (any set below the range minimum): remove a set; at one set,
      take weight off
    - otherwise: no change
    """

    progression_type = ProgressionType.REPS_PER_SET

    def __init__(
        self,
        rep_range: RepRange,
        current_weight: Weight,
        equipment: EquipmentType,
        starting_sets: int = 2,
        target_sets: int = 4,
        is_unilateral: bool = False,
        max_sets: Optional[int] = None,
        current_set_count: Optional[int] = None,
        id: Optional[UUID] = None,
    ):
        super().__init__(id)
        if not (1 <= starting_sets <= REPS_PER_SET_SET_LIMIT):
            raise ValidationError(
                f"Starting sets must be between 1 and {REPS_PER_SET_SET_LIMIT}",
                field="starting_sets",
            )
        if not (starting_sets <= target_sets <= REPS_PER_SET_SET_LIMIT):
            raise ValidationError(
                f"Target sets must be between starting sets and {REPS_PER_SET_SET_LIMIT}",
                field="target_sets",
            )
        if max_sets is None:
            max_sets = (
                REPS_PER_SET_MAX_SETS_UNILATERAL if is_unilateral else REPS_PER_SET_MAX_SETS_BILATERAL
            )
        if max_sets < 1:
            raise ValidationError("Max sets must be at least 1", field="max_sets")

        self.rep_range = rep_range
        self.current_weight = current_weight
        self.equipment = EquipmentType(equipment)
        self.starting_sets = starting_sets
        self.target_sets = target_sets
        self.is_unilateral = is_unilateral
        self.max_sets = max_sets

        if starting_sets > self.effective_max_sets:
            raise ValidationError(
                f"Starting sets cannot exceed the set cap of {self.effective_max_sets}",
                field="starting_sets",
            )
        if current_set_count is None:
            current_set_count = starting_sets
        if not (1 <= current_set_count <= self.effective_max_sets):
            raise ValidationError(
                f"Current set count must be between 1 and {self.effective_max_sets}",
                field="current_set_count",
            )
        self.current_set_count = current_set_count

    @property
    def effective_max_sets(self) -> int:
        """Set count at which success adds weight instead of a set."""
        return min(self.target_sets, self.max_sets)

    def plan(self, week: int, block: int) -> List[PlannedSet]:
        # Not intensity driven, never AMRAP
        return [
            PlannedSet(set_number, self.current_weight, self.rep_range.target, is_amrap=False)
            for set_number in range(1, self.current_set_count + 1)
        ]

    def apply(self, performance: ExercisePerformance) -> ProgressionChange:
        before = self.snapshot()

        if performance.all_sets_hit_max(self.rep_range):
            if self.current_set_count < self.effective_max_sets:
                self.current_set_count += 1
                return self._change(ChangeKind.SET_ADDED, "Added 1 set", before)
            self.current_weight = self.current_weight.add(
                equipment_increment(self.equipment, self.current_weight)
            )
            self.current_set_count = self.starting_sets
            return self._change(ChangeKind.WEIGHT_INCREASED, "Weight increased, sets reset", before)

        if performance.any_sets_below_min(self.rep_range):
            if self.current_set_count > 1:
                self.current_set_count -= 1
                return self._change(ChangeKind.SET_REMOVED, "Removed 1 set", before)
            decrement = equipment_increment(self.equipment, self.current_weight)
            if decrement.value > 0 and self.current_weight.value >= decrement.value:
                self.current_weight = self.current_weight.subtract(decrement)
                return self._change(ChangeKind.WEIGHT_DECREASED, "Weight decreased", before)
            # Already at the floor; consider a form check or a substitution
            return ProgressionChange(ChangeKind.NONE, "No change (at minimum)")

        return ProgressionChange(ChangeKind.NONE, "No change")

    def _change(self, kind: ChangeKind, description: str, before: Dict[str, Any]) -> ProgressionChange:
        return ProgressionChange(kind, description, before=before, after=self.snapshot())

    def update_weight(self, weight: Weight) -> Weight:
        if weight.unit != self.current_weight.unit:
            raise ValidationError(
                "New weight must use the same unit as current weight", field="unit"
            )
        previous = self.current_weight
        self.current_weight = weight
        return previous

    def update_rep_range(self, rep_range: RepRange):
        self.rep_range = rep_range

    def summary(self) -> ProgressionSummary:
        details = {
            "Rep Range": str(self.rep_range),
            "Current Sets": f"{self.current_set_count}/{self.effective_max_sets}",
            "Current Weight": str(self.current_weight),
            "Equipment": self.equipment.value,
        }
        if self.is_unilateral:
            details["Type"] = "Unilateral (per side)"
        return ProgressionSummary(type="Reps Per Set", details=details)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "current_weight": self.current_weight.value,
            "unit": self.current_weight.unit.value,
            "current_set_count": self.current_set_count,
            "rep_range": str(self.rep_range),
        }


# =============================================================================
# MINIMAL SETS
# =============================================================================

class MinimalSetsProgression(ProgressionStrategy):
    """
    Minimal Sets progression (e.g. assisted dips / pull-ups).

    Complete a total rep target in as few sets as possible:
    - short of the target: allow one more set next time
    - target met in fewer sets than allotted: tighten to the sets used
    - target met in exactly the allotted sets: no change

    Weight is user-controlled and never adjusted automatically.
    """

    progression_type = ProgressionType.MINIMAL_SETS

    def __init__(
        self,
        current_weight: Weight,
        target_total_reps: int,
        starting_sets: int,
        equipment: EquipmentType,
        minimum_sets: int = 2,
        maximum_sets: int = 10,
        current_set_count: Optional[int] = None,
        id: Optional[UUID] = None,
    ):
        super().__init__(id)
        self._validate_target_total_reps(target_total_reps)
        if not (1 <= starting_sets <= MINIMAL_SETS_SET_LIMIT):
            raise ValidationError(
                f"Starting sets must be between 1 and {MINIMAL_SETS_SET_LIMIT}",
                field="starting_sets",
            )
        if not (1 <= minimum_sets <= starting_sets):
            raise ValidationError(
                "Minimum sets must be between 1 and starting sets", field="minimum_sets"
            )
        if not (starting_sets <= maximum_sets <= MINIMAL_SETS_SET_LIMIT):
            raise ValidationError(
                f"Maximum sets must be between starting sets and {MINIMAL_SETS_SET_LIMIT}",
                field="maximum_sets",
            )
        if maximum_sets > target_total_reps:
            raise ValidationError(
                "Maximum sets cannot exceed the target total reps", field="maximum_sets"
            )

        self.current_weight = current_weight
        self.target_total_reps = target_total_reps
        self.starting_sets = starting_sets
        self.minimum_sets = minimum_sets
        self.maximum_sets = maximum_sets
        self.equipment = EquipmentType(equipment)

        if current_set_count is None:
            current_set_count = starting_sets
        if not (minimum_sets <= current_set_count <= maximum_sets):
            raise ValidationError(
                f"Current set count must be between {minimum_sets} and {maximum_sets}",
                field="current_set_count",
            )
        self.current_set_count = current_set_count

    @staticmethod
    def _validate_target_total_reps(target_total_reps: int):
        low, high = MINIMAL_SETS_TOTAL_REPS_RANGE
        if not (low <= target_total_reps <= high):
            raise ValidationError(
                f"Target total reps must be between {low} and {high}", field="target_total_reps"
            )

    def plan(self, week: int, block: int) -> List[PlannedSet]:
        # Even split; the remainder goes to the earliest sets
        base, remainder = divmod(self.target_total_reps, self.current_set_count)
        return [
            PlannedSet(
                set_number,
                self.current_weight,
                base + (1 if set_number <= remainder else 0),
                is_amrap=False,
            )
            for set_number in range(1, self.current_set_count + 1)
        ]

    def apply(self, performance: ExercisePerformance) -> ProgressionChange:
        before = self.snapshot()
        total_reps = performance.total_reps_completed()
        sets_used = performance.sets_used()

        if total_reps < self.target_total_reps:
            new_count = self._clamp(self.current_set_count + 1)
            kind = ChangeKind.SET_ADDED
            description = "Added 1 set (did not hit target reps)"
        elif sets_used < self.current_set_count:
            new_count = self._clamp(sets_used)
            kind = ChangeKind.SETS_REDUCED
            description = "Reduced sets (completed in fewer sets)"
        else:
            return ProgressionChange(ChangeKind.NONE, "No change")

        if new_count == self.current_set_count:
            # Pinned at a bound
            return ProgressionChange(ChangeKind.NONE, f"No change (set count at limit {new_count})")

        self.current_set_count = new_count
        return ProgressionChange(kind, description, before=before, after=self.snapshot())

    def _clamp(self, count: int) -> int:
        return max(self.minimum_sets, min(self.maximum_sets, count))

    def update_weight(self, weight: Weight) -> Weight:
        if weight.unit != self.current_weight.unit:
            raise ValidationError(
                "New weight must use the same unit as current weight", field="unit"
            )
        previous = self.current_weight
        self.current_weight = weight
        return previous

    def update_target_total_reps(self, target_total_reps: int):
        self._validate_target_total_reps(target_total_reps)
        if self.maximum_sets > target_total_reps:
            raise ValidationError(
                "Target total reps cannot be below the maximum set count",
                field="target_total_reps",
            )
        self.target_total_reps = target_total_reps

    def reset_set_count(self):
        """Back to the starting set count, e.g. after a big weight change."""
        self.current_set_count = self.starting_sets

    def summary(self) -> ProgressionSummary:
        return ProgressionSummary(
            type="Minimal Sets",
            details={
                "Target Total Reps": str(self.target_total_reps),
                "Current Sets": str(self.current_set_count),
                "Set Range": f"{self.minimum_sets}-{self.maximum_sets}",
                "Current Weight": str(self.current_weight),
                "Equipment": self.equipment.value,
            },
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "current_weight": self.current_weight.value,
            "unit": self.current_weight.unit.value,
            "current_set_count": self.current_set_count,
            "target_total_reps": self.target_total_reps,
        }

"""Planned (prescribed) and completed (as-performed) sets."""

from dataclasses import dataclass

from core.exceptions import ValidationError

from .weights import Weight


@dataclass(frozen=True)
class PlannedSet:
    set_number: int
    weight: Weight
    target_reps: int
    is_amrap: bool = False

    def __post_init__(self):
        if self.set_number <= 0:
            raise ValidationError("Set number must be greater than zero", field="set_number")
        if self.target_reps <= 0:
            raise ValidationError("Target reps must be greater than zero", field="target_reps")

    def __str__(self) -> str:
        return f"Set {self.set_number}: {self.weight} x {self.target_reps}{'+' if self.is_amrap else ''}"


@dataclass(frozen=True)
class CompletedSet:
    set_number: int
    weight: Weight
    actual_reps: int
    was_amrap: bool = False

    def __post_init__(self):
        if self.set_number <= 0:
            raise ValidationError("Set number must be greater than zero", field="set_number")
        if self.actual_reps < 0:
            raise ValidationError("Actual reps cannot be negative", field="actual_reps")

    def calculate_delta(self, planned: PlannedSet) -> int:
        """
        Reps above (+) or below (-) the planned target.

        Set numbers are deliberately not compared: a lifter may do fewer or
        more sets than prescribed and the AMRAP set is still compared
        against its target.
        """
        return self.actual_reps - planned.target_reps

    def __str__(self) -> str:
        return f"Set {self.set_number}: {self.weight} x {self.actual_reps}{' (AMRAP)' if self.was_amrap else ''}"

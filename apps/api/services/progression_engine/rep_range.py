"""Rep range value object (minimum-target-maximum, e.g. 8-10-12)."""

from dataclasses import dataclass

from core.exceptions import ValidationError

from .constants import REP_RANGE_MAX_SPAN


@dataclass(frozen=True)
class RepRange:
    """
    Rep prescription for accessory work.

    minimum: below this on any set triggers a regression
    target:  reps prescribed per set
    maximum: hitting this on every set triggers a progression
    """
    minimum: int
    target: int
    maximum: int

    def __post_init__(self):
        if self.minimum <= 0:
            raise ValidationError("Minimum reps must be greater than zero", field="minimum")
        if self.target < self.minimum:
            raise ValidationError("Target must be greater than or equal to minimum", field="target")
        if self.maximum < self.target:
            raise ValidationError("Maximum must be greater than or equal to target", field="maximum")
        if self.maximum - self.minimum > REP_RANGE_MAX_SPAN:
            raise ValidationError(
                f"Rep range span cannot exceed {REP_RANGE_MAX_SPAN} reps", field="maximum"
            )

    @classmethod
    def create(cls, minimum: int, target: int, maximum: int) -> "RepRange":
        return cls(minimum, target, maximum)

    @classmethod
    def parse(cls, text: str) -> "RepRange":
        """Parse the '8-10-12' form."""
        try:
            minimum, target, maximum = (int(part) for part in text.split("-"))
        except ValueError:
            raise ValidationError(f"Invalid rep range: {text!r}", field="rep_range")
        return cls(minimum, target, maximum)

    def is_below_minimum(self, actual_reps: int) -> bool:
        return actual_reps < self.minimum

    def meets_maximum(self, actual_reps: int) -> bool:
        return actual_reps >= self.maximum

    def is_in_range(self, actual_reps: int) -> bool:
        return self.minimum <= actual_reps <= self.maximum

    def __str__(self) -> str:
        return f"{self.minimum}-{self.target}-{self.maximum}"


# Common rep ranges for accessories
LOW = RepRange(4, 6, 8)              # strength focus
MEDIUM_LOW = RepRange(6, 8, 10)
MEDIUM = RepRange(8, 10, 12)         # most common
MEDIUM_HIGH = RepRange(10, 12, 15)
HIGH = RepRange(12, 15, 20)          # endurance focus

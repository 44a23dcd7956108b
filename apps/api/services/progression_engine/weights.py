"""
Weight and Training Max value objects.

All arithmetic is done in Decimal so that snapped loads are exact multiples
of the plate increment (2.5kg / 5lbs). Rounding mode follows
settings.WEIGHT_ROUNDING_MODE.

Usage:
    tm = TrainingMax.create(100, WeightUnit.KILOGRAMS)
    tm.calculate_working_weight(Decimal("0.75"))   # Weight(75, kg)
    tm.apply_adjustment(TrainingMaxAdjustment.percentage(Decimal("0.02")))
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import Union

from core.config import settings
from core.exceptions import ValidationError

from .constants import WeightUnit, WEIGHT_INCREMENTS, LBS_PER_KG, MAX_INTENSITY

Number = Union[int, float, str, Decimal]

_ROUNDING_MODES = {
    "half_even": ROUND_HALF_EVEN,
    "half_up": ROUND_HALF_UP,
}


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Coerce a number to Decimal without float artefacts (0.1 -> '0.1')."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be numeric", field=field)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be numeric, got {value!r}", field=field)


def snap_to_increment(value: Decimal, increment: Decimal) -> Decimal:
    """Round value to the nearest multiple of increment."""
    if increment <= 0:
        raise ValidationError("Increment must be greater than zero", field="increment")
    rounding = _ROUNDING_MODES.get(settings.WEIGHT_ROUNDING_MODE, ROUND_HALF_EVEN)
    steps = (value / increment).quantize(Decimal("1"), rounding=rounding)
    return steps * increment


def increment_for(unit: WeightUnit) -> Decimal:
    return WEIGHT_INCREMENTS[unit]


def _unit_label(unit: WeightUnit) -> str:
    return "kg" if unit == WeightUnit.KILOGRAMS else "lbs"


@dataclass(frozen=True)
class Weight:
    """A non-negative load with its unit. Immutable."""
    value: Decimal
    unit: WeightUnit

    def __post_init__(self):
        value = to_decimal(self.value, "weight")
        if value < 0:
            raise ValidationError("Weight cannot be negative", field="weight")
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "unit", WeightUnit(self.unit))

    @classmethod
    def create(cls, value: Number, unit: WeightUnit) -> "Weight":
        return cls(to_decimal(value, "weight"), unit)

    @classmethod
    def kilograms(cls, value: Number) -> "Weight":
        return cls.create(value, WeightUnit.KILOGRAMS)

    @classmethod
    def pounds(cls, value: Number) -> "Weight":
        return cls.create(value, WeightUnit.POUNDS)

    @classmethod
    def zero(cls, unit: WeightUnit) -> "Weight":
        return cls(Decimal("0"), unit)

    def add(self, other: "Weight") -> "Weight":
        if self.unit != other.unit:
            raise ValidationError("Cannot add weights with different units", field="unit")
        return Weight(self.value + other.value, self.unit)

    def subtract(self, other: "Weight") -> "Weight":
        if self.unit != other.unit:
            raise ValidationError("Cannot subtract weights with different units", field="unit")
        new_value = self.value - other.value
        if new_value < 0:
            raise ValidationError("Resulting weight cannot be negative", field="weight")
        return Weight(new_value, self.unit)

    def round_to_increment(self, increment: Number) -> "Weight":
        """Rounds weight to the nearest increment (e.g., 2.5kg for barbell exercises)."""
        return Weight(snap_to_increment(self.value, to_decimal(increment, "increment")), self.unit)

    def convert_to(self, target_unit: WeightUnit) -> "Weight":
        if self.unit == target_unit:
            return self
        if target_unit == WeightUnit.KILOGRAMS:
            return Weight(self.value / LBS_PER_KG, target_unit)
        return Weight(self.value * LBS_PER_KG, target_unit)

    def __str__(self) -> str:
        return f"{self.value.normalize():f}{_unit_label(self.unit)}"


class AdjustmentType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class TrainingMaxAdjustment:
    """A change to a Training Max: a fraction (0.02 = +2%) or an absolute load."""
    type: AdjustmentType
    amount: Decimal = Decimal("0")

    @classmethod
    def none(cls) -> "TrainingMaxAdjustment":
        return cls(AdjustmentType.NONE, Decimal("0"))

    @classmethod
    def percentage(cls, fraction: Number) -> "TrainingMaxAdjustment":
        return cls(AdjustmentType.PERCENTAGE, to_decimal(fraction, "percentage"))

    @classmethod
    def absolute(cls, amount: Number) -> "TrainingMaxAdjustment":
        return cls(AdjustmentType.ABSOLUTE, to_decimal(amount, "amount"))

    @property
    def is_none(self) -> bool:
        return self.type == AdjustmentType.NONE or self.amount == 0

    def describe(self) -> str:
        if self.type == AdjustmentType.NONE:
            return "No adjustment"
        if self.type == AdjustmentType.PERCENTAGE:
            pct = (self.amount * 100).normalize()
            sign = "+" if self.amount >= 0 else ""
            return f"{sign}{pct:f}%"
        sign = "+" if self.amount >= 0 else ""
        return f"{sign}{self.amount.normalize():f}"


@dataclass(frozen=True)
class TrainingMax:
    """
    Reference maximum used to derive working weights.

    Working weights and adjusted values are always snapped to the unit's
    plate increment.
    """
    value: Decimal
    unit: WeightUnit

    def __post_init__(self):
        value = to_decimal(self.value, "training_max")
        if value <= 0:
            raise ValidationError("Training Max must be greater than zero", field="training_max")
        unit = WeightUnit(self.unit)
        # Smallest TM whose -5% adjustment still snaps to a loadable weight
        if value < increment_for(unit):
            raise ValidationError(
                f"Training Max must be at least {increment_for(unit).normalize():f}{_unit_label(unit)}",
                field="training_max",
            )
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "unit", unit)

    @classmethod
    def create(cls, value: Number, unit: WeightUnit) -> "TrainingMax":
        return cls(to_decimal(value, "training_max"), unit)

    @property
    def increment(self) -> Decimal:
        return increment_for(self.unit)

    def calculate_working_weight(self, intensity: Number) -> Weight:
        """
        Working weight for an intensity fraction (0.70 = 70% of TM).

        Raises:
            ValidationError: intensity outside (0, 1.5]
        """
        intensity = to_decimal(intensity, "intensity")
        if not (0 < intensity <= MAX_INTENSITY):
            raise ValidationError(
                "Intensity percentage must be between 0 and 1.5 (0-150%)",
                field="intensity",
            )
        return Weight(snap_to_increment(self.value * intensity, self.increment), self.unit)

    def apply_adjustment(self, adjustment: TrainingMaxAdjustment) -> "TrainingMax":
        if adjustment.type == AdjustmentType.PERCENTAGE:
            new_value = self.value * (1 + adjustment.amount)
        elif adjustment.type == AdjustmentType.ABSOLUTE:
            new_value = self.value + adjustment.amount
        elif adjustment.type == AdjustmentType.NONE:
            new_value = self.value
        else:
            raise ValidationError(f"Unknown adjustment type: {adjustment.type}", field="adjustment")

        new_value = snap_to_increment(new_value, self.increment)
        if new_value <= 0:
            raise ValidationError(
                "Adjusted Training Max must be greater than zero", field="training_max"
            )
        return TrainingMax(new_value, self.unit)

    def to_weight(self) -> Weight:
        return Weight(self.value, self.unit)

    def __str__(self) -> str:
        return f"{self.value.normalize():f}{_unit_label(self.unit)} TM"

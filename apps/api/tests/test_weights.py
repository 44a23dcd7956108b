"""
Tests for Weight, TrainingMax and TrainingMaxAdjustment

Covers unit handling, increment snapping and Training Max adjustments.
Weights are Decimal throughout so snapped values compare exactly.
"""
import pytest
from decimal import Decimal

from core.config import settings
from core.exceptions import ValidationError
from services.progression_engine import (
    AdjustmentType,
    TrainingMax,
    TrainingMaxAdjustment,
    Weight,
    WeightUnit,
)
from services.progression_engine.constants import WEEKLY_PROGRAM
from tests.workout_helpers import kg, tm_kg


class TestWeight:
    """Weight value object"""

    def test_negative_weight_rejected(self):
        """A weight can never be below zero"""
        with pytest.raises(ValidationError) as exc:
            kg(-1)
        assert exc.value.field == "weight"

    def test_zero_weight_allowed(self):
        """Bodyweight exercises carry a zero load"""
        assert Weight.zero(WeightUnit.KILOGRAMS).value == 0

    def test_float_input_has_no_artefacts(self):
        """0.1 stays 0.1, not 0.1000000000000000055..."""
        assert kg(0.1).value == Decimal("0.1")

    def test_add_same_unit(self):
        assert kg("2.5").add(kg("2.5")) == kg(5)

    def test_add_different_units_rejected(self):
        with pytest.raises(ValidationError):
            kg(10).add(Weight.pounds(10))

    def test_subtract_below_zero_rejected(self):
        with pytest.raises(ValidationError):
            kg(2).subtract(kg("2.5"))

    def test_subtract(self):
        assert kg(60).subtract(kg("2.5")) == kg("57.5")

    def test_convert_kilograms_to_pounds(self):
        """100kg = 220.462lbs"""
        converted = kg(100).convert_to(WeightUnit.POUNDS)
        assert converted.unit == WeightUnit.POUNDS
        assert converted.value == Decimal("220.462")

    def test_convert_same_unit_is_identity(self):
        weight = kg(80)
        assert weight.convert_to(WeightUnit.KILOGRAMS) is weight

    def test_round_to_increment(self):
        """101.2 snaps to the nearest 2.5 -> 100"""
        assert kg("101.2").round_to_increment("2.5") == kg(100)

    def test_string_form(self):
        assert str(kg(75)) == "75kg"
        assert str(Weight.pounds("202.5")) == "202.5lbs"


class TestRoundingMode:
    """Ties are resolved by settings.WEIGHT_ROUNDING_MODE"""

    def test_half_even_by_default(self):
        """76.25 is exactly between 75 and 77.5; half-even picks 75"""
        assert kg("76.25").round_to_increment("2.5") == kg(75)

    def test_half_up(self, monkeypatch):
        """Half-up rounds the same tie away from zero"""
        monkeypatch.setattr(settings, "WEIGHT_ROUNDING_MODE", "half_up")
        assert kg("76.25").round_to_increment("2.5") == kg("77.5")


class TestTrainingMax:
    """TrainingMax value object"""

    def test_must_be_positive(self):
        with pytest.raises(ValidationError):
            tm_kg(0)
        with pytest.raises(ValidationError):
            tm_kg(-10)

    def test_must_be_at_least_one_increment(self):
        """Below one plate increment a -5% adjustment would snap to zero"""
        with pytest.raises(ValidationError):
            tm_kg(1)
        with pytest.raises(ValidationError):
            TrainingMax.create(4, WeightUnit.POUNDS)
        assert tm_kg("2.5").value == Decimal("2.5")
        assert TrainingMax.create(5, WeightUnit.POUNDS).value == 5

    @pytest.mark.parametrize("tm_value", ["2.5", "2.6", "3", "4.9", "7.5"])
    def test_largest_decrease_never_reaches_zero(self, tm_value):
        """-5% on the smallest Training Maxes still leaves a loadable weight"""
        adjusted = tm_kg(tm_value).apply_adjustment(TrainingMaxAdjustment.percentage("-0.05"))
        assert adjusted.value >= Decimal("2.5")

    def test_working_weight_week_one(self):
        """100kg TM at 75% -> 75kg"""
        assert tm_kg(100).calculate_working_weight(Decimal("0.75")) == kg(75)

    @pytest.mark.parametrize("intensity", ["0", "-0.1", "1.51"])
    def test_intensity_out_of_range_rejected(self, intensity):
        with pytest.raises(ValidationError):
            tm_kg(100).calculate_working_weight(Decimal(intensity))

    def test_intensity_upper_bound_inclusive(self):
        assert tm_kg(100).calculate_working_weight(Decimal("1.5")) == kg(150)

    @pytest.mark.parametrize("tm_value", ["57.5", "100", "142.5", "163", "201.7", "317.5"])
    def test_working_weights_are_exact_increments(self, tm_value):
        """Every working weight is an exact multiple of 2.5kg"""
        tm = tm_kg(tm_value)
        for intensity, _, _, _ in WEEKLY_PROGRAM.values():
            weight = tm.calculate_working_weight(Decimal(intensity))
            assert weight.value % Decimal("2.5") == 0, f"{tm} @ {intensity} -> {weight}"

    def test_pound_working_weights_snap_to_five(self):
        tm = TrainingMax.create(315, WeightUnit.POUNDS)
        weight = tm.calculate_working_weight(Decimal("0.85"))
        assert weight.unit == WeightUnit.POUNDS
        assert weight.value % 5 == 0

    def test_percentage_adjustment_rounds_to_increment(self):
        """100kg +2% = 102kg, which snaps to 102.5kg"""
        adjusted = tm_kg(100).apply_adjustment(TrainingMaxAdjustment.percentage("0.02"))
        assert adjusted.value == Decimal("102.5")

    def test_absolute_adjustment(self):
        adjusted = tm_kg(100).apply_adjustment(TrainingMaxAdjustment.absolute(5))
        assert adjusted == tm_kg(105)

    def test_no_adjustment(self):
        assert tm_kg(100).apply_adjustment(TrainingMaxAdjustment.none()) == tm_kg(100)

    def test_adjustment_to_zero_rejected(self):
        with pytest.raises(ValidationError):
            tm_kg(100).apply_adjustment(TrainingMaxAdjustment.absolute(-100))
        with pytest.raises(ValidationError):
            tm_kg(100).apply_adjustment(TrainingMaxAdjustment.percentage(-1))

    def test_string_form(self):
        assert str(tm_kg(100)) == "100kg TM"


class TestTrainingMaxAdjustment:
    """Adjustment factories and descriptions"""

    def test_factories(self):
        assert TrainingMaxAdjustment.none().type == AdjustmentType.NONE
        assert TrainingMaxAdjustment.percentage("0.02").type == AdjustmentType.PERCENTAGE
        assert TrainingMaxAdjustment.absolute(5).type == AdjustmentType.ABSOLUTE

    def test_zero_amount_counts_as_none(self):
        assert TrainingMaxAdjustment.percentage(0).is_none

    def test_describe(self):
        assert TrainingMaxAdjustment.percentage("0.02").describe() == "+2%"
        assert TrainingMaxAdjustment.percentage("0.015").describe() == "+1.5%"
        assert TrainingMaxAdjustment.percentage("-0.05").describe() == "-5%"
        assert TrainingMaxAdjustment.absolute("-2.5").describe() == "-2.5"
        assert TrainingMaxAdjustment.none().describe() == "No adjustment"

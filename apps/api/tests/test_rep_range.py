"""Tests for RepRange"""
import pytest

from core.exceptions import ValidationError
from services.progression_engine import RepRange
from services.progression_engine import rep_range as presets


class TestRepRangeValidation:

    @pytest.mark.parametrize("minimum,target,maximum", [
        (0, 10, 12),     # non-positive minimum
        (10, 8, 12),     # target below minimum
        (8, 12, 10),     # maximum below target
        (5, 10, 16),     # span of 11
    ])
    def test_invalid_ranges_rejected(self, minimum, target, maximum):
        with pytest.raises(ValidationError):
            RepRange(minimum, target, maximum)

    def test_flat_range_allowed(self):
        """min == target == max is a valid (strict) prescription"""
        assert RepRange(10, 10, 10).target == 10

    def test_span_of_ten_allowed(self):
        assert RepRange(10, 15, 20).maximum == 20


class TestRepRangeQueries:

    def test_below_minimum(self):
        rep_range = RepRange(8, 10, 12)
        assert rep_range.is_below_minimum(7)
        assert not rep_range.is_below_minimum(8)

    def test_meets_maximum(self):
        rep_range = RepRange(8, 10, 12)
        assert rep_range.meets_maximum(12)
        assert rep_range.meets_maximum(15)
        assert not rep_range.meets_maximum(11)

    def test_in_range(self):
        rep_range = RepRange(8, 10, 12)
        assert rep_range.is_in_range(8)
        assert rep_range.is_in_range(12)
        assert not rep_range.is_in_range(13)


class TestRepRangeFormat:

    def test_string_round_trip(self):
        assert str(RepRange.parse("8-10-12")) == "8-10-12"

    @pytest.mark.parametrize("text", ["8-10", "a-b-c", "8-10-12-14", ""])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValidationError):
            RepRange.parse(text)

    def test_presets(self):
        assert str(presets.LOW) == "4-6-8"
        assert str(presets.MEDIUM) == "8-10-12"
        assert str(presets.HIGH) == "12-15-20"

"""
Tests for Minimal Sets progression

Hit a total rep target in as few sets as possible. Missing the target
allows one more set; meeting it early tightens the set count to the sets
actually used. The set count stays within [minimum_sets, maximum_sets].
"""
import pytest
from uuid import uuid4

from core.exceptions import ValidationError
from services.progression_engine import (
    ChangeKind,
    CompletedSet,
    EquipmentType,
    ExercisePerformance,
    MinimalSetsProgression,
    Weight,
)
from tests.workout_helpers import kg


def make_strategy(target_total_reps=40, starting_sets=6, minimum_sets=2, maximum_sets=10, **kwargs):
    return MinimalSetsProgression(
        current_weight=kg(0),
        target_total_reps=target_total_reps,
        starting_sets=starting_sets,
        equipment=EquipmentType.BODYWEIGHT,
        minimum_sets=minimum_sets,
        maximum_sets=maximum_sets,
        **kwargs,
    )


def perform(strategy, reps):
    planned = strategy.plan(1, 1)
    completed = [CompletedSet(n, strategy.current_weight, r) for n, r in enumerate(reps, start=1)]
    return ExercisePerformance.create(uuid4(), planned, completed)


class TestMinimalSetsPlan:

    def test_even_split_remainder_first(self):
        """40 reps over 6 sets -> 7, 7, 7, 7, 6, 6"""
        plan = make_strategy().plan(1, 1)
        assert [s.target_reps for s in plan] == [7, 7, 7, 7, 6, 6]
        assert sum(s.target_reps for s in plan) == 40

    def test_exact_split(self):
        plan = make_strategy(target_total_reps=50, starting_sets=5).plan(1, 1)
        assert [s.target_reps for s in plan] == [10] * 5


class TestMinimalSetsApply:

    def test_short_of_target_adds_set(self):
        """Target 40 at 6 sets, only 38 reps -> 7 sets"""
        strategy = make_strategy()
        change = strategy.apply(perform(strategy, [7, 7, 7, 6, 6, 5]))

        assert strategy.current_set_count == 7
        assert change.kind == ChangeKind.SET_ADDED
        assert change.description == "Added 1 set (did not hit target reps)"

    def test_target_in_fewer_sets_tightens(self):
        strategy = make_strategy()
        change = strategy.apply(perform(strategy, [12, 10, 10, 8]))

        assert strategy.current_set_count == 4
        assert change.kind == ChangeKind.SETS_REDUCED
        assert change.description == "Reduced sets (completed in fewer sets)"

    def test_target_in_all_sets_is_no_change(self):
        strategy = make_strategy()
        change = strategy.apply(perform(strategy, [7, 7, 7, 7, 6, 6]))

        assert strategy.current_set_count == 6
        assert change.kind == ChangeKind.NONE

    def test_clamped_to_minimum(self):
        """40 reps in one set still leaves the minimum of 2 sets"""
        strategy = make_strategy()
        strategy.apply(perform(strategy, [40]))
        assert strategy.current_set_count == 2

    def test_clamped_to_maximum(self):
        strategy = make_strategy(starting_sets=10, maximum_sets=10)
        change = strategy.apply(perform(strategy, [3] * 10))

        assert strategy.current_set_count == 10
        assert change.kind == ChangeKind.NONE

    def test_weight_is_never_changed_automatically(self):
        strategy = make_strategy()
        strategy.apply(perform(strategy, [1, 1]))
        assert strategy.current_weight == kg(0)


def split(total, sets):
    base, remainder = divmod(total, sets)
    return [base + (1 if n < remainder else 0) for n in range(sets)]


class TestMinimalSetsSequences:
    """The set count stays within [minimum_sets, maximum_sets] over many sessions"""

    @pytest.mark.parametrize("outcomes", [
        ["short"] * 12,
        ["early"] * 6,
        ["short", "short", "early", "exact", "short", "early", "early", "short"],
        ["early", "short", "short", "short", "short", "short", "exact", "early"],
    ])
    @pytest.mark.parametrize("minimum_sets,maximum_sets", [(2, 10), (3, 7), (6, 6)])
    def test_set_count_stays_within_bounds(self, outcomes, minimum_sets, maximum_sets):
        strategy = make_strategy(minimum_sets=minimum_sets, maximum_sets=maximum_sets)

        for outcome in outcomes:
            count = strategy.current_set_count
            if outcome == "short":
                reps = split(strategy.target_total_reps - 3, count)
            elif outcome == "early":
                reps = split(strategy.target_total_reps, max(1, count - 2))
            else:
                reps = split(strategy.target_total_reps, count)
            strategy.apply(perform(strategy, reps))

            assert minimum_sets <= strategy.current_set_count <= maximum_sets, (
                f"{outcome}: {count} -> {strategy.current_set_count}"
            )


class TestMinimalSetsConfiguration:

    @pytest.mark.parametrize("kwargs", [
        {"target_total_reps": 9},
        {"target_total_reps": 201},
        {"starting_sets": 0},
        {"starting_sets": 21, "maximum_sets": 21},
        {"minimum_sets": 7},                                  # above starting sets
        {"maximum_sets": 5},                                  # below starting sets
        {"maximum_sets": 21},
        {"target_total_reps": 10, "maximum_sets": 12},        # more sets than reps
        {"current_set_count": 11},
    ])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValidationError):
            make_strategy(**kwargs)

    def test_update_target_total_reps(self):
        strategy = make_strategy(maximum_sets=15)
        strategy.update_target_total_reps(60)
        assert strategy.target_total_reps == 60

        with pytest.raises(ValidationError):
            strategy.update_target_total_reps(12)
        with pytest.raises(ValidationError):
            strategy.update_target_total_reps(250)

    def test_reset_set_count(self):
        strategy = make_strategy()
        strategy.apply(perform(strategy, [20, 20]))
        assert strategy.current_set_count == 2

        strategy.reset_set_count()
        assert strategy.current_set_count == 6

    def test_update_weight(self):
        strategy = make_strategy()
        assert strategy.update_weight(kg(10)) == kg(0)
        with pytest.raises(ValidationError):
            strategy.update_weight(Weight.pounds(10))

    def test_summary(self):
        summary = make_strategy().summary()
        assert summary.type == "Minimal Sets"
        assert summary.details["Target Total Reps"] == "40"
        assert summary.details["Set Range"] == "2-10"

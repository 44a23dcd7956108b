"""Tests for the in-memory workout repository"""
import pytest
from uuid import uuid4

from core.exceptions import ConcurrencyConflictError
from services.workout_repository import InMemoryWorkoutRepository
from tests.workout_helpers import complete_day_as_planned, tm_kg


@pytest.fixture
def repository():
    return InMemoryWorkoutRepository()


class TestInMemoryWorkoutRepository:

    def test_get_unknown_returns_none(self, repository):
        assert repository.get(uuid4()) is None

    def test_save_and_load(self, repository, workout):
        repository.save(workout)
        loaded = repository.get(workout.id)

        assert loaded is not workout
        assert loaded.id == workout.id
        assert loaded.version == 1
        assert len(loaded.exercises) == len(workout.exercises)

    def test_loaded_copy_is_isolated(self, repository, active_workout, squat):
        """Mutating a loaded workout without saving leaves stored state alone"""
        repository.save(active_workout)
        loaded = repository.get(active_workout.id)
        complete_day_as_planned(loaded, 1, amrap_delta=5)

        fresh = repository.get(active_workout.id)
        assert fresh.completed_activities == ()
        assert fresh.get_exercise(squat.id).training_max == tm_kg(140)

    def test_saved_state_does_not_carry_events(self, repository, workout):
        repository.save(workout)
        assert repository.get(workout.id).pending_events == ()
        assert workout.pending_events  # the caller's copy still has them to dispatch

    def test_stale_save_rejected(self, repository, active_workout):
        repository.save(active_workout)
        first = repository.get(active_workout.id)
        second = repository.get(active_workout.id)

        complete_day_as_planned(first, 1)
        repository.save(first)

        complete_day_as_planned(second, 1)
        with pytest.raises(ConcurrencyConflictError) as exc:
            repository.save(second)
        assert exc.value.expected_version == 1
        assert exc.value.actual_version == 2

    def test_list_for_user(self, repository, workout, four_day_exercises):
        from services.progression_engine import ProgramVariant, Workout

        other = Workout.create("user-2", "Other", ProgramVariant.FOUR_DAY, four_day_exercises)
        repository.save(workout)
        repository.save(other)

        assert [w.id for w in repository.list_for_user("user-1")] == [workout.id]
        assert repository.list_for_user("nobody") == []

    def test_delete(self, repository, workout):
        repository.save(workout)
        assert repository.delete(workout.id)
        assert not repository.delete(workout.id)
        assert repository.get(workout.id) is None

"""
Workout Repository

Load / persist contract for the Workout aggregate.

A repository hands out fully hydrated aggregates (every exercise with its
progression state, plus the activity log) and stores a mutated aggregate
as one unit. Concurrent writers are serialized with a per-workout version
number: saving a copy that was loaded before another save raises
ConcurrencyConflictError.

Usage:
    repository = InMemoryWorkoutRepository()
    repository.save(workout)

    workout = repository.get(workout_id)   # None when unknown
    workout.complete_day(...)
    repository.save(workout)
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from core.exceptions import ConcurrencyConflictError
from services.progression_engine import Workout

logger = logging.getLogger(__name__)


class WorkoutRepository(ABC):
    """
    Storage for Workout aggregates.

    Implementation Requirements:
    - get() returns None for an unknown id (not an exception)
    - save() stores every exercise's progression state and the appended
      activities together, or nothing
    - save() rejects stale copies (version mismatch)
    """

    @abstractmethod
    def get(self, workout_id: UUID) -> Optional[Workout]:
        """Load a workout, or None when it does not exist."""
        pass

    @abstractmethod
    def save(self, workout: Workout) -> Workout:
        """Persist a workout and bump its version."""
        pass

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[Workout]:
        """All workouts owned by a user, oldest first."""
        pass

    @abstractmethod
    def delete(self, workout_id: UUID) -> bool:
        """Remove a workout. Returns False when it did not exist."""
        pass


class InMemoryWorkoutRepository(WorkoutRepository):
    """
    Process-local repository.

    Stores deep copies: a caller mutating a loaded workout does not change
    stored state until it saves.
    """

    def __init__(self):
        self._workouts: Dict[UUID, Workout] = {}

    def get(self, workout_id: UUID) -> Optional[Workout]:
        stored = self._workouts.get(workout_id)
        if stored is None:
            return None
        return copy.deepcopy(stored)

    def save(self, workout: Workout) -> Workout:
        stored = self._workouts.get(workout.id)
        current_version = stored.version if stored is not None else 0
        if workout.version != current_version:
            raise ConcurrencyConflictError(
                "Workout", str(workout.id), expected=workout.version, actual=current_version,
            )

        snapshot = copy.deepcopy(workout)
        # Events belong to the caller's copy; they are dispatched, not stored
        snapshot.clear_events()
        snapshot.version = current_version + 1
        self._workouts[workout.id] = snapshot
        workout.version = snapshot.version

        logger.debug(f"Saved workout {workout.id} (version {workout.version})")
        return workout

    def list_for_user(self, user_id: str) -> List[Workout]:
        owned = [w for w in self._workouts.values() if w.user_id == user_id]
        owned.sort(key=lambda w: w.created_at)
        return [copy.deepcopy(w) for w in owned]

    def delete(self, workout_id: UUID) -> bool:
        if workout_id not in self._workouts:
            return False
        del self._workouts[workout_id]
        logger.debug(f"Deleted workout {workout_id}")
        return True

    def __len__(self) -> int:
        return len(self._workouts)

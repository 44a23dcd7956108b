"""
Exercise Performance

One exercise's completed sets for one day, held against the sets that were
planned for it. This is the input every progression strategy consumes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple
from uuid import UUID

from core.exceptions import ValidationError

from .rep_range import RepRange
from .sets import CompletedSet, PlannedSet


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExercisePerformance:
    exercise_id: UUID
    planned_sets: Tuple[PlannedSet, ...]
    completed_sets: Tuple[CompletedSet, ...]
    completed_at: datetime = field(default_factory=_utcnow)
    # Temporary substitution: the lifter did a different movement, so the
    # original exercise's progression must not be touched.
    skip_progression: bool = False

    def __post_init__(self):
        planned = tuple(self.planned_sets)
        completed = tuple(self.completed_sets)
        if not planned:
            raise ValidationError("At least one planned set is required", field="planned_sets")
        if not completed:
            raise ValidationError("At least one completed set is required", field="completed_sets")
        if len(completed) > len(planned):
            raise ValidationError(
                f"Cannot record {len(completed)} completed sets against "
                f"{len(planned)} planned sets",
                field="completed_sets",
            )
        object.__setattr__(self, "planned_sets", planned)
        object.__setattr__(self, "completed_sets", completed)

    @classmethod
    def create(
        cls,
        exercise_id: UUID,
        planned_sets: Iterable[PlannedSet],
        completed_sets: Iterable[CompletedSet],
        completed_at: Optional[datetime] = None,
        skip_progression: bool = False,
    ) -> "ExercisePerformance":
        return cls(
            exercise_id=exercise_id,
            planned_sets=tuple(planned_sets),
            completed_sets=tuple(completed_sets),
            completed_at=completed_at or _utcnow(),
            skip_progression=skip_progression,
        )

    def _amrap_pair(self) -> Optional[Tuple[PlannedSet, CompletedSet]]:
        planned = next((s for s in reversed(self.planned_sets) if s.is_amrap), None)
        if planned is None:
            return None
        completed = next((s for s in reversed(self.completed_sets) if s.was_amrap), None)
        if completed is None:
            return None
        return planned, completed

    def has_amrap_result(self) -> bool:
        """True when an AMRAP set was both planned and performed."""
        return self._amrap_pair() is not None

    def amrap_delta(self) -> int:
        """Actual minus target reps on the AMRAP set; 0 when no AMRAP set matched."""
        pair = self._amrap_pair()
        if pair is None:
            return 0
        planned, completed = pair
        return completed.calculate_delta(planned)

    def all_sets_hit_max(self, rep_range: RepRange) -> bool:
        return all(rep_range.meets_maximum(s.actual_reps) for s in self.completed_sets)

    def any_sets_below_min(self, rep_range: RepRange) -> bool:
        return any(rep_range.is_below_minimum(s.actual_reps) for s in self.completed_sets)

    def total_reps_completed(self) -> int:
        return sum(s.actual_reps for s in self.completed_sets)

    def sets_used(self) -> int:
        return len(self.completed_sets)

"""Completed training day record. Append-only audit trail of a Workout."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID

from core.exceptions import ValidationError

from .constants import DayNumber, PROGRAM_WEEKS, TOTAL_BLOCKS
from .performance import ExercisePerformance
from .periodization import is_deload_week


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WorkoutActivity:
    day: DayNumber
    week_number: int
    block_number: int
    performances: Tuple[ExercisePerformance, ...]
    completed_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if not (1 <= self.week_number <= PROGRAM_WEEKS):
            raise ValidationError(
                f"Week number must be between 1 and {PROGRAM_WEEKS}", field="week_number"
            )
        if not (1 <= self.block_number <= TOTAL_BLOCKS):
            raise ValidationError(
                f"Block number must be between 1 and {TOTAL_BLOCKS}", field="block_number"
            )
        performances = tuple(self.performances)
        if not performances:
            raise ValidationError("At least one exercise performance is required", field="performances")
        object.__setattr__(self, "day", DayNumber(self.day))
        object.__setattr__(self, "performances", performances)

    def is_deload_week(self) -> bool:
        return is_deload_week(self.week_number)

    def performance_for(self, exercise_id: UUID) -> Optional[ExercisePerformance]:
        return next((p for p in self.performances if p.exercise_id == exercise_id), None)

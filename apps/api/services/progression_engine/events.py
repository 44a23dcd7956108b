"""
Workout domain events.

The aggregate records these as it changes; the service layer dispatches
them through core.events after the workout has been saved.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from core.events import (
    EVENT_DAY_COMPLETED,
    EVENT_TRAINING_MAX_ADJUSTED,
    EVENT_WEEK_PROGRESSED,
    EVENT_WORKOUT_COMPLETED,
    EVENT_WORKOUT_CREATED,
    EVENT_WORKOUT_STARTED,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    workout_id: UUID
    occurred_at: datetime = field(default_factory=_utcnow, kw_only=True)

    event_type = "workout.event"

    def payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WorkoutCreated(DomainEvent):
    user_id: str
    name: str
    variant: str

    event_type = EVENT_WORKOUT_CREATED


@dataclass(frozen=True)
class WorkoutStarted(DomainEvent):
    user_id: str

    event_type = EVENT_WORKOUT_STARTED


@dataclass(frozen=True)
class DayCompleted(DomainEvent):
    day: int
    week_number: int
    block_number: int
    exercises_completed: int

    event_type = EVENT_DAY_COMPLETED


@dataclass(frozen=True)
class WeekProgressed(DomainEvent):
    previous_week: int
    new_week: int
    new_block: int
    is_deload_week: bool

    event_type = EVENT_WEEK_PROGRESSED


@dataclass(frozen=True)
class TrainingMaxAdjusted(DomainEvent):
    exercise_id: UUID
    exercise_name: str
    previous_value: str
    new_value: str
    reason: Optional[str] = None

    event_type = EVENT_TRAINING_MAX_ADJUSTED


@dataclass(frozen=True)
class WorkoutCompleted(DomainEvent):
    user_id: str
    total_weeks: int

    event_type = EVENT_WORKOUT_COMPLETED

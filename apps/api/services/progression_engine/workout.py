"""
Workout Aggregate

A 21-week A2S program for one user: the exercise list, the week/block/day
cursor, the lifecycle status and the append-only log of completed days.

State machine:
    NOT_STARTED --start()--> ACTIVE <--pause()/resume()--> PAUSED
    ACTIVE --(final week completed)--> COMPLETED (terminal)

complete_day() is the main entry point. For each exercise performed it
builds the plan for the current week, compares it with what was lifted and
lets the exercise's progression strategy adjust itself. All strategy
changes of one call commit together or not at all.

Usage:
    workout = Workout.create("user-1", "A2S Hypertrophy", ProgramVariant.FOUR_DAY, exercises)
    workout.start()
    result = workout.complete_day(DayNumber.DAY_1, [
        ExercisePerformanceInput(squat.id, completed_sets),
    ])
    result.week_progressed
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID, uuid4

from core.exceptions import BusinessRuleViolation, ValidationError
from core.logging import log_fields

from .activity import WorkoutActivity
from .constants import DayNumber, PROGRAM_WEEKS, ProgramVariant, WorkoutStatus
from .events import (
    DayCompleted,
    DomainEvent,
    TrainingMaxAdjusted,
    WeekProgressed,
    WorkoutCompleted,
    WorkoutCreated,
    WorkoutStarted,
)
from .exercise import Exercise
from .performance import ExercisePerformance
from .periodization import block_for_week, is_deload_week
from .rep_range import RepRange
from .sets import CompletedSet, PlannedSet
from .strategies import ProgressionChange
from .weights import TrainingMax, Weight

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExercisePerformanceInput:
    """What the lifter reports for one exercise on a day."""
    exercise_id: UUID
    completed_sets: Tuple[CompletedSet, ...]
    skip_progression: bool = False

    def __post_init__(self):
        object.__setattr__(self, "completed_sets", tuple(self.completed_sets))


@dataclass(frozen=True)
class ExerciseProgressionResult:
    exercise_id: UUID
    exercise_name: str
    change: ProgressionChange


@dataclass(frozen=True)
class DayCompletion:
    """Outcome of Workout.complete_day()."""
    day: DayNumber
    week_number: int
    block_number: int
    activity: WorkoutActivity
    progression_changes: Tuple[ExerciseProgressionResult, ...]
    new_current_week: int
    new_current_day: DayNumber
    week_progressed: bool
    program_complete: bool
    is_deload_week: bool

    @property
    def exercises_completed(self) -> int:
        return len(self.progression_changes)


@dataclass(frozen=True)
class ProgressSnapshot:
    """Read-only progress view for reporting."""
    current_week: int
    current_block: int
    current_day: DayNumber
    total_weeks: int
    days_per_week: int
    status: WorkoutStatus
    is_deload_week: bool
    completed_days_this_week: Tuple[int, ...]
    total_days_completed: int
    exercises: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)

    @property
    def percent_complete(self) -> float:
        total_days = self.total_weeks * self.days_per_week
        return round(100.0 * self.total_days_completed / total_days, 1) if total_days else 0.0


class Workout:
    """Aggregate root for a training program."""

    def __init__(
        self,
        user_id: str,
        name: str,
        variant: ProgramVariant,
        exercises: Iterable[Exercise],
        total_weeks: int = PROGRAM_WEEKS,
        id: Optional[UUID] = None,
        created_at: Optional[datetime] = None,
    ):
        if not user_id or not str(user_id).strip():
            raise ValidationError("User id is required", field="user_id")
        if not name or not name.strip():
            raise ValidationError("Workout name is required", field="name")
        if not (1 <= total_weeks <= PROGRAM_WEEKS):
            raise ValidationError(
                f"Total weeks must be between 1 and {PROGRAM_WEEKS}", field="total_weeks"
            )

        self.id = id or uuid4()
        self.user_id = str(user_id)
        self.name = name.strip()
        self.variant = ProgramVariant(variant)
        self.total_weeks = total_weeks
        self.current_week = 1
        self.current_day = DayNumber.DAY_1
        self.status = WorkoutStatus.NOT_STARTED
        self.created_at = created_at or _utcnow()
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None
        # Persistence version for optimistic concurrency; maintained by the repository
        self.version = 0

        self._exercises: List[Exercise] = list(exercises)
        self._activities: List[WorkoutActivity] = []
        self._pending_events: List[DomainEvent] = []

        if not self._exercises:
            raise ValidationError("A workout needs at least one exercise", field="exercises")
        self._validate_exercise_layout(self._exercises)

    @classmethod
    def create(
        cls,
        user_id: str,
        name: str,
        variant: ProgramVariant,
        exercises: Iterable[Exercise],
        total_weeks: int = PROGRAM_WEEKS,
    ) -> "Workout":
        workout = cls(user_id, name, variant, exercises, total_weeks)
        workout._record(WorkoutCreated(
            workout.id, user_id=workout.user_id, name=workout.name, variant=workout.variant.value,
        ))
        logger.info(
            f"Created workout {workout.id} ({workout.variant.value}, "
            f"{len(workout._exercises)} exercises, {total_weeks} weeks)"
        )
        return workout

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def current_block(self) -> int:
        return block_for_week(self.current_week)

    @property
    def days_per_week(self) -> int:
        return self.variant.days_per_week

    @property
    def exercises(self) -> Tuple[Exercise, ...]:
        return tuple(self._exercises)

    @property
    def completed_activities(self) -> Tuple[WorkoutActivity, ...]:
        return tuple(self._activities)

    @property
    def pending_events(self) -> Tuple[DomainEvent, ...]:
        return tuple(self._pending_events)

    def clear_events(self) -> List[DomainEvent]:
        events, self._pending_events = self._pending_events, []
        return events

    def is_deload_week(self) -> bool:
        return is_deload_week(self.current_week)

    def _record(self, event: DomainEvent):
        self._pending_events.append(event)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self):
        if self.status != WorkoutStatus.NOT_STARTED:
            raise self._violation("start_requires_not_started", f"Cannot start a {self.status.value} workout")
        if not self._exercises:
            raise self._violation("start_requires_exercises", "Cannot start a workout without exercises")
        self.status = WorkoutStatus.ACTIVE
        self.started_at = _utcnow()
        self._record(WorkoutStarted(self.id, user_id=self.user_id))
        logger.info(f"Workout {self.id} started")

    def pause(self):
        if self.status != WorkoutStatus.ACTIVE:
            raise self._violation("pause_requires_active", f"Cannot pause a {self.status.value} workout")
        self.status = WorkoutStatus.PAUSED
        logger.info(f"Workout {self.id} paused at week {self.current_week}")

    def resume(self):
        if self.status != WorkoutStatus.PAUSED:
            raise self._violation("resume_requires_paused", f"Cannot resume a {self.status.value} workout")
        self.status = WorkoutStatus.ACTIVE
        logger.info(f"Workout {self.id} resumed at week {self.current_week}")

    def set_as_active(self):
        """Make this the user's active program: starts or resumes it."""
        if self.status == WorkoutStatus.COMPLETED:
            raise self._violation("completed_is_terminal", "Cannot activate a completed workout")
        if self.status == WorkoutStatus.NOT_STARTED:
            self.start()
        elif self.status == WorkoutStatus.PAUSED:
            self.resume()

    def deactivate(self):
        """Pause when active; no-op otherwise."""
        if self.status == WorkoutStatus.ACTIVE:
            self.pause()

    # =========================================================================
    # DAY COMPLETION
    # =========================================================================

    def complete_day(self, day: DayNumber, inputs: Iterable[ExercisePerformanceInput]) -> DayCompletion:
        """
        Record a training day and apply progression for every exercise.

        Raises:
            BusinessRuleViolation: workout not active, day outside the
                variant or without exercises, exercise not assigned to the
                day, unknown or duplicate exercise, more sets than planned
        """
        self._require_active("complete_day")
        day = self._validate_day(day)
        inputs = list(inputs)

        day_exercises = self.exercises_for_day(day)
        if not day_exercises:
            raise self._violation("day_has_no_exercises", f"No exercises assigned to day {int(day)}")
        if not inputs:
            raise self._violation("performances_required", "At least one exercise performance is required")

        week = self.current_week
        block = self.current_block
        if int(day) in self._completed_days(week):
            logger.warning(f"Workout {self.id}: day {int(day)} of week {week} completed again")

        # Validate and build everything before touching any state
        performances: List[ExercisePerformance] = []
        staged: Dict[UUID, Exercise] = {}
        for item in inputs:
            exercise = self._require_exercise(item.exercise_id)
            if exercise.id in staged:
                raise self._violation(
                    "duplicate_performance",
                    f"{exercise.name} was reported more than once",
                    entity=str(exercise.id),
                )
            if exercise.assigned_day != day:
                raise self._violation(
                    "exercise_not_assigned_to_day",
                    f"{exercise.name} is assigned to day {int(exercise.assigned_day)}, not day {int(day)}",
                    entity=str(exercise.id),
                )
            planned = exercise.planned_sets(week, block)
            if len(item.completed_sets) > len(planned):
                raise self._violation(
                    "completed_sets_exceed_planned",
                    f"{exercise.name}: {len(item.completed_sets)} sets completed, {len(planned)} planned",
                    entity=str(exercise.id),
                )
            performances.append(ExercisePerformance.create(
                exercise.id, planned, item.completed_sets, skip_progression=item.skip_progression,
            ))
            staged[exercise.id] = copy.deepcopy(exercise)

        # Apply on copies; a failure leaves the real exercises untouched
        results = []
        for performance in performances:
            working_copy = staged[performance.exercise_id]
            change = working_copy.apply_progression(performance)
            results.append(ExerciseProgressionResult(working_copy.id, working_copy.name, change))

        activity = WorkoutActivity(day, week, block, tuple(performances))

        # Commit into the live strategies; Exercise and strategy identity is kept
        for exercise in self._exercises:
            if exercise.id in staged:
                exercise.progression.adopt_state(staged[exercise.id].progression)
        self._activities.append(activity)
        self._record(DayCompleted(
            self.id, day=int(day), week_number=week, block_number=block,
            exercises_completed=len(performances),
        ))

        week_progressed = False
        program_complete = False
        if self._week_is_complete(week):
            if week >= self.total_weeks:
                self._complete_program()
                program_complete = True
            else:
                self._advance_week()
                week_progressed = True
        else:
            self.current_day = self._next_open_day(week)

        logger.info(
            f"Workout {self.id}: completed day {int(day)} of week {week} "
            f"({len(performances)} exercises)",
            extra=log_fields(workout_id=str(self.id), day=int(day), week=week),
        )
        return DayCompletion(
            day=day,
            week_number=week,
            block_number=block,
            activity=activity,
            progression_changes=tuple(results),
            new_current_week=self.current_week,
            new_current_day=self.current_day,
            week_progressed=week_progressed,
            program_complete=program_complete,
            is_deload_week=is_deload_week(week),
        )

    def progress_to_next_week(self):
        """Manual advance without completing every day of the week."""
        self._require_active("progress_to_next_week")
        if self.current_week >= self.total_weeks:
            raise self._violation(
                "cannot_progress_past_final_week",
                f"Already at the final week ({self.total_weeks})",
            )
        self._advance_week()

    def _advance_week(self):
        previous = self.current_week
        self.current_week += 1
        self.current_day = DayNumber.DAY_1
        self._record(WeekProgressed(
            self.id, previous_week=previous, new_week=self.current_week,
            new_block=self.current_block, is_deload_week=self.is_deload_week(),
        ))
        logger.info(
            f"Workout {self.id} advanced to week {self.current_week} "
            f"(block {self.current_block}{', deload' if self.is_deload_week() else ''})",
            extra=log_fields(workout_id=str(self.id), week=self.current_week, block=self.current_block),
        )

    def _complete_program(self):
        self.status = WorkoutStatus.COMPLETED
        self.completed_at = _utcnow()
        self._record(WorkoutCompleted(self.id, user_id=self.user_id, total_weeks=self.total_weeks))
        logger.info(f"Workout {self.id} completed after {self.total_weeks} weeks")

    def _assigned_days(self) -> List[int]:
        return sorted({
            int(e.assigned_day) for e in self._exercises
            if int(e.assigned_day) <= self.days_per_week
        })

    def completed_days_this_week(self) -> List[int]:
        return self._completed_days(self.current_week)

    def _completed_days(self, week: int) -> List[int]:
        return sorted({int(a.day) for a in self._activities if a.week_number == week})

    def _week_is_complete(self, week: int) -> bool:
        completed = set(self._completed_days(week))
        return set(self._assigned_days()) <= completed

    def _next_open_day(self, week: int) -> DayNumber:
        completed = set(self._completed_days(week))
        for day in self._assigned_days():
            if day not in completed:
                return DayNumber(day)
        return DayNumber.DAY_1

    # =========================================================================
    # EXERCISE MANAGEMENT
    # =========================================================================

    def substitute_exercise(
        self,
        exercise_id: UUID,
        new_name: str,
        new_external_template_id: Optional[str] = None,
    ) -> str:
        """Rename an exercise in place, keeping its progression. Returns the old name."""
        self._require_mutable("substitute_exercise")
        exercise = self._require_exercise(exercise_id)
        original_name = exercise.substitute(new_name, new_external_template_id)
        logger.info(f"Workout {self.id}: substituted {original_name} with {exercise.name}")
        return original_name

    def adjust_training_max(
        self,
        exercise_id: UUID,
        training_max: TrainingMax,
        reason: Optional[str] = None,
    ) -> TrainingMax:
        """Manual Training Max correction. Returns the previous value."""
        self._require_mutable("adjust_training_max")
        exercise = self._require_exercise(exercise_id)
        previous = exercise.update_training_max(training_max)
        self._record(TrainingMaxAdjusted(
            self.id, exercise_id=exercise.id, exercise_name=exercise.name,
            previous_value=str(previous), new_value=str(training_max), reason=reason,
        ))
        logger.info(
            f"Workout {self.id}: {exercise.name} TM {previous} -> {training_max}"
            f"{f' ({reason})' if reason else ''}"
        )
        return previous

    def adjust_weight(self, exercise_id: UUID, weight: Weight) -> Weight:
        """Manual working weight correction. Returns the previous weight."""
        self._require_mutable("adjust_weight")
        exercise = self._require_exercise(exercise_id)
        previous = exercise.update_weight(weight)
        logger.info(f"Workout {self.id}: {exercise.name} weight {previous} -> {weight}")
        return previous

    def adjust_rep_range(self, exercise_id: UUID, rep_range: RepRange):
        self._require_mutable("adjust_rep_range")
        self._require_exercise(exercise_id).update_rep_range(rep_range)

    def add_exercise(self, exercise: Exercise):
        self._require_editable("add_exercise")
        if self.get_exercise(exercise.id) is not None:
            raise self._violation(
                "duplicate_exercise", f"{exercise.name} is already in this workout", entity=str(exercise.id),
            )
        self._validate_exercise_layout(self._exercises + [exercise])
        self._exercises.append(exercise)

    def remove_exercise(self, exercise_id: UUID) -> Exercise:
        self._require_editable("remove_exercise")
        exercise = self._require_exercise(exercise_id)
        if len(self._exercises) == 1:
            raise self._violation(
                "workout_requires_exercise", "Cannot remove the last exercise", entity=str(exercise.id),
            )
        remaining = [e for e in self._exercises if e.id != exercise.id]
        # Close the gap in the day's ordering
        for e in sorted(remaining, key=lambda e: e.order_in_day):
            if e.assigned_day == exercise.assigned_day and e.order_in_day > exercise.order_in_day:
                e.order_in_day -= 1
        self._exercises = remaining
        return exercise

    def reorder_exercise(self, exercise_id: UUID, new_order: int):
        """Move an exercise to a new position within its day."""
        self._require_editable("reorder_exercise")
        exercise = self._require_exercise(exercise_id)
        same_day = sorted(
            (e for e in self._exercises if e.assigned_day == exercise.assigned_day),
            key=lambda e: e.order_in_day,
        )
        if not (1 <= new_order <= len(same_day)):
            raise self._violation(
                "invalid_exercise_order",
                f"Order must be between 1 and {len(same_day)}",
                entity=str(exercise.id),
            )
        same_day.remove(exercise)
        same_day.insert(new_order - 1, exercise)
        for position, e in enumerate(same_day, start=1):
            e.order_in_day = position

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_exercise(self, exercise_id: UUID) -> Optional[Exercise]:
        return next((e for e in self._exercises if e.id == exercise_id), None)

    def exercises_for_day(self, day: DayNumber) -> List[Exercise]:
        return sorted(
            (e for e in self._exercises if e.assigned_day == DayNumber(day)),
            key=lambda e: e.order_in_day,
        )

    def planned_sets_for_day(self, day: DayNumber) -> Dict[UUID, List[PlannedSet]]:
        return {
            e.id: e.planned_sets(self.current_week, self.current_block)
            for e in self.exercises_for_day(day)
        }

    def planned_sets_for_exercise(self, exercise_id: UUID) -> List[PlannedSet]:
        exercise = self._require_exercise(exercise_id)
        return exercise.planned_sets(self.current_week, self.current_block)

    def activities_for_exercise(self, exercise_id: UUID) -> List[Tuple[WorkoutActivity, ExercisePerformance]]:
        history = []
        for activity in self._activities:
            performance = activity.performance_for(exercise_id)
            if performance is not None:
                history.append((activity, performance))
        return history

    def progress_snapshot(self) -> ProgressSnapshot:
        exercises = tuple(
            {
                "id": e.id,
                "name": e.name,
                "day": int(e.assigned_day),
                "order": e.order_in_day,
                "progression_type": e.progression_type.value,
                **e.progression.snapshot(),
            }
            for e in sorted(self._exercises, key=lambda e: (int(e.assigned_day), e.order_in_day))
        )
        return ProgressSnapshot(
            current_week=self.current_week,
            current_block=self.current_block,
            current_day=self.current_day,
            total_weeks=self.total_weeks,
            days_per_week=self.days_per_week,
            status=self.status,
            is_deload_week=self.is_deload_week(),
            completed_days_this_week=tuple(self.completed_days_this_week()),
            total_days_completed=len(self._activities),
            exercises=exercises,
        )

    # =========================================================================
    # GUARDS
    # =========================================================================

    def _violation(self, rule: str, detail: str, entity: Optional[str] = None) -> BusinessRuleViolation:
        return BusinessRuleViolation(rule=rule, detail=detail, entity=entity or f"workout:{self.id}")

    def _require_active(self, operation: str):
        if self.status != WorkoutStatus.ACTIVE:
            raise self._violation(
                f"{operation}_requires_active",
                f"Workout must be active to {operation.replace('_', ' ')} (status: {self.status.value})",
            )

    def _require_mutable(self, operation: str):
        if self.status == WorkoutStatus.COMPLETED:
            raise self._violation(
                f"{operation}_on_completed", f"Cannot {operation.replace('_', ' ')} on a completed workout",
            )

    def _require_editable(self, operation: str):
        if self.status in (WorkoutStatus.PAUSED, WorkoutStatus.COMPLETED):
            raise self._violation(
                f"{operation}_requires_editable",
                f"Cannot {operation.replace('_', ' ')} while the workout is {self.status.value}",
            )

    def _require_exercise(self, exercise_id: UUID) -> Exercise:
        exercise = self.get_exercise(exercise_id)
        if exercise is None:
            raise self._violation(
                "exercise_not_found", f"Exercise {exercise_id} is not part of this workout",
                entity=str(exercise_id),
            )
        return exercise

    def _validate_day(self, day) -> DayNumber:
        try:
            day = DayNumber(day)
        except ValueError:
            raise self._violation("invalid_day", f"Day {day} does not exist")
        if int(day) > self.days_per_week:
            raise self._violation(
                "day_outside_variant",
                f"Day {int(day)} is not part of a {self.days_per_week}-day program",
            )
        return day

    def _validate_exercise_layout(self, exercises: List[Exercise]):
        by_day: Dict[int, List[int]] = {}
        for exercise in exercises:
            day = int(exercise.assigned_day)
            if day > self.days_per_week:
                raise ValidationError(
                    f"{exercise.name} is assigned to day {day}, "
                    f"but the program has {self.days_per_week} days",
                    field="assigned_day",
                )
            by_day.setdefault(day, []).append(exercise.order_in_day)

        for day, orders in by_day.items():
            if sorted(orders) != list(range(1, len(orders) + 1)):
                raise ValidationError(
                    f"Exercise order on day {day} must run 1..{len(orders)} without gaps or duplicates",
                    field="order_in_day",
                )

    def __repr__(self) -> str:
        return (
            f"<Workout {self.name!r} {self.status.value} "
            f"week={self.current_week}/{self.total_weeks} day={int(self.current_day)}>"
        )

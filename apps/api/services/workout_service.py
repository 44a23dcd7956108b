"""
Workout Service

Application commands and queries over Workout aggregates. Every command
loads one workout, checks the acting user owns it, mutates it, saves it and
only then dispatches the workout's domain events.

An unknown workout id is an absent result (None), not an error. Domain rule
violations propagate unchanged so the caller can render them.

Usage:
    service = WorkoutService(InMemoryWorkoutRepository())
    created = service.create_workout("user-1", WorkoutCreate(...))
    service.set_active_workout("user-1", created.id)
    result = service.complete_day("user-1", created.id, CompleteDayRequest(...))
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from core.events import emit
from core.exceptions import ForbiddenError
from core.logging import setup_logging
from schemas import (
    AdjustTrainingMaxRequest,
    AdjustWeightRequest,
    CompleteDayRequest,
    CompleteDayResponse,
    ExerciseCreate,
    ExerciseHistoryEntry,
    ExerciseHistoryResponse,
    ExerciseLibraryResponse,
    ExercisePerformanceResponse,
    ExerciseResponse,
    ExerciseTemplateResponse,
    PlannedSetResponse,
    ProgressWeekResponse,
    SubstituteExerciseRequest,
    SubstituteExerciseResponse,
    TrainingMaxAdjustmentResponse,
    WeightAdjustmentResponse,
    WorkoutActivityResponse,
    WorkoutCreate,
    WorkoutHistoryResponse,
    WorkoutResponse,
    WorkoutSummaryResponse,
)
from services.progression_engine import (
    DayNumber,
    EquipmentType,
    Exercise,
    ExercisePerformanceInput,
    ProgressionType,
    RepRange,
    TrainingMax,
    Weight,
    Workout,
    WorkoutStatus,
    all_templates,
    filter_by_equipment,
)
from services.workout_repository import InMemoryWorkoutRepository, WorkoutRepository

# Initialize logging at application import
setup_logging()

logger = logging.getLogger(__name__)


def build_exercise(definition: ExerciseCreate) -> Exercise:
    """Create an Exercise with the progression the definition asks for."""
    progression_type = definition.progression_type
    day = DayNumber(definition.assigned_day)

    if progression_type == ProgressionType.LINEAR:
        return Exercise.create_with_linear_progression(
            name=definition.name,
            category=definition.category,
            equipment=definition.equipment,
            assigned_day=day,
            order_in_day=definition.order_in_day,
            training_max=TrainingMax.create(definition.training_max, definition.unit),
            use_amrap=definition.use_amrap,
            base_sets_per_exercise=definition.base_sets_per_exercise,
            external_template_id=definition.external_template_id,
        )
    if progression_type == ProgressionType.REPS_PER_SET:
        return Exercise.create_with_reps_per_set_progression(
            name=definition.name,
            equipment=definition.equipment,
            assigned_day=day,
            order_in_day=definition.order_in_day,
            rep_range=RepRange.parse(definition.rep_range),
            starting_weight=Weight.create(definition.starting_weight, definition.unit),
            starting_sets=definition.starting_sets or 2,
            target_sets=definition.target_sets,
            is_unilateral=definition.is_unilateral,
            category=definition.category,
            external_template_id=definition.external_template_id,
        )
    if progression_type == ProgressionType.MINIMAL_SETS:
        return Exercise.create_with_minimal_sets_progression(
            name=definition.name,
            equipment=definition.equipment,
            assigned_day=day,
            order_in_day=definition.order_in_day,
            starting_weight=Weight.create(definition.starting_weight, definition.unit),
            target_total_reps=definition.target_total_reps,
            starting_sets=definition.starting_sets,
            minimum_sets=definition.minimum_sets,
            maximum_sets=definition.maximum_sets,
            category=definition.category,
            external_template_id=definition.external_template_id,
        )
    raise ValueError(f"Unhandled progression type: {progression_type}")


class WorkoutService:
    """
    Commands and queries for a user's A2S programs.
    """

    def __init__(self, repository: Optional[WorkoutRepository] = None):
        self.repository = repository or InMemoryWorkoutRepository()

    # ========== Internals ==========

    def _load(self, user_id: str, workout_id: UUID) -> Optional[Workout]:
        workout = self.repository.get(workout_id)
        if workout is None:
            logger.debug(f"Workout {workout_id} not found")
            return None
        if workout.user_id != user_id:
            logger.warning(f"User {user_id} denied access to workout {workout_id}")
            raise ForbiddenError(f"Workout {workout_id} does not belong to this user")
        return workout

    def _save(self, workout: Workout) -> Workout:
        self.repository.save(workout)
        self._dispatch(workout)
        return workout

    def _dispatch(self, workout: Workout):
        for event in workout.clear_events():
            emit(event.event_type, **event.payload())

    def _deactivate_others(self, user_id: str, keep_id: UUID):
        for other in self.repository.list_for_user(user_id):
            if other.id != keep_id and other.status == WorkoutStatus.ACTIVE:
                other.deactivate()
                self._save(other)
                logger.info(f"Paused workout {other.id} for user {user_id}")

    # ========== Commands ==========

    def create_workout(self, user_id: str, request: WorkoutCreate) -> WorkoutResponse:
        exercises = [build_exercise(definition) for definition in request.exercises]
        workout = Workout.create(
            user_id=user_id,
            name=request.name,
            variant=request.variant,
            exercises=exercises,
            total_weeks=request.total_weeks,
        )
        if request.set_as_active:
            self._deactivate_others(user_id, workout.id)
            workout.set_as_active()
        self._save(workout)
        return WorkoutResponse.from_workout(workout)

    def set_active_workout(self, user_id: str, workout_id: UUID) -> Optional[WorkoutResponse]:
        """Start or resume a workout and pause the user's other active ones."""
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        workout.set_as_active()
        self._deactivate_others(user_id, workout.id)
        self._save(workout)
        return WorkoutResponse.from_workout(workout)

    def complete_day(
        self,
        user_id: str,
        workout_id: UUID,
        request: CompleteDayRequest,
    ) -> Optional[CompleteDayResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None

        inputs = [
            ExercisePerformanceInput(
                exercise_id=item.exercise_id,
                completed_sets=tuple(s.to_completed_set() for s in item.sets),
                skip_progression=item.skip_progression,
            )
            for item in request.performances
        ]
        completion = workout.complete_day(DayNumber(request.day), inputs)
        self._save(workout)
        return CompleteDayResponse.from_completion(workout.id, completion)

    def progress_week(self, user_id: str, workout_id: UUID) -> Optional[ProgressWeekResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        previous_week = workout.current_week
        workout.progress_to_next_week()
        self._save(workout)
        return ProgressWeekResponse(
            workout_id=workout.id,
            previous_week=previous_week,
            new_week=workout.current_week,
            new_block=workout.current_block,
            is_deload_week=workout.is_deload_week(),
        )

    def substitute_exercise(
        self,
        user_id: str,
        workout_id: UUID,
        exercise_id: UUID,
        request: SubstituteExerciseRequest,
    ) -> Optional[SubstituteExerciseResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        original_name = workout.substitute_exercise(
            exercise_id, request.new_name, request.new_external_template_id
        )
        self._save(workout)
        return SubstituteExerciseResponse(
            exercise_id=exercise_id,
            original_name=original_name,
            new_name=workout.get_exercise(exercise_id).name,
        )

    def adjust_training_max(
        self,
        user_id: str,
        workout_id: UUID,
        exercise_id: UUID,
        request: AdjustTrainingMaxRequest,
    ) -> Optional[TrainingMaxAdjustmentResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        new_training_max = TrainingMax.create(request.value, request.unit)
        previous = workout.adjust_training_max(exercise_id, new_training_max, request.reason)
        self._save(workout)
        return TrainingMaxAdjustmentResponse(
            exercise_id=exercise_id,
            exercise_name=workout.get_exercise(exercise_id).name,
            previous_training_max=previous.value,
            new_training_max=new_training_max.value,
            unit=new_training_max.unit,
            reason=request.reason,
        )

    def adjust_weight(
        self,
        user_id: str,
        workout_id: UUID,
        exercise_id: UUID,
        request: AdjustWeightRequest,
    ) -> Optional[WeightAdjustmentResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        new_weight = Weight.create(request.value, request.unit)
        previous = workout.adjust_weight(exercise_id, new_weight)
        self._save(workout)
        return WeightAdjustmentResponse(
            exercise_id=exercise_id,
            exercise_name=workout.get_exercise(exercise_id).name,
            previous_weight=previous.value,
            new_weight=new_weight.value,
            unit=new_weight.unit,
        )

    def delete_workout(self, user_id: str, workout_id: UUID) -> bool:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return False
        deleted = self.repository.delete(workout_id)
        if deleted:
            logger.info(f"Deleted workout {workout_id} for user {user_id}")
        return deleted

    # ========== Queries ==========

    def get_workout(self, user_id: str, workout_id: UUID) -> Optional[WorkoutResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        return WorkoutResponse.from_workout(workout)

    def get_current_workout(self, user_id: str) -> Optional[WorkoutResponse]:
        """The user's active workout, if any."""
        for workout in self.repository.list_for_user(user_id):
            if workout.status == WorkoutStatus.ACTIVE:
                return WorkoutResponse.from_workout(workout)
        return None

    def list_workouts(self, user_id: str) -> List[WorkoutSummaryResponse]:
        return [
            WorkoutSummaryResponse.model_validate(workout)
            for workout in self.repository.list_for_user(user_id)
        ]

    def get_planned_sets(
        self,
        user_id: str,
        workout_id: UUID,
        day: int,
    ) -> Optional[Dict[UUID, List[PlannedSetResponse]]]:
        """Prescription for a day at the workout's current week."""
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        return {
            exercise_id: [PlannedSetResponse.from_planned_set(s) for s in planned]
            for exercise_id, planned in workout.planned_sets_for_day(DayNumber(day)).items()
        }

    def get_workout_history(self, user_id: str, workout_id: UUID) -> Optional[WorkoutHistoryResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        return WorkoutHistoryResponse(
            workout_id=workout.id,
            activities=[WorkoutActivityResponse.from_activity(a) for a in workout.completed_activities],
        )

    def get_exercise_history(
        self,
        user_id: str,
        workout_id: UUID,
        exercise_id: UUID,
    ) -> Optional[ExerciseHistoryResponse]:
        workout = self._load(user_id, workout_id)
        if workout is None:
            return None
        exercise = workout.get_exercise(exercise_id)
        if exercise is None:
            return None
        entries = [
            ExerciseHistoryEntry(
                week_number=activity.week_number,
                block_number=activity.block_number,
                day=int(activity.day),
                completed_at=activity.completed_at,
                performance=ExercisePerformanceResponse.from_performance(performance),
            )
            for activity, performance in workout.activities_for_exercise(exercise_id)
        ]
        return ExerciseHistoryResponse(
            workout_id=workout.id,
            exercise=ExerciseResponse.from_exercise(exercise),
            entries=entries,
        )

    def get_exercise_library(self, equipment: Optional[EquipmentType] = None) -> ExerciseLibraryResponse:
        """Predefined exercise templates, optionally limited to one equipment type."""
        templates = filter_by_equipment(equipment) if equipment is not None else all_templates()
        return ExerciseLibraryResponse(
            templates=[ExerciseTemplateResponse.from_template(t) for t in templates],
        )

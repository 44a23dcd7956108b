from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import Optional, List, Dict, Any

from core.config import settings
from services.progression_engine import (
    CompletedSet,
    DayCompletion,
    EquipmentType,
    Exercise,
    ExerciseCategory,
    ExercisePerformance,
    ExerciseTemplate,
    PlannedSet,
    ProgramVariant,
    ProgressionType,
    RepRange,
    Weight,
    WeightUnit,
    Workout,
    WorkoutActivity,
    WorkoutStatus,
)


# =============================================================================
# REQUESTS
# =============================================================================

class SetInput(BaseModel):
    """One set as performed"""
    set_number: int = Field(gt=0)
    weight: Decimal = Field(ge=0)
    unit: WeightUnit = WeightUnit.KILOGRAMS
    reps: int = Field(ge=0)
    is_amrap: bool = False

    def to_completed_set(self) -> CompletedSet:
        return CompletedSet(self.set_number, Weight.create(self.weight, self.unit), self.reps, self.is_amrap)


class ExercisePerformanceRequest(BaseModel):
    exercise_id: UUID
    sets: List[SetInput] = Field(min_length=1)
    skip_progression: bool = False  # Temporary substitution: log, don't progress


class CompleteDayRequest(BaseModel):
    day: int = Field(ge=1, le=6)
    performances: List[ExercisePerformanceRequest] = Field(min_length=1)


class ExerciseCreate(BaseModel):
    """
    Exercise definition for a new workout.

    Which progression fields are required depends on progression_type:
    - linear: training_max
    - reps_per_set: rep_range, starting_weight
    - minimal_sets: starting_weight, target_total_reps, starting_sets
    """
    name: str = Field(min_length=1)
    category: ExerciseCategory
    equipment: EquipmentType
    assigned_day: int = Field(ge=1, le=6)
    order_in_day: int = Field(ge=1)
    progression_type: ProgressionType
    unit: WeightUnit = WeightUnit.KILOGRAMS
    external_template_id: Optional[str] = None

    # Linear
    training_max: Optional[Decimal] = Field(default=None, gt=0)
    use_amrap: bool = True
    base_sets_per_exercise: Optional[int] = None

    # Reps per set / minimal sets
    starting_weight: Optional[Decimal] = Field(default=None, ge=0)
    starting_sets: Optional[int] = None
    rep_range: Optional[str] = None  # "8-10-12"
    target_sets: int = 4
    is_unilateral: bool = False
    target_total_reps: Optional[int] = None
    minimum_sets: int = 2
    maximum_sets: int = 10

    @model_validator(mode="after")
    def check_progression_fields(self):
        required = {
            ProgressionType.LINEAR: ["training_max"],
            ProgressionType.REPS_PER_SET: ["rep_range", "starting_weight"],
            ProgressionType.MINIMAL_SETS: ["starting_weight", "target_total_reps", "starting_sets"],
        }[self.progression_type]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"{self.progression_type.value} progression requires: {', '.join(missing)}")
        return self


class WorkoutCreate(BaseModel):
    name: str = Field(min_length=1)
    variant: ProgramVariant
    total_weeks: int = Field(default_factory=lambda: settings.DEFAULT_TOTAL_WEEKS, ge=1, le=21)
    exercises: List[ExerciseCreate] = Field(min_length=1)
    set_as_active: bool = False


class SubstituteExerciseRequest(BaseModel):
    new_name: str = Field(min_length=1)
    new_external_template_id: Optional[str] = None


class AdjustTrainingMaxRequest(BaseModel):
    value: Decimal = Field(gt=0)
    unit: WeightUnit = WeightUnit.KILOGRAMS
    reason: Optional[str] = None


class AdjustWeightRequest(BaseModel):
    value: Decimal = Field(ge=0)
    unit: WeightUnit = WeightUnit.KILOGRAMS


# =============================================================================
# RESPONSES
# =============================================================================

class PlannedSetResponse(BaseModel):
    set_number: int
    weight: Decimal
    unit: WeightUnit
    target_reps: int
    is_amrap: bool

    @classmethod
    def from_planned_set(cls, planned: PlannedSet) -> "PlannedSetResponse":
        return cls(
            set_number=planned.set_number,
            weight=planned.weight.value,
            unit=planned.weight.unit,
            target_reps=planned.target_reps,
            is_amrap=planned.is_amrap,
        )


class CompletedSetResponse(BaseModel):
    set_number: int
    weight: Decimal
    unit: WeightUnit
    actual_reps: int
    was_amrap: bool

    @classmethod
    def from_completed_set(cls, completed: CompletedSet) -> "CompletedSetResponse":
        return cls(
            set_number=completed.set_number,
            weight=completed.weight.value,
            unit=completed.weight.unit,
            actual_reps=completed.actual_reps,
            was_amrap=completed.was_amrap,
        )


class ExerciseResponse(BaseModel):
    """Exercise with its current progression state"""
    id: UUID
    name: str
    category: ExerciseCategory
    equipment: EquipmentType
    assigned_day: int
    order_in_day: int
    progression_type: ProgressionType
    training_max: Optional[Decimal] = None  # Linear only
    current_weight: Optional[Decimal] = None  # Reps per set / minimal sets
    current_set_count: Optional[int] = None
    unit: WeightUnit
    progression_summary: Dict[str, str]
    external_template_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "ExerciseResponse":
        training_max = exercise.training_max
        current_weight = exercise.current_weight
        unit = training_max.unit if training_max is not None else current_weight.unit
        return cls(
            id=exercise.id,
            name=exercise.name,
            category=exercise.category,
            equipment=exercise.equipment,
            assigned_day=int(exercise.assigned_day),
            order_in_day=exercise.order_in_day,
            progression_type=exercise.progression_type,
            training_max=training_max.value if training_max is not None else None,
            current_weight=current_weight.value if current_weight is not None else None,
            current_set_count=exercise.current_set_count,
            unit=unit,
            progression_summary=exercise.progression_summary().details,
            external_template_id=exercise.external_template_id,
        )


class WorkoutResponse(BaseModel):
    id: UUID
    user_id: str
    name: str
    variant: ProgramVariant
    days_per_week: int
    total_weeks: int
    current_week: int
    current_block: int
    current_day: int
    status: WorkoutStatus
    is_deload_week: bool
    completed_days_this_week: List[int]
    total_days_completed: int
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    exercises: List[ExerciseResponse]

    @classmethod
    def from_workout(cls, workout: Workout) -> "WorkoutResponse":
        exercises = sorted(workout.exercises, key=lambda e: (int(e.assigned_day), e.order_in_day))
        return cls(
            id=workout.id,
            user_id=workout.user_id,
            name=workout.name,
            variant=workout.variant,
            days_per_week=workout.days_per_week,
            total_weeks=workout.total_weeks,
            current_week=workout.current_week,
            current_block=workout.current_block,
            current_day=int(workout.current_day),
            status=workout.status,
            is_deload_week=workout.is_deload_week(),
            completed_days_this_week=workout.completed_days_this_week(),
            total_days_completed=len(workout.completed_activities),
            created_at=workout.created_at,
            started_at=workout.started_at,
            completed_at=workout.completed_at,
            exercises=[ExerciseResponse.from_exercise(e) for e in exercises],
        )


class WorkoutSummaryResponse(BaseModel):
    """Schema for workout list entries"""
    id: UUID
    name: str
    variant: ProgramVariant
    status: WorkoutStatus
    current_week: int
    total_weeks: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressionChangeResponse(BaseModel):
    exercise_id: UUID
    exercise_name: str
    kind: str
    description: str
    before: Dict[str, Any] = {}
    after: Dict[str, Any] = {}


class CompleteDayResponse(BaseModel):
    workout_id: UUID
    day: int
    week_number: int
    block_number: int
    exercises_completed: int
    progression_changes: List[ProgressionChangeResponse]
    new_current_week: int
    new_current_day: int
    week_progressed: bool
    program_complete: bool
    is_deload_week: bool

    @classmethod
    def from_completion(cls, workout_id: UUID, completion: DayCompletion) -> "CompleteDayResponse":
        return cls(
            workout_id=workout_id,
            day=int(completion.day),
            week_number=completion.week_number,
            block_number=completion.block_number,
            exercises_completed=completion.exercises_completed,
            progression_changes=[
                ProgressionChangeResponse(
                    exercise_id=result.exercise_id,
                    exercise_name=result.exercise_name,
                    kind=result.change.kind.value,
                    description=result.change.description,
                    before=result.change.before,
                    after=result.change.after,
                )
                for result in completion.progression_changes
            ],
            new_current_week=completion.new_current_week,
            new_current_day=int(completion.new_current_day),
            week_progressed=completion.week_progressed,
            program_complete=completion.program_complete,
            is_deload_week=completion.is_deload_week,
        )


class ProgressWeekResponse(BaseModel):
    workout_id: UUID
    previous_week: int
    new_week: int
    new_block: int
    is_deload_week: bool


class SubstituteExerciseResponse(BaseModel):
    exercise_id: UUID
    original_name: str
    new_name: str


class TrainingMaxAdjustmentResponse(BaseModel):
    exercise_id: UUID
    exercise_name: str
    previous_training_max: Decimal
    new_training_max: Decimal
    unit: WeightUnit
    reason: Optional[str] = None


class WeightAdjustmentResponse(BaseModel):
    exercise_id: UUID
    exercise_name: str
    previous_weight: Decimal
    new_weight: Decimal
    unit: WeightUnit


class ExercisePerformanceResponse(BaseModel):
    exercise_id: UUID
    planned_sets: List[PlannedSetResponse]
    completed_sets: List[CompletedSetResponse]
    skip_progression: bool
    amrap_delta: Optional[int] = None
    total_reps: int

    @classmethod
    def from_performance(cls, performance: ExercisePerformance) -> "ExercisePerformanceResponse":
        return cls(
            exercise_id=performance.exercise_id,
            planned_sets=[PlannedSetResponse.from_planned_set(s) for s in performance.planned_sets],
            completed_sets=[CompletedSetResponse.from_completed_set(s) for s in performance.completed_sets],
            skip_progression=performance.skip_progression,
            amrap_delta=performance.amrap_delta() if performance.has_amrap_result() else None,
            total_reps=performance.total_reps_completed(),
        )


class WorkoutActivityResponse(BaseModel):
    """Schema for one completed training day"""
    day: int
    week_number: int
    block_number: int
    is_deload_week: bool
    completed_at: datetime
    performances: List[ExercisePerformanceResponse]

    @classmethod
    def from_activity(cls, activity: WorkoutActivity) -> "WorkoutActivityResponse":
        return cls(
            day=int(activity.day),
            week_number=activity.week_number,
            block_number=activity.block_number,
            is_deload_week=activity.is_deload_week(),
            completed_at=activity.completed_at,
            performances=[ExercisePerformanceResponse.from_performance(p) for p in activity.performances],
        )


class WorkoutHistoryResponse(BaseModel):
    workout_id: UUID
    activities: List[WorkoutActivityResponse]


class ExerciseHistoryEntry(BaseModel):
    week_number: int
    block_number: int
    day: int
    completed_at: datetime
    performance: ExercisePerformanceResponse


class ExerciseHistoryResponse(BaseModel):
    workout_id: UUID
    exercise: ExerciseResponse
    entries: List[ExerciseHistoryEntry]


class RepRangeResponse(BaseModel):
    minimum: int
    target: int
    maximum: int

    model_config = ConfigDict(from_attributes=True)


class ExerciseTemplateResponse(BaseModel):
    """Schema for one exercise library entry"""
    name: str
    equipment: EquipmentType
    default_rep_range: Optional[RepRangeResponse] = None
    default_sets: Optional[int] = None
    description: str = ""

    @classmethod
    def from_template(cls, template: ExerciseTemplate) -> "ExerciseTemplateResponse":
        rep_range: Optional[RepRange] = template.default_rep_range
        return cls(
            name=template.name,
            equipment=template.equipment,
            default_rep_range=RepRangeResponse.model_validate(rep_range) if rep_range is not None else None,
            default_sets=template.default_sets,
            description=template.description,
        )


class ExerciseLibraryResponse(BaseModel):
    templates: List[ExerciseTemplateResponse]

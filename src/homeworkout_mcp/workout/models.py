"""Workout data models."""

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SETS = 3
DEFAULT_REPS = 12


class MuscleGroup(str, Enum):
    """Muscle group tag used to filter the catalog."""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    ABS = "abs"


class Equipment(str, Enum):
    """Whether an exercise needs external weights."""
    WEIGHTED = "weighted"
    UNWEIGHTED = "unweighted"


# Values written by older exports of the catalog.
LEGACY_EQUIPMENT = {
    "dumbbells": Equipment.WEIGHTED,
    "bodyweight": Equipment.UNWEIGHTED,
}


class WorkoutModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Exercise(WorkoutModel):
    """A catalog exercise."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    muscle_group: MuscleGroup
    equipment: Equipment
    description: str | None = None
    video_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("videoUrl", "youtubeUrl", "video_url"),
    )

    @field_validator("muscle_group", mode="before")
    @classmethod
    def _normalize_group(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("equipment", mode="before")
    @classmethod
    def _legacy_equipment(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return LEGACY_EQUIPMENT.get(value, value)
        return value


class PlanItem(Exercise):
    """An exercise placed in a workout plan with its targets."""
    sets: PositiveInt = DEFAULT_SETS
    reps: PositiveInt = DEFAULT_REPS

    @classmethod
    def from_exercise(
        cls, exercise: Exercise, sets: int = DEFAULT_SETS, reps: int = DEFAULT_REPS,
    ) -> "PlanItem":
        data = exercise.model_dump(include=set(Exercise.model_fields))
        return cls(**data, sets=sets, reps=reps)


class ImportedWorkout(WorkoutModel):
    """A workout read from a workout file."""
    name: str
    exercises: list[PlanItem]


class ExerciseProgress(WorkoutModel):
    """Set completion for one plan position during a session."""
    exercise_id: str
    completed_sets: int = 0
    is_completed: bool = False


class RestState(WorkoutModel):
    """The session-wide rest countdown."""
    active: bool = False
    remaining_seconds: int = 0


class SummaryItem(PlanItem):
    """A plan item frozen together with its final progress."""
    completed_sets: int = 0
    is_completed: bool = False


class Summary(WorkoutModel):
    """The record appended to the history when a session finishes."""
    model_config = ConfigDict(frozen=True)

    date: datetime
    exercise_count: int
    completed_exercise_count: int
    total_sets: int
    duration_minutes: int
    workout: list[SummaryItem] = []

    @property
    def completion_rate(self) -> float:
        if self.exercise_count == 0:
            return 0.0
        return self.completed_exercise_count / self.exercise_count * 100

    @property
    def muscle_groups(self) -> list[MuscleGroup]:
        return list(dict.fromkeys(item.muscle_group for item in self.workout))

    @property
    def equipment_counts(self) -> dict[Equipment, int]:
        counts: dict[Equipment, int] = {}
        for item in self.workout:
            counts[item.equipment] = counts.get(item.equipment, 0) + 1
        return counts

from homeworkout_mcp.workout.models import (
    Exercise, PlanItem, ExerciseProgress, RestState, Summary, SummaryItem,
    MuscleGroup, Equipment,
)
from homeworkout_mcp.workout.exceptions import (
    WorkoutError, NoGroupsSelected, ImportParseError, ImportEmptyError,
    SessionAlreadyFinished, IndexOutOfRange, EmptyPlanError, NoActiveSession,
    ExerciseNotFound,
)
from homeworkout_mcp.workout.generator import generate_workout
from homeworkout_mcp.workout.session import WorkoutSession, ExerciseState, launch_plan
from homeworkout_mcp.workout.store import KeyValueStore, MemoryStore, JsonFileStore
from homeworkout_mcp.workout.summary import summarize

__all__ = [
    "Exercise", "PlanItem", "ExerciseProgress", "RestState", "Summary", "SummaryItem",
    "MuscleGroup", "Equipment",
    "WorkoutError", "NoGroupsSelected", "ImportParseError", "ImportEmptyError",
    "SessionAlreadyFinished", "IndexOutOfRange", "EmptyPlanError", "NoActiveSession",
    "ExerciseNotFound",
    "generate_workout", "WorkoutSession", "ExerciseState", "launch_plan",
    "KeyValueStore", "MemoryStore", "JsonFileStore", "summarize",
]

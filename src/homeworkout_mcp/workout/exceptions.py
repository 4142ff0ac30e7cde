"""Workout engine exceptions."""


class WorkoutError(Exception):
    """Base exception for workout engine errors."""
    pass


class NoGroupsSelected(WorkoutError):
    """Raised when a workout is generated without any muscle group."""
    pass


class WorkoutImportError(WorkoutError):
    """Raised when an imported file cannot be turned into records."""
    pass


class ImportParseError(WorkoutImportError):
    """Raised when an imported file is not valid JSON or has the wrong shape."""
    pass


class ImportEmptyError(WorkoutImportError):
    """Raised when an imported file holds no valid records."""
    pass


class SessionAlreadyFinished(WorkoutError):
    """Raised when a finished session is used again."""
    pass


class IndexOutOfRange(WorkoutError):
    """Raised when an operation addresses a position outside the plan."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Position {index} is out of range for a plan of {size} exercises")
        self.index = index
        self.size = size


class EmptyPlanError(WorkoutError):
    """Raised when a session is launched without a plan."""
    pass


class NoActiveSession(WorkoutError):
    """Raised when a session operation is requested and no workout is running."""
    pass


class ExerciseNotFound(WorkoutError):
    """Raised when an exercise id is not in the catalog."""

    def __init__(self, exercise_id: str):
        super().__init__(f"Exercise not found: {exercise_id}")
        self.exercise_id = exercise_id

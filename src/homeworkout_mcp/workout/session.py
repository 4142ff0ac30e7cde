"""Live execution of a workout plan."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Sequence

from homeworkout_mcp.workout.exceptions import (
    EmptyPlanError, IndexOutOfRange, SessionAlreadyFinished,
)
from homeworkout_mcp.workout.models import ExerciseProgress, PlanItem, RestState, Summary
from homeworkout_mcp.workout.store import (
    PLAN_KEY, KeyValueStore, append_history, load_plan, save_plan,
)
from homeworkout_mcp.workout.summary import summarize

logger = logging.getLogger(__name__)

REST_SECONDS = 60


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExerciseState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    RESTING = "resting"
    COMPLETED = "completed"


def launch_plan(store: KeyValueStore, plan: Sequence[PlanItem]) -> None:
    """Persist the plan a session will be started from."""
    if not plan:
        raise EmptyPlanError("Add exercises to the workout before starting it")
    save_plan(store, list(plan), PLAN_KEY)


class WorkoutSession:
    """State machine for one workout in progress.

    Tracks completed sets per plan position, the current exercise and the
    single rest countdown. The countdown only moves when ``tick()`` is
    called; scheduling the ticks is up to the caller.
    """

    def __init__(
        self,
        plan: Sequence[PlanItem],
        store: KeyValueStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not plan:
            raise EmptyPlanError("Cannot start an empty workout")
        self._plan: list[PlanItem] = list(plan)
        self._progress: list[ExerciseProgress] = [
            ExerciseProgress(exercise_id=item.id) for item in self._plan
        ]
        self._store = store
        self._clock = clock
        self._current_index = 0
        self._rest = RestState()
        self._rest_owner: int | None = None
        self._finished = False
        self.started_at = clock()

    @classmethod
    def launch(
        cls, store: KeyValueStore, clock: Callable[[], datetime] = utcnow,
    ) -> "WorkoutSession":
        """Start a session from the plan persisted by ``launch_plan``."""
        plan = load_plan(store, PLAN_KEY)
        if not plan:
            raise EmptyPlanError("No workout has been launched")
        logger.info("Starting workout with %d exercises", len(plan))
        return cls(plan, store, clock)

    # --- State ---

    @property
    def plan(self) -> list[PlanItem]:
        return list(self._plan)

    @property
    def progress(self) -> list[ExerciseProgress]:
        return [p.model_copy() for p in self._progress]

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def rest(self) -> RestState:
        return self._rest.model_copy()

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def completed_count(self) -> int:
        return sum(1 for p in self._progress if p.is_completed)

    def state_of(self, index: int) -> ExerciseState:
        self._check_index(index)
        progress = self._progress[index]
        if progress.is_completed:
            return ExerciseState.COMPLETED
        if self._rest.active and index == self._current_index:
            return ExerciseState.RESTING
        if progress.completed_sets == 0:
            return ExerciseState.NOT_STARTED
        return ExerciseState.IN_PROGRESS

    # --- Commands ---

    def complete_set(self, index: int) -> None:
        """Record one more set done at ``index``.

        Jumps the cursor to ``index`` first, dropping any rest in progress.
        Finishing the last set marks the exercise done and moves the cursor
        to the next position; any other set starts the rest countdown.
        """
        self._check_open()
        self._check_index(index)

        if index != self._current_index:
            self._current_index = index
            self._cancel_rest()

        progress = self._progress[index]
        if progress.is_completed:
            return

        item = self._plan[index]
        progress.completed_sets += 1
        logger.debug("Set %d/%d done for %s", progress.completed_sets, item.sets, item.name)

        if progress.completed_sets == item.sets:
            progress.is_completed = True
            logger.debug("Exercise completed: %s", item.name)
            if index < len(self._plan) - 1:
                self._current_index = index + 1
        else:
            self._rest = RestState(active=True, remaining_seconds=REST_SECONDS)
            self._rest_owner = index

    def uncomplete_set(self, index: int) -> None:
        """Take back one set at ``index``. Cancels the rest if ``index`` owns it."""
        self._check_open()
        self._check_index(index)

        progress = self._progress[index]
        if progress.completed_sets == 0:
            return

        progress.completed_sets -= 1
        progress.is_completed = False
        if self._rest.active and self._rest_owner == index:
            self._cancel_rest()

    def skip_rest(self) -> None:
        self._check_open()
        self._cancel_rest()

    def tick(self) -> None:
        """Advance the rest countdown by one second."""
        self._check_open()
        if not self._rest.active:
            return
        self._rest.remaining_seconds -= 1
        if self._rest.remaining_seconds <= 0:
            logger.debug("Rest complete")
            self._cancel_rest()

    def move_exercise(self, from_index: int, to_index: int) -> None:
        """Move a plan item together with its progress.

        The cursor goes back to the first position. A running rest keeps
        counting and stays with the exercise it belongs to.
        """
        self._check_open()
        self._check_index(from_index)
        self._check_index(to_index)

        positions = list(range(len(self._plan)))
        for seq in (self._plan, self._progress, positions):
            seq.insert(to_index, seq.pop(from_index))

        if self._rest_owner is not None:
            self._rest_owner = positions.index(self._rest_owner)
        self._current_index = 0

    def finish(self) -> Summary:
        """End the session, record its summary in the history and return it."""
        self._check_open()
        summary = summarize(self._plan, self._progress, self.started_at, self._clock())

        append_history(self._store, summary)
        self._store.delete(PLAN_KEY)
        self._finished = True
        self._cancel_rest()

        logger.info(
            "Workout finished: %d/%d exercises in %d min",
            summary.completed_exercise_count, summary.exercise_count, summary.duration_minutes,
        )
        return summary

    # --- Helpers ---

    def _cancel_rest(self) -> None:
        self._rest = RestState()
        self._rest_owner = None

    def _check_open(self) -> None:
        if self._finished:
            raise SessionAlreadyFinished("This workout has already been finished")

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._plan):
            raise IndexOutOfRange(index, len(self._plan))

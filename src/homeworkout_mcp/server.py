"""Home Workout MCP Server."""

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from homeworkout_mcp.workout import catalog as catalog_store
from homeworkout_mcp.workout.exceptions import NoActiveSession
from homeworkout_mcp.workout.generator import (
    add_exercises, generate_workout as generate_plan, remove_plan_item, update_plan_item,
)
from homeworkout_mcp.workout.models import PlanItem, Summary
from homeworkout_mcp.workout.random_source import default_random
from homeworkout_mcp.workout.session import WorkoutSession, launch_plan
from homeworkout_mcp.workout.store import (
    DRAFT_KEY, JsonFileStore, KeyValueStore, load_history, load_plan, save_plan,
)
from homeworkout_mcp.workout.transfer import dumps_workout, parse_workout

logger = logging.getLogger(__name__)

TICK_SECONDS = 1


def _build_store() -> KeyValueStore:
    data_dir = os.environ.get("HOMEWORKOUT_DATA_DIR", "~/.homeworkout")
    return JsonFileStore(data_dir)


async def _rest_ticker() -> None:
    """Drive the rest countdown of the live session once per second."""
    while True:
        await asyncio.sleep(TICK_SECONDS)
        if session is not None and not session.is_finished and session.rest.active:
            session.tick()


@asynccontextmanager
async def _lifespan(server: FastMCP) -> AsyncIterator[None]:
    ticker = asyncio.create_task(_rest_ticker())
    try:
        yield
    finally:
        ticker.cancel()


mcp = FastMCP("homeworkout", lifespan=_lifespan)
store: KeyValueStore = _build_store()
rng = default_random()
session: WorkoutSession | None = None


def _require_session() -> WorkoutSession:
    if session is None:
        raise NoActiveSession("No workout in progress. Call start_workout first.")
    return session


def _format_item(item: PlanItem) -> str:
    return f"**{item.name}** ({item.muscle_group.value}, {item.equipment.value})"


def _format_plan(plan: list[PlanItem]) -> str:
    if not plan:
        return "The workout is empty."
    lines = [f"{len(plan)} exercises ready to go:\n"]
    for i, item in enumerate(plan):
        lines.append(f"{i}. {_format_item(item)} {item.sets} x {item.reps} [id: {item.id}]")
    return "\n".join(lines)


def _format_session(s: WorkoutSession) -> str:
    plan = s.plan
    lines = [f"# Workout in progress — {s.completed_count} / {len(plan)} exercises"]
    rest = s.rest
    if rest.active:
        lines.append(f"Resting: {rest.remaining_seconds}s left")
    lines.append("")

    for i, (item, p) in enumerate(zip(plan, s.progress)):
        marker = " ← current" if i == s.current_index else ""
        state = s.state_of(i).value.replace("_", " ")
        lines.append(
            f"{i}. {_format_item(item)}: {p.completed_sets} / {item.sets} sets"
            f" x {item.reps} reps [{state}]{marker}"
        )
    return "\n".join(lines)


def _format_summary(summary: Summary) -> str:
    lines = [
        f"## Workout {summary.date.strftime('%Y-%m-%d %H:%M')} ({summary.duration_minutes}min)",
        f"Completed {summary.completed_exercise_count} / {summary.exercise_count} exercises"
        f" ({summary.completion_rate:.0f}%) | Planned sets: {summary.total_sets}",
    ]
    if summary.muscle_groups:
        lines.append("Muscle groups: " + ", ".join(g.value for g in summary.muscle_groups))
    if summary.equipment_counts:
        lines.append("Equipment: " + ", ".join(
            f"{e.value} x {n}" for e, n in summary.equipment_counts.items()
        ))
    for item in summary.workout:
        lines.append(f"  {item.name}: {item.completed_sets} / {item.sets} sets")
    return "\n".join(lines)


# --- Catalog ---

@mcp.tool()
async def get_exercises(muscle_group: str | None = None) -> str:
    """List the exercise catalog.

    Args:
        muscle_group: Only list exercises for this muscle group. Omit for all.
    """
    exercises = catalog_store.load_catalog(store)
    if muscle_group:
        exercises = [ex for ex in exercises if ex.muscle_group.value == muscle_group.strip().lower()]

    if not exercises:
        return "No exercises found."

    lines = [f"Found {len(exercises)} exercises:\n"]
    for ex in sorted(exercises, key=lambda e: (e.muscle_group.value, e.name)):
        lines.append(f"- {_format_item(ex)} (id: {ex.id})")
    return "\n".join(lines)


@mcp.tool()
async def add_exercise(
    name: str,
    muscle_group: str,
    equipment: str,
    description: str | None = None,
    video_url: str | None = None,
) -> str:
    """Add an exercise to the catalog.

    Args:
        name: Exercise name.
        muscle_group: One of chest, back, shoulders, biceps, triceps, legs, abs.
        equipment: "weighted" or "unweighted".
        description: Optional instructions.
        video_url: Optional link to a demonstration video.
    """
    ex = catalog_store.add_catalog_exercise(store, name, muscle_group, equipment, description, video_url)
    return f"Added {_format_item(ex)} (id: {ex.id})"


@mcp.tool()
async def remove_exercise(exercise_id: str) -> str:
    """Remove an exercise from the catalog."""
    ex = catalog_store.remove_catalog_exercise(store, exercise_id)
    return f"Removed {_format_item(ex)}"


@mcp.tool()
async def import_exercises(content: str) -> str:
    """Replace the catalog with the exercises in a JSON catalog file.

    Args:
        content: The file contents, a JSON list of exercises.
    """
    exercises = catalog_store.parse_catalog(content)
    catalog_store.save_catalog(store, exercises)
    return f"Successfully imported {len(exercises)} exercises"


@mcp.tool()
async def export_exercises() -> str:
    """Export the catalog as a JSON catalog file."""
    return catalog_store.dumps_catalog(catalog_store.load_catalog(store))


# --- Plan building ---

@mcp.tool()
async def get_workout() -> str:
    """Show the workout being built."""
    return _format_plan(load_plan(store, DRAFT_KEY))


@mcp.tool()
async def generate_workout(muscle_groups: list[str], per_group: int = 3) -> str:
    """Add random exercises for the given muscle groups to the workout being built.

    The whole workout is reshuffled afterwards.

    Args:
        muscle_groups: Muscle groups to train, e.g. ["chest", "legs"].
        per_group: Exercises to pick per muscle group (default 3).
    """
    plan = generate_plan(
        catalog_store.load_catalog(store),
        muscle_groups,
        per_group,
        load_plan(store, DRAFT_KEY),
        rng,
    )
    save_plan(store, plan, DRAFT_KEY)
    return _format_plan(plan)


@mcp.tool()
async def add_to_workout(exercise_ids: list[str]) -> str:
    """Add specific catalog exercises to the workout being built.

    Args:
        exercise_ids: Catalog ids (from get_exercises). Exercises already in the workout are skipped.
    """
    chosen = catalog_store.find_exercises(catalog_store.load_catalog(store), exercise_ids)
    plan = add_exercises(load_plan(store, DRAFT_KEY), chosen)
    save_plan(store, plan, DRAFT_KEY)
    return _format_plan(plan)


@mcp.tool()
async def update_workout_exercise(index: int, sets: int | None = None, reps: int | None = None) -> str:
    """Change the sets or reps of an exercise in the workout being built.

    Args:
        index: Position in the workout (from get_workout).
        sets: New number of sets.
        reps: New number of reps.
    """
    plan = update_plan_item(load_plan(store, DRAFT_KEY), index, sets, reps)
    save_plan(store, plan, DRAFT_KEY)
    return _format_plan(plan)


@mcp.tool()
async def remove_from_workout(index: int) -> str:
    """Remove an exercise from the workout being built."""
    plan = remove_plan_item(load_plan(store, DRAFT_KEY), index)
    save_plan(store, plan, DRAFT_KEY)
    return _format_plan(plan)


@mcp.tool()
async def import_workout(content: str) -> str:
    """Load a workout file as the workout being built.

    Args:
        content: The file contents, either {"name", "exercises": [...]} or a bare list of exercises.
    """
    imported = parse_workout(content)
    save_plan(store, imported.exercises, DRAFT_KEY)
    return (
        f'Successfully imported "{imported.name}" with {len(imported.exercises)} exercises\n\n'
        + _format_plan(imported.exercises)
    )


@mcp.tool()
async def export_workout(name: str | None = None) -> str:
    """Export the running workout, or the one being built, as a workout file.

    Args:
        name: Name stored in the file. Defaults to "Workout <date>".
    """
    if session is not None and not session.is_finished:
        plan = session.plan
    else:
        plan = load_plan(store, DRAFT_KEY)
    return dumps_workout(plan, name)


# --- Session ---

@mcp.tool()
async def start_workout() -> str:
    """Start the workout that has been built."""
    global session

    launch_plan(store, load_plan(store, DRAFT_KEY))
    if session is not None and not session.is_finished:
        logger.warning("Abandoning the workout in progress")
    session = WorkoutSession.launch(store)
    return _format_session(session)


@mcp.tool()
async def get_session() -> str:
    """Show progress of the workout in progress."""
    return _format_session(_require_session())


@mcp.tool()
async def complete_set(index: int) -> str:
    """Mark one more set of an exercise as done. Starts a 60 second rest unless the exercise is finished.

    Args:
        index: Position of the exercise in the workout.
    """
    s = _require_session()
    s.complete_set(index)
    return _format_session(s)


@mcp.tool()
async def uncomplete_set(index: int) -> str:
    """Take back the last completed set of an exercise.

    Args:
        index: Position of the exercise in the workout.
    """
    s = _require_session()
    s.uncomplete_set(index)
    return _format_session(s)


@mcp.tool()
async def skip_rest() -> str:
    """Stop the rest countdown."""
    s = _require_session()
    s.skip_rest()
    return _format_session(s)


@mcp.tool()
async def move_exercise(from_index: int, to_index: int) -> str:
    """Move an exercise to another position in the running workout.

    Args:
        from_index: Current position of the exercise.
        to_index: Position to move it to.
    """
    s = _require_session()
    s.move_exercise(from_index, to_index)
    return _format_session(s)


@mcp.tool()
async def finish_workout() -> str:
    """Finish the workout in progress and save its summary to the history.

    The finished workout is kept until the next start_workout, so calling
    this again reports that the workout has already been finished.
    """
    summary = _require_session().finish()
    return _format_summary(summary)


@mcp.tool()
async def get_history(limit: int = 10) -> str:
    """Show finished workouts, most recent first.

    Args:
        limit: Maximum number of workouts to return (default 10).
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    history = load_history(store)
    if not history:
        return "No workouts yet."

    lines = [f"{len(history)} workouts completed\n"]
    for summary in reversed(history[-limit:]):
        lines.append(_format_summary(summary))
        lines.append("")
    return "\n".join(lines)


def main():
    logging.basicConfig(
        level=os.environ.get("HOMEWORKOUT_LOG_LEVEL", "WARNING").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()

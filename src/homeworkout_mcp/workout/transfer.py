"""Workout file import and export."""

import json
import logging
import uuid
from datetime import date
from typing import Any, Sequence

from pydantic import ValidationError

from homeworkout_mcp.workout.exceptions import ImportEmptyError, ImportParseError
from homeworkout_mcp.workout.models import ImportedWorkout, PlanItem

logger = logging.getLogger(__name__)

UNTITLED_WORKOUT = "Untitled Workout"
REQUIRED_FIELDS = ("name", "muscleGroup", "equipment")


def new_id() -> str:
    return uuid.uuid4().hex


def load_json(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportParseError(f"Invalid JSON file format: {e}") from e


def has_required_fields(entry: Any, fields: Sequence[str] = REQUIRED_FIELDS) -> bool:
    return isinstance(entry, dict) and all(entry.get(f) for f in fields)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_entry(entry: Any) -> PlanItem | None:
    if not has_required_fields(entry):
        return None
    if not (_is_number(entry.get("sets")) and _is_number(entry.get("reps"))):
        return None
    data = dict(entry)
    if not data.get("id"):
        data["id"] = new_id()
    try:
        return PlanItem.model_validate(data)
    except ValidationError as e:
        logger.debug("Skipping invalid exercise %r: %s", entry.get("name"), e)
        return None


def parse_workout(text: str | bytes) -> ImportedWorkout:
    """Read a workout file.

    Accepts ``{"name": ..., "exercises": [...]}`` and the older bare list of
    exercises. Entries that do not validate are dropped.

    Raises:
        ImportParseError: The text is not JSON or has neither shape.
        ImportEmptyError: No entry survived validation.
    """
    data = load_json(text)

    if isinstance(data, dict) and isinstance(data.get("exercises"), list):
        name = data.get("name")
        if not isinstance(name, str) or not name:
            name = UNTITLED_WORKOUT
        entries = data["exercises"]
    elif isinstance(data, list):
        name = UNTITLED_WORKOUT
        entries = data
    else:
        raise ImportParseError("Invalid file format - expected workout with exercises array")

    exercises = []
    for entry in entries:
        item = _parse_entry(entry)
        if item is not None:
            exercises.append(item)

    if not exercises:
        raise ImportEmptyError("No valid workout exercises found in file")

    logger.info("Imported %d of %d exercises from %r", len(exercises), len(entries), name)
    return ImportedWorkout(name=name, exercises=exercises)


def export_workout(
    plan: Sequence[PlanItem], name: str | None = None, today: date | None = None,
) -> dict:
    """Build the exportable form of a plan. Ids are not exported."""
    if not name:
        name = f"Workout {(today or date.today()).isoformat()}"
    return {
        "name": name,
        "exercises": [
            {
                "name": item.name,
                "muscleGroup": item.muscle_group.value,
                "equipment": item.equipment.value,
                "sets": item.sets,
                "reps": item.reps,
                "description": item.description,
            }
            for item in plan
        ],
    }


def dumps_workout(plan: Sequence[PlanItem], name: str | None = None, today: date | None = None) -> str:
    return json.dumps(export_workout(plan, name, today), indent=2)

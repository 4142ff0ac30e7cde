"""Key-value persistence for the catalog, plans and history."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter

from homeworkout_mcp.workout.models import PlanItem, Summary

logger = logging.getLogger(__name__)

CATALOG_KEY = "workout-exercises"
DRAFT_KEY = "workout-draft"
PLAN_KEY = "current-workout"
HISTORY_KEY = "workout-history"

_plan_adapter = TypeAdapter(list[PlanItem])
_history_adapter = TypeAdapter(list[Summary])


class KeyValueStore(Protocol):
    """Storage port holding JSON-compatible values under string keys."""

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Store kept in process memory."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        # Hand out copies so callers cannot mutate stored values.
        return json.loads(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store writing one ``<key>.json`` file per key into a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def set(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(value, indent=2), encoding="utf-8")
        logger.debug("Wrote %s to %s", key, self.directory)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def load_plan(store: KeyValueStore, key: str = PLAN_KEY) -> list[PlanItem]:
    data = store.get(key)
    if not data:
        return []
    return _plan_adapter.validate_python(data)


def save_plan(store: KeyValueStore, plan: list[PlanItem], key: str = PLAN_KEY) -> None:
    store.set(key, _plan_adapter.dump_python(plan, mode="json", by_alias=True, exclude_none=True))


def load_history(store: KeyValueStore) -> list[Summary]:
    return _history_adapter.validate_python(store.get(HISTORY_KEY) or [])


def append_history(store: KeyValueStore, summary: Summary) -> None:
    """Append a summary to the history. Existing entries are never rewritten."""
    history = store.get(HISTORY_KEY) or []
    history.append(summary.to_json_dict())
    store.set(HISTORY_KEY, history)

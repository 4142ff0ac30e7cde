from datetime import datetime, timedelta, timezone

import pytest

from homeworkout_mcp.workout.models import Equipment, Exercise, MuscleGroup, PlanItem
from homeworkout_mcp.workout.store import MemoryStore


class KeepOrder:
    """Shuffle stub that leaves lists as they are."""

    def shuffle(self, x):
        pass


class Reverse:
    """Shuffle stub that reverses lists."""

    def shuffle(self, x):
        x.reverse()


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 5, 18, 0, tzinfo=timezone.utc))


@pytest.fixture
def keep_order():
    return KeepOrder()


@pytest.fixture
def reverse():
    return Reverse()


@pytest.fixture
def make_exercise():
    def _make(id, group=MuscleGroup.CHEST, equipment=Equipment.WEIGHTED, name=None):
        return Exercise(
            id=id, name=name or f"Exercise {id}", muscle_group=group, equipment=equipment,
        )
    return _make


@pytest.fixture
def make_item():
    def _make(id, sets=3, reps=12, group=MuscleGroup.CHEST, equipment=Equipment.WEIGHTED):
        return PlanItem(
            id=id, name=f"Exercise {id}", muscle_group=group, equipment=equipment,
            sets=sets, reps=reps,
        )
    return _make


@pytest.fixture
def catalog(make_exercise):
    return [
        make_exercise("c1", MuscleGroup.CHEST),
        make_exercise("c2", MuscleGroup.CHEST, Equipment.UNWEIGHTED),
        make_exercise("c3", MuscleGroup.CHEST),
        make_exercise("l1", MuscleGroup.LEGS, Equipment.UNWEIGHTED),
        make_exercise("l2", MuscleGroup.LEGS),
        make_exercise("a1", MuscleGroup.ABS, Equipment.UNWEIGHTED),
    ]

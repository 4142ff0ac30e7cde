"""Workout plan generation and manual plan building."""

import logging
from typing import Iterable, Sequence

from homeworkout_mcp.workout.exceptions import IndexOutOfRange, NoGroupsSelected
from homeworkout_mcp.workout.models import (
    DEFAULT_REPS, DEFAULT_SETS, Exercise, MuscleGroup, PlanItem,
)
from homeworkout_mcp.workout.random_source import RandomSource

logger = logging.getLogger(__name__)


def generate_workout(
    catalog: Sequence[Exercise],
    selected_groups: Iterable[MuscleGroup | str],
    per_group: int,
    existing_plan: Sequence[PlanItem],
    rng: RandomSource,
) -> list[PlanItem]:
    """Add random exercises for each selected muscle group to a plan.

    Up to ``per_group`` exercises are drawn from every group, skipping
    anything already in ``existing_plan``. The new picks and the existing
    plan are then shuffled together, so earlier items move as well.

    Args:
        catalog: Exercises to draw from.
        selected_groups: Muscle groups to draw for. Must not be empty.
        per_group: Maximum number of exercises drawn per group (at least 1).
        existing_plan: Plan the picks are added to.
        rng: Shuffle source.
    """
    groups = list(dict.fromkeys(_muscle_group(g) for g in selected_groups))
    if not groups:
        raise NoGroupsSelected("Select at least one muscle group")
    if per_group < 1:
        raise ValueError(f"per_group must be at least 1, got {per_group}")

    taken = {item.id for item in existing_plan}
    picks: list[PlanItem] = []

    for group in groups:
        eligible = {
            ex.id: ex for ex in catalog
            if ex.muscle_group == group and ex.id not in taken
        }
        candidates = list(eligible.values())
        rng.shuffle(candidates)
        chosen = candidates[:min(per_group, len(candidates))]
        taken.update(ex.id for ex in chosen)

        if not chosen:
            logger.debug("No eligible exercises for %s", group.value)
        picks.extend(PlanItem.from_exercise(ex) for ex in chosen)

    combined = list(existing_plan) + picks
    rng.shuffle(combined)

    logger.info(
        "Generated %d new exercises for %s, plan now has %d",
        len(picks), ", ".join(g.value for g in groups), len(combined),
    )
    return combined


def add_exercises(plan: Sequence[PlanItem], exercises: Iterable[Exercise]) -> list[PlanItem]:
    """Append exercises that are not in the plan yet, with default sets and reps."""
    result = list(plan)
    present = {item.id for item in result}
    for ex in exercises:
        if ex.id in present:
            continue
        result.append(PlanItem.from_exercise(ex, DEFAULT_SETS, DEFAULT_REPS))
        present.add(ex.id)
    return result


def update_plan_item(
    plan: Sequence[PlanItem],
    index: int,
    sets: int | None = None,
    reps: int | None = None,
) -> list[PlanItem]:
    """Change the targets of one plan item. Values below 1 are raised to 1."""
    _check_index(plan, index)
    changes = {}
    if sets is not None:
        changes["sets"] = max(1, sets)
    if reps is not None:
        changes["reps"] = max(1, reps)

    result = list(plan)
    result[index] = result[index].model_copy(update=changes)
    return result


def remove_plan_item(plan: Sequence[PlanItem], index: int) -> list[PlanItem]:
    _check_index(plan, index)
    return [item for i, item in enumerate(plan) if i != index]


def manual_candidates(
    catalog: Sequence[Exercise],
    selected_groups: Iterable[MuscleGroup | str],
    plan: Sequence[PlanItem],
) -> list[Exercise]:
    """Catalog exercises in the selected groups that the plan does not hold yet."""
    groups = {_muscle_group(g) for g in selected_groups}
    present = {item.id for item in plan}
    return [ex for ex in catalog if ex.muscle_group in groups and ex.id not in present]


def _muscle_group(value: MuscleGroup | str) -> MuscleGroup:
    if isinstance(value, MuscleGroup):
        return value
    return MuscleGroup(str(value).strip().lower())


def _check_index(plan: Sequence[PlanItem], index: int) -> None:
    if not 0 <= index < len(plan):
        raise IndexOutOfRange(index, len(plan))

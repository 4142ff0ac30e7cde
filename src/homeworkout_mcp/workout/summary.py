"""Reduce a finished session to its history record."""

import math
from datetime import datetime
from typing import Sequence

from homeworkout_mcp.workout.models import ExerciseProgress, PlanItem, Summary, SummaryItem


def summarize(
    plan: Sequence[PlanItem],
    progress: Sequence[ExerciseProgress],
    started_at: datetime,
    finished_at: datetime,
) -> Summary:
    """Build the summary of a session.

    ``total_sets`` counts the planned sets, whether or not they were done.
    The duration is rounded to the nearest minute, halves rounding up.
    """
    items = [
        SummaryItem(
            **item.model_dump(),
            completed_sets=p.completed_sets,
            is_completed=p.is_completed,
        )
        for item, p in zip(plan, progress)
    ]
    elapsed = (finished_at - started_at).total_seconds()

    return Summary(
        date=finished_at,
        exercise_count=len(plan),
        completed_exercise_count=sum(1 for p in progress if p.is_completed),
        total_sets=sum(item.sets for item in plan),
        duration_minutes=max(0, math.floor(elapsed / 60 + 0.5)),
        workout=items,
    )

"""Recency-weighted muscle group aggregation over workout logs.

Each set contributes ``1 / (1 + days_ago)`` to every muscle group its
exercise trains, so a group trained more recently and more often always
scores at least as high as one trained less recently with equal volume.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

import pandas as pd

from load_engine.catalog import ExerciseCatalog
from load_engine.models.enums import SECONDARY_MUSCLE_WEIGHT
from load_engine.models.workout_log import WorkoutLog

_COLUMNS = ["muscle_group", "contribution"]


def recency_weight(days_ago: int) -> float:
    """Weight of a session *days_ago* days old; future sessions count as today."""
    return 1.0 / (1.0 + max(0, days_ago))


def _group_totals(rows: list[tuple[str, float]], groups: Sequence[str]) -> dict[str, float]:
    """Sum contributions per group, reindexed to *groups* with 0 for untouched ones."""
    if not rows:
        return {group: 0.0 for group in groups}
    frame = pd.DataFrame(rows, columns=_COLUMNS)
    totals = (
        frame.groupby("muscle_group")["contribution"]
        .sum()
        .reindex(list(groups), fill_value=0.0)
    )
    return {str(group): float(value) for group, value in totals.items()}


def muscle_group_fatigue(
    logs: Iterable[WorkoutLog],
    catalog: ExerciseCatalog,
    as_of: date,
    groups: Sequence[str],
    secondary_weight: float = SECONDARY_MUSCLE_WEIGHT,
) -> dict[str, float]:
    """Recency-weighted fatigue score per muscle group.

    Args:
        logs: Workout logs to aggregate.
        catalog: Exercise → muscle group lookup; unknown exercises contribute 0.
        as_of: Reference day for computing each session's age.
        groups: Full taxonomy; every entry appears in the output.
        secondary_weight: Share of a set credited to secondary muscle groups.

    Returns:
        Mapping of every group in *groups* to a non-negative score.
    """
    rows: list[tuple[str, float]] = []
    for log in logs:
        weight = recency_weight((as_of - log.date).days)
        for completed in log.completed_sets:
            muscles = catalog.lookup(completed.exercise_id)
            if muscles is None:
                continue
            rows.extend((group, weight) for group in muscles.primary)
            rows.extend((group, weight * secondary_weight) for group in muscles.secondary)
    return _group_totals(rows, groups)


def weekly_sets_by_group(
    logs: Iterable[WorkoutLog],
    catalog: ExerciseCatalog,
    groups: Sequence[str],
    window_weeks: int = 1,
) -> dict[str, float]:
    """Average weekly set count per muscle group over the given logs.

    A set counts once toward each group its exercise targets, primary or
    secondary.

    Raises:
        ValueError: If window_weeks < 1.
    """
    if window_weeks < 1:
        raise ValueError(f"window_weeks must be >= 1, got {window_weeks}")
    rows: list[tuple[str, float]] = []
    for log in logs:
        for completed in log.completed_sets:
            muscles = catalog.lookup(completed.exercise_id)
            if muscles is None:
                continue
            rows.extend((group, 1.0) for group in muscles.all_groups)
    totals = _group_totals(rows, groups)
    return {group: count / window_weeks for group, count in totals.items()}

"""Session-over-session performance decline from workout logs.

A session's performance on an exercise is the mean ``weight * reps`` over
its sets. Decline compares each exercise's two latest sessions and is
averaged across exercises; improvements count as zero decline.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from load_engine.models.workout_log import WorkoutLog

_COLUMNS = ["exercise_id", "log_id", "timestamp", "set_load"]


def performance_decline(logs: Iterable[WorkoutLog]) -> float | None:
    """Average percent drop in set load between the latest two sessions per exercise.

    Args:
        logs: Workout logs in any order.

    Returns:
        A decline in percent (>= 0), or None when no loaded exercise
        appears in at least two sessions.
    """
    rows = [
        (s.exercise_id, log.id, s.timestamp, s.weight * s.reps)
        for log in logs
        for s in log.completed_sets
    ]
    if not rows:
        return None
    frame = pd.DataFrame(rows, columns=_COLUMNS)
    sessions = (
        frame.groupby(["exercise_id", "log_id"])
        .agg(performed_at=("timestamp", "max"), set_load=("set_load", "mean"))
        .reset_index()
        .sort_values(["exercise_id", "performed_at"])
    )

    declines: list[float] = []
    for _, history in sessions.groupby("exercise_id"):
        if len(history) < 2:
            continue
        previous, recent = history["set_load"].iloc[-2], history["set_load"].iloc[-1]
        if previous > 0:
            declines.append(max(0.0, (previous - recent) / previous * 100.0))
    if not declines:
        return None
    return float(sum(declines) / len(declines))

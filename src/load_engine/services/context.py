"""Builds the per-request TrainingLoadContext."""

from __future__ import annotations

from datetime import date

from load_engine.models.context import TrainingLoadContext
from load_engine.services.fatigue_tracker import FatigueTracker
from load_engine.services.volume_tracker import VolumeLandmarkTracker


def build_context(
    user_id: str,
    fatigue_tracker: FatigueTracker,
    volume_tracker: VolumeLandmarkTracker,
    as_of: date,
) -> TrainingLoadContext:
    """Read fatigue and tracked volume statuses once, from committed state."""
    return TrainingLoadContext(
        user_id=user_id,
        as_of=as_of,
        fatigue=fatigue_tracker.get_fatigue(user_id),
        volume_statuses=volume_tracker.tracked_statuses(user_id),
    )

"""Shared per-request view of a user's training load."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from load_engine.models.enums import VolumeStatus
from load_engine.models.fatigue import UserFatigueState


@dataclass(frozen=True)
class TrainingLoadContext:
    """Fatigue and volume status captured once and handed to every consumer.

    Load recommendations and deload analysis read the same snapshot so they
    can never disagree about whether a muscle group is overreached.
    """

    user_id: str
    as_of: date
    fatigue: UserFatigueState
    volume_statuses: Mapping[str, VolumeStatus] = field(default_factory=dict)

    @property
    def tracked_groups(self) -> int:
        return len(self.volume_statuses)

    def groups_at_or_above(self, status: VolumeStatus) -> list[str]:
        return [g for g, s in self.volume_statuses.items() if s >= status]

    @property
    def majority_near_mrv(self) -> bool:
        """True when more than half of tracked groups are approaching or exceeding MRV."""
        if not self.volume_statuses:
            return False
        near = len(self.groups_at_or_above(VolumeStatus.APPROACHING_MRV))
        return near * 2 > len(self.volume_statuses)

    def is_overreached(self, muscle_group: str | None) -> bool:
        if muscle_group is None:
            return False
        return self.volume_statuses.get(muscle_group) == VolumeStatus.EXCEEDING_MRV

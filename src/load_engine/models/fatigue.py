"""Per-user fatigue state."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from load_engine.exceptions import ValidationError
from load_engine.models.enums import (
    MAX_FATIGUE,
    READY_TO_TRAIN_BELOW,
    RECOVERY_EXCELLENT_BELOW,
    RECOVERY_GOOD_BELOW,
    RECOVERY_MODERATE_BELOW,
    RecoveryStatus,
)


@dataclass(frozen=True)
class UserFatigueState:
    """Snapshot of a user's accumulated fatigue on a 0-100 scale.

    ``current_fatigue`` always lies within ``[baseline_fatigue, 100]``; the
    constructor rejects anything else so a bad state cannot be persisted.
    """

    user_id: str
    current_fatigue: float
    baseline_fatigue: float
    recovery_rate: float  # points recovered per rested day
    last_updated: datetime

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("user_id must be non-empty")
        values = (self.current_fatigue, self.baseline_fatigue, self.recovery_rate)
        if not all(math.isfinite(v) for v in values):
            raise ValidationError(f"Fatigue values must be finite, got {values}")
        if self.recovery_rate < 0:
            raise ValidationError(
                f"recovery_rate must be >= 0, got {self.recovery_rate}"
            )
        if not 0 <= self.baseline_fatigue <= MAX_FATIGUE:
            raise ValidationError(
                f"baseline_fatigue must be in [0, {MAX_FATIGUE}], "
                f"got {self.baseline_fatigue}"
            )
        if not self.baseline_fatigue <= self.current_fatigue <= MAX_FATIGUE:
            raise ValidationError(
                f"current_fatigue must be in [{self.baseline_fatigue}, {MAX_FATIGUE}], "
                f"got {self.current_fatigue}"
            )

    @property
    def excess(self) -> float:
        """Fatigue above the user's baseline."""
        return self.current_fatigue - self.baseline_fatigue

    @property
    def recovery_status(self) -> RecoveryStatus:
        if self.current_fatigue < RECOVERY_EXCELLENT_BELOW:
            return RecoveryStatus.EXCELLENT
        if self.current_fatigue < RECOVERY_GOOD_BELOW:
            return RecoveryStatus.GOOD
        if self.current_fatigue < RECOVERY_MODERATE_BELOW:
            return RecoveryStatus.MODERATE
        return RecoveryStatus.POOR

    @property
    def ready_to_train(self) -> bool:
        return self.current_fatigue < READY_TO_TRAIN_BELOW

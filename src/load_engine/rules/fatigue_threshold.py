"""SAFETY rule: accumulated fatigue above the user's deload threshold.

Thresholds (0-100 fatigue scale):
    fatigue >= 90                → CRITICAL
    fatigue >  threshold + 10    → HIGH
    fatigue >  threshold         → MODERATE
"""

from __future__ import annotations

from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import (
    FATIGUE_CRITICAL_LEVEL,
    FATIGUE_HIGH_MARGIN,
    DeloadUrgency,
    Priority,
    ReasonCode,
)
from load_engine.rules.base import DeloadRule


class FatigueThresholdRule(DeloadRule):
    """Calls for a deload once current fatigue exceeds the configured threshold."""

    rule_id = "fatigue_threshold"
    version = "1.0.0"
    priority = Priority.SAFETY
    required_data = ["context.fatigue"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        fatigue = inputs.context.fatigue.current_fatigue
        threshold = inputs.schedule.fatigue_threshold
        if fatigue <= threshold:
            return None

        if fatigue >= FATIGUE_CRITICAL_LEVEL:
            urgency = DeloadUrgency.CRITICAL
        elif fatigue > threshold + FATIGUE_HIGH_MARGIN:
            urgency = DeloadUrgency.HIGH
        else:
            urgency = DeloadUrgency.MODERATE

        return DeloadSignal(
            rule_id=self.rule_id,
            reason_codes=(ReasonCode.FATIGUE_ABOVE_THRESHOLD,),
            urgency=urgency,
            auto_regulated=True,
            explanation=(
                f"Fatigue {fatigue:.0f} exceeds threshold {threshold:.0f} "
                f"(baseline {inputs.context.fatigue.baseline_fatigue:.0f})."
            ),
        )

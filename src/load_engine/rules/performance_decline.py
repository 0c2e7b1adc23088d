"""RECOVERY rule: lifts are getting lighter session over session.

Thresholds (percent decline in average set load):
    decline >= 20           → CRITICAL
    decline >= 15           → HIGH
    decline >= threshold    → MODERATE
"""

from __future__ import annotations

from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import (
    PERFORMANCE_CRITICAL_DECLINE,
    PERFORMANCE_HIGH_DECLINE,
    DeloadUrgency,
    Priority,
    ReasonCode,
)
from load_engine.rules.base import DeloadRule


class PerformanceDeclineRule(DeloadRule):
    """Calls for a deload once recent sessions fall short of the ones before."""

    rule_id = "performance_decline"
    version = "1.0.0"
    priority = Priority.RECOVERY
    required_data = ["performance_decline"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        decline = inputs.performance_decline
        threshold = inputs.schedule.performance_threshold
        if decline is None or decline <= 0 or decline < threshold:
            return None

        if decline >= PERFORMANCE_CRITICAL_DECLINE:
            urgency = DeloadUrgency.CRITICAL
        elif decline >= PERFORMANCE_HIGH_DECLINE:
            urgency = DeloadUrgency.HIGH
        else:
            urgency = DeloadUrgency.MODERATE

        return DeloadSignal(
            rule_id=self.rule_id,
            reason_codes=(ReasonCode.PERFORMANCE_DECLINE,),
            urgency=urgency,
            auto_regulated=True,
            explanation=(
                f"Set load fell {decline:.1f}% between the latest sessions "
                f"(threshold {threshold:.0f}%)."
            ),
        )

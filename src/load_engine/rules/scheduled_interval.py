"""SCHEDULE rule: the calendar says a deload is due."""

from __future__ import annotations

from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import DeloadUrgency, Priority, ReasonCode
from load_engine.rules.base import DeloadRule

# Weeks past the due date before an overdue deload escalates
OVERDUE_WEEKS = 2


class ScheduledIntervalRule(DeloadRule):
    """Fires once ``frequency`` weeks have passed since the last deload."""

    rule_id = "scheduled_interval"
    version = "1.0.0"
    priority = Priority.SCHEDULE
    required_data = ["weeks_since_last_deload"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        weeks = inputs.weeks_since_last_deload
        frequency = inputs.schedule.frequency
        if weeks is None or weeks < frequency:
            return None
        urgency = (
            DeloadUrgency.MODERATE if weeks >= frequency + OVERDUE_WEEKS
            else DeloadUrgency.LOW
        )
        return DeloadSignal(
            rule_id=self.rule_id,
            reason_codes=(ReasonCode.SCHEDULED_INTERVAL_REACHED,),
            urgency=urgency,
            auto_regulated=False,
            explanation=f"{weeks} weeks since the last deload (every {frequency} scheduled).",
        )

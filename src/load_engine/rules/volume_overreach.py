"""RECOVERY rule: most tracked muscle groups at or above MAV.

A majority of tracked groups approaching or exceeding MRV means systemic
recovery capacity is being exhausted, whatever the global fatigue score says.
"""

from __future__ import annotations

from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import DeloadUrgency, Priority, ReasonCode, VolumeStatus
from load_engine.rules.base import DeloadRule


class VolumeOverreachRule(DeloadRule):
    """Calls for a deload when more than half of tracked groups are near MRV."""

    rule_id = "volume_overreach"
    version = "1.0.0"
    priority = Priority.RECOVERY
    required_data = ["context.volume_statuses"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        context = inputs.context
        if not context.majority_near_mrv:
            return None

        near = context.groups_at_or_above(VolumeStatus.APPROACHING_MRV)
        exceeding = context.groups_at_or_above(VolumeStatus.EXCEEDING_MRV)
        urgency = (
            DeloadUrgency.HIGH if len(exceeding) * 2 > context.tracked_groups
            else DeloadUrgency.MODERATE
        )
        codes = [ReasonCode.VOLUME_MAJORITY_NEAR_MRV]
        if exceeding:
            codes.append(ReasonCode.MUSCLE_GROUPS_EXCEEDING_MRV)
        return DeloadSignal(
            rule_id=self.rule_id,
            reason_codes=tuple(codes),
            urgency=urgency,
            auto_regulated=True,
            explanation=(
                f"{len(near)} of {context.tracked_groups} tracked muscle groups are "
                f"approaching or exceeding MRV ({', '.join(near)})."
            ),
        )

"""Decision trace: record of how each deload rule evaluated."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import auto, IntEnum

from load_engine.models.enums import ReasonCode


class RuleStatus(IntEnum):
    """Whether a rule fired, was skipped, or was not applicable."""

    FIRED = auto()
    SKIPPED = auto()
    NOT_APPLICABLE = auto()


@dataclass(frozen=True)
class RuleResult:
    """Record of a single rule's evaluation during a deload analysis."""

    rule_id: str
    status: RuleStatus
    reason_codes: tuple[ReasonCode, ...] = field(default_factory=tuple)
    explanation: str = ""

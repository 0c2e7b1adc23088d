"""Abstract base class for all deload rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import Priority


class DeloadRule(ABC):
    """Base class for a single deload trigger.

    Rules are discovered automatically by the RuleRegistry and evaluated by
    the DeloadAdvisor, which decides which signals count under the user's
    schedule (auto-regulated vs calendar-driven).

    Subclasses must define:
        rule_id: unique identifier (e.g. "fatigue_threshold")
        version: semantic version string
        priority: Priority tier (SAFETY, RECOVERY, SCHEDULE)
        required_data: dotted DeloadInputs attribute paths the rule needs
        evaluate(): the rule's decision logic
    """

    rule_id: str
    version: str
    priority: Priority
    required_data: list[str]

    def has_required_data(self, inputs: DeloadInputs) -> bool:
        """Check that every required path resolves to a non-empty value."""
        for path in self.required_data:
            value: object = inputs
            for part in path.split("."):
                value = getattr(value, part, None)
                if value is None:
                    return False
            # Treat empty collections as missing data
            if isinstance(value, (list, tuple, dict)) and len(value) == 0:
                return False
        return True

    @abstractmethod
    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        """Return a DeloadSignal if this rule calls for a deload, else None."""
        ...

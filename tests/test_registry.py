"""Tests for RuleRegistry: auto-discovery and registration checks for deload rules."""

from __future__ import annotations

import pytest

from load_engine.exceptions import ConflictError, ValidationError
from load_engine.models.deload import DeloadInputs, DeloadSignal
from load_engine.models.enums import Priority
from load_engine.registry import RuleRegistry
from load_engine.rules.base import DeloadRule
from load_engine.rules.fatigue_threshold import FatigueThresholdRule


class _ShadowFatigueRule(DeloadRule):
    rule_id = "fatigue_threshold"
    version = "0.1.0"
    priority = Priority.SAFETY
    required_data = ["context.fatigue"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        return None


class _SleepRule(DeloadRule):
    rule_id = "sleep_debt"
    version = "0.1.0"
    priority = Priority.RECOVERY
    required_data = ["sleep_hours"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        return None


class _UntieredRule(DeloadRule):
    rule_id = "untiered"
    version = "0.1.0"
    priority = 2  # type: ignore[assignment]
    required_data = ["context.fatigue"]

    def evaluate(self, inputs: DeloadInputs) -> DeloadSignal | None:
        return None


def _discovered() -> RuleRegistry:
    registry = RuleRegistry()
    registry.discover_rules()
    return registry


class TestRuleRegistry:
    def test_discover_finds_rules(self) -> None:
        assert len(_discovered().get_all_rules()) == 4

    def test_discovers_each_rule(self) -> None:
        assert {r.rule_id for r in _discovered().get_all_rules()} == {
            "fatigue_threshold",
            "volume_overreach",
            "performance_decline",
            "scheduled_interval",
        }

    def test_get_all_sorted_by_priority(self) -> None:
        priorities = [r.priority for r in _discovered().get_all_rules()]
        assert priorities == sorted(priorities)

    def test_safety_rules_first(self) -> None:
        assert _discovered().get_all_rules()[0].priority == Priority.SAFETY

    def test_ties_ordered_by_rule_id(self) -> None:
        recovery = [
            r.rule_id for r in _discovered().get_all_rules() if r.priority == Priority.RECOVERY
        ]
        assert recovery == ["performance_decline", "volume_overreach"]

    def test_manual_register(self) -> None:
        registry = RuleRegistry()
        registry.register(FatigueThresholdRule())
        assert [r.rule_id for r in registry.get_all_rules()] == ["fatigue_threshold"]

    def test_discovery_is_idempotent(self) -> None:
        registry = _discovered()
        registry.discover_rules()
        assert len(registry.get_all_rules()) == 4


class TestRegistrationChecks:
    def test_same_class_replaces(self) -> None:
        registry = RuleRegistry()
        first = FatigueThresholdRule()
        second = FatigueThresholdRule()
        registry.register(first)
        registry.register(second)
        assert registry.get_all_rules() == [second]

    def test_rule_id_claimed_by_other_class(self) -> None:
        registry = _discovered()
        with pytest.raises(ConflictError, match="FatigueThresholdRule"):
            registry.register(_ShadowFatigueRule())

    def test_conflict_keeps_original(self) -> None:
        registry = _discovered()
        with pytest.raises(ConflictError):
            registry.register(_ShadowFatigueRule())
        kept = [r for r in registry.get_all_rules() if r.rule_id == "fatigue_threshold"]
        assert isinstance(kept[0], FatigueThresholdRule)

    def test_unknown_input_rejected(self) -> None:
        with pytest.raises(ValidationError, match="sleep_hours"):
            RuleRegistry().register(_SleepRule())

    def test_priority_must_be_tier(self) -> None:
        with pytest.raises(ValidationError, match="Priority"):
            RuleRegistry().register(_UntieredRule())

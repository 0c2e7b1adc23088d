"""Deload rule registry with auto-discovery of DeloadRule subclasses."""

from __future__ import annotations

import dataclasses
import importlib
import logging
import pkgutil
from pathlib import Path

from load_engine.exceptions import ConflictError, ValidationError
from load_engine.models.deload import DeloadInputs
from load_engine.models.enums import Priority
from load_engine.rules.base import DeloadRule

logger = logging.getLogger(__name__)

_INPUT_FIELDS = frozenset(f.name for f in dataclasses.fields(DeloadInputs))


class RuleRegistry:
    """Holds the deload rules the DeloadAdvisor evaluates.

    Discovery imports every module under load_engine.rules and registers its
    concrete DeloadRule subclasses, so a new trigger is added by dropping a
    module there. Each rule is checked on registration: a known Priority
    tier, required_data rooted in a DeloadInputs field, and a rule_id no
    other rule class has claimed.
    """

    def __init__(self) -> None:
        self._rules: dict[str, DeloadRule] = {}

    def discover_rules(self) -> None:
        """Scan the rules package and register all DeloadRule subclasses."""
        import load_engine.rules as rules_pkg

        rules_path = Path(rules_pkg.__file__).parent  # type: ignore[arg-type]
        for _, module_name, _ in pkgutil.walk_packages(
            [str(rules_path)], prefix=rules_pkg.__name__ + "."
        ):
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.warning("Skipping rule module %s: %s", module_name, exc)
                continue

            for attr in vars(module).values():
                if (
                    isinstance(attr, type)
                    and issubclass(attr, DeloadRule)
                    and attr is not DeloadRule
                    and not getattr(attr, "__abstractmethods__", set())
                ):
                    self.register(attr())
        logger.debug("Deload rules: %s", ", ".join(r.rule_id for r in self.get_all_rules()))

    def register(self, rule: DeloadRule) -> None:
        """Register a rule instance by its rule_id.

        Re-registering a rule of the same class replaces it.

        Raises:
            ValidationError: If the rule's id, priority or required_data is malformed.
            ConflictError: If a different rule class already uses the rule_id.
        """
        if not getattr(rule, "rule_id", ""):
            raise ValidationError(f"{type(rule).__name__} has no rule_id")
        if not isinstance(getattr(rule, "priority", None), Priority):
            raise ValidationError(f"Rule {rule.rule_id} needs a Priority tier")
        unknown = [p for p in rule.required_data if p.split(".")[0] not in _INPUT_FIELDS]
        if unknown:
            raise ValidationError(
                f"Rule {rule.rule_id} requires data DeloadInputs does not carry: {unknown}"
            )
        existing = self._rules.get(rule.rule_id)
        if existing is not None and type(existing) is not type(rule):
            raise ConflictError(
                f"Rule id {rule.rule_id!r} already registered by {type(existing).__name__}"
            )
        self._rules[rule.rule_id] = rule

    def get_all_rules(self) -> list[DeloadRule]:
        """Return all registered rules sorted by priority (lowest value first)."""
        return sorted(self._rules.values(), key=lambda r: (r.priority, r.rule_id))

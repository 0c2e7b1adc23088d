"""Deload rules, auto-discovered by load_engine.registry.RuleRegistry."""

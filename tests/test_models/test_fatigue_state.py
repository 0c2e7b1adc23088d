"""Tests for UserFatigueState invariants and readiness properties."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from load_engine.exceptions import ValidationError
from load_engine.models.enums import RecoveryStatus
from load_engine.models.fatigue import UserFatigueState

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _state(current: float = 30.0, baseline: float = 20.0, rate: float = 5.0) -> UserFatigueState:
    return UserFatigueState(
        user_id="u1",
        current_fatigue=current,
        baseline_fatigue=baseline,
        recovery_rate=rate,
        last_updated=NOW,
    )


class TestUserFatigueState:
    def test_valid_state(self) -> None:
        state = _state()
        assert state.excess == 10.0

    def test_current_below_baseline_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _state(current=10.0, baseline=20.0)

    def test_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _state(current=101.0)

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _state(rate=-1.0)

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _state(current=float("nan"))

    def test_empty_user_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UserFatigueState("", 30.0, 20.0, 5.0, NOW)

    def test_validation_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            _state(baseline=150.0, current=150.0)

    def test_recovery_buckets(self) -> None:
        assert _state(current=25.0).recovery_status == RecoveryStatus.EXCELLENT
        assert _state(current=45.0).recovery_status == RecoveryStatus.GOOD
        assert _state(current=65.0).recovery_status == RecoveryStatus.MODERATE
        assert _state(current=85.0).recovery_status == RecoveryStatus.POOR

    def test_ready_to_train(self) -> None:
        assert _state(current=79.0).ready_to_train is True
        assert _state(current=80.0).ready_to_train is False

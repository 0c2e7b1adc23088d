"""Tests for EngineConfig defaults, validation and environment overrides."""

from __future__ import annotations

import pytest

from load_engine.config import EngineConfig
from load_engine.exceptions import ValidationError
from load_engine.models.enums import TrainingLevel


class TestEngineConfig:
    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.default_current_fatigue == 30.0
        assert config.fatigue_discount_divisor == 400.0
        assert config.plate_increment == 2.5
        assert config.default_training_level == TrainingLevel.INTERMEDIATE

    def test_inconsistent_defaults_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(default_current_fatigue=10.0, default_baseline_fatigue=20.0)

    def test_non_positive_increment_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(plate_increment=0.0)

    def test_fatigue_ceiling_not_tunable(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(max_fatigue=120.0)
        with pytest.raises(ValidationError):
            EngineConfig.from_env({"LOAD_ENGINE_MAX_FATIGUE": "80"})

    def test_from_env_overrides(self) -> None:
        config = EngineConfig.from_env(
            {
                "LOAD_ENGINE_PLATE_INCREMENT": "1.25",
                "LOAD_ENGINE_RIR_CEILING": "5",
                "LOAD_ENGINE_DEFAULT_TRAINING_LEVEL": "advanced",
            }
        )
        assert config.plate_increment == 1.25
        assert config.rir_ceiling == 5
        assert isinstance(config.rir_ceiling, int)
        assert config.default_training_level == TrainingLevel.ADVANCED

    def test_from_env_ignores_unrelated(self) -> None:
        assert EngineConfig.from_env({"HOME": "/root"}) == EngineConfig()

    def test_from_env_bad_number(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig.from_env({"LOAD_ENGINE_MAX_FATIGUE": "lots"})

    def test_from_env_bad_level(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig.from_env({"LOAD_ENGINE_DEFAULT_TRAINING_LEVEL": "elite"})

    def test_from_env_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOAD_ENGINE_DEFAULT_RECOVERY_RATE", "7.5")
        assert EngineConfig.from_env().default_recovery_rate == 7.5

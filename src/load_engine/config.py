"""Engine tunables, overridable from ``LOAD_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from load_engine.exceptions import ValidationError
from load_engine.models.enums import (
    ALTERNATIVE_WEIGHT_SPREAD,
    DEFAULT_BASELINE_FATIGUE,
    DEFAULT_CURRENT_FATIGUE,
    DEFAULT_RECOVERY_RATE,
    DEFAULT_RIR,
    FATIGUE_DISCOUNT_DIVISOR,
    FATIGUE_DISCOUNT_FLOOR,
    INTENSITY_PER_SET,
    MAX_FATIGUE,
    OVERREACHED_GROUP_DISCOUNT,
    PLATE_INCREMENT,
    RIR_CEILING,
    SECONDARY_MUSCLE_WEIGHT,
    TrainingLevel,
)

ENV_PREFIX = "LOAD_ENGINE_"


@dataclass(frozen=True)
class EngineConfig:
    """Every number the engine treats as a tunable rather than a fixed law.

    The fatigue decay and the workout intensity derivation in particular are
    heuristics; deployments are expected to calibrate them.
    """

    default_current_fatigue: float = DEFAULT_CURRENT_FATIGUE
    default_baseline_fatigue: float = DEFAULT_BASELINE_FATIGUE
    default_recovery_rate: float = DEFAULT_RECOVERY_RATE
    max_fatigue: float = MAX_FATIGUE

    intensity_per_set: float = INTENSITY_PER_SET
    rir_ceiling: int = RIR_CEILING
    default_rir: int = DEFAULT_RIR

    fatigue_discount_divisor: float = FATIGUE_DISCOUNT_DIVISOR
    discount_floor: float = FATIGUE_DISCOUNT_FLOOR
    overreached_group_discount: float = OVERREACHED_GROUP_DISCOUNT
    alternative_spread: float = ALTERNATIVE_WEIGHT_SPREAD
    plate_increment: float = PLATE_INCREMENT

    secondary_muscle_weight: float = SECONDARY_MUSCLE_WEIGHT
    default_training_level: TrainingLevel = TrainingLevel.INTERMEDIATE

    def __post_init__(self) -> None:
        # UserFatigueState validates against MAX_FATIGUE
        if self.max_fatigue != MAX_FATIGUE:
            raise ValidationError(
                f"max_fatigue is fixed at {MAX_FATIGUE}, got {self.max_fatigue}"
            )
        if not 0 <= self.default_baseline_fatigue <= self.default_current_fatigue <= self.max_fatigue:
            raise ValidationError(
                "Default fatigue must satisfy 0 <= baseline <= current <= max, got "
                f"baseline={self.default_baseline_fatigue}, "
                f"current={self.default_current_fatigue}, max={self.max_fatigue}"
            )
        if self.default_recovery_rate < 0:
            raise ValidationError("default_recovery_rate must be >= 0")
        if self.rir_ceiling <= 0:
            raise ValidationError("rir_ceiling must be positive")
        if self.fatigue_discount_divisor <= 0:
            raise ValidationError("fatigue_discount_divisor must be positive")
        if not 0 < self.discount_floor <= 1:
            raise ValidationError("discount_floor must be in (0, 1]")
        if self.plate_increment <= 0:
            raise ValidationError("plate_increment must be positive")
        if not 0 <= self.secondary_muscle_weight <= 1:
            raise ValidationError("secondary_muscle_weight must be in [0, 1]")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config, overriding defaults with ``LOAD_ENGINE_<FIELD>`` variables.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``.

        Returns:
            A validated EngineConfig.

        Raises:
            ValidationError: If a variable cannot be parsed or breaks an invariant.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for name, field_def in cls.__dataclass_fields__.items():
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                if name == "default_training_level":
                    overrides[name] = TrainingLevel[raw.strip().upper()]
                elif field_def.type in ("int", int):
                    overrides[name] = int(raw)
                else:
                    overrides[name] = float(raw)
            except (KeyError, ValueError) as exc:
                raise ValidationError(
                    f"Invalid value for {ENV_PREFIX + name.upper()}: {raw!r}"
                ) from exc
        return cls(**overrides)

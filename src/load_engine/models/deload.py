"""Deload schedule configuration, recommendations and history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from load_engine.exceptions import ValidationError
from load_engine.models.context import TrainingLoadContext
from load_engine.models.decision_trace import RuleResult
from load_engine.models.enums import (
    DELOAD_DEFAULTS,
    DELOAD_STRATEGY_BY_GOAL,
    MAX_FATIGUE,
    DeloadTiming,
    DeloadType,
    DeloadUrgency,
    ReasonCode,
    ScheduleTiming,
    TrainingGoal,
    TrainingLevel,
)


@dataclass(frozen=True)
class DeloadScheduleConfig:
    """How and when a user deloads."""

    frequency: int  # weeks between scheduled deloads
    strategy: DeloadType = DeloadType.VOLUME
    timing: ScheduleTiming = ScheduleTiming.PLANNED
    auto_regulated: bool = False
    fatigue_threshold: float = 75.0  # 0-100 fatigue scale
    min_weeks_between_deloads: int = 0
    performance_threshold: float = 10.0  # percent decline in set load

    def __post_init__(self) -> None:
        if self.frequency < 1:
            raise ValidationError(f"Deload frequency must be >= 1 week, got {self.frequency}")
        if not 0 <= self.fatigue_threshold <= MAX_FATIGUE:
            raise ValidationError(
                f"fatigue_threshold must be in [0, {MAX_FATIGUE}], got {self.fatigue_threshold}"
            )
        if self.min_weeks_between_deloads < 0:
            raise ValidationError("min_weeks_between_deloads must be >= 0")
        if not self.performance_threshold >= 0:
            raise ValidationError(
                f"performance_threshold must be >= 0, got {self.performance_threshold}"
            )

    @classmethod
    def for_level(cls, level: TrainingLevel, goal: TrainingGoal) -> DeloadScheduleConfig:
        """Default schedule for a training level, with the strategy picked by goal."""
        defaults = DELOAD_DEFAULTS[level]
        auto_regulated = bool(defaults["auto_regulated"])
        return cls(
            frequency=int(defaults["frequency"]),
            strategy=DELOAD_STRATEGY_BY_GOAL[goal],
            timing=ScheduleTiming.AUTOREGULATED if auto_regulated else ScheduleTiming.PLANNED,
            auto_regulated=auto_regulated,
            fatigue_threshold=float(defaults["fatigue_threshold"]),
            min_weeks_between_deloads=int(defaults["min_weeks_between_deloads"]),
            performance_threshold=float(defaults["performance_threshold"]),
        )


@dataclass(frozen=True)
class DeloadRecommendation:
    """Whether, when and how to deload. Recomputed on every request."""

    should_deload: bool
    type: DeloadType
    timing: DeloadTiming
    reason_codes: tuple[ReasonCode, ...] = field(default_factory=tuple)
    urgency: DeloadUrgency = DeloadUrgency.NONE
    duration_days: int = 0
    weeks_since_last_deload: int | None = None
    rule_results: tuple[RuleResult, ...] = field(default_factory=tuple)
    # Prescription, in percent cuts; zero when no deload is due
    volume_reduction: int = 0
    intensity_reduction: int = 0
    frequency_reduction: int = 0
    target_muscle_groups: tuple[str, ...] = field(default_factory=tuple)

    @property
    def codes(self) -> list[str]:
        """Reason codes in their lower-case wire form."""
        return [code.code for code in self.reason_codes]


@dataclass(frozen=True)
class DeloadRecord:
    """A deload the user actually took."""

    user_id: str
    start_date: date
    end_date: date  # inclusive
    type: DeloadType = DeloadType.VOLUME

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("user_id must be non-empty")
        if self.end_date < self.start_date:
            raise ValidationError(
                f"Deload end {self.end_date} precedes start {self.start_date}"
            )


@dataclass(frozen=True)
class DeloadInputs:
    """Everything a deload rule may look at, captured once per analysis."""

    context: TrainingLoadContext
    schedule: DeloadScheduleConfig
    weeks_since_last_deload: int | None = None
    performance_decline: float | None = None  # percent, None without two sessions


@dataclass(frozen=True)
class DeloadSignal:
    """A single rule's vote for a deload."""

    rule_id: str
    reason_codes: tuple[ReasonCode, ...]
    urgency: DeloadUrgency
    auto_regulated: bool  # True for readiness triggers, False for calendar triggers
    explanation: str = ""

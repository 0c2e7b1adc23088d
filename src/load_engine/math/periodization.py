"""Periodization math: plan length, phase sequences, mesocycle allocation.

Loading mesocycles cycle through a phase sequence chosen by periodization
type. When deloads are enabled a one-week deload block is inserted after
every ``deload_frequency`` loading weeks, so a block never straddles a
deload.

References:
    Issurin (2010), New horizons for the methodology and physiology of training
        periodization.
    Rhea et al. (2002), A comparison of linear and daily undulating
        periodized programs with equated volume and intensity for strength.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from load_engine.models.enums import (
    DELOAD_WEEKS,
    MIN_PLAN_WEEKS,
    PHASE_WEEK_TARGETS,
    WEEKLY_VOLUME_PROGRESSION,
    WEEKS_PER_YEAR,
    MesocyclePhase,
    PeriodizationType,
    TrainingGoal,
    TrainingLevel,
)


@dataclass(frozen=True)
class MesocycleBlock:
    """Week range of a single mesocycle within the macrocycle."""

    phase: MesocyclePhase
    start_week: int  # 1-indexed
    end_week: int  # inclusive
    duration_weeks: int
    is_deload: bool = False


_LINEAR_SEQUENCE = (
    MesocyclePhase.FOUNDATION,
    MesocyclePhase.VOLUME,
    MesocyclePhase.INTENSITY,
    MesocyclePhase.STRENGTH,
)

_UNDULATING_SEQUENCE = (MesocyclePhase.VOLUME, MesocyclePhase.INTENSITY)

_BLOCK_SEQUENCES: dict[TrainingGoal, tuple[MesocyclePhase, ...]] = {
    TrainingGoal.HYPERTROPHY: (
        MesocyclePhase.FOUNDATION,
        MesocyclePhase.VOLUME,
        MesocyclePhase.INTENSITY,
        MesocyclePhase.VOLUME,
        MesocyclePhase.INTENSITY,
    ),
    TrainingGoal.STRENGTH: (
        MesocyclePhase.VOLUME,
        MesocyclePhase.STRENGTH,
        MesocyclePhase.STRENGTH,
        MesocyclePhase.PEAKING,
    ),
    TrainingGoal.POWER: (
        MesocyclePhase.VOLUME,
        MesocyclePhase.STRENGTH,
        MesocyclePhase.PEAKING,
    ),
    TrainingGoal.WEIGHT_LOSS: (
        MesocyclePhase.METABOLIC,
        MesocyclePhase.VOLUME,
        MesocyclePhase.METABOLIC,
        MesocyclePhase.MAINTENANCE,
    ),
    TrainingGoal.ENDURANCE: (
        MesocyclePhase.FOUNDATION,
        MesocyclePhase.METABOLIC,
        MesocyclePhase.VOLUME,
    ),
}

_DEFAULT_BLOCK_SEQUENCE = (
    MesocyclePhase.FOUNDATION,
    MesocyclePhase.VOLUME,
    MesocyclePhase.STRENGTH,
    MesocyclePhase.MAINTENANCE,
)

_DEFAULT_PERIODIZATION: dict[TrainingLevel, PeriodizationType] = {
    TrainingLevel.BEGINNER: PeriodizationType.LINEAR,
    TrainingLevel.INTERMEDIATE: PeriodizationType.UNDULATING,
    TrainingLevel.ADVANCED: PeriodizationType.BLOCK,
}


def weeks_from_months(duration_months: int) -> int:
    """Convert a plan length in months to whole weeks (2 months → 8 weeks).

    Raises:
        ValueError: If the resulting plan is shorter than MIN_PLAN_WEEKS.
    """
    if duration_months < 1:
        raise ValueError(f"duration_months must be >= 1, got {duration_months}")
    weeks = duration_months * WEEKS_PER_YEAR // 12
    if weeks < MIN_PLAN_WEEKS:
        raise ValueError(f"Plan must be at least {MIN_PLAN_WEEKS} weeks, got {weeks}")
    return weeks


def default_periodization_type(level: TrainingLevel, goal: TrainingGoal) -> PeriodizationType:
    """Template family used when the caller does not pick one."""
    if goal in (TrainingGoal.STRENGTH, TrainingGoal.POWER) and level != TrainingLevel.BEGINNER:
        return PeriodizationType.BLOCK
    return _DEFAULT_PERIODIZATION[level]


def phase_sequence(
    periodization_type: PeriodizationType, goal: TrainingGoal
) -> tuple[MesocyclePhase, ...]:
    """Ordered loading phases for a template family; deloads are not included."""
    if periodization_type == PeriodizationType.LINEAR:
        return _LINEAR_SEQUENCE
    if periodization_type == PeriodizationType.UNDULATING:
        return _UNDULATING_SEQUENCE
    return _BLOCK_SEQUENCES.get(goal, _DEFAULT_BLOCK_SEQUENCE)


def allocate_mesocycles(
    total_weeks: int,
    sequence: tuple[MesocyclePhase, ...],
    mesocycle_weeks: int,
    deload_frequency: int,
    include_deloads: bool = True,
) -> list[MesocycleBlock]:
    """Partition the macrocycle into contiguous mesocycles.

    Args:
        total_weeks: Length of the macrocycle.
        sequence: Loading phases, cycled in order.
        mesocycle_weeks: Preferred length of a loading block.
        deload_frequency: Loading weeks before a deload week is due.
        include_deloads: Whether deload weeks are inserted at all.

    Returns:
        MesocycleBlock list in chronological order whose durations sum to
        total_weeks.

    Raises:
        ValueError: On non-positive lengths or an empty sequence.
    """
    if total_weeks < 1 or mesocycle_weeks < 1 or deload_frequency < 1:
        raise ValueError(
            "total_weeks, mesocycle_weeks and deload_frequency must be positive, got "
            f"{total_weeks}, {mesocycle_weeks}, {deload_frequency}"
        )
    if not sequence:
        raise ValueError("Phase sequence must not be empty")

    blocks: list[MesocycleBlock] = []
    week = 1
    loading_since_deload = 0
    phase_index = 0

    while week <= total_weeks:
        remaining = total_weeks - week + 1

        if include_deloads and loading_since_deload >= deload_frequency:
            length = min(DELOAD_WEEKS, remaining)
            blocks.append(
                MesocycleBlock(
                    phase=MesocyclePhase.DELOAD,
                    start_week=week,
                    end_week=week + length - 1,
                    duration_weeks=length,
                    is_deload=True,
                )
            )
            week += length
            loading_since_deload = 0
            continue

        length = min(mesocycle_weeks, remaining)
        if include_deloads:
            length = min(length, deload_frequency - loading_since_deload)

        blocks.append(
            MesocycleBlock(
                phase=sequence[phase_index % len(sequence)],
                start_week=week,
                end_week=week + length - 1,
                duration_weeks=length,
            )
        )
        phase_index += 1
        week += length
        loading_since_deload += length

    return blocks


def week_start(plan_start: date, week_number: int) -> date:
    """First day of a 1-indexed plan week."""
    return plan_start + timedelta(weeks=week_number - 1)


def week_targets(phase: MesocyclePhase, week_in_block: int) -> tuple[float, int]:
    """(volume multiplier, target RIR) for a week inside a mesocycle.

    Volume ramps by WEEKLY_VOLUME_PROGRESSION each week of a loading block;
    target RIR drops by one every two weeks, never below 0. Deload weeks are
    flat.

    Args:
        phase: Phase of the enclosing mesocycle.
        week_in_block: 0-indexed week within the mesocycle.
    """
    multiplier, rir = PHASE_WEEK_TARGETS[phase]
    if phase == MesocyclePhase.DELOAD:
        return multiplier, rir
    ramped = multiplier * (1.0 + WEEKLY_VOLUME_PROGRESSION * week_in_block)
    return round(ramped, 3), max(0, rir - week_in_block // 2)

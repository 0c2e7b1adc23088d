"""Volume landmark classification, goal-specific set targets and week-to-week advice.

Reference:
    Israetel, Hoffmann & Smith (2019). Scientific Principles of Hypertrophy
        Training. Renaissance Periodization.
"""

from __future__ import annotations

from typing import Sequence

from load_engine.models.enums import (
    ADAPTATION_NEUTRAL,
    ADAPTATION_POSITIVE,
    APPROACHING_MRV_SET_CUT,
    BELOW_MEV_SET_BUMP,
    LANDMARK_TEMPLATES,
    OPTIMAL_INCREASE_CEILING,
    AdaptationResponse,
    TrainingGoal,
    TrainingLevel,
    VolumeAdjustment,
    VolumeStatus,
    VolumeTrend,
)
from load_engine.models.volume import VolumeRecommendation, VolumeTargets


def classify_volume(current: float, mev: float, mav: float, mrv: float) -> VolumeStatus:
    """Classify weekly sets against landmarks.

    ``current < mev`` → BELOW_MEV; ``mev <= current <= mav`` → OPTIMAL;
    ``mav < current <= mrv`` → APPROACHING_MRV; ``current > mrv`` → EXCEEDING_MRV.
    """
    if current < mev:
        return VolumeStatus.BELOW_MEV
    if current <= mav:
        return VolumeStatus.OPTIMAL
    if current <= mrv:
        return VolumeStatus.APPROACHING_MRV
    return VolumeStatus.EXCEEDING_MRV


def _sets(value: float) -> str:
    return f"{round(value, 1):g}"


def volume_recommendation(
    muscle_group: str, current: float, mev: float, mav: float, mrv: float
) -> tuple[str, float]:
    """Advice text and set delta toward the next-better status.

    Returns:
        ``(text, set_delta)``; the delta is sets to add when below MEV, sets
        to remove when above MAV, and 0 when volume is already optimal.
    """
    status = classify_volume(current, mev, mav, mrv)
    if status == VolumeStatus.BELOW_MEV:
        delta = mev - current
        return (
            f"Add {_sets(delta)} weekly sets for {muscle_group} to reach MEV "
            f"({_sets(mev)} sets).",
            delta,
        )
    if status == VolumeStatus.OPTIMAL:
        headroom = mav - current
        return (
            f"{muscle_group} volume is optimal; up to {_sets(headroom)} more weekly "
            f"sets stay within MAV ({_sets(mav)} sets).",
            0.0,
        )
    if status == VolumeStatus.APPROACHING_MRV:
        delta = current - mav
        return (
            f"Remove {_sets(delta)} weekly sets for {muscle_group} to return to MAV "
            f"({_sets(mav)} sets).",
            delta,
        )
    delta = current - mrv
    return (
        f"Remove {_sets(delta)} weekly sets for {muscle_group} to get back under MRV "
        f"({_sets(mrv)} sets); consider a deload.",
        delta,
    )


def template_landmarks(level: TrainingLevel, muscle_group: str) -> tuple[float, float, float]:
    """(mev, mav, mrv) for a muscle group at a training level.

    Raises:
        KeyError: If the muscle group is not in the template table.
    """
    mev, mav, mrv = LANDMARK_TEMPLATES[level][muscle_group]
    return float(mev), float(mav), float(mrv)


def volume_targets_for_goal(
    goal: TrainingGoal, mev: float, mav: float, mrv: float
) -> VolumeTargets:
    """Weekly set range suited to a training goal.

    Strength work sits near MEV, hypertrophy near MAV, endurance toward MRV.
    Other goals use the full MEV-MAV-MRV band.
    """
    if goal in (TrainingGoal.STRENGTH, TrainingGoal.POWER):
        optimal = mev + (mav - mev) * 0.4
        return VolumeTargets(
            minimum=mev,
            optimal=optimal,
            maximum=max(optimal, mav * 0.8),
        )
    if goal == TrainingGoal.HYPERTROPHY:
        return VolumeTargets(
            minimum=mev + (mav - mev) * 0.3,
            optimal=mav,
            maximum=mrv * 0.9,
        )
    if goal == TrainingGoal.ENDURANCE:
        return VolumeTargets(
            minimum=mav * 0.6,
            optimal=mav * 0.8,
            maximum=mrv,
        )
    return VolumeTargets(minimum=mev, optimal=mav, maximum=mrv)


def adaptation_response(
    sets_performed: float, target_sets: float, fatigue_level: float
) -> AdaptationResponse:
    """Grade a training week from set completion and the fatigue it left behind.

    Completing the target at fatigue <= 60 is positive; at least 80% of it at
    fatigue <= 80 is neutral; anything else is negative.
    """
    completion = sets_performed / target_sets
    min_completion, max_fatigue = ADAPTATION_POSITIVE
    if completion >= min_completion and fatigue_level <= max_fatigue:
        return AdaptationResponse.POSITIVE
    min_completion, max_fatigue = ADAPTATION_NEUTRAL
    if completion >= min_completion and fatigue_level <= max_fatigue:
        return AdaptationResponse.NEUTRAL
    return AdaptationResponse.NEGATIVE


def volume_trend(sets_by_week: Sequence[float]) -> VolumeTrend:
    """Direction of weekly sets, oldest first, by counting week-over-week changes."""
    if len(sets_by_week) < 2:
        return VolumeTrend.STABLE
    increases = sum(1 for a, b in zip(sets_by_week, sets_by_week[1:]) if b > a)
    decreases = sum(1 for a, b in zip(sets_by_week, sets_by_week[1:]) if b < a)
    if increases > decreases:
        return VolumeTrend.INCREASING
    if decreases > increases:
        return VolumeTrend.DECREASING
    if increases == 0:
        return VolumeTrend.STABLE
    return VolumeTrend.INCONSISTENT


def volume_adjustment(
    muscle_group: str,
    current: float,
    mev: float,
    mav: float,
    mrv: float,
    trend: VolumeTrend = VolumeTrend.STABLE,
) -> VolumeRecommendation:
    """Next weekly set count from the landmark status and the recorded trend.

    ============== ============================================= ==========
    Status         Recommendation                                Confidence
    ============== ============================================= ==========
    below MEV      increase to min(mev + 2, mav) over 2 weeks     0.9
    optimal        +1 set if increasing and below 80% of MAV,     0.8
                   else maintain
    approaching    maintain if decreasing, else cut 2 sets (not   0.8
                   below MAV) within a week
    exceeding MRV  deload back to MAV within a week               0.95
    ============== ============================================= ==========
    """
    status = classify_volume(current, mev, mav, mrv)
    recommended = current
    adjustment = VolumeAdjustment.MAINTAIN
    confidence = 0.8
    timeline = 2

    if status == VolumeStatus.BELOW_MEV:
        recommended = min(mev + BELOW_MEV_SET_BUMP, mav)
        adjustment = VolumeAdjustment.INCREASE
        reasoning = (
            f"{muscle_group} is below MEV; build up to {_sets(recommended)} weekly sets."
        )
        confidence = 0.9
    elif status == VolumeStatus.OPTIMAL:
        if trend == VolumeTrend.INCREASING and current < mav * OPTIMAL_INCREASE_CEILING:
            recommended = current + 1
            adjustment = VolumeAdjustment.INCREASE
            reasoning = f"{muscle_group} is progressing well; add one weekly set."
        else:
            reasoning = f"{muscle_group} volume is optimal; hold it to consolidate."
    elif status == VolumeStatus.APPROACHING_MRV:
        if trend == VolumeTrend.DECREASING:
            reasoning = f"{muscle_group} is near MRV but already trending down; hold it."
        else:
            recommended = max(current - APPROACHING_MRV_SET_CUT, mav)
            adjustment = VolumeAdjustment.DECREASE
            reasoning = (
                f"{muscle_group} is approaching MRV; trim to {_sets(recommended)} weekly sets."
            )
            timeline = 1
    else:
        recommended = mav
        adjustment = VolumeAdjustment.DELOAD
        reasoning = (
            f"{muscle_group} exceeds MRV; deload back to MAV ({_sets(mav)} sets)."
        )
        confidence = 0.95
        timeline = 1

    return VolumeRecommendation(
        muscle_group=muscle_group,
        current_volume=current,
        recommended_volume=recommended,
        adjustment=adjustment,
        reasoning=reasoning,
        confidence=confidence,
        timeline_weeks=timeline,
        trend=trend,
    )

"""VolumeLandmarkTracker: MEV/MAV/MRV per muscle group and rolling weekly volume."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, timedelta
from typing import Callable

from load_engine.catalog import MUSCLE_GROUPS, ExerciseCatalog
from load_engine.config import EngineConfig
from load_engine.exceptions import StorageError, ValidationError
from load_engine.math.recency import weekly_sets_by_group
from load_engine.math.volume import (
    adaptation_response,
    classify_volume,
    template_landmarks,
    volume_adjustment,
    volume_recommendation,
    volume_targets_for_goal,
    volume_trend,
)
from load_engine.models.enums import (
    PROGRESSION_HISTORY_WEEKS,
    TrainingGoal,
    TrainingLevel,
    VolumeStatus,
)
from load_engine.models.volume import (
    VolumeClassification,
    VolumeLandmark,
    VolumeProgression,
    VolumeRecommendation,
    VolumeSummary,
    VolumeTargets,
)
from load_engine.repositories.base import (
    LandmarkRepository,
    VolumeProgressionRepository,
    WorkoutLogRepository,
)
from load_engine.repositories.memory import InMemoryVolumeProgressionRepository

logger = logging.getLogger(__name__)


class VolumeLandmarkTracker:
    """Tracks landmarks and current weekly volume through a LandmarkRepository.

    Reads fall back to the template for the configured default training
    level, so new users get usable classifications without provisioning.
    """

    def __init__(
        self,
        landmarks: LandmarkRepository,
        logs: WorkoutLogRepository,
        catalog: ExerciseCatalog | None = None,
        config: EngineConfig | None = None,
        today: Callable[[], date] = date.today,
        progressions: VolumeProgressionRepository | None = None,
    ) -> None:
        self._landmarks = landmarks
        self._progressions = progressions or InMemoryVolumeProgressionRepository()
        self._logs = logs
        self._catalog = catalog or ExerciseCatalog()
        self._config = config or EngineConfig()
        self._today = today

    # ------------------------------------------------------------------
    # Landmark CRUD
    # ------------------------------------------------------------------

    def get_landmark(self, user_id: str, muscle_group: str) -> VolumeLandmark | None:
        try:
            return self._landmarks.get(user_id, muscle_group)
        except StorageError as exc:
            logger.warning("Landmark read failed for %s/%s: %s", user_id, muscle_group, exc)
            return None

    def upsert_landmark(self, user_id: str, landmark: VolumeLandmark) -> VolumeLandmark:
        """Create or replace a landmark. Ordering is enforced by VolumeLandmark itself.

        Raises:
            ValidationError: On a user mismatch or an unknown muscle group.
            StorageError: If the write fails.
        """
        if landmark.user_id != user_id:
            raise ValidationError(
                f"Landmark belongs to {landmark.user_id!r}, not {user_id!r}"
            )
        _require_group(landmark.muscle_group)
        self._landmarks.save(landmark)
        return landmark

    def initialize_from_template(
        self, user_id: str, training_level: TrainingLevel
    ) -> list[VolumeLandmark]:
        """Create landmarks for every muscle group from the level's table.

        Existing current volumes are preserved; only mev/mav/mrv are reset.
        """
        created: list[VolumeLandmark] = []
        for group in MUSCLE_GROUPS:
            existing = self._landmarks.get(user_id, group)
            landmark = self._template(
                user_id, group, training_level,
                current_volume=existing.current_volume if existing else 0.0,
            )
            self._landmarks.save(landmark)
            created.append(landmark)
        logger.info(
            "Initialized %d landmarks for %s at %s level",
            len(created), user_id, training_level.name.lower(),
        )
        return created

    # ------------------------------------------------------------------
    # Current volume
    # ------------------------------------------------------------------

    def compute_current_volume(
        self,
        user_id: str,
        muscle_group: str,
        window_weeks: int = 1,
        as_of: date | None = None,
    ) -> float:
        """Average weekly sets for a group over the trailing window, written back.

        Raises:
            ValidationError: If window_weeks < 1 or the group is unknown.
            StorageError: If logs cannot be read or the landmark cannot be saved.
        """
        _require_group(muscle_group)
        volumes = self._weekly_volumes(user_id, window_weeks, as_of)
        volume = volumes[muscle_group]
        self._write_volume(user_id, muscle_group, volume)
        return volume

    def refresh_all(
        self, user_id: str, window_weeks: int = 1, as_of: date | None = None
    ) -> dict[str, float]:
        """Recompute and store current volume for every muscle group in one pass."""
        volumes = self._weekly_volumes(user_id, window_weeks, as_of)
        for group, volume in volumes.items():
            self._write_volume(user_id, group, volume)
        return volumes

    def _weekly_volumes(
        self, user_id: str, window_weeks: int, as_of: date | None
    ) -> dict[str, float]:
        if window_weeks < 1:
            raise ValidationError(f"window_weeks must be >= 1, got {window_weeks}")
        end = as_of or self._today()
        start = end - timedelta(days=7 * window_weeks - 1)
        logs = self._logs.list_logs(user_id, start, end)
        return weekly_sets_by_group(logs, self._catalog, MUSCLE_GROUPS, window_weeks)

    def _write_volume(self, user_id: str, muscle_group: str, volume: float) -> None:
        landmark = self._landmarks.get(user_id, muscle_group)
        if landmark is None:
            landmark = self._template(user_id, muscle_group, self._config.default_training_level)
        self._landmarks.save(dataclasses.replace(landmark, current_volume=volume))

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, user_id: str, muscle_group: str) -> VolumeClassification:
        """Status and advice for one group; untracked groups use template landmarks."""
        _require_group(muscle_group)
        landmark = self.get_landmark(user_id, muscle_group) or self._template(
            user_id, muscle_group, self._config.default_training_level
        )
        return _classify(landmark)

    def tracked_statuses(self, user_id: str) -> dict[str, VolumeStatus]:
        """Status of every group the user actually tracks; empty when none are stored."""
        try:
            landmarks = self._landmarks.list_for_user(user_id)
        except StorageError as exc:
            logger.warning("Landmark list failed for %s: %s", user_id, exc)
            return {}
        return {lm.muscle_group: _classify(lm).status for lm in _ordered(landmarks)}

    def summarize_all(self, user_id: str) -> list[VolumeSummary]:
        """One row per tracked group in taxonomy order.

        Users with nothing stored get template rows, which are not persisted.
        """
        rows: list[VolumeSummary] = []
        for landmark in self._landmarks_or_templates(user_id):
            result = _classify(landmark)
            rows.append(
                VolumeSummary(
                    muscle_group=landmark.muscle_group,
                    mev=landmark.mev,
                    mav=landmark.mav,
                    mrv=landmark.mrv,
                    current_volume=landmark.current_volume,
                    status=result.status,
                    recommendation=result.recommendation,
                    set_delta=result.set_delta,
                )
            )
        return rows

    def volume_targets_for_goal(
        self, user_id: str, muscle_group: str, goal: TrainingGoal
    ) -> VolumeTargets:
        _require_group(muscle_group)
        landmark = self.get_landmark(user_id, muscle_group) or self._template(
            user_id, muscle_group, self._config.default_training_level
        )
        return volume_targets_for_goal(goal, landmark.mev, landmark.mav, landmark.mrv)

    # ------------------------------------------------------------------
    # Progression history
    # ------------------------------------------------------------------

    def record_volume_progression(
        self,
        user_id: str,
        muscle_group: str,
        sets_performed: float,
        target_sets: float,
        fatigue_level: float,
        notes: str = "",
        week_of: date | None = None,
    ) -> VolumeProgression:
        """Record how a week went for a muscle group, graded by adaptation_response.

        The entry is keyed by the Monday of *week_of* (default today); recording
        the same week again replaces it.

        Raises:
            ValidationError: On an unknown group or out-of-range numbers.
            StorageError: If the write fails.
        """
        _require_group(muscle_group)
        if target_sets <= 0:
            raise ValidationError(f"target_sets must be > 0, got {target_sets}")
        day = week_of or self._today()
        progression = VolumeProgression(
            user_id=user_id,
            muscle_group=muscle_group,
            week_start=_monday(day),
            sets_performed=sets_performed,
            target_sets=target_sets,
            fatigue_level=fatigue_level,
            adaptation_response=adaptation_response(sets_performed, target_sets, fatigue_level),
            notes=notes,
        )
        self._progressions.add(progression)
        logger.info(
            "Recorded %s week of %s for %s: %g/%g sets (%s)",
            muscle_group, progression.week_start, user_id, sets_performed, target_sets,
            progression.adaptation_response.name.lower(),
        )
        return progression

    def volume_recommendations(
        self,
        user_id: str,
        history_weeks: int = PROGRESSION_HISTORY_WEEKS,
        as_of: date | None = None,
    ) -> list[VolumeRecommendation]:
        """Set advice per tracked group from its landmarks and recent weekly trend.

        Users with no landmarks get advice against template landmarks. An
        unreadable history is treated as a stable trend.

        Raises:
            ValidationError: If history_weeks < 1.
        """
        if history_weeks < 1:
            raise ValidationError(f"history_weeks must be >= 1, got {history_weeks}")
        since = _monday(as_of or self._today()) - timedelta(weeks=history_weeks)
        try:
            history = self._progressions.list_for_user(user_id, since=since)
        except StorageError as exc:
            logger.warning("Progression history read failed for %s: %s", user_id, exc)
            history = []

        recommendations: list[VolumeRecommendation] = []
        for landmark in self._landmarks_or_templates(user_id):
            weeks = [p.sets_performed for p in history if p.muscle_group == landmark.muscle_group]
            recommendations.append(
                volume_adjustment(
                    landmark.muscle_group,
                    landmark.current_volume,
                    landmark.mev,
                    landmark.mav,
                    landmark.mrv,
                    trend=volume_trend(weeks),
                )
            )
        return recommendations

    def _landmarks_or_templates(self, user_id: str) -> list[VolumeLandmark]:
        try:
            landmarks = self._landmarks.list_for_user(user_id)
        except StorageError as exc:
            logger.warning("Landmark list failed for %s, using templates: %s", user_id, exc)
            landmarks = []
        if not landmarks:
            level = self._config.default_training_level
            landmarks = [self._template(user_id, g, level) for g in MUSCLE_GROUPS]
        return _ordered(landmarks)

    @staticmethod
    def _template(
        user_id: str, muscle_group: str, level: TrainingLevel, current_volume: float = 0.0
    ) -> VolumeLandmark:
        mev, mav, mrv = template_landmarks(level, muscle_group)
        return VolumeLandmark(
            user_id=user_id,
            muscle_group=muscle_group,
            mev=mev,
            mav=mav,
            mrv=mrv,
            current_volume=current_volume,
        )


def _classify(landmark: VolumeLandmark) -> VolumeClassification:
    status = classify_volume(landmark.current_volume, landmark.mev, landmark.mav, landmark.mrv)
    text, delta = volume_recommendation(
        landmark.muscle_group, landmark.current_volume, landmark.mev, landmark.mav, landmark.mrv
    )
    return VolumeClassification(
        muscle_group=landmark.muscle_group,
        status=status,
        recommendation=text,
        current_volume=landmark.current_volume,
        set_delta=delta,
    )


def _ordered(landmarks: list[VolumeLandmark]) -> list[VolumeLandmark]:
    order = {group: i for i, group in enumerate(MUSCLE_GROUPS)}
    return sorted(landmarks, key=lambda lm: order.get(lm.muscle_group, len(order)))


def _monday(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _require_group(muscle_group: str) -> None:
    if muscle_group not in MUSCLE_GROUPS:
        raise ValidationError(f"Unknown muscle group {muscle_group!r}")

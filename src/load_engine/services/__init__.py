"""Stateful services of the training load engine."""

from load_engine.services.deload_advisor import DeloadAdvisor
from load_engine.services.fatigue_tracker import FatigueTracker
from load_engine.services.load_recommender import LoadRecommender
from load_engine.services.muscle_fatigue import MuscleGroupFatigueAnalyzer
from load_engine.services.periodization_planner import PeriodizationPlanner
from load_engine.services.volume_tracker import VolumeLandmarkTracker

__all__ = [
    "DeloadAdvisor",
    "FatigueTracker",
    "LoadRecommender",
    "MuscleGroupFatigueAnalyzer",
    "PeriodizationPlanner",
    "VolumeLandmarkTracker",
]

"""Repository ports and their in-memory implementations."""

from load_engine.repositories.base import (
    DeloadHistoryRepository,
    FatigueRepository,
    LandmarkRepository,
    PlanRepository,
    VolumeProgressionRepository,
    WorkoutLogRepository,
)
from load_engine.repositories.memory import (
    InMemoryDeloadHistoryRepository,
    InMemoryFatigueRepository,
    InMemoryLandmarkRepository,
    InMemoryPlanRepository,
    InMemoryStore,
    InMemoryVolumeProgressionRepository,
    InMemoryWorkoutLogRepository,
)

__all__ = [
    "DeloadHistoryRepository",
    "FatigueRepository",
    "InMemoryDeloadHistoryRepository",
    "InMemoryFatigueRepository",
    "InMemoryLandmarkRepository",
    "InMemoryPlanRepository",
    "InMemoryStore",
    "InMemoryVolumeProgressionRepository",
    "InMemoryWorkoutLogRepository",
    "LandmarkRepository",
    "PlanRepository",
    "VolumeProgressionRepository",
    "WorkoutLogRepository",
]

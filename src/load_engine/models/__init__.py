"""Data models for the training load engine."""

from load_engine.models.context import TrainingLoadContext
from load_engine.models.decision_trace import RuleResult, RuleStatus
from load_engine.models.deload import (
    DeloadInputs,
    DeloadRecommendation,
    DeloadRecord,
    DeloadScheduleConfig,
    DeloadSignal,
)
from load_engine.models.enums import (
    DeloadTiming,
    DeloadType,
    DeloadUrgency,
    MesocyclePhase,
    PeriodizationType,
    Priority,
    ReasonCode,
    RecoveryStatus,
    ScheduleTiming,
    TrainingGoal,
    TrainingLevel,
    VolumeStatus,
)
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import (
    ActivePlanView,
    Macrocycle,
    Mesocycle,
    Microcycle,
    PlanOptions,
    PlanParams,
    PlanResult,
    RoutineDay,
    RoutineExercise,
    WorkoutRoutine,
)
from load_engine.models.recommendation import LoadRecommendation
from load_engine.models.volume import (
    VolumeClassification,
    VolumeLandmark,
    VolumeSummary,
    VolumeTargets,
)
from load_engine.models.workout_log import CompletedSet, WorkoutLog

__all__ = [
    "ActivePlanView",
    "CompletedSet",
    "DeloadInputs",
    "DeloadRecommendation",
    "DeloadRecord",
    "DeloadScheduleConfig",
    "DeloadSignal",
    "DeloadTiming",
    "DeloadType",
    "DeloadUrgency",
    "LoadRecommendation",
    "Macrocycle",
    "Mesocycle",
    "MesocyclePhase",
    "Microcycle",
    "PeriodizationType",
    "PlanOptions",
    "PlanParams",
    "PlanResult",
    "Priority",
    "ReasonCode",
    "RecoveryStatus",
    "RoutineDay",
    "RoutineExercise",
    "RuleResult",
    "RuleStatus",
    "ScheduleTiming",
    "TrainingGoal",
    "TrainingLevel",
    "TrainingLoadContext",
    "UserFatigueState",
    "VolumeClassification",
    "VolumeLandmark",
    "VolumeStatus",
    "VolumeSummary",
    "VolumeTargets",
    "WorkoutLog",
    "WorkoutRoutine",
]

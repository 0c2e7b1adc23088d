"""Enumerations and tunable constants for the training load engine.

Volume landmarks and deload cadences follow the Renaissance Periodization
model where a published source exists.
"""

from enum import IntEnum, auto


class Priority(IntEnum):
    """Deload rule priority tiers; lower value is evaluated first."""

    SAFETY = 0
    RECOVERY = 1
    SCHEDULE = 2


class TrainingLevel(IntEnum):
    """Lifter experience level; selects landmark tables and cycle lengths."""

    BEGINNER = auto()
    INTERMEDIATE = auto()
    ADVANCED = auto()


class TrainingGoal(IntEnum):
    """Primary goal of a training plan."""

    STRENGTH = auto()
    HYPERTROPHY = auto()
    POWER = auto()
    ENDURANCE = auto()
    WEIGHT_LOSS = auto()
    BODY_RECOMPOSITION = auto()
    GENERAL_FITNESS = auto()


class PeriodizationType(IntEnum):
    """Template family that decides the order of loading phases."""

    LINEAR = auto()
    BLOCK = auto()
    UNDULATING = auto()


class MesocyclePhase(IntEnum):
    """Phase tag carried by every mesocycle."""

    FOUNDATION = auto()
    VOLUME = auto()
    INTENSITY = auto()
    STRENGTH = auto()
    PEAKING = auto()
    METABOLIC = auto()
    MAINTENANCE = auto()
    DELOAD = auto()


class VolumeStatus(IntEnum):
    """Weekly volume status, ordered by increasing volume.

    The ordering is relied upon: a higher current volume never maps to a
    lower member.
    """

    BELOW_MEV = auto()
    OPTIMAL = auto()
    APPROACHING_MRV = auto()
    EXCEEDING_MRV = auto()


class AdaptationResponse(IntEnum):
    """How a week of training went relative to its set target and fatigue."""

    POSITIVE = auto()
    NEUTRAL = auto()
    NEGATIVE = auto()


class VolumeTrend(IntEnum):
    """Direction of a muscle group's recorded weekly sets."""

    INCREASING = auto()
    STABLE = auto()
    DECREASING = auto()
    INCONSISTENT = auto()


class VolumeAdjustment(IntEnum):
    """What to do with a muscle group's weekly sets next."""

    INCREASE = auto()
    MAINTAIN = auto()
    DECREASE = auto()
    DELOAD = auto()


class RecoveryStatus(IntEnum):
    """Coarse readiness bucket derived from current fatigue."""

    EXCELLENT = auto()
    GOOD = auto()
    MODERATE = auto()
    POOR = auto()


class DeloadType(IntEnum):
    """What a deload reduces."""

    VOLUME = auto()
    INTENSITY = auto()
    FREQUENCY = auto()
    ACTIVE_RECOVERY = auto()
    COMBINED = auto()


class DeloadTiming(IntEnum):
    """When a recommended deload should start."""

    IMMEDIATE = auto()
    NEXT_WEEK = auto()
    UPCOMING = auto()
    NOT_NEEDED = auto()


class DeloadUrgency(IntEnum):
    """How pressing a deload is, ordered from least to most urgent."""

    NONE = 0
    LOW = 1
    MODERATE = 2
    HIGH = 3
    CRITICAL = 4


class ScheduleTiming(IntEnum):
    """Whether deloads follow the calendar or react to readiness."""

    PLANNED = auto()
    AUTOREGULATED = auto()


class ReasonCode(IntEnum):
    """Machine-readable explanation codes attached to deload recommendations."""

    FATIGUE_ABOVE_THRESHOLD = auto()
    VOLUME_MAJORITY_NEAR_MRV = auto()
    PERFORMANCE_DECLINE = auto()
    SCHEDULED_INTERVAL_REACHED = auto()
    SCHEDULED_DELOAD_APPROACHING = auto()
    MUSCLE_GROUPS_EXCEEDING_MRV = auto()
    NO_DELOAD_HISTORY = auto()
    NO_VOLUME_DATA = auto()
    RECENT_DELOAD = auto()
    WITHIN_TOLERANCE = auto()

    @property
    def code(self) -> str:
        """Lower-case wire form, e.g. ``"fatigue_above_threshold"``."""
        return self.name.lower()


# ---------------------------------------------------------------------------
# Fatigue model
# ---------------------------------------------------------------------------
MAX_FATIGUE = 100.0
DEFAULT_CURRENT_FATIGUE = 30.0
DEFAULT_BASELINE_FATIGUE = 20.0
DEFAULT_RECOVERY_RATE = 5.0  # points per rested day

# Recovery status cut-offs (upper bounds, exclusive)
RECOVERY_EXCELLENT_BELOW = 30.0
RECOVERY_GOOD_BELOW = 50.0
RECOVERY_MODERATE_BELOW = 70.0
READY_TO_TRAIN_BELOW = 80.0

# Workout intensity derivation: every set adds INTENSITY_PER_SET, scaled up
# to 2x as RIR approaches 0.
INTENSITY_PER_SET = 0.5
RIR_CEILING = 4
DEFAULT_RIR = 2

# ---------------------------------------------------------------------------
# Load recommendation
# ---------------------------------------------------------------------------
# Epley-style estimate with RIR folded into reps: 1RM = w * (1 + (reps + rir) / 30)
EPLEY_DIVISOR = 30.0
PLATE_INCREMENT = 2.5
FATIGUE_DISCOUNT_DIVISOR = 400.0
FATIGUE_DISCOUNT_FLOOR = 0.85
OVERREACHED_GROUP_DISCOUNT = 0.95
ALTERNATIVE_WEIGHT_SPREAD = 0.05

# ---------------------------------------------------------------------------
# Muscle group fatigue
# ---------------------------------------------------------------------------
SECONDARY_MUSCLE_WEIGHT = 0.5

# ---------------------------------------------------------------------------
# Volume landmarks: weekly hard sets, Israetel et al. (2019),
# Scientific Principles of Hypertrophy Training
# ---------------------------------------------------------------------------
# (mev, mav, mrv) per muscle group
LANDMARK_TEMPLATES: dict[TrainingLevel, dict[str, tuple[float, float, float]]] = {
    TrainingLevel.BEGINNER: {
        "chest": (6, 14, 18),
        "back": (8, 16, 20),
        "shoulders": (6, 12, 16),
        "quadriceps": (8, 16, 20),
        "hamstrings": (6, 12, 16),
        "glutes": (6, 14, 18),
        "biceps": (4, 10, 14),
        "triceps": (4, 10, 14),
        "calves": (6, 12, 16),
        "abs": (6, 12, 16),
    },
    TrainingLevel.INTERMEDIATE: {
        "chest": (8, 18, 22),
        "back": (10, 20, 25),
        "shoulders": (8, 16, 20),
        "quadriceps": (10, 20, 25),
        "hamstrings": (8, 16, 20),
        "glutes": (8, 18, 22),
        "biceps": (6, 14, 18),
        "triceps": (6, 14, 18),
        "calves": (8, 16, 20),
        "abs": (8, 16, 20),
    },
    TrainingLevel.ADVANCED: {
        "chest": (10, 22, 26),
        "back": (12, 25, 30),
        "shoulders": (10, 20, 24),
        "quadriceps": (12, 25, 30),
        "hamstrings": (10, 20, 24),
        "glutes": (10, 22, 26),
        "biceps": (8, 18, 22),
        "triceps": (8, 18, 22),
        "calves": (10, 20, 24),
        "abs": (10, 20, 24),
    },
}

# ---------------------------------------------------------------------------
# Volume progression
# ---------------------------------------------------------------------------
# (min set completion, max fatigue) for each non-negative adaptation response
ADAPTATION_POSITIVE = (1.0, 60.0)
ADAPTATION_NEUTRAL = (0.8, 80.0)
PROGRESSION_HISTORY_WEEKS = 4
BELOW_MEV_SET_BUMP = 2.0  # recommend mev + this, capped at mav
OPTIMAL_INCREASE_CEILING = 0.8  # of mav; above it optimal volume is held
APPROACHING_MRV_SET_CUT = 2.0

# ---------------------------------------------------------------------------
# Periodization
# ---------------------------------------------------------------------------
WEEKS_PER_YEAR = 52
MIN_PLAN_WEEKS = 4
MIN_TRAINING_FREQUENCY = 2
MAX_TRAINING_FREQUENCY = 7
MIN_DELOAD_FREQUENCY = 2
DELOAD_WEEKS = 1
WEEKLY_VOLUME_PROGRESSION = 0.05  # +5% volume per week inside a loading block

MESOCYCLE_WEEKS: dict[TrainingLevel, int] = {
    TrainingLevel.BEGINNER: 6,
    TrainingLevel.INTERMEDIATE: 5,
    TrainingLevel.ADVANCED: 4,
}

# (volume multiplier, target RIR) for the first week of each phase
PHASE_WEEK_TARGETS: dict[MesocyclePhase, tuple[float, int]] = {
    MesocyclePhase.FOUNDATION: (0.8, 3),
    MesocyclePhase.VOLUME: (1.0, 2),
    MesocyclePhase.INTENSITY: (0.9, 1),
    MesocyclePhase.STRENGTH: (0.8, 1),
    MesocyclePhase.PEAKING: (0.6, 0),
    MesocyclePhase.METABOLIC: (1.0, 1),
    MesocyclePhase.MAINTENANCE: (0.7, 2),
    MesocyclePhase.DELOAD: (0.5, 4),
}

# Load multipliers applied on top of the back-calculated target weight
PHASE_LOAD_ADJUSTMENT: dict[MesocyclePhase, float] = {
    MesocyclePhase.STRENGTH: 1.05,
    MesocyclePhase.PEAKING: 1.075,
    MesocyclePhase.VOLUME: 0.95,
    MesocyclePhase.DELOAD: 0.85,
}

# ---------------------------------------------------------------------------
# Deloads: frequency in weeks; fatigue threshold on the 0-100 fatigue scale;
# performance threshold in percent decline
# ---------------------------------------------------------------------------
DELOAD_DEFAULTS: dict[TrainingLevel, dict[str, float | int | bool]] = {
    TrainingLevel.BEGINNER: {
        "frequency": 8,
        "auto_regulated": False,
        "fatigue_threshold": 85.0,
        "min_weeks_between_deloads": 6,
        "performance_threshold": 15.0,
    },
    TrainingLevel.INTERMEDIATE: {
        "frequency": 6,
        "auto_regulated": True,
        "fatigue_threshold": 75.0,
        "min_weeks_between_deloads": 4,
        "performance_threshold": 10.0,
    },
    TrainingLevel.ADVANCED: {
        "frequency": 4,
        "auto_regulated": True,
        "fatigue_threshold": 70.0,
        "min_weeks_between_deloads": 3,
        "performance_threshold": 8.0,
    },
}

DELOAD_STRATEGY_BY_GOAL: dict[TrainingGoal, DeloadType] = {
    TrainingGoal.STRENGTH: DeloadType.INTENSITY,
    TrainingGoal.HYPERTROPHY: DeloadType.VOLUME,
    TrainingGoal.POWER: DeloadType.FREQUENCY,
    TrainingGoal.ENDURANCE: DeloadType.ACTIVE_RECOVERY,
    TrainingGoal.WEIGHT_LOSS: DeloadType.VOLUME,
    TrainingGoal.BODY_RECOMPOSITION: DeloadType.COMBINED,
    TrainingGoal.GENERAL_FITNESS: DeloadType.VOLUME,
}

DELOAD_DURATION_DAYS: dict[DeloadUrgency, int] = {
    DeloadUrgency.NONE: 0,
    DeloadUrgency.LOW: 3,
    DeloadUrgency.MODERATE: 4,
    DeloadUrgency.HIGH: 5,
    DeloadUrgency.CRITICAL: 7,
}

# (volume %, intensity %, frequency %) cut prescribed by each deload type
DELOAD_REDUCTIONS: dict[DeloadType, tuple[int, int, int]] = {
    DeloadType.VOLUME: (50, 0, 0),
    DeloadType.INTENSITY: (0, 30, 0),
    DeloadType.FREQUENCY: (0, 0, 30),
    DeloadType.ACTIVE_RECOVERY: (50, 30, 0),
    DeloadType.COMBINED: (70, 50, 30),
}

# Fatigue this far above the threshold escalates urgency
FATIGUE_HIGH_MARGIN = 10.0
FATIGUE_CRITICAL_LEVEL = 90.0

# Performance decline: percent drop in average set load (weight x reps)
# between an exercise's two latest sessions, over the last N logs
PERFORMANCE_LOG_WINDOW = 10
PERFORMANCE_HIGH_DECLINE = 15.0
PERFORMANCE_CRITICAL_DECLINE = 20.0

# Deload sets/RIR during a deload week
DELOAD_MIN_SETS = 2
DELOAD_TARGET_RIR = 4

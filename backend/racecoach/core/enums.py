import enum


class FitnessLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SlotType(str, enum.Enum):
    REST = "rest"
    QUICK = "quick"
    STATION = "station"
    COVERAGE = "coverage"
    FULL = "full"
    RUN = "run"
    STRENGTH = "strength"


class StrengthFocus(str, enum.Enum):
    LOWER = "lower"
    UPPER = "upper"
    FULL = "full"


class QuickFocus(str, enum.Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    MIXED = "mixed"


class CompletionStatus(str, enum.Enum):
    FULL = "full"
    PARTIAL = "partial"
    SKIPPED = "skipped"


class Importance(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecoveryAction(str, enum.Enum):
    SKIP = "skip"
    MAKEUP_CONDENSED = "makeup_condensed"
    MAKEUP_FULL = "makeup_full"


class Trend(str, enum.Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class AlertType(str, enum.Enum):
    HIGH_FATIGUE = "high_fatigue"
    LOW_COMPLETION = "low_completion"
    OVERTRAINING = "overtraining"


class AlertSeverity(str, enum.Enum):
    WARNING = "warning"
    CRITICAL = "critical"

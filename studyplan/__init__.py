"""
Study planning and spaced-repetition core.

Components:
- distribute_hours: Split an hour budget across subjects by difficulty
- SessionPlanner: Day-by-day study sessions ahead of exams
- SpacedRepetitionTracker: SM-2 review state per flashcard
- StudyTimeOptimizer: Duration and time-of-day predictions from history
- JsonFileStore / SqliteStore / MemoryStore: Key-value persistence
"""

from studyplan.adaptive import OptimizerConfig, StudyTimeOptimizer
from studyplan.delivery.state_store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SqliteStore,
    StoreError,
)
from studyplan.models import (
    Flashcard,
    FlashcardReviewState,
    ScheduleEntry,
    StudyMetric,
    Subject,
    TimeOfDay,
)
from studyplan.planning import (
    InvalidPlanningWindowError,
    PlannerConfig,
    SessionPlanner,
    distribute_hours,
    generate_schedule,
)
from studyplan.review import SM2Config, SpacedRepetitionTracker, order_by_similarity

__version__ = "0.1.0"

__all__ = [
    # Records
    "Subject",
    "Flashcard",
    "ScheduleEntry",
    "FlashcardReviewState",
    "StudyMetric",
    "TimeOfDay",
    # Planning
    "distribute_hours",
    "generate_schedule",
    "SessionPlanner",
    "PlannerConfig",
    "InvalidPlanningWindowError",
    # Review
    "SpacedRepetitionTracker",
    "SM2Config",
    "order_by_similarity",
    # Optimizer
    "StudyTimeOptimizer",
    "OptimizerConfig",
    # Persistence
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "StoreError",
]

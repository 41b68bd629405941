"""
Study planning: hour distribution and day-by-day session placement.
"""

from studyplan.planning.distributor import distribute_hours
from studyplan.planning.planner import (
    InvalidPlanningWindowError,
    PlannerConfig,
    SessionPlanner,
    generate_schedule,
)

__all__ = [
    "distribute_hours",
    "generate_schedule",
    "InvalidPlanningWindowError",
    "PlannerConfig",
    "SessionPlanner",
]

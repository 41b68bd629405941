"""
Adaptive study-time predictions learned from completed sessions.
"""

from studyplan.adaptive.optimizer import OptimizerConfig, StudyTimeOptimizer

__all__ = [
    "OptimizerConfig",
    "StudyTimeOptimizer",
]

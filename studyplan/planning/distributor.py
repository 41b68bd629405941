"""
Hour Distributor.

Splits a total study-hour budget across subjects in proportion to their
difficulty (or to caller-supplied planning weights).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from loguru import logger

from studyplan.models import Subject
from studyplan.planning.calendar import round_half_up


def distribute_hours(
    subjects: Sequence[Subject],
    total_hours: float,
    weights: Mapping[str, float] | None = None,
) -> dict[str, int]:
    """
    Allocate `total_hours` across subjects proportionally to difficulty.

    Each share is rounded to a whole hour on its own; the rounded shares are
    not renormalized, so their sum may drift from `total_hours` by up to half
    an hour per subject.

    Args:
        subjects: Subjects to allocate hours to
        total_hours: Non-negative hour budget
        weights: Optional per-subject weight overriding `difficulty`

    Returns:
        Mapping of subject id to whole-hour allocation
    """
    if not subjects:
        return {}

    def weight_of(subject: Subject) -> float:
        if weights is not None and subject.id in weights:
            return max(0.0, float(weights[subject.id]))
        return float(subject.difficulty)

    total_weight = sum(weight_of(subject) for subject in subjects)

    if total_weight <= 0:
        logger.warning(
            f"Total weight across {len(subjects)} subjects is zero; allocating no hours"
        )
        return {subject.id: 0 for subject in subjects}

    return {
        subject.id: max(0, round_half_up(weight_of(subject) / total_weight * total_hours))
        for subject in subjects
    }

"""
Unit tests for the hour distributor.
"""

from datetime import date

import pytest

from studyplan.models import Subject
from studyplan.planning.distributor import distribute_hours


def make_subjects(*difficulties):
    return [
        Subject(id=f"s{i}", name=f"Subject {i}", exam_date=date(2026, 4, 1), difficulty=d)
        for i, d in enumerate(difficulties)
    ]


class TestDistributeHours:
    def test_proportional_to_difficulty(self, subjects):
        assert distribute_hours(subjects, 60) == {"A": 50, "B": 10}

    def test_empty_subject_list(self):
        assert distribute_hours([], 60) == {}

    def test_zero_total_hours(self, subjects):
        assert distribute_hours(subjects, 0) == {"A": 0, "B": 0}

    def test_zero_total_difficulty_allocates_nothing(self):
        subjects = make_subjects(0, 0)
        assert distribute_hours(subjects, 10) == {"s0": 0, "s1": 0}

    def test_shares_rounded_independently(self):
        # 5/3 = 1.67 rounds up for each subject; no renormalization
        assert distribute_hours(make_subjects(1, 1, 1), 5) == {"s0": 2, "s1": 2, "s2": 2}

    @pytest.mark.parametrize(
        "difficulties,total",
        [((1, 2, 3), 7), ((5, 5, 1, 2), 13), ((3,), 2.5), ((4, 1), 0.4)],
    )
    def test_rounding_slack_is_bounded(self, difficulties, total):
        allocation = distribute_hours(make_subjects(*difficulties), total)
        assert all(hours >= 0 for hours in allocation.values())
        assert sum(allocation.values()) <= total + len(difficulties) * 0.5

    def test_weights_override_difficulty(self, subjects):
        allocation = distribute_hours(subjects, 60, weights={"A": 1.0, "B": 1.0})
        assert allocation == {"A": 30, "B": 30}

    def test_missing_weight_falls_back_to_difficulty(self, subjects):
        allocation = distribute_hours(subjects, 60, weights={"A": 5.0})
        assert allocation == {"A": 50, "B": 10}

"""
Unit tests for calendar and duration helpers.
"""

from datetime import date, datetime

from studyplan.planning.calendar import (
    add_days,
    as_date,
    at_hour,
    days_between,
    iter_days,
    round_half_up,
    round_to_half_hour,
)


class TestDaysBetween:
    def test_consecutive_dates(self):
        assert days_between(date(2026, 3, 2), date(2026, 3, 3)) == 1

    def test_order_does_not_matter(self):
        assert days_between(date(2026, 3, 12), date(2026, 3, 2)) == 10

    def test_partial_day_rounds_up(self):
        start = datetime(2026, 3, 2, 10, 0)
        end = datetime(2026, 3, 3, 9, 0)
        assert days_between(start, end) == 1

    def test_mixed_date_and_datetime(self):
        assert days_between(date(2026, 3, 2), datetime(2026, 3, 5, 18, 0)) == 3

    def test_same_day_is_zero(self):
        assert days_between(date(2026, 3, 2), date(2026, 3, 2)) == 0


class TestIterDays:
    def test_inclusive_range(self):
        days = list(iter_days(date(2026, 2, 27), date(2026, 3, 2)))
        assert days == [
            date(2026, 2, 27),
            date(2026, 2, 28),
            date(2026, 3, 1),
            date(2026, 3, 2),
        ]

    def test_empty_when_reversed(self):
        assert list(iter_days(date(2026, 3, 3), date(2026, 3, 2))) == []


class TestRounding:
    def test_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(15.6) == 16
        assert round_half_up(0.49) == 0

    def test_half_hour(self):
        assert round_to_half_hour(0.25) == 0.5
        assert round_to_half_hour(0.74) == 0.5
        assert round_to_half_hour(0.75) == 1.0
        assert round_to_half_hour(1.2) == 1.0
        assert round_to_half_hour(0.2) == 0.0


class TestMoments:
    def test_at_hour(self):
        assert at_hour(date(2026, 3, 2), 13) == datetime(2026, 3, 2, 13, 0)

    def test_at_hour_stays_on_the_same_day(self):
        assert at_hour(date(2026, 3, 2), 25) == datetime(2026, 3, 2, 23, 0)

    def test_add_days_keeps_time(self):
        assert add_days(datetime(2026, 3, 2, 10, 30), 6) == datetime(2026, 3, 8, 10, 30)

    def test_as_date(self):
        assert as_date(datetime(2026, 3, 2, 10, 30)) == date(2026, 3, 2)
        assert as_date(date(2026, 3, 2)) == date(2026, 3, 2)

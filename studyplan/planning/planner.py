"""
Session Planner.

Turns a set of subjects, a planning window and a daily hour budget into
concrete study sessions:

1. The total budget (days x daily hours) is split across subjects by the
   hour distributor and written back to each subject's `time_to_spend`.
2. Subjects are ordered by exam date, nearest first.
3. Each day, the subjects that still have hours left and whose exam has not
   passed share the daily budget evenly. Each share is capped by the
   subject's remaining hours and rounded to the nearest half hour; zero-hour
   shares are dropped.
4. Sessions are placed at a time of day chosen by the placement policy.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from uuid import uuid4

from loguru import logger

from studyplan.models import ScheduleEntry, Subject, TimeOfDay
from studyplan.planning.calendar import (
    as_date,
    at_hour,
    days_between,
    iter_days,
    round_to_half_hour,
)
from studyplan.planning.distributor import distribute_hours


class InvalidPlanningWindowError(ValueError):
    """Raised when the planning window does not end after it starts."""

    def __init__(self, start_date: date, end_date: date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"End date {end_date.isoformat()} must be after start date {start_date.isoformat()}"
        )


@dataclass
class PlannerConfig:
    """Configuration for session placement and budget sizing."""

    morning_start_hour: int = 9
    afternoon_start_hour: int = 13
    evening_start_hour: int = 18
    distributed_start_hour: int = 9
    distributed_step_hours: int = 4
    distributed_window_hours: int = 12
    # False: budget days = days spanned by the window (end day not counted)
    count_end_day: bool = False

    @classmethod
    def from_settings(cls, settings) -> PlannerConfig:
        return cls(
            morning_start_hour=settings.morning_start_hour,
            afternoon_start_hour=settings.afternoon_start_hour,
            evening_start_hour=settings.evening_start_hour,
            distributed_start_hour=settings.distributed_start_hour,
            distributed_step_hours=settings.distributed_step_hours,
            distributed_window_hours=settings.distributed_window_hours,
            count_end_day=settings.count_end_day,
        )


class SessionPlanner:
    """
    Builds a day-by-day study schedule ahead of a set of exams.

    The planner is stateless between calls apart from its configuration;
    it mutates only the `time_to_spend` field of the subjects it is given.
    """

    def __init__(
        self,
        config: PlannerConfig | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """
        Initialize the planner.

        Args:
            config: Placement configuration (uses defaults if None)
            id_factory: Generates ScheduleEntry ids (random UUIDs if None)
        """
        self.config = config or PlannerConfig()
        self.id_factory = id_factory or (lambda: str(uuid4()))

    def budget_days(self, start_date: date, end_date: date) -> int:
        """Number of days that contribute to the total hour budget."""
        days = days_between(start_date, end_date)
        if self.config.count_end_day:
            days += 1
        return days

    def session_hour(self, time_of_day: TimeOfDay, index: int) -> int:
        """Start hour of the `index`-th session of a day."""
        cfg = self.config
        if time_of_day == TimeOfDay.MORNING:
            return cfg.morning_start_hour + index
        if time_of_day == TimeOfDay.AFTERNOON:
            return cfg.afternoon_start_hour + index
        if time_of_day == TimeOfDay.EVENING:
            return cfg.evening_start_hour + index
        return cfg.distributed_start_hour + (
            (index * cfg.distributed_step_hours) % cfg.distributed_window_hours
        )

    def generate(
        self,
        subjects: Sequence[Subject],
        start_date: date | datetime,
        end_date: date | datetime,
        daily_hours: float,
        preferred_time_of_day: TimeOfDay | str = TimeOfDay.DISTRIBUTED,
        weights: Mapping[str, float] | None = None,
    ) -> list[ScheduleEntry]:
        """
        Generate study sessions between two dates.

        Args:
            subjects: Subjects to plan for (their time_to_spend is overwritten)
            start_date: First day of the plan
            end_date: Last day of the plan, must be after start_date
            daily_hours: Hour budget per day
            preferred_time_of_day: Session placement policy
            weights: Optional planning weights passed to the distributor

        Returns:
            Schedule entries in chronological order

        Raises:
            InvalidPlanningWindowError: If end_date is not after start_date
        """
        if not subjects:
            return []

        start, end = as_date(start_date), as_date(end_date)
        if end <= start:
            raise InvalidPlanningWindowError(start, end)

        time_of_day = TimeOfDay(preferred_time_of_day)
        total_hours = self.budget_days(start, end) * daily_hours

        allocation = distribute_hours(subjects, total_hours, weights=weights)
        for subject in subjects:
            subject.time_to_spend = allocation.get(subject.id, 0)

        ordered = sorted(subjects, key=lambda s: as_date(s.exam_date))
        remaining = {subject.id: float(subject.time_to_spend or 0) for subject in ordered}

        schedule: list[ScheduleEntry] = []

        for day in iter_days(start, end):
            candidates = [
                subject
                for subject in ordered
                if remaining[subject.id] > 0 and day <= as_date(subject.exam_date)
            ]
            if not candidates:
                continue

            remaining_today = daily_hours
            even_share = daily_hours / len(candidates)

            for index, subject in enumerate(candidates):
                hours = round_to_half_hour(min(remaining[subject.id], even_share))
                if hours <= 0:
                    continue

                schedule.append(
                    ScheduleEntry(
                        id=self.id_factory(),
                        subject_id=subject.id,
                        date=at_hour(day, self.session_hour(time_of_day, index)),
                        duration=hours,
                    )
                )
                remaining[subject.id] -= hours
                remaining_today -= hours

            logger.debug(
                f"{day.isoformat()}: {len(candidates)} subjects, "
                f"{daily_hours - remaining_today:g}h planned"
            )

        logger.info(
            f"Schedule generated: {len(schedule)} sessions for {len(subjects)} subjects "
            f"({start.isoformat()} to {end.isoformat()}, {time_of_day.value})"
        )

        return schedule


def generate_schedule(
    subjects: Sequence[Subject],
    start_date: date | datetime,
    end_date: date | datetime,
    daily_hours: float,
    preferred_time_of_day: TimeOfDay | str = TimeOfDay.DISTRIBUTED,
    weights: Mapping[str, float] | None = None,
    config: PlannerConfig | None = None,
) -> list[ScheduleEntry]:
    """Generate a schedule with a one-off SessionPlanner."""
    return SessionPlanner(config).generate(
        subjects,
        start_date,
        end_date,
        daily_hours,
        preferred_time_of_day,
        weights=weights,
    )

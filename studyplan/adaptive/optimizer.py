"""
Study-Time Optimizer.

Learns from completed study sessions:
- Per-subject optimal duration: average study time of past sessions,
  weighted by (performance/100) * (1 - fatigue/100), blended with a
  difficulty-based baseline.
- Best time of day: the bucket (morning/afternoon/evening) with the highest
  average performance, or "distributed" when there is too little data or
  the buckets are too close to call.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from itertools import combinations
from typing import TYPE_CHECKING

from loguru import logger

from studyplan.models import ScheduleEntry, StudyMetric, Subject, TimeOfDay

if TYPE_CHECKING:
    from studyplan.delivery.state_store import KeyValueStore

METRICS_KEY = "studyMetrics"
WEIGHTS_KEY = "subjectWeights"


@dataclass
class OptimizerConfig:
    """Configuration for duration and time-of-day predictions."""

    hours_per_difficulty: float = 0.5
    history_blend: float = 0.7  # Share of the learned duration
    min_metrics_for_time_of_day: int = 5
    distributed_threshold: float = 10.0  # Performance points

    # Bucket boundaries (hour of day); evening wraps past midnight
    morning_start: int = 5
    afternoon_start: int = 12
    evening_start: int = 18

    @classmethod
    def from_settings(cls, settings) -> OptimizerConfig:
        return cls(
            hours_per_difficulty=settings.hours_per_difficulty,
            history_blend=settings.history_blend,
            min_metrics_for_time_of_day=settings.min_metrics_for_time_of_day,
            distributed_threshold=settings.distributed_threshold,
            morning_start=settings.morning_bucket_start,
            afternoon_start=settings.afternoon_bucket_start,
            evening_start=settings.evening_bucket_start,
        )

    def bucket_for(self, moment: datetime) -> TimeOfDay:
        hour = moment.hour
        if self.morning_start <= hour < self.afternoon_start:
            return TimeOfDay.MORNING
        if self.afternoon_start <= hour < self.evening_start:
            return TimeOfDay.AFTERNOON
        return TimeOfDay.EVENING


class StudyTimeOptimizer:
    """
    Keeps an append-only log of study metrics and predicts from it.

    Mutations (append plus weight recompute) and snapshots are serialized
    by an instance lock.
    """

    def __init__(
        self,
        config: OptimizerConfig | None = None,
        metrics: Iterable[StudyMetric] | None = None,
    ):
        """
        Initialize the optimizer.

        Args:
            config: Prediction constants (uses defaults if None)
            metrics: Previously recorded metrics, oldest first
        """
        self.config = config or OptimizerConfig()
        self._metrics: list[StudyMetric] = list(metrics or [])
        self._weights: dict[str, float] = {}
        self._lock = threading.RLock()
        self._update_weights()

    @property
    def metrics(self) -> list[StudyMetric]:
        with self._lock:
            return list(self._metrics)

    @property
    def subject_weights(self) -> dict[str, float]:
        with self._lock:
            return dict(self._weights)

    def add_metric(self, metric: StudyMetric) -> None:
        """Append a metric and refresh the learned per-subject durations."""
        with self._lock:
            self._metrics.append(metric)
            self._update_weights()

        logger.debug(
            f"Metric added for {metric.subject_id}: {metric.study_time}h, "
            f"performance={metric.performance}, fatigue={metric.fatigue}"
        )

    def _update_weights(self) -> None:
        totals: dict[str, float] = defaultdict(float)
        weight_sums: dict[str, float] = defaultdict(float)

        for metric in self._metrics:
            totals[metric.subject_id] += metric.study_time * metric.weight
            weight_sums[metric.subject_id] += metric.weight

        for subject_id, weight_sum in weight_sums.items():
            if weight_sum == 0:
                continue
            self._weights[subject_id] = totals[subject_id] / weight_sum

    def predict_optimal_duration(self, subject_id: str, difficulty: float) -> float:
        """
        Predict a session length in hours for a subject.

        Blends the learned duration (if any) with difficulty x 0.5h.
        """
        base = difficulty * self.config.hours_per_difficulty

        with self._lock:
            learned = self._weights.get(subject_id)

        if learned is None:
            return base

        blend = self.config.history_blend
        return learned * blend + base * (1 - blend)

    def predict_best_time_of_day(
        self,
        metrics: Sequence[StudyMetric] | None = None,
    ) -> TimeOfDay:
        """
        Recommend the time of day with the best average performance.

        Args:
            metrics: Metrics to analyse (the optimizer's own log if None)

        Returns:
            A TimeOfDay; DISTRIBUTED when there are too few metrics or all
            bucket averages are within the threshold of each other
        """
        if metrics is None:
            metrics = self.metrics

        if len(metrics) < self.config.min_metrics_for_time_of_day:
            return TimeOfDay.DISTRIBUTED

        buckets: dict[TimeOfDay, list[float]] = {
            TimeOfDay.MORNING: [],
            TimeOfDay.AFTERNOON: [],
            TimeOfDay.EVENING: [],
        }
        for metric in metrics:
            buckets[self.config.bucket_for(metric.timestamp)].append(metric.performance)

        averages = {
            bucket: (sum(values) / len(values) if values else 0.0)
            for bucket, values in buckets.items()
        }

        threshold = self.config.distributed_threshold
        if all(abs(a - b) < threshold for a, b in combinations(averages.values(), 2)):
            return TimeOfDay.DISTRIBUTED

        # Ties resolve in morning, afternoon, evening order
        return max(averages, key=lambda bucket: averages[bucket])

    def record_session(
        self,
        entry: ScheduleEntry,
        performance: float,
        fatigue: float,
        now: datetime | None = None,
    ) -> StudyMetric | None:
        """
        Mark a scheduled session completed and learn from it.

        Args:
            entry: The session that was studied
            performance: Performance score, 0-100
            fatigue: Fatigue score, 0-100
            now: When it was studied (the scheduled time if None)

        Returns:
            The recorded metric, or None if the entry was already completed
        """
        if entry.completed:
            logger.debug(f"Session {entry.id} already completed; ignoring")
            return None

        metric = StudyMetric(
            subject_id=entry.subject_id,
            study_time=entry.duration,
            performance=performance,
            fatigue=fatigue,
            timestamp=now or entry.date,
        )
        self.add_metric(metric)
        entry.completed = True
        return metric

    def planning_weights(self, subjects: Sequence[Subject]) -> dict[str, float]:
        """Per-subject weights for the hour distributor."""
        return {
            subject.id: self.predict_optimal_duration(subject.id, subject.difficulty)
            for subject in subjects
        }

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_snapshot(self) -> dict[str, list]:
        with self._lock:
            return {
                METRICS_KEY: [metric.to_dict() for metric in self._metrics],
                WEIGHTS_KEY: [[subject_id, weight] for subject_id, weight in self._weights.items()],
            }

    @classmethod
    def from_snapshot(
        cls,
        metrics_blob: list[dict] | None,
        config: OptimizerConfig | None = None,
    ) -> StudyTimeOptimizer:
        if metrics_blob is not None and not isinstance(metrics_blob, list):
            logger.warning(
                f"Metric log has unexpected type {type(metrics_blob).__name__}; starting empty"
            )
            metrics_blob = None

        metrics: list[StudyMetric] = []
        for data in metrics_blob or []:
            try:
                metrics.append(StudyMetric.from_dict(data))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed study metric: {e}")
        return cls(config=config, metrics=metrics)

    def save(self, store: KeyValueStore) -> None:
        snapshot = self.to_snapshot()
        store.save(METRICS_KEY, snapshot[METRICS_KEY])
        store.save(WEIGHTS_KEY, snapshot[WEIGHTS_KEY])

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        config: OptimizerConfig | None = None,
    ) -> StudyTimeOptimizer:
        """
        Rebuild an optimizer from a store.

        Weights are recomputed from the metric log; the stored weights are
        written for other readers only.
        """
        optimizer = cls.from_snapshot(store.load(METRICS_KEY), config=config)
        logger.debug(f"Loaded {len(optimizer.metrics)} study metrics")
        return optimizer

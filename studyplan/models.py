"""
Domain records shared by the planner, the review tracker and the optimizer.

These are plain value objects. Entities owned by the caller (subjects,
flashcards) are referenced by id only; nothing here holds a pointer to
another record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import uuid4


class TimeOfDay(str, Enum):
    """Preferred placement of study sessions within a day."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    DISTRIBUTED = "distributed"


@dataclass
class Subject:
    """
    A subject the learner is preparing an exam for.

    Attributes:
        id: Caller-supplied identifier.
        name: Display name.
        exam_date: Calendar date of the exam.
        difficulty: Declared difficulty, 1 (easy) to 5 (hard).
        time_to_spend: Hour budget, written back by the planner.
    """

    id: str
    name: str
    exam_date: date
    difficulty: int
    time_to_spend: float | None = None


@dataclass
class Flashcard:
    """A question/answer card belonging to a subject."""

    id: str
    subject_id: str
    question: str
    answer: str


@dataclass
class ScheduleEntry:
    """A single planned study session."""

    subject_id: str
    date: datetime
    duration: float  # hours, multiple of 0.5
    completed: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScheduleEntry:
        return cls(
            id=data["id"],
            subject_id=data["subject_id"],
            date=datetime.fromisoformat(data["date"]),
            duration=float(data["duration"]),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class FlashcardReviewState:
    """SM-2 review state for a single flashcard."""

    card_id: str
    correct: int = 0
    incorrect: int = 0
    interval: int = 1  # days
    ease_factor: float = 2.5
    next_review: datetime | None = None

    @property
    def total_responses(self) -> int:
        return self.correct + self.incorrect

    def is_due(self, now: datetime) -> bool:
        """Check if this card is due at `now`."""
        if self.next_review is None:
            return True
        return self.next_review <= now

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "incorrect": self.incorrect,
            "interval": self.interval,
            "ease_factor": self.ease_factor,
            "next_review": self.next_review.isoformat() if self.next_review else None,
        }

    @classmethod
    def from_dict(cls, card_id: str, data: dict) -> FlashcardReviewState:
        next_review = data.get("next_review")
        return cls(
            card_id=card_id,
            correct=int(data["correct"]),
            incorrect=int(data["incorrect"]),
            interval=int(data["interval"]),
            ease_factor=float(data["ease_factor"]),
            next_review=datetime.fromisoformat(next_review) if next_review else None,
        )


@dataclass(frozen=True)
class StudyMetric:
    """
    One observation of a finished study session.

    Attributes:
        subject_id: Subject the session was about.
        study_time: Hours studied.
        performance: Self-reported or measured performance, 0-100.
        fatigue: Fatigue at the end of the session, 0-100.
        timestamp: When the session took place.
    """

    subject_id: str
    study_time: float
    performance: float
    fatigue: float
    timestamp: datetime

    @property
    def weight(self) -> float:
        """Higher performance with lower fatigue counts for more."""
        return (self.performance / 100) * (1 - self.fatigue / 100)

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "study_time": self.study_time,
            "performance": self.performance,
            "fatigue": self.fatigue,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> StudyMetric:
        return cls(
            subject_id=data["subject_id"],
            study_time=float(data["study_time"]),
            performance=float(data["performance"]),
            fatigue=float(data["fatigue"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

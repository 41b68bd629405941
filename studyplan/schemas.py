"""
Input schemas for JSON documents read by the CLI.

Validation happens here, at the boundary; the planning core works on the
plain dataclasses in studyplan.models.
"""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from studyplan.models import Flashcard, StudyMetric, Subject


class SubjectIn(BaseModel):
    """A subject entry in a subjects file."""

    id: str = Field(..., min_length=1, description="Subject identifier")
    name: str = Field(..., description="Display name")
    exam_date: date = Field(..., description="Exam date (YYYY-MM-DD)")
    difficulty: int = Field(..., ge=1, le=5, description="Difficulty from 1 to 5")
    time_to_spend: float | None = Field(None, ge=0)

    def to_subject(self) -> Subject:
        return Subject(
            id=self.id,
            name=self.name,
            exam_date=self.exam_date,
            difficulty=self.difficulty,
            time_to_spend=self.time_to_spend,
        )


class FlashcardIn(BaseModel):
    """A flashcard entry in a cards file."""

    id: str = Field(..., min_length=1)
    subject_id: str
    question: str
    answer: str
    embedding: list[float] | None = Field(
        None, description="Optional content embedding for similarity ordering"
    )

    def to_flashcard(self) -> Flashcard:
        return Flashcard(
            id=self.id,
            subject_id=self.subject_id,
            question=self.question,
            answer=self.answer,
        )


class StudyMetricIn(BaseModel):
    """A study metric submitted by a caller."""

    subject_id: str
    study_time: float = Field(..., ge=0, description="Hours studied")
    performance: float = Field(..., ge=0, le=100)
    fatigue: float = Field(..., ge=0, le=100)
    timestamp: datetime

    def to_metric(self) -> StudyMetric:
        return StudyMetric(
            subject_id=self.subject_id,
            study_time=self.study_time,
            performance=self.performance,
            fatigue=self.fatigue,
            timestamp=self.timestamp,
        )


_subjects_adapter = TypeAdapter(list[SubjectIn])
_cards_adapter = TypeAdapter(list[FlashcardIn])


def load_subjects(path: Path) -> list[Subject]:
    """
    Read and validate a JSON list of subjects.

    Malformed JSON is reported as a ValidationError like any other bad input.
    """
    return [item.to_subject() for item in _subjects_adapter.validate_json(Path(path).read_bytes())]


def load_flashcards(path: Path) -> list[FlashcardIn]:
    """Read and validate a JSON list of flashcards."""
    return _cards_adapter.validate_json(Path(path).read_bytes())

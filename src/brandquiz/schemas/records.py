"""Persisted quiz aggregate, responses, and scoring output.

Records are addressed by store-assigned identifiers; ``id`` is None until the
record has been inserted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from brandquiz.schemas.quiz import QuestionType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuizStatus(str, Enum):
    """Quiz lifecycle."""

    DRAFT = "draft"
    LIVE = "live"
    ARCHIVED = "archived"


class Record(BaseModel):
    """Base for everything the store holds."""

    id: Optional[str] = None


class QuizRecord(Record):
    workspace_id: Optional[str] = None
    slug: str
    title: str
    description: Optional[str] = None
    status: QuizStatus = QuizStatus.DRAFT
    ai_concept: Optional[dict[str, Any]] = None
    created_at: datetime = Field(default_factory=_utcnow)


class QuestionRecord(Record):
    quiz_id: str
    sort_order: int
    text: str
    question_type: QuestionType = "single_choice"
    data_dimension: Optional[str] = None
    insight: Optional[str] = None


class AnswerOptionRecord(Record):
    question_id: str
    sort_order: int
    text: str


class ResultTypeRecord(Record):
    quiz_id: str
    sort_order: int
    name: str
    description: str
    recommendation_detail: Optional[str] = None
    colour: Optional[str] = None


class ScoringMappingRecord(Record):
    """Weighted edge between one answer option and one result type."""

    answer_option_id: str
    result_type_id: str
    weight: int = Field(default=1, ge=1)


class ResponseRecord(Record):
    quiz_id: str
    result_type_id: Optional[str] = None
    respondent_email: Optional[str] = None
    ip_hash: Optional[str] = None
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None


class ResponseAnswerRecord(Record):
    response_id: str
    question_id: str
    answer_option_id: str


class ScoreResult(BaseModel):
    """Winning result type for a set of selected options."""

    result_type_id: str
    name: str
    description: str
    recommendation_detail: Optional[str] = None
    colour: Optional[str] = None
    score: int

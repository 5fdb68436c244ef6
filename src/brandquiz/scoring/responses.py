"""Record a respondent's submission and its scored result."""

import hashlib
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from brandquiz.core.errors import NotFoundError
from brandquiz.core.logging import get_logger
from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizRecord,
    QuizStatus,
    ResponseAnswerRecord,
    ResponseRecord,
    ScoreResult,
)
from brandquiz.scoring.engine import ScoringEngine
from brandquiz.storage.base import QuizStore

logger = get_logger("brandquiz.responses")


class SubmittedAnswer(BaseModel):
    question_id: str = Field(min_length=1)
    option_id: str = Field(min_length=1)


class Submission(BaseModel):
    """A completed quiz as sent by the respondent."""

    answers: list[SubmittedAnswer] = Field(min_length=1)
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v


def hash_ip(ip: Optional[str], secret: str) -> str:
    """Salted, truncated SHA-256 of the client IP; the raw IP is never stored."""
    return hashlib.sha256(((ip or "unknown") + secret).encode("utf-8")).hexdigest()[:16]


class ResponseRecorder:
    """Validates, scores and stores submissions for live quizzes."""

    def __init__(self, store: QuizStore, ip_hash_secret: str = ""):
        self.store = store
        self.ip_hash_secret = ip_hash_secret
        self.engine = ScoringEngine(store)

    def _live_quiz(self, slug: str) -> QuizRecord:
        matches = self.store.find(QuizRecord, slug=slug)
        if not matches or matches[0].status != QuizStatus.LIVE:
            raise NotFoundError(f"Quiz '{slug}' not found or not live")
        return matches[0]

    def _check_answers(self, quiz: QuizRecord, submission: Submission) -> None:
        """
        Every answer must name an option of the named question of this quiz,
        no option may be answered twice, and single_choice questions take one
        answer at most.

        Raises:
            ValueError: On the first inconsistent answer
        """
        questions = {q.id: q for q in self.store.find(QuestionRecord, quiz_id=quiz.id)}
        options = {
            option.id: option
            for option in self.store.find_in(
                AnswerOptionRecord, "question_id", list(questions)
            )
        }

        answered: dict[str, int] = {}
        chosen: set[tuple[str, str]] = set()
        for answer in submission.answers:
            question = questions.get(answer.question_id)
            if question is None:
                raise ValueError(f"Question {answer.question_id} is not part of this quiz")
            option = options.get(answer.option_id)
            if option is None or option.question_id != question.id:
                raise ValueError(
                    f"Option {answer.option_id} does not belong to question {question.id}"
                )
            if (question.id, option.id) in chosen:
                raise ValueError(f"Option {option.id} is answered more than once")
            chosen.add((question.id, option.id))
            answered[question.id] = answered.get(question.id, 0) + 1
            if question.question_type == "single_choice" and answered[question.id] > 1:
                raise ValueError(f"Question {question.id} accepts a single answer")

    def submit(
        self,
        slug: str,
        submission: Submission,
        ip: Optional[str] = None,
    ) -> tuple[ResponseRecord, ScoreResult]:
        """
        Score a submission and store it with its answers as one unit.

        Returns:
            The stored response and the score that produced its result

        Raises:
            NotFoundError: If the quiz does not exist or is not live
            ValueError: If the answers do not fit the quiz, or no result can be computed
        """
        quiz = self._live_quiz(slug)
        self._check_answers(quiz, submission)

        score = self.engine.score(quiz.id, [answer.option_id for answer in submission.answers])
        if score is None:
            raise ValueError("Unable to calculate result")

        response = ResponseRecord(
            quiz_id=quiz.id,
            result_type_id=score.result_type_id,
            respondent_email=submission.email,
            ip_hash=hash_ip(ip, self.ip_hash_secret),
            completed_at=datetime.now(timezone.utc),
        )
        with self.store.transaction():
            response_id = self.store.insert(response)
            for answer in submission.answers:
                self.store.insert(
                    ResponseAnswerRecord(
                        response_id=response_id,
                        question_id=answer.question_id,
                        answer_option_id=answer.option_id,
                    )
                )

        logger.info(
            f"Recorded response for quiz '{slug}'",
            context={"quiz_id": quiz.id, "result_type": score.name, "score": score.score},
        )
        return response.model_copy(update={"id": response_id}), score

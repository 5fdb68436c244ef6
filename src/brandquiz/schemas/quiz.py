"""Schema for the quiz structure stage output.

Questions and options carry no identifiers: their position in the arrays is
the address later stages use.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

MIN_QUESTIONS = 8
MAX_QUESTIONS = 12
MIN_OPTIONS = 3
MAX_OPTIONS = 6

QuestionType = Literal["single_choice", "multi_select"]


class GeneratedOption(BaseModel):
    """An answer option."""

    text: str = Field(min_length=1)


class GeneratedQuestion(BaseModel):
    """A question with its answer options in display order."""

    text: str = Field(min_length=1)
    question_type: QuestionType = Field(description="single_choice or multi_select")
    options: list[GeneratedOption] = Field(min_length=MIN_OPTIONS, max_length=MAX_OPTIONS)
    data_dimension: Optional[str] = Field(
        default=None,
        description="Which concept data dimension this question captures",
    )
    insight: Optional[str] = Field(
        default=None,
        description="What the answer reveals about the respondent (internal only)",
    )

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, v):
        """Accept bare strings as options."""
        if isinstance(v, list):
            return [{"text": item} if isinstance(item, str) else item for item in v]
        return v


class GeneratedQuiz(BaseModel):
    """Complete quiz structure, index-addressed."""

    title: str = Field(min_length=1)
    intro_text: str = Field(min_length=20)
    questions: list[GeneratedQuestion] = Field(
        min_length=MIN_QUESTIONS,
        max_length=MAX_QUESTIONS,
    )

    @property
    def option_counts(self) -> list[int]:
        """Number of options per question, by question index."""
        return [len(question.options) for question in self.questions]

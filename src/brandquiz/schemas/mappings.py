"""Schema for the result types and scoring matrix stage output."""

from typing import Optional

from pydantic import BaseModel, Field

MIN_RESULT_TYPES = 4
MAX_RESULT_TYPES = 8
MIN_MAPPINGS = 10
MIN_WEIGHT = 1
MAX_WEIGHT = 3


class GeneratedResultType(BaseModel):
    """A possible quiz outcome."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=20)
    recommendation_detail: Optional[str] = Field(
        default=None,
        description="The concrete recommendation the quiz-taker receives",
    )


class MappingEntry(BaseModel):
    """Weighted edge from (question, option) to a result type, all by array index."""

    question_index: int = Field(ge=0)
    option_index: int = Field(ge=0)
    result_type_index: int = Field(ge=0)
    weight: int = Field(ge=MIN_WEIGHT, le=MAX_WEIGHT)


class GeneratedResultMappings(BaseModel):
    """Result types plus the index-addressed scoring matrix."""

    result_types: list[GeneratedResultType] = Field(
        min_length=MIN_RESULT_TYPES,
        max_length=MAX_RESULT_TYPES,
    )
    mappings: list[MappingEntry] = Field(min_length=MIN_MAPPINGS)

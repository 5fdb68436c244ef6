"""Schema for the quiz concept stage output."""

from typing import Optional

from pydantic import BaseModel, Field, RootModel, field_validator

MIN_CONCEPTS = 3
MAX_CONCEPTS = 5
MIN_RESULT_TYPE_NAMES = 4
MAX_RESULT_TYPE_NAMES = 6
MAX_TITLE_LENGTH = 80


class QuizConcept(BaseModel):
    """One candidate quiz idea; the user picks exactly one."""

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH, description="Catchy quiz title")
    description: str = Field(min_length=1, description="What the quiz-taker receives")
    outcome_framing: str = Field(
        min_length=1,
        description="How results are framed to the quiz-taker",
    )
    result_type_names: list[str] = Field(
        min_length=MIN_RESULT_TYPE_NAMES,
        max_length=MAX_RESULT_TYPE_NAMES,
        description="Specific recommendations the quiz can end on",
    )
    recommendation_type: Optional[str] = Field(
        default=None,
        description="Kind of personalised recommendation delivered",
    )
    data_dimensions: list[str] = Field(
        default_factory=list,
        description="Psychographic or behavioural categories the questions capture",
    )

    @field_validator("data_dimensions", mode="before")
    @classmethod
    def normalize_data_dimensions(cls, v):
        """Normalize data_dimensions to a list of strings."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class QuizConceptList(RootModel[list[QuizConcept]]):
    """Stage output: several concepts to choose from."""

    root: list[QuizConcept] = Field(min_length=MIN_CONCEPTS, max_length=MAX_CONCEPTS)

    @field_validator("root", mode="before")
    @classmethod
    def unwrap_concepts_key(cls, v):
        """Accept {"concepts": [...]} as well as a bare array."""
        if isinstance(v, dict) and isinstance(v.get("concepts"), list):
            return v["concepts"]
        return v

    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> QuizConcept:
        return self.root[index]

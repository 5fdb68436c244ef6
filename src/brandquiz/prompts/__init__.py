"""Prompt builders for the four generation stages.

Each builder is a pure function of its typed inputs. Templates live beside
this module as ``<name>.txt`` and are filled with ``str.format``. Counts
quoted to the model come from the schema constants so the model is never
asked for something the validators would reject.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from brandquiz.schemas.brand import MAX_KEY_THEMES, MIN_KEY_THEMES, BrandSummary
from brandquiz.schemas.concept import (
    MAX_RESULT_TYPE_NAMES,
    MAX_TITLE_LENGTH,
    MIN_RESULT_TYPE_NAMES,
    QuizConcept,
)
from brandquiz.schemas.quiz import MAX_QUESTIONS, MIN_QUESTIONS, GeneratedQuiz

TEMPLATE_DIR = Path(__file__).parent

CONCEPT_COUNT = 4
OPTIONS_PER_QUESTION = 4
TARGET_MAX_QUESTIONS = 10
# Asked of the model; the enforced minimum is config.min_mappings_per_result_type.
REQUESTED_MAPPINGS_PER_RESULT = 5


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    """Load a prompt template by name (without extension)."""
    return (TEMPLATE_DIR / f"{name}.txt").read_text(encoding="utf-8")


def _dump(model) -> str:
    return model.model_dump_json(indent=2, exclude_none=True)


def build_brand_summary_prompt(website_text: str, user_description: Optional[str] = None) -> str:
    """Stage 1: website text (and optional description) to brand summary."""
    user_description_block = ""
    if user_description:
        user_description_block = f"\n<user_description>\n{user_description}\n</user_description>\n"

    return load_template("brand_summary").format(
        website_text=website_text,
        user_description_block=user_description_block,
        min_themes=MIN_KEY_THEMES,
        max_themes=MAX_KEY_THEMES,
    )


def build_quiz_concepts_prompt(brand_summary: BrandSummary) -> str:
    """Stage 2: brand summary to candidate concepts."""
    return load_template("quiz_concepts").format(
        brand_summary=_dump(brand_summary),
        concept_count=CONCEPT_COUNT,
        max_title_length=MAX_TITLE_LENGTH,
        min_result_types=MIN_RESULT_TYPE_NAMES,
        max_result_types=MAX_RESULT_TYPE_NAMES,
    )


def build_quiz_structure_prompt(brand_summary: BrandSummary, concept: QuizConcept) -> str:
    """Stage 3: brand summary and chosen concept to questions and options."""
    data_dimensions = ", ".join(concept.data_dimensions) or "the brand's key themes"
    return load_template("quiz_structure").format(
        brand_summary=_dump(brand_summary),
        concept=_dump(concept),
        data_dimensions=data_dimensions,
        result_type_names=", ".join(concept.result_type_names),
        title=json.dumps(concept.title, ensure_ascii=False),
        min_questions=MIN_QUESTIONS,
        max_questions=MAX_QUESTIONS,
        target_max_questions=TARGET_MAX_QUESTIONS,
        options_per_question=OPTIONS_PER_QUESTION,
    )


def build_result_mappings_prompt(
    quiz: GeneratedQuiz,
    result_type_names: list[str],
    brand_summary: BrandSummary,
) -> str:
    """Stage 4: quiz structure to result types and index-addressed scoring matrix."""
    option_index_ranges = ", ".join(
        f"question {index}: 0 to {count - 1}" for index, count in enumerate(quiz.option_counts)
    )
    return load_template("result_mappings").format(
        brand_summary=_dump(brand_summary),
        quiz_structure=_dump(quiz),
        result_type_names=json.dumps(result_type_names, ensure_ascii=False),
        max_question_index=len(quiz.questions) - 1,
        option_index_ranges=option_index_ranges,
        max_result_type_index=len(result_type_names) - 1,
        requested_mappings_per_result=REQUESTED_MAPPINGS_PER_RESULT,
    )

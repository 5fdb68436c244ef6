"""Structural and business-rule validation for generation stage outputs."""

from collections import Counter
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from brandquiz.core.errors import SchemaValidationError
from brandquiz.schemas.mappings import (
    MAX_RESULT_TYPES,
    MIN_RESULT_TYPES,
    GeneratedResultMappings,
)
from brandquiz.schemas.quiz import (
    MAX_OPTIONS,
    MAX_QUESTIONS,
    MIN_OPTIONS,
    MIN_QUESTIONS,
    GeneratedQuiz,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MAX_INPUT_PREVIEW = 100


def _suggestion(error_type: str, input_value: Any) -> Optional[str]:
    """Hint for the generator on how to fix a common shape mistake."""
    if error_type == "string_type" and isinstance(input_value, dict):
        for key in ("name", "title", "text"):
            if key in input_value:
                return f"expected a string but got an object; use its '{key}' value instead"
        return "expected a string but got an object"
    if error_type == "list_type" and isinstance(input_value, str):
        return "expected a list but got a string; wrap the value in a list"
    if error_type == "missing":
        return "required field is missing; add it"
    if error_type in ("too_short", "too_long"):
        return "adjust the number of items or characters to fit the stated bounds"
    return None


def format_violations(error: ValidationError) -> list[str]:
    """
    Flatten a pydantic ValidationError into one line per violation.

    Each line names the field path, the problem and, where helpful, a
    suggestion and a preview of the offending input.
    """
    violations = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        line = f"{loc}: {err.get('msg', '')}"

        suggestion = _suggestion(err["type"], err.get("input"))
        if suggestion:
            line += f" ({suggestion})"

        input_value = err.get("input")
        if input_value is not None and err["type"] != "missing":
            preview = str(input_value)
            if len(preview) > _MAX_INPUT_PREVIEW:
                preview = preview[: _MAX_INPUT_PREVIEW - 3] + "..."
            line += f" [got: {preview}]"

        violations.append(line)
    return violations


def validate_schema(data: Any, schema_class: type[ModelT]) -> ModelT:
    """
    Validate data against a pydantic schema.

    Args:
        data: Parsed JSON value
        schema_class: Pydantic model class to validate against

    Returns:
        Validated model instance

    Raises:
        SchemaValidationError: With one violation per failing field
    """
    try:
        return schema_class.model_validate(data)
    except ValidationError as e:
        violations = format_violations(e)
        message = f"Validation failed for {schema_class.__name__}: " + "; ".join(violations)
        raise SchemaValidationError(message, violations) from e


def validate_quiz_structure(quiz: GeneratedQuiz) -> Optional[str]:
    """
    Business check for the quiz structure stage.

    The bounds repeat the schema bounds on purpose: this check decides
    whether a retry happens, so both must agree.

    Returns:
        None if valid, otherwise a description of the first problem found
    """
    if not MIN_QUESTIONS <= len(quiz.questions) <= MAX_QUESTIONS:
        return f"Expected {MIN_QUESTIONS}-{MAX_QUESTIONS} questions, got {len(quiz.questions)}"

    for index, question in enumerate(quiz.questions):
        if not MIN_OPTIONS <= len(question.options) <= MAX_OPTIONS:
            return (
                f"Question {index + 1} has {len(question.options)} options "
                f"(expected {MIN_OPTIONS}-{MAX_OPTIONS})"
            )

    return None


def validate_result_mappings(
    mappings: GeneratedResultMappings,
    quiz: GeneratedQuiz,
    min_mappings_per_result_type: int = 2,
) -> Optional[str]:
    """
    Cross-check the scoring matrix against the quiz it scores.

    Every (question_index, option_index) must exist in the quiz, every
    result_type_index must exist, no (option, result type) pair may repeat,
    and every result type needs at least ``min_mappings_per_result_type``
    mappings.

    Returns:
        None if valid, otherwise a description of the first problem found
    """
    num_questions = len(quiz.questions)
    num_result_types = len(mappings.result_types)

    if not MIN_RESULT_TYPES <= num_result_types <= MAX_RESULT_TYPES:
        return f"Expected {MIN_RESULT_TYPES}-{MAX_RESULT_TYPES} result types, got {num_result_types}"

    seen: set[tuple[int, int, int]] = set()
    for mapping in mappings.mappings:
        if mapping.question_index >= num_questions:
            return (
                f"Mapping references question_index {mapping.question_index} "
                f"but only {num_questions} questions exist"
            )
        num_options = len(quiz.questions[mapping.question_index].options)
        if mapping.option_index >= num_options:
            return (
                f"Mapping references option_index {mapping.option_index} for question "
                f"{mapping.question_index} but only {num_options} options exist"
            )
        if mapping.result_type_index >= num_result_types:
            return (
                f"Mapping references result_type_index {mapping.result_type_index} "
                f"but only {num_result_types} result types exist"
            )

        key = (mapping.question_index, mapping.option_index, mapping.result_type_index)
        if key in seen:
            return (
                f"Mapping for question_index {mapping.question_index}, option_index "
                f"{mapping.option_index} to result_type_index {mapping.result_type_index} "
                "appears more than once; combine them into a single mapping"
            )
        seen.add(key)

    counts = Counter(mapping.result_type_index for mapping in mappings.mappings)
    for index, result_type in enumerate(mappings.result_types):
        count = counts.get(index, 0)
        if count < min_mappings_per_result_type:
            return (
                f'Result type "{result_type.name}" has only {count} mappings '
                f"(need at least {min_mappings_per_result_type})"
            )

    return None

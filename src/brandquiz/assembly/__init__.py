"""Persistence assembly for generated quizzes."""

from brandquiz.assembly.quiz_assembler import DEFAULT_COLOURS, QuizAssembler
from brandquiz.assembly.slug import generate_unique_slug, slugify

__all__ = ["QuizAssembler", "DEFAULT_COLOURS", "generate_unique_slug", "slugify"]

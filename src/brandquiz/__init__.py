"""brandquiz - AI-generated brand recommendation quizzes."""

__version__ = "0.1.0"

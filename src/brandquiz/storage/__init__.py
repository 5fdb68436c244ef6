"""Persistence collaborators."""

from brandquiz.storage.access import get_workspace_quiz
from brandquiz.storage.base import QuizStore
from brandquiz.storage.json_store import JsonFileQuizStore
from brandquiz.storage.memory import InMemoryQuizStore

__all__ = ["QuizStore", "InMemoryQuizStore", "JsonFileQuizStore", "get_workspace_quiz"]

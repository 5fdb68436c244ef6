"""Workspace-scoped lookups."""

from typing import Optional

from brandquiz.core.errors import NotFoundError, OwnershipError
from brandquiz.schemas.records import QuizRecord
from brandquiz.storage.base import QuizStore


def get_workspace_quiz(
    store: QuizStore, quiz_id: str, workspace_id: Optional[str] = None
) -> QuizRecord:
    """
    Load a quiz, checking it belongs to ``workspace_id`` when one is given.

    Raises:
        NotFoundError: No quiz with this id
        OwnershipError: The quiz belongs to another workspace
    """
    quiz = store.get(QuizRecord, quiz_id)
    if quiz is None:
        raise NotFoundError(f"Quiz {quiz_id} not found")
    if workspace_id is not None and quiz.workspace_id != workspace_id:
        raise OwnershipError(f"Quiz {quiz_id} does not belong to workspace {workspace_id}")
    return quiz

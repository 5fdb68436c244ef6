"""Weighted additive scoring.

For each selected answer option, every scoring mapping it has adds its weight
to the mapped result type. The result type with the highest total wins; ties
go to the lowest sort_order.
"""

from typing import Iterable, Optional

from brandquiz.core.logging import get_logger
from brandquiz.schemas.records import ResultTypeRecord, ScoreResult, ScoringMappingRecord
from brandquiz.storage.base import QuizStore

logger = get_logger("brandquiz.scoring")


class ScoringEngine:
    """Computes the winning result type for a completed response. Never writes."""

    def __init__(self, store: QuizStore):
        self.store = store

    def result_types(self, quiz_id: str) -> list[ResultTypeRecord]:
        """Result types of a quiz in canonical (sort_order) order."""
        return sorted(
            self.store.find(ResultTypeRecord, quiz_id=quiz_id),
            key=lambda result_type: result_type.sort_order,
        )

    def tally(self, quiz_id: str, selected_option_ids: Iterable[str]) -> dict[str, int]:
        """
        Accumulated score per result type id, zero for unreached result types.

        Mappings pointing outside this quiz's result types are ignored.
        """
        scores = {result_type.id: 0 for result_type in self.result_types(quiz_id)}
        mappings = self.store.find_in(
            ScoringMappingRecord, "answer_option_id", set(selected_option_ids)
        )
        for mapping in mappings:
            if mapping.result_type_id in scores:
                scores[mapping.result_type_id] += mapping.weight
        return scores

    def score(self, quiz_id: str, selected_option_ids: Iterable[str]) -> Optional[ScoreResult]:
        """
        Pick the best matching result type.

        Args:
            quiz_id: Quiz whose result types compete
            selected_option_ids: Answer option ids chosen by the respondent

        Returns:
            The winner with its score, or None if nothing was selected or the
            quiz has no result types
        """
        selected = set(selected_option_ids)
        if not selected:
            return None

        result_types = self.result_types(quiz_id)
        if not result_types:
            return None

        scores = self.tally(quiz_id, selected)

        winner = result_types[0]
        for result_type in result_types[1:]:
            if scores[result_type.id] > scores[winner.id]:
                winner = result_type

        logger.debug(
            f"Scored quiz {quiz_id}: winner '{winner.name}'",
            context={
                "quiz_id": quiz_id,
                "selected": len(selected),
                "scores": {rt.name: scores[rt.id] for rt in result_types},
            },
        )

        return ScoreResult(
            result_type_id=winner.id,
            name=winner.name,
            description=winner.description,
            recommendation_detail=winner.recommendation_detail,
            colour=winner.colour,
            score=scores[winner.id],
        )

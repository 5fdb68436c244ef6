"""Persist a generated quiz, translating array indices into record identifiers."""

from typing import Optional

from brandquiz.assembly.slug import generate_unique_slug
from brandquiz.core.logging import get_logger
from brandquiz.schemas.concept import QuizConcept
from brandquiz.schemas.mappings import GeneratedResultMappings
from brandquiz.schemas.quiz import GeneratedQuiz
from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizRecord,
    QuizStatus,
    ResultTypeRecord,
    ScoringMappingRecord,
)
from brandquiz.storage.base import QuizStore

logger = get_logger("brandquiz.assembly")

DEFAULT_COLOURS = [
    "#6C5CE7",
    "#00B894",
    "#E17055",
    "#0984E3",
    "#FDCB6E",
    "#E84393",
    "#00CEC9",
    "#636E72",
]


class QuizAssembler:
    """
    Writes the quiz aggregate for a validated (GeneratedQuiz, GeneratedResultMappings) pair.

    Indices were checked by the result mapping stage, so every mapping entry
    resolves; a KeyError or IndexError here means the inputs were never
    validated together and aborts the whole transaction.
    """

    def __init__(self, store: QuizStore):
        self.store = store

    def assemble(
        self,
        quiz: GeneratedQuiz,
        mappings: GeneratedResultMappings,
        concept: Optional[QuizConcept] = None,
        workspace_id: Optional[str] = None,
    ) -> QuizRecord:
        """
        Persist everything inside one store transaction.

        Args:
            quiz: Validated quiz structure
            mappings: Result types and matrix validated against ``quiz``
            concept: The concept the quiz was generated from, kept for reference
            workspace_id: Owning workspace

        Returns:
            The stored quiz record (status draft)
        """
        with self.store.transaction():
            slug = generate_unique_slug(quiz.title, self.store)
            quiz_record = QuizRecord(
                workspace_id=workspace_id,
                slug=slug,
                title=quiz.title,
                description=quiz.intro_text,
                status=QuizStatus.DRAFT,
                ai_concept=concept.model_dump() if concept else None,
            )
            quiz_id = self.store.insert(quiz_record)

            option_ids = self._insert_questions(quiz_id, quiz)
            result_type_ids = self._insert_result_types(quiz_id, mappings)

            for entry in mappings.mappings:
                self.store.insert(
                    ScoringMappingRecord(
                        answer_option_id=option_ids[(entry.question_index, entry.option_index)],
                        result_type_id=result_type_ids[entry.result_type_index],
                        weight=entry.weight,
                    )
                )

        logger.info(
            f"Assembled quiz '{slug}'",
            context={
                "quiz_id": quiz_id,
                "questions": len(quiz.questions),
                "options": len(option_ids),
                "result_types": len(result_type_ids),
                "mapping_rows": len(mappings.mappings),
            },
        )
        return quiz_record.model_copy(update={"id": quiz_id})

    def _insert_questions(self, quiz_id: str, quiz: GeneratedQuiz) -> dict[tuple[int, int], str]:
        """Insert questions and options; return (question_index, option_index) -> option id."""
        option_ids: dict[tuple[int, int], str] = {}
        for q_index, question in enumerate(quiz.questions):
            question_id = self.store.insert(
                QuestionRecord(
                    quiz_id=quiz_id,
                    sort_order=q_index,
                    text=question.text,
                    question_type=question.question_type,
                    data_dimension=question.data_dimension,
                    insight=question.insight,
                )
            )
            for o_index, option in enumerate(question.options):
                option_ids[(q_index, o_index)] = self.store.insert(
                    AnswerOptionRecord(question_id=question_id, sort_order=o_index, text=option.text)
                )
        return option_ids

    def _insert_result_types(self, quiz_id: str, mappings: GeneratedResultMappings) -> list[str]:
        result_type_ids = []
        for index, result_type in enumerate(mappings.result_types):
            result_type_ids.append(
                self.store.insert(
                    ResultTypeRecord(
                        quiz_id=quiz_id,
                        sort_order=index,
                        name=result_type.name,
                        description=result_type.description,
                        recommendation_detail=result_type.recommendation_detail,
                        colour=DEFAULT_COLOURS[index % len(DEFAULT_COLOURS)],
                    )
                )
            )
        return result_type_ids

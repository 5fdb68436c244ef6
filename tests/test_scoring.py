"""Tests for the scoring engine."""

import pytest

from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizRecord,
    ResultTypeRecord,
    ScoringMappingRecord,
)
from brandquiz.scoring import ScoringEngine


@pytest.fixture
def scored_quiz(store):
    """
    Two questions, two options each, two result types.

    q0o0 -> A (3), q0o1 -> B (2), q1o0 -> A (2) and B (2), q1o1 -> B (3)
    """
    quiz_id = store.insert(QuizRecord(slug="scored", title="Scored"))
    # Insert B first so canonical order depends on sort_order, not insertion
    b = store.insert(
        ResultTypeRecord(quiz_id=quiz_id, sort_order=1, name="B", description="Result B", colour="#00B894")
    )
    a = store.insert(
        ResultTypeRecord(quiz_id=quiz_id, sort_order=0, name="A", description="Result A", colour="#6C5CE7")
    )

    options = {}
    for q in range(2):
        question_id = store.insert(QuestionRecord(quiz_id=quiz_id, sort_order=q, text=f"Q{q}"))
        for o in range(2):
            options[(q, o)] = store.insert(
                AnswerOptionRecord(question_id=question_id, sort_order=o, text=f"Q{q}O{o}")
            )

    for (q, o), result_type_id, weight in [
        ((0, 0), a, 3),
        ((0, 1), b, 2),
        ((1, 0), a, 2),
        ((1, 0), b, 2),
        ((1, 1), b, 3),
    ]:
        store.insert(
            ScoringMappingRecord(answer_option_id=options[(q, o)], result_type_id=result_type_id, weight=weight)
        )

    return {"quiz_id": quiz_id, "a": a, "b": b, "options": options}


class TestScoringEngine:
    """Test ScoringEngine."""

    def test_result_types_in_sort_order(self, store, scored_quiz):
        names = [rt.name for rt in ScoringEngine(store).result_types(scored_quiz["quiz_id"])]
        assert names == ["A", "B"]

    def test_tally_is_additive(self, store, scored_quiz):
        options = scored_quiz["options"]
        scores = ScoringEngine(store).tally(scored_quiz["quiz_id"], [options[(0, 0)], options[(1, 0)]])
        assert scores == {scored_quiz["a"]: 5, scored_quiz["b"]: 2}

    def test_highest_score_wins(self, store, scored_quiz):
        options = scored_quiz["options"]
        result = ScoringEngine(store).score(scored_quiz["quiz_id"], [options[(0, 1)], options[(1, 1)]])
        assert result.name == "B"
        assert result.score == 5
        assert result.colour == "#00B894"

    def test_tie_goes_to_lowest_sort_order(self, store, scored_quiz):
        options = scored_quiz["options"]
        engine = ScoringEngine(store)
        tie = engine.tally(scored_quiz["quiz_id"], [options[(1, 0)]])
        assert tie == {scored_quiz["a"]: 2, scored_quiz["b"]: 2}

        result = engine.score(scored_quiz["quiz_id"], [options[(1, 0)]])
        assert result.name == "A"
        assert result.score == 2

    def test_adding_a_selection_never_lowers_a_score(self, store, scored_quiz):
        options = scored_quiz["options"]
        engine = ScoringEngine(store)
        before = engine.tally(scored_quiz["quiz_id"], [options[(0, 0)]])
        after = engine.tally(scored_quiz["quiz_id"], [options[(0, 0)], options[(1, 1)]])
        assert all(after[rt] >= before[rt] for rt in before)

    def test_unmapped_selection_falls_to_first_result_type(self, store, scored_quiz):
        result = ScoringEngine(store).score(scored_quiz["quiz_id"], ["not-an-option"])
        assert result.name == "A"
        assert result.score == 0

    def test_empty_selection(self, store, scored_quiz):
        assert ScoringEngine(store).score(scored_quiz["quiz_id"], []) is None

    def test_quiz_without_result_types(self, store):
        quiz_id = store.insert(QuizRecord(slug="empty", title="Empty"))
        assert ScoringEngine(store).score(quiz_id, ["anything"]) is None

    def test_mappings_to_other_quizzes_ignored(self, store, scored_quiz):
        other_quiz = store.insert(QuizRecord(slug="other", title="Other"))
        foreign = store.insert(
            ResultTypeRecord(quiz_id=other_quiz, sort_order=0, name="X", description="Result X")
        )
        option = scored_quiz["options"][(0, 0)]
        store.insert(ScoringMappingRecord(answer_option_id=option, result_type_id=foreign, weight=3))

        scores = ScoringEngine(store).tally(scored_quiz["quiz_id"], [option])
        assert foreign not in scores
        assert scores[scored_quiz["a"]] == 3

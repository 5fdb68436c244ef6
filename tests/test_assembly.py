"""Tests for slug generation and quiz assembly."""

from unittest.mock import patch

import pytest

from brandquiz.assembly import DEFAULT_COLOURS, QuizAssembler, generate_unique_slug, slugify
from brandquiz.core.errors import DuplicateRecordError
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
from conftest import make_mappings_data, make_quiz_data


class TestSlugify:
    """Test slugify."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("My Quiz", "my-quiz"),
            ("  What's Your   Style?! ", "whats-your-style"),
            ("snake_case and--dashes", "snake-case-and-dashes"),
            ("Café Quiz", "caf-quiz"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, title, expected):
        assert slugify(title) == expected

    def test_length_capped(self):
        assert len(slugify("word " * 50)) == 100


class TestGenerateUniqueSlug:
    """Test generate_unique_slug."""

    def test_free_slug_used_as_is(self, store):
        assert generate_unique_slug("My Quiz", store) == "my-quiz"

    def test_collision_appends_suffix(self, store):
        store.insert(QuizRecord(slug="my-quiz", title="My Quiz"))
        slug = generate_unique_slug("My Quiz", store)
        assert slug.startswith("my-quiz-")
        suffix = slug[len("my-quiz-"):]
        assert len(suffix) == 4
        assert all(c.isdigit() or c.islower() for c in suffix)

    def test_retries_until_unique(self, store):
        store.insert(QuizRecord(slug="my-quiz", title="My Quiz"))
        store.insert(QuizRecord(slug="my-quiz-aaaa", title="My Quiz"))
        with patch("brandquiz.assembly.slug.random_suffix", side_effect=["aaaa", "bbbb"]):
            assert generate_unique_slug("My Quiz", store) == "my-quiz-bbbb"

    def test_empty_title_fallback(self, store):
        with patch("brandquiz.assembly.slug.time.time", return_value=1.0):
            assert generate_unique_slug("???", store) == "quiz-rs"


class TestQuizAssembler:
    """Test QuizAssembler.assemble."""

    def test_persists_whole_aggregate(self, store, generated_quiz, generated_mappings, concept):
        quiz = QuizAssembler(store).assemble(
            generated_quiz, generated_mappings, concept=concept, workspace_id="ws-1"
        )

        stored = store.get(QuizRecord, quiz.id)
        assert stored.status is QuizStatus.DRAFT
        assert stored.slug == "my-quiz"
        assert stored.description == generated_quiz.intro_text
        assert stored.ai_concept["title"] == concept.title
        assert stored.workspace_id == "ws-1"

        questions = store.find(QuestionRecord, quiz_id=quiz.id)
        assert [q.sort_order for q in questions] == list(range(8))
        assert store.count(AnswerOptionRecord) == 32

    def test_one_row_per_mapping_entry(self, store, generated_quiz, generated_mappings):
        QuizAssembler(store).assemble(generated_quiz, generated_mappings)
        assert store.count(ScoringMappingRecord) == len(generated_mappings.mappings)

    def test_indices_resolve_to_records(self, store, generated_quiz):
        data = make_mappings_data()
        data["mappings"][0] = {
            "question_index": 0,
            "option_index": 0,
            "result_type_index": 0,
            "weight": 3,
        }
        mappings = GeneratedResultMappings.model_validate(data)

        quiz = QuizAssembler(store).assemble(generated_quiz, mappings)

        question = store.find(QuestionRecord, quiz_id=quiz.id, sort_order=0)[0]
        option = store.find(AnswerOptionRecord, question_id=question.id, sort_order=0)[0]
        result_type = store.find(ResultTypeRecord, quiz_id=quiz.id, sort_order=0)[0]
        [row] = store.find(ScoringMappingRecord, answer_option_id=option.id)
        assert row.result_type_id == result_type.id
        assert row.weight == 3

    def test_colours_cycle_through_palette(self, store):
        quiz_data = make_quiz_data()
        mappings = GeneratedResultMappings.model_validate(make_mappings_data(num_result_types=8))
        quiz = QuizAssembler(store).assemble(GeneratedQuiz.model_validate(quiz_data), mappings)

        result_types = sorted(store.find(ResultTypeRecord, quiz_id=quiz.id), key=lambda r: r.sort_order)
        assert [r.colour for r in result_types] == DEFAULT_COLOURS
        assert result_types[0].recommendation_detail == "Try product line 0"

    def test_failure_rolls_back_everything(self, store, generated_quiz, generated_mappings):
        original_insert = store.insert

        def failing_insert(record):
            if isinstance(record, ScoringMappingRecord):
                raise DuplicateRecordError("boom")
            return original_insert(record)

        with patch.object(store, "insert", side_effect=failing_insert):
            with pytest.raises(DuplicateRecordError):
                QuizAssembler(store).assemble(generated_quiz, generated_mappings)

        assert store.count(QuizRecord) == 0
        assert store.count(QuestionRecord) == 0
        assert store.count(ResultTypeRecord) == 0

    def test_second_quiz_with_same_title_gets_new_slug(self, store, generated_quiz, generated_mappings):
        first = QuizAssembler(store).assemble(generated_quiz, generated_mappings)
        second = QuizAssembler(store).assemble(generated_quiz, generated_mappings)
        assert first.slug == "my-quiz"
        assert second.slug.startswith("my-quiz-")

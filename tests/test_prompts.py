"""Tests for prompt builders."""

import json

from brandquiz.prompts import (
    REQUESTED_MAPPINGS_PER_RESULT,
    build_brand_summary_prompt,
    build_quiz_concepts_prompt,
    build_quiz_structure_prompt,
    build_result_mappings_prompt,
    load_template,
)
from brandquiz.schemas.quiz import GeneratedQuiz
from conftest import RESULT_TYPE_NAMES, make_quiz_data


class TestPromptBuilders:
    """Test the stage prompt builders."""

    def test_templates_load(self):
        for name in ("brand_summary", "quiz_concepts", "quiz_structure", "result_mappings"):
            assert load_template(name)

    def test_brand_summary_prompt(self):
        prompt = build_brand_summary_prompt("Website body text")
        assert "Website body text" in prompt
        assert "<user_description>" not in prompt

    def test_brand_summary_prompt_with_description(self):
        prompt = build_brand_summary_prompt("Website body text", "We sell boots")
        assert "<user_description>\nWe sell boots\n</user_description>" in prompt

    def test_concepts_prompt_embeds_summary(self, brand_summary):
        prompt = build_quiz_concepts_prompt(brand_summary)
        assert '"brand_name": "Acme Outdoors"' in prompt
        assert "outcome_framing" in prompt

    def test_structure_prompt(self, brand_summary, concept):
        prompt = build_quiz_structure_prompt(brand_summary, concept)
        assert json.dumps(concept.title) in prompt
        assert "terrain, pace, distance" in prompt
        assert ", ".join(RESULT_TYPE_NAMES) in prompt

    def test_mappings_prompt_lists_index_ranges(self, brand_summary):
        quiz = GeneratedQuiz.model_validate(make_quiz_data(num_questions=9, num_options=3))
        prompt = build_result_mappings_prompt(quiz, RESULT_TYPE_NAMES, brand_summary)

        assert "question 0: 0 to 2" in prompt
        assert "question 8: 0 to 2" in prompt
        assert json.dumps(RESULT_TYPE_NAMES) in prompt
        assert str(REQUESTED_MAPPINGS_PER_RESULT) in prompt

    def test_builders_are_deterministic(self, brand_summary, concept):
        assert build_quiz_structure_prompt(brand_summary, concept) == build_quiz_structure_prompt(
            brand_summary, concept
        )

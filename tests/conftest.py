"""Shared fixtures: sample stage outputs and a scripted generation client."""

import json
import logging
from typing import Optional
from unittest.mock import patch

import pytest

from brandquiz.core.config import Config
from brandquiz.core.logging import ROOT_LOGGER_NAME
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.concept import QuizConcept
from brandquiz.schemas.mappings import GeneratedResultMappings
from brandquiz.schemas.quiz import GeneratedQuiz
from brandquiz.storage.memory import InMemoryQuizStore

RESULT_TYPE_NAMES = ["Trail Runner", "City Walker", "Summit Seeker", "Weekend Wanderer"]


def make_brand_summary_data() -> dict:
    return {
        "brand_name": "Acme Outdoors",
        "industry": "Outdoor equipment retail",
        "target_audience": "Active adults who hike and camp",
        "tone": "Friendly and adventurous",
        "key_themes": ["sustainability", "adventure", "durability"],
        "summary": "Acme Outdoors sells durable, sustainably made gear for hikers and campers.",
        "products_or_services": [
            {"name": "Trail shoes", "description": "Lightweight hiking shoes"},
            "Tents",
        ],
        "recommendation_domain": "hiking gear",
    }


def make_concept_data(title: str = "Which Trail Shoe Fits Your Stride?") -> dict:
    return {
        "title": title,
        "description": "Find the trail shoe that matches how and where you hike.",
        "outcome_framing": "Your ideal shoe is...",
        "result_type_names": list(RESULT_TYPE_NAMES),
        "recommendation_type": "product",
        "data_dimensions": ["terrain", "pace", "distance"],
    }


def make_quiz_data(num_questions: int = 8, num_options: int = 4, title: str = "My Quiz") -> dict:
    return {
        "title": title,
        "intro_text": "Answer a few quick questions to find your perfect match.",
        "questions": [
            {
                "text": f"Question {q}?",
                "question_type": "single_choice",
                "options": [f"Option {q}.{o}" for o in range(num_options)],
                "data_dimension": "terrain",
                "insight": "Reveals preferred terrain",
            }
            for q in range(num_questions)
        ],
    }


def make_mappings_data(num_questions: int = 8, num_options: int = 4, num_result_types: int = 4) -> dict:
    """Option o of every question maps to result type o % num_result_types with weight 2."""
    return {
        "result_types": [
            {
                "name": RESULT_TYPE_NAMES[i % len(RESULT_TYPE_NAMES)] + ("" if i < 4 else f" {i}"),
                "description": f"A detailed description of result type number {i}.",
                "recommendation_detail": f"Try product line {i}",
            }
            for i in range(num_result_types)
        ],
        "mappings": [
            {
                "question_index": q,
                "option_index": o,
                "result_type_index": o % num_result_types,
                "weight": 2,
            }
            for q in range(num_questions)
            for o in range(num_options)
        ],
    }


class ScriptedClient:
    """Generation client that replays canned responses and records every call."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def generate(self, prompt: str, history: Optional[list] = None, max_tokens: int = 4096) -> str:
        self.calls.append({"prompt": prompt, "history": history, "max_tokens": max_tokens})
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, (dict, list)):
            return json.dumps(response)
        return response


@pytest.fixture(autouse=True)
def no_sleep():
    """Retry backoff never really sleeps in tests; the mock records the delays."""
    with patch("brandquiz.core.generator.time.sleep") as sleep:
        yield sleep


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def store():
    return InMemoryQuizStore()


@pytest.fixture
def brand_summary():
    return BrandSummary.model_validate(make_brand_summary_data())


@pytest.fixture
def concept():
    return QuizConcept.model_validate(make_concept_data())


@pytest.fixture
def generated_quiz():
    return GeneratedQuiz.model_validate(make_quiz_data())


@pytest.fixture
def generated_mappings():
    return GeneratedResultMappings.model_validate(make_mappings_data())


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging so records reach pytest's capture handler."""

    def reset():
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        root.propagate = True
        root.setLevel(logging.NOTSET)

    reset()
    yield
    reset()

"""Tests for the generation orchestrator's retry loop."""

from unittest.mock import call

import pytest

from brandquiz.core.config import Config
from brandquiz.core.errors import GenerationExhausted, TransportFailure
from brandquiz.core.generator import (
    RETRY_APOLOGY,
    AttemptStatus,
    GenerationOrchestrator,
    build_retry_history,
)
from brandquiz.core.validator import validate_schema
from brandquiz.schemas.brand import BrandSummary
from conftest import ScriptedClient, make_brand_summary_data


def _structural(data):
    return validate_schema(data, BrandSummary)


class TestBuildRetryHistory:
    """Test the corrective turns sent on retries."""

    def test_history_shape(self):
        history = build_retry_history("boom")
        assert history == [
            {"role": "assistant", "content": RETRY_APOLOGY},
            {
                "role": "user",
                "content": (
                    "Your previous response had the following error: boom. "
                    "Please fix it and return valid JSON only."
                ),
            },
        ]


class TestGenerationOrchestrator:
    """Test GenerationOrchestrator.run_stage."""

    def test_first_attempt_success(self, config, no_sleep):
        client = ScriptedClient([make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        summary = orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert summary.brand_name == "Acme Outdoors"
        assert len(client.calls) == 1
        assert client.calls[0]["history"] is None
        assert client.calls[0]["max_tokens"] == 4096
        no_sleep.assert_not_called()

    def test_exhaustion_after_three_unparsable_responses(self, config, no_sleep):
        client = ScriptedClient(["garbage", "garbage", "garbage"])
        orchestrator = GenerationOrchestrator(client, config)

        with pytest.raises(GenerationExhausted) as exc_info:
            orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        error = exc_info.value
        assert error.stage == "brand_summary"
        assert error.attempts == 3
        assert "No JSON object or array found" in error.last_error
        assert str(error).startswith("AI generation failed for stage 'brand_summary' after 3 attempts")
        assert len(client.calls) == 3
        # Waits before the 2nd and 3rd attempts only
        assert no_sleep.call_args_list == [call(1.0), call(3.0)]

    def test_retry_feeds_back_last_error(self, config):
        bad = make_brand_summary_data()
        del bad["industry"]
        client = ScriptedClient([bad, make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        summary = orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert summary.industry == "Outdoor equipment retail"
        second = client.calls[1]
        assert second["prompt"] == "PROMPT"
        assert second["history"][0] == {"role": "assistant", "content": RETRY_APOLOGY}
        assert "Validation failed for BrandSummary" in second["history"][1]["content"]
        assert "industry" in second["history"][1]["content"]

    def test_business_rule_violation_retries(self, config):
        client = ScriptedClient([make_brand_summary_data(), make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)
        verdicts = iter(["Brand name must not be generic", None])

        orchestrator.run_stage(
            "brand_summary", "PROMPT", _structural, lambda summary: next(verdicts)
        )

        assert len(client.calls) == 2
        assert "Brand name must not be generic" in client.calls[1]["history"][1]["content"]

    def test_transport_failure_consumes_an_attempt(self, config, no_sleep):
        client = ScriptedClient([TransportFailure("rate limited"), make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        summary = orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert summary.brand_name == "Acme Outdoors"
        assert len(client.calls) == 2
        assert "rate limited" in client.calls[1]["history"][1]["content"]
        no_sleep.assert_called_once_with(1.0)

    def test_any_client_exception_is_retried(self, config, no_sleep):
        """Collaborator errors that are not TransportFailure still get a retry."""
        client = ScriptedClient([ConnectionError("connection reset"), make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        summary = orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert summary.brand_name == "Acme Outdoors"
        assert len(client.calls) == 2
        assert "connection reset" in client.calls[1]["history"][1]["content"]
        no_sleep.assert_called_once_with(1.0)

    def test_client_errors_exhaust_the_stage(self, config):
        client = ScriptedClient([KeyError("message")] * 3)
        orchestrator = GenerationOrchestrator(client, config)

        with pytest.raises(GenerationExhausted) as exc_info:
            orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert exc_info.value.attempts == 3
        assert "message" in exc_info.value.last_error

    def test_deeply_nested_output_is_retried(self, config):
        client = ScriptedClient(["[" * 100000] * 3)
        orchestrator = GenerationOrchestrator(client, config)

        with pytest.raises(GenerationExhausted) as exc_info:
            orchestrator.run_stage("brand_summary", "PROMPT", _structural)

        assert len(client.calls) == 3
        assert "Failed to extract valid JSON" in exc_info.value.last_error

    def test_validator_bug_is_fatal(self, config):
        client = ScriptedClient([make_brand_summary_data(), make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        def broken_check(summary):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError, match="bug"):
            orchestrator.run_stage("brand_summary", "PROMPT", _structural, broken_check)

        assert len(client.calls) == 1

    def test_max_tokens_override(self, config):
        client = ScriptedClient([make_brand_summary_data()])
        orchestrator = GenerationOrchestrator(client, config)

        orchestrator.run_stage("brand_summary", "PROMPT", _structural, max_tokens=8192)

        assert client.calls[0]["max_tokens"] == 8192

    def test_configurable_attempts_and_backoff(self, no_sleep):
        config = Config()
        config.max_retries = 4
        config.backoff_base_seconds = 2.0
        client = ScriptedClient(["x"] * 4)
        orchestrator = GenerationOrchestrator(client, config)

        with pytest.raises(GenerationExhausted):
            orchestrator.run_stage("quiz_concepts", "PROMPT", _structural)

        assert len(client.calls) == 4
        assert [c.args[0] for c in no_sleep.call_args_list] == [1.0, 2.0, 4.0]

    def test_attempt_outcome_classification(self, config):
        client = ScriptedClient(["not json"])
        orchestrator = GenerationOrchestrator(client, config)

        outcome = orchestrator._attempt("PROMPT", _structural, None, 100, None)

        assert outcome.status is AttemptStatus.RETRY
        assert outcome.error_type.__name__ == "ParseError"

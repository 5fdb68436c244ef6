"""Drive one generation stage: call the model, extract, validate, retry with feedback."""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from brandquiz.core.config import Config
from brandquiz.core.errors import (
    BusinessRuleViolation,
    GenerationExhausted,
    ParseError,
    SchemaValidationError,
    TransportFailure,
)
from brandquiz.core.json_extractor import extract_json
from brandquiz.core.llm_base import LLMClientBase, Message
from brandquiz.core.logging import get_logger

T = TypeVar("T")

StructuralValidator = Callable[[Any], T]
BusinessValidator = Callable[[T], Optional[str]]

logger = get_logger("brandquiz.generator")

RETRY_APOLOGY = "I apologize for the error."


class AttemptStatus(str, Enum):
    """How a single attempt ended."""

    SUCCESS = "success"
    RETRY = "retry"
    FATAL = "fatal"


@dataclass
class AttemptOutcome(Generic[T]):
    """Tagged result of one attempt."""

    status: AttemptStatus
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[type[Exception]] = None
    exception: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.SUCCESS, value=value)

    @classmethod
    def retry(cls, error_type: type[Exception], message: str) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.RETRY, error=message, error_type=error_type)

    @classmethod
    def fatal(cls, exception: BaseException) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.FATAL, error=str(exception), exception=exception)


def build_retry_history(last_error: str) -> list[Message]:
    """Corrective turns appended after the prompt on attempts after the first."""
    return [
        {"role": "assistant", "content": RETRY_APOLOGY},
        {
            "role": "user",
            "content": (
                f"Your previous response had the following error: {last_error}. "
                "Please fix it and return valid JSON only."
            ),
        },
    ]


class GenerationOrchestrator:
    """
    Runs a stage end-to-end with a bounded, feedback-directed retry loop.

    Every retry-worthy failure (unparsable output, schema violation, business
    rule violation, transport failure) consumes one attempt from the same
    budget. Its message is sent back to the model on the next attempt.
    Before each retry the orchestrator waits ``backoff_base_seconds ** n``
    seconds, where n is the zero-based index of the failed attempt (1s, 3s, 9s
    with the default base of 3). Any exception from the client is a transport
    failure. An unexpected exception from a validator aborts the stage.
    """

    def __init__(self, llm_client: LLMClientBase, config: Optional[Config] = None):
        """
        Initialize orchestrator.

        Args:
            llm_client: Content-generation collaborator
            config: Configuration (max_retries, backoff_base_seconds, max_output_tokens)
        """
        config = config or Config()
        self.llm_client = llm_client
        self.max_retries = int(config.max_retries)
        self.backoff_base_seconds = float(config.backoff_base_seconds)
        self.default_max_tokens = int(config.max_output_tokens)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after zero-based attempt ``attempt`` fails."""
        return self.backoff_base_seconds ** attempt

    def run_stage(
        self,
        stage: str,
        prompt: str,
        structural_validate: StructuralValidator,
        business_validate: Optional[BusinessValidator] = None,
        max_tokens: Optional[int] = None,
    ) -> T:
        """
        Generate and validate one stage output.

        Args:
            stage: Stage name, for logging and the failure message
            prompt: Stage prompt
            structural_validate: Turns parsed JSON into a typed value or raises SchemaValidationError
            business_validate: Optional check returning an error description or None
            max_tokens: Response length bound (defaults to config.max_output_tokens)

        Returns:
            The validated stage value

        Raises:
            GenerationExhausted: If every attempt failed
        """
        max_tokens = max_tokens or self.default_max_tokens
        last_error: Optional[str] = None

        for attempt in range(self.max_retries):
            outcome = self._attempt(
                prompt, structural_validate, business_validate, max_tokens, last_error
            )

            if outcome.status is AttemptStatus.SUCCESS:
                if attempt > 0:
                    logger.info(
                        f"Stage {stage} succeeded after {attempt + 1} attempts",
                        context={"stage": stage, "attempt": attempt + 1},
                    )
                return outcome.value

            if outcome.status is AttemptStatus.FATAL:
                logger.error(
                    f"Stage {stage} aborted: {outcome.error}",
                    context={"stage": stage, "attempt": attempt + 1},
                )
                raise outcome.exception

            last_error = outcome.error
            context = {
                "stage": stage,
                "attempt": attempt + 1,
                "max_retries": self.max_retries,
                "error_type": outcome.error_type.__name__,
            }

            if attempt < self.max_retries - 1:
                delay = self.backoff_delay(attempt)
                context["delay"] = delay
                logger.warning(
                    f"Attempt {attempt + 1}/{self.max_retries} for {stage} failed: {last_error}. "
                    f"Retrying in {delay:.2f}s...",
                    context=context,
                )
                time.sleep(delay)
            else:
                logger.error(
                    f"All {self.max_retries} attempts failed for {stage}",
                    context={**context, "error": last_error},
                )

        raise GenerationExhausted(stage, self.max_retries, last_error)

    def _attempt(
        self,
        prompt: str,
        structural_validate: StructuralValidator,
        business_validate: Optional[BusinessValidator],
        max_tokens: int,
        last_error: Optional[str],
    ) -> AttemptOutcome:
        """Run one attempt and classify how it ended."""
        history = build_retry_history(last_error) if last_error else None

        try:
            raw = self.llm_client.generate(prompt, history=history, max_tokens=max_tokens)
        except Exception as e:
            # Any collaborator failure counts as transport, whatever its type
            return AttemptOutcome.retry(TransportFailure, str(e) or type(e).__name__)

        try:
            data = extract_json(raw)
        except ParseError as e:
            return AttemptOutcome.retry(ParseError, str(e))

        try:
            value = structural_validate(data)
            violation = business_validate(value) if business_validate is not None else None
        except SchemaValidationError as e:
            return AttemptOutcome.retry(SchemaValidationError, str(e))
        except Exception as e:
            return AttemptOutcome.fatal(e)

        if violation:
            return AttemptOutcome.retry(BusinessRuleViolation, violation)

        return AttemptOutcome.success(value)

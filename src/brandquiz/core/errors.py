"""Exception hierarchy for quiz generation, persistence and scoring."""

from typing import Optional


class BrandQuizError(Exception):
    """Base class for all brandquiz errors."""

    user_message = "Something went wrong. Please try again."


# Retry-eligible failures. These are handled inside the generation orchestrator
# and only surface wrapped in GenerationExhausted.


class ParseError(BrandQuizError):
    """No structured value could be recovered from model output."""

    pass


class SchemaValidationError(BrandQuizError):
    """Structured value does not match the expected shape or bounds."""

    def __init__(self, message: str, violations: Optional[list[str]] = None):
        super().__init__(message)
        self.violations = violations or []


class BusinessRuleViolation(BrandQuizError):
    """Structurally valid value that is semantically inconsistent."""

    pass


class TransportFailure(BrandQuizError):
    """The content-generation collaborator itself failed (network, auth, rate limit)."""

    pass


# Terminal failures.


class GenerationExhausted(BrandQuizError):
    """All attempts for a generation stage failed."""

    user_message = (
        "We couldn't generate quiz content right now. "
        "Please try the whole action again in a few minutes."
    )
    website_message = (
        "We couldn't understand that website. "
        "Please add a description of your brand and try again."
    )

    def __init__(self, stage: str, attempts: int, last_error: Optional[str]):
        self.stage = stage
        self.attempts = attempts
        self.last_error = last_error
        if stage == "brand_summary":
            self.user_message = self.website_message
        super().__init__(
            f"AI generation failed for stage '{stage}' after {attempts} attempts. "
            f"Last error: {last_error}"
        )


class WebsiteUnavailableError(BrandQuizError):
    """Website text could not be fetched and no description was supplied."""

    user_message = (
        "We couldn't access that website. "
        "Please check the URL or add a description of your brand."
    )

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class NotFoundError(BrandQuizError):
    """A requested record does not exist (or is not visible)."""

    user_message = "Not found."


class OwnershipError(BrandQuizError):
    """A record exists but belongs to a different workspace."""

    user_message = "Not found."


class DuplicateRecordError(BrandQuizError):
    """A uniqueness constraint in the store would be violated."""

    pass

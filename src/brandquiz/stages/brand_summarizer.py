"""Brand summary stage implementation."""

from typing import Optional

from brandquiz.core.generator import GenerationOrchestrator
from brandquiz.core.validator import validate_schema
from brandquiz.prompts import build_brand_summary_prompt
from brandquiz.schemas.brand import BrandSummary

STAGE_NAME = "brand_summary"


class BrandSummarizer:
    """Condenses website text into a BrandSummary."""

    def __init__(self, orchestrator: GenerationOrchestrator):
        """
        Initialize brand summarizer.

        Args:
            orchestrator: Runs the generate/validate/retry loop
        """
        self.orchestrator = orchestrator

    def summarize(self, website_text: str, user_description: Optional[str] = None) -> BrandSummary:
        """
        Summarize a brand.

        Args:
            website_text: Plain text extracted from the brand's website
            user_description: Optional description supplied by the user

        Returns:
            Validated BrandSummary

        Raises:
            GenerationExhausted: If no valid summary was produced
        """
        prompt = build_brand_summary_prompt(website_text, user_description)
        return self.orchestrator.run_stage(
            STAGE_NAME,
            prompt,
            lambda data: validate_schema(data, BrandSummary),
        )

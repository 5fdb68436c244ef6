"""Result types and scoring matrix stage implementation."""

from typing import Optional

from brandquiz.core.generator import GenerationOrchestrator
from brandquiz.core.validator import validate_result_mappings, validate_schema
from brandquiz.prompts import build_result_mappings_prompt
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.mappings import GeneratedResultMappings
from brandquiz.schemas.quiz import GeneratedQuiz

STAGE_NAME = "result_mappings"


class ResultMapper:
    """Describes each result type and weights every answer option towards them."""

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        min_mappings_per_result_type: int = 2,
        max_tokens: Optional[int] = 8192,
    ):
        """
        Initialize result mapper.

        Args:
            orchestrator: Runs the generate/validate/retry loop
            min_mappings_per_result_type: Enforced minimum mappings per result type
            max_tokens: Response length bound; the matrix is the largest stage output
        """
        self.orchestrator = orchestrator
        self.min_mappings_per_result_type = min_mappings_per_result_type
        self.max_tokens = max_tokens

    def map(
        self,
        quiz: GeneratedQuiz,
        result_type_names: list[str],
        brand_summary: BrandSummary,
    ) -> GeneratedResultMappings:
        """
        Generate result types and the scoring matrix for a quiz.

        Every mapping index is checked against ``quiz``; an out-of-range index
        is sent back to the model as feedback rather than dropped.

        Raises:
            GenerationExhausted: If no consistent matrix was produced
        """
        prompt = build_result_mappings_prompt(quiz, result_type_names, brand_summary)
        return self.orchestrator.run_stage(
            STAGE_NAME,
            prompt,
            lambda data: validate_schema(data, GeneratedResultMappings),
            lambda mappings: validate_result_mappings(
                mappings, quiz, self.min_mappings_per_result_type
            ),
            max_tokens=self.max_tokens,
        )

"""Quiz structure stage implementation."""

from brandquiz.core.generator import GenerationOrchestrator
from brandquiz.core.validator import validate_quiz_structure, validate_schema
from brandquiz.prompts import build_quiz_structure_prompt
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.concept import QuizConcept
from brandquiz.schemas.quiz import GeneratedQuiz

STAGE_NAME = "quiz_structure"


class QuizStructurer:
    """Writes the questions and answer options for a chosen concept."""

    def __init__(self, orchestrator: GenerationOrchestrator):
        self.orchestrator = orchestrator

    def structure(self, brand_summary: BrandSummary, concept: QuizConcept) -> GeneratedQuiz:
        """
        Generate the quiz structure.

        Args:
            brand_summary: Output of the brand summary stage
            concept: The concept the user picked

        Returns:
            Validated GeneratedQuiz (questions and options addressed by index)

        Raises:
            GenerationExhausted: If no valid structure was produced
        """
        prompt = build_quiz_structure_prompt(brand_summary, concept)
        return self.orchestrator.run_stage(
            STAGE_NAME,
            prompt,
            lambda data: validate_schema(data, GeneratedQuiz),
            validate_quiz_structure,
        )

"""Quiz concept stage implementation."""

from brandquiz.core.generator import GenerationOrchestrator
from brandquiz.core.validator import validate_schema
from brandquiz.prompts import build_quiz_concepts_prompt
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.concept import QuizConcept, QuizConceptList

STAGE_NAME = "quiz_concepts"


class ConceptGenerator:
    """Proposes candidate quiz concepts for a brand."""

    def __init__(self, orchestrator: GenerationOrchestrator):
        self.orchestrator = orchestrator

    def generate(self, brand_summary: BrandSummary) -> list[QuizConcept]:
        """
        Generate candidate concepts; the caller picks one.

        Raises:
            GenerationExhausted: If no valid concept list was produced
        """
        prompt = build_quiz_concepts_prompt(brand_summary)
        concepts = self.orchestrator.run_stage(
            STAGE_NAME,
            prompt,
            lambda data: validate_schema(data, QuizConceptList),
        )
        return list(concepts.root)

"""Main pipeline: website text to a persisted, scoreable quiz."""

import time
from typing import Callable, Optional, Protocol, TypeVar

from brandquiz.assembly.quiz_assembler import QuizAssembler
from brandquiz.core.config import Config
from brandquiz.core.errors import GenerationExhausted, WebsiteUnavailableError
from brandquiz.core.generator import GenerationOrchestrator
from brandquiz.core.llm_base import LLMClientBase
from brandquiz.core.logging import StructuredLogger, get_logger
from brandquiz.core.provider_factory import create_client
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.concept import QuizConcept
from brandquiz.schemas.mappings import GeneratedResultMappings
from brandquiz.schemas.quiz import GeneratedQuiz
from brandquiz.schemas.records import QuizRecord
from brandquiz.scraper.fetch import WebsiteTextExtractor
from brandquiz.stages import BrandSummarizer, ConceptGenerator, QuizStructurer, ResultMapper
from brandquiz.storage.base import QuizStore

T = TypeVar("T")

ConceptChooser = Callable[[list[QuizConcept]], QuizConcept]


class TextExtractor(Protocol):
    def extract(self, url: str) -> str:
        ...


class QuizPipeline:
    """
    Runs the four generation stages in order.

    brand_summary -> quiz_concepts -> (caller picks a concept) ->
    quiz_structure -> result_mappings -> assembly. A GenerationExhausted from
    any stage stops the run; nothing is persisted unless both quiz stages
    succeeded.
    """

    def __init__(
        self,
        llm_client: LLMClientBase,
        config: Optional[Config] = None,
        text_extractor: Optional[TextExtractor] = None,
    ):
        """
        Initialize pipeline.

        Args:
            llm_client: Content-generation collaborator
            config: Configuration (defaults to Config())
            text_extractor: Website text source (defaults to WebsiteTextExtractor)
        """
        self.config = config or Config()
        self.orchestrator = GenerationOrchestrator(llm_client, self.config)
        self.text_extractor = text_extractor or WebsiteTextExtractor(
            timeout=self.config.fetch_timeout,
            max_chars=self.config.max_website_chars,
        )

        self.brand_summarizer = BrandSummarizer(self.orchestrator)
        self.concept_generator = ConceptGenerator(self.orchestrator)
        self.quiz_structurer = QuizStructurer(self.orchestrator)
        self.result_mapper = ResultMapper(
            self.orchestrator,
            min_mappings_per_result_type=self.config.min_mappings_per_result_type,
            max_tokens=self.config.mapping_max_output_tokens,
        )

        self.logger: StructuredLogger = get_logger("brandquiz.pipeline")

    @classmethod
    def from_config(cls, config: Config) -> "QuizPipeline":
        """Build a pipeline with the client the configuration names."""
        return cls(create_client(config), config)

    def _run_stage(self, stage: str, func: Callable[..., T], *args) -> T:
        start = time.time()
        self.logger.log_pipeline_stage(stage, "started")
        try:
            result = func(*args)
        except GenerationExhausted as e:
            self.logger.log_pipeline_stage(
                stage,
                "failed",
                duration_ms=(time.time() - start) * 1000,
                error=e.last_error,
            )
            raise
        self.logger.log_pipeline_stage(
            stage, "completed", duration_ms=(time.time() - start) * 1000
        )
        return result

    def analyse_brand(self, url: str, user_description: Optional[str] = None) -> BrandSummary:
        """
        Fetch a brand's website and summarise it.

        If the site cannot be fetched, the user description stands in for the
        website text.

        Raises:
            WebsiteUnavailableError: Fetch failed and no description was given
            GenerationExhausted: The summary stage failed
        """
        try:
            website_text = self.text_extractor.extract(url)
        except Exception as e:
            if not user_description:
                raise WebsiteUnavailableError(url, str(e)) from e
            self.logger.warning(
                f"Could not fetch {url}; falling back to user description",
                context={"url": url, "error": str(e)},
            )
            website_text = f"Brand URL: {url}\n\nUser description: {user_description}"

        return self.summarize_brand(website_text, user_description)

    def summarize_brand(
        self, website_text: str, user_description: Optional[str] = None
    ) -> BrandSummary:
        """Stage 1."""
        return self._run_stage(
            "brand_summary", self.brand_summarizer.summarize, website_text, user_description
        )

    def generate_concepts(self, brand_summary: BrandSummary) -> list[QuizConcept]:
        """Stage 2."""
        return self._run_stage("quiz_concepts", self.concept_generator.generate, brand_summary)

    def generate_quiz(
        self, brand_summary: BrandSummary, concept: QuizConcept
    ) -> tuple[GeneratedQuiz, GeneratedResultMappings]:
        """Stages 3 and 4 for a chosen concept."""
        quiz = self._run_stage(
            "quiz_structure", self.quiz_structurer.structure, brand_summary, concept
        )
        mappings = self._run_stage(
            "result_mappings",
            self.result_mapper.map,
            quiz,
            concept.result_type_names,
            brand_summary,
        )
        return quiz, mappings

    def create_quiz(
        self,
        brand_summary: BrandSummary,
        concept: QuizConcept,
        store: QuizStore,
        workspace_id: Optional[str] = None,
    ) -> QuizRecord:
        """
        Generate a quiz for the chosen concept and persist it.

        Returns:
            The stored quiz record (draft)
        """
        quiz, mappings = self.generate_quiz(brand_summary, concept)
        return QuizAssembler(store).assemble(
            quiz, mappings, concept=concept, workspace_id=workspace_id
        )

    def run(
        self,
        website_text: str,
        choose_concept: ConceptChooser,
        store: QuizStore,
        user_description: Optional[str] = None,
        workspace_id: Optional[str] = None,
    ) -> QuizRecord:
        """
        All four stages plus assembly in one call.

        Args:
            website_text: Plain text describing the brand
            choose_concept: Picks one of the generated concepts
            store: Where the quiz is persisted
            user_description: Optional extra description of the brand
            workspace_id: Owning workspace

        Returns:
            The stored quiz record
        """
        brand_summary = self.summarize_brand(website_text, user_description)
        concepts = self.generate_concepts(brand_summary)
        concept = choose_concept(concepts)
        return self.create_quiz(brand_summary, concept, store, workspace_id)

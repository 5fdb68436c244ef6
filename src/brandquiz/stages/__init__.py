"""The four generation stages, in pipeline order."""

from brandquiz.stages.brand_summarizer import BrandSummarizer
from brandquiz.stages.concept_generator import ConceptGenerator
from brandquiz.stages.quiz_structurer import QuizStructurer
from brandquiz.stages.result_mapper import ResultMapper

__all__ = ["BrandSummarizer", "ConceptGenerator", "QuizStructurer", "ResultMapper"]

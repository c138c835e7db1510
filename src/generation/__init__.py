"""Summary and question generation pipelines."""

from src.generation.providers import (
    AnthropicGenerator,
    ExtractiveGenerator,
    TextGenerator,
    build_generator,
)
from src.generation.questions import QuestionGenerator
from src.generation.study_guide import StudyGuideBuilder
from src.generation.summary import SummaryPipeline

__all__ = [
    "AnthropicGenerator",
    "ExtractiveGenerator",
    "QuestionGenerator",
    "StudyGuideBuilder",
    "SummaryPipeline",
    "TextGenerator",
    "build_generator",
]

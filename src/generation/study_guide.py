"""Assembles a summary and question sections into a StudyGuide."""

import logging
import random
from concurrent.futures import ThreadPoolExecutor

from src.config import AppConfig
from src.errors import InvalidInputError
from src.generation.providers import TextGenerator, build_generator
from src.generation.questions import QuestionGenerator
from src.generation.summary import SummaryPipeline
from src.models.question import QuestionSection, QuestionType
from src.models.study_guide import StudyGuide

logger = logging.getLogger(__name__)


class StudyGuideBuilder:
    """Runs the summary and question pipelines for one document.

    The summary is produced first; question sections for all requested
    types are then generated concurrently, one worker per type, and
    returned in request order. Each type gets its own random source
    derived from the builder's, so a seeded builder is reproducible
    regardless of thread scheduling.

    Args:
        config: Application configuration.
        generator: Text generator for the summary. Built from config when omitted.
        rng: Random source. Seeded from ``config.questions.seed`` when omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        generator: TextGenerator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._summary = SummaryPipeline(
            generator=generator or build_generator(config),
            chunking=config.chunking,
            settings=config.summary,
        )
        self._rng = rng or random.Random(config.questions.seed)

    def build(
        self,
        text: str,
        filename: str,
        question_types: list[str] | list[QuestionType],
        count: int | None = None,
    ) -> StudyGuide:
        """Generate a complete study guide.

        Args:
            text: Extracted document text.
            filename: Original upload name, recorded on the guide.
            question_types: Requested type identifiers, in display order.
            count: Questions per type. Defaults to ``questions.count_per_type``.

        Returns:
            The assembled StudyGuide.

        Raises:
            InvalidInputError: If no question types were requested.
            UnsupportedTypeError: If any requested type is unknown.
            InsufficientTextError: If the text is too short.
            SummaryUnavailableError: If the summary could not be produced.
            GenerationError: If a question generator failed as a whole.
        """
        if not question_types:
            raise InvalidInputError("Please select at least one question type")

        types = [QuestionGenerator.parse_type(t) for t in question_types]
        per_type = count or self._config.questions.count_per_type

        summary = self._summary.summarize(text)
        sections = self._generate_sections(text, types, per_type)

        guide = StudyGuide(filename=filename, summary=summary, sections=sections)
        logger.info(
            "Built study guide for %s: %d sections, %d questions",
            filename,
            len(sections),
            guide.total_questions,
        )
        return guide

    def _generate_sections(
        self, text: str, types: list[QuestionType], count: int
    ) -> list[QuestionSection]:
        """Generate one section per type concurrently, preserving order."""
        generators = [
            QuestionGenerator(
                chunking=self._config.chunking,
                settings=self._config.questions,
                rng=random.Random(self._rng.random()),
            )
            for _ in types
        ]

        max_workers = max(1, min(self._config.questions.max_workers, len(types)))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(generator.generate, text, qtype, count)
                for generator, qtype in zip(generators, types)
            ]
            # result() re-raises the first failing type's GenerationError
            return [
                QuestionSection(type=qtype, questions=future.result())
                for qtype, future in zip(types, futures)
            ]

"""Chunked summary generation with expansion toward a word-count target."""

import logging

from src.config import ChunkingConfig, SummaryConfig
from src.errors import InsufficientTextError, SummaryUnavailableError
from src.generation.providers import TextGenerator
from src.ingestion.chunker import chunk_text, count_words, normalize_whitespace

logger = logging.getLogger(__name__)

SUMMARY_SEPARATOR = ". "

EXPANSION_FILLER = (
    "This document contains important academic content covering key concepts, "
    "theoretical frameworks, and practical applications relevant to the subject matter. "
    "The material presents comprehensive information that students should understand "
    "and remember for academic success."
)

EXPANSION_PROMPT = (
    "Based on this summary, provide a detailed academic explanation with key concepts, "
    "principles, and important details: {excerpt}"
)


class SummaryPipeline:
    """Builds a long-form summary from document text.

    The text is split into large word chunks, a bounded number of which are
    condensed independently. A chunk whose condensation fails is skipped.
    If the joined result falls short of the target word count, one
    expansion call is attempted, and a fixed filler paragraph is appended
    when that call fails.

    Args:
        generator: Provider for the condensation and expansion steps.
        chunking: Chunk size and excerpt limits.
        settings: Length targets and condensation bounds.
    """

    def __init__(
        self,
        generator: TextGenerator,
        chunking: ChunkingConfig | None = None,
        settings: SummaryConfig | None = None,
    ) -> None:
        self._generator = generator
        self._chunking = chunking or ChunkingConfig()
        self._settings = settings or SummaryConfig()

    def summarize(self, text: str) -> str:
        """Generate a summary of ``text``.

        Args:
            text: Raw document text.

        Returns:
            The summary string, never empty.

        Raises:
            InsufficientTextError: If the normalized text is too short.
            SummaryUnavailableError: If no chunk could be condensed.
        """
        clean_text = normalize_whitespace(text)
        if len(clean_text) < self._settings.min_text_chars:
            raise InsufficientTextError(
                f"Document text is too short to summarize "
                f"({len(clean_text)} < {self._settings.min_text_chars} characters)"
            )

        chunks = chunk_text(clean_text, self._chunking.summary_chunk_size)
        chunks = chunks[: self._chunking.max_summary_chunks]

        summaries = self._condense_chunks(chunks)
        if not summaries:
            raise SummaryUnavailableError("Unable to generate summary from the provided content")

        combined = SUMMARY_SEPARATOR.join(summaries)
        if count_words(combined) < self._settings.target_words:
            combined = self._expand(combined)

        if not combined.endswith((".", "!", "?")):
            combined += "."
        return combined

    def _condense_chunks(self, chunks: list[str]) -> list[str]:
        """Condense each eligible chunk, skipping failures.

        Args:
            chunks: Word chunks in document order.

        Returns:
            Condensed strings with trailing periods removed.
        """
        summaries: list[str] = []

        for i, chunk in enumerate(chunks):
            if len(chunk) < self._chunking.min_chunk_chars:
                continue

            try:
                condensed = self._generator.condense(
                    chunk[: self._chunking.excerpt_chars],
                    self._settings.condense_min_len,
                    self._settings.condense_max_len,
                )
            except Exception as exc:
                logger.warning("Error condensing chunk %d, skipping: %s", i, exc)
                continue

            condensed = condensed.strip().rstrip(".").strip()
            if condensed:
                summaries.append(condensed)

        logger.debug("Condensed %d of %d chunks", len(summaries), len(chunks))
        return summaries

    def _expand(self, summary: str) -> str:
        """Append an expansion of ``summary``, or the filler paragraph on failure."""
        prompt = EXPANSION_PROMPT.format(excerpt=summary[: self._settings.expansion_seed_chars])

        try:
            expansion = self._generator.generate_text(
                prompt,
                self._settings.expansion_max_tokens,
                self._settings.expansion_temperature,
            ).strip()
        except Exception as exc:
            logger.warning("Error expanding summary, using filler paragraph: %s", exc)
            expansion = ""

        return summary + SUMMARY_SEPARATOR + (expansion or EXPANSION_FILLER)

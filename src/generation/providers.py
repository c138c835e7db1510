"""Text generation providers used by the summary pipeline."""

import logging
import re
from typing import Protocol

from src.config import AppConfig
from src.errors import ConfigurationError, ProviderUnavailableError

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


class TextGenerator(Protocol):
    """Capability interface for condensing and generating text.

    Implementations may fail with any exception; callers recover.
    """

    def condense(self, excerpt: str, min_len: int, max_len: int) -> str:
        """Compress an excerpt to roughly ``min_len``-``max_len`` words."""
        ...

    def generate_text(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """Produce a free-text continuation of ``prompt``."""
        ...


class ExtractiveGenerator:
    """Offline provider that condenses by keeping leading sentences.

    Free-text generation is not supported and always raises
    ProviderUnavailableError, so callers take their fallback path.
    """

    def condense(self, excerpt: str, min_len: int, max_len: int) -> str:
        sentences = [s.strip() for s in _SENTENCE_END_RE.split(excerpt.strip()) if s.strip()]
        kept: list[str] = []
        word_count = 0

        for sentence in sentences:
            if word_count >= min_len and word_count + len(sentence.split()) > max_len:
                break
            kept.append(sentence)
            word_count += len(sentence.split())

        words = " ".join(kept).split()
        if not words:
            raise ProviderUnavailableError("Nothing to condense")
        return " ".join(words[:max_len])

    def generate_text(self, prompt: str, max_tokens: int, temperature: float) -> str:
        raise ProviderUnavailableError("The extractive provider cannot generate free text")


class AnthropicGenerator:
    """Provider backed by the Anthropic Messages API.

    Args:
        api_key: Anthropic API key.
        model: Model identifier passed to ``messages.create``.
        max_tokens: Token limit for condensation calls.
        temperature: Sampling temperature for condensation calls.
        client: Optional pre-built client, mainly for tests.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        max_tokens: int = 400,
        temperature: float = 0.3,
        client: object | None = None,
    ) -> None:
        if client is None:
            import anthropic

            client = anthropic.Anthropic(api_key=api_key)
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    def condense(self, excerpt: str, min_len: int, max_len: int) -> str:
        prompt = (
            f"Summarize the following academic text in {min_len} to {max_len} words. "
            "Reply with the summary only.\n\n"
            f"{excerpt}"
        )
        return self._complete(prompt, max_tokens=self._max_tokens, temperature=self._temperature)

    def generate_text(self, prompt: str, max_tokens: int, temperature: float) -> str:
        return self._complete(prompt, max_tokens=max_tokens, temperature=temperature)

    def _complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        response = self._client.messages.create(  # type: ignore[attr-defined]
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        # Concatenate only text blocks
        content = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not content:
            raise ProviderUnavailableError(f"Empty response from {self._model}")
        return content


def build_generator(config: AppConfig) -> TextGenerator:
    """Create the text generator named by ``config.generation.provider``.

    Args:
        config: Application configuration.

    Returns:
        A TextGenerator implementation.

    Raises:
        ConfigurationError: If the provider is unknown or missing credentials.
    """
    provider = config.generation.provider.lower()

    if provider == "extractive":
        return ExtractiveGenerator()
    if provider == "anthropic":
        if not config.anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is required for the anthropic provider")
        logger.info("Using Anthropic generator with model %s", config.generation.model)
        return AnthropicGenerator(
            api_key=config.anthropic_api_key,
            model=config.generation.model,
            max_tokens=config.generation.max_tokens,
            temperature=config.generation.temperature,
        )

    raise ConfigurationError(f"Unknown generation provider: '{config.generation.provider}'")

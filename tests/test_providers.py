"""Tests for text generation providers."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from src.config import AppConfig
from src.errors import ConfigurationError, ProviderUnavailableError
from src.generation.providers import AnthropicGenerator, ExtractiveGenerator, build_generator


def _response(*texts: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


class TestExtractiveGenerator:
    def test_keeps_leading_sentences_within_bound(self) -> None:
        excerpt = "One two three four. Five six seven eight. Nine ten eleven twelve."
        assert ExtractiveGenerator().condense(excerpt, 2, 8) == "One two three four. Five six seven eight."

    def test_reaches_minimum_before_stopping(self) -> None:
        excerpt = "Short one. Another short one. A third short sentence here."
        result = ExtractiveGenerator().condense(excerpt, 5, 6)
        assert result.split() == ["Short", "one.", "Another", "short", "one."]

    def test_truncates_long_first_sentence(self) -> None:
        excerpt = " ".join(f"w{i}" for i in range(200))
        assert len(ExtractiveGenerator().condense(excerpt, 30, 150).split()) == 150

    def test_empty_excerpt_raises(self) -> None:
        with pytest.raises(ProviderUnavailableError):
            ExtractiveGenerator().condense("   ", 30, 150)

    def test_generate_text_unavailable(self) -> None:
        with pytest.raises(ProviderUnavailableError):
            ExtractiveGenerator().generate_text("Expand this", 400, 0.3)


class TestAnthropicGenerator:
    def test_generate_text_calls_messages_api(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = _response("Expanded ", "explanation.")

        generator = AnthropicGenerator(api_key="k", model="test-model", client=client)
        assert generator.generate_text("Expand", 400, 0.3) == "Expanded explanation."

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 400
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"] == [{"role": "user", "content": "Expand"}]

    def test_condense_includes_bounds_and_excerpt(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = _response("Short summary.")

        generator = AnthropicGenerator(api_key="k", model="m", client=client)
        assert generator.condense("Long excerpt text", 30, 150) == "Short summary."

        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "30 to 150 words" in prompt
        assert "Long excerpt text" in prompt

    def test_condense_uses_configured_limits(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = _response("Short summary.")

        generator = AnthropicGenerator(
            api_key="k", model="m", max_tokens=1234, temperature=0.9, client=client
        )
        generator.condense("Long excerpt text", 30, 150)

        kwargs = client.messages.create.call_args.kwargs
        assert (kwargs["max_tokens"], kwargs["temperature"]) == (1234, 0.9)

    def test_ignores_non_text_blocks(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="tool_use"), SimpleNamespace(type="text", text="ok")]
        )
        generator = AnthropicGenerator(api_key="k", model="m", client=client)
        assert generator.generate_text("p", 10, 0.0) == "ok"

    def test_empty_response_raises(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = _response("  ")
        generator = AnthropicGenerator(api_key="k", model="m", client=client)
        with pytest.raises(ProviderUnavailableError):
            generator.generate_text("p", 10, 0.0)

    def test_api_errors_propagate(self) -> None:
        client = MagicMock()
        client.messages.create.side_effect = ConnectionError("network down")
        generator = AnthropicGenerator(api_key="k", model="m", client=client)
        with pytest.raises(ConnectionError):
            generator.condense("text", 1, 2)


class TestBuildGenerator:
    def test_extractive_default(self) -> None:
        assert isinstance(build_generator(AppConfig()), ExtractiveGenerator)

    def test_anthropic_requires_key(self) -> None:
        config = AppConfig()
        config.generation.provider = "anthropic"
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            build_generator(config)

    def test_anthropic_with_key(self) -> None:
        config = AppConfig(anthropic_api_key="sk-test")
        config.generation.provider = "anthropic"
        assert isinstance(build_generator(config), AnthropicGenerator)

    def test_unknown_provider(self) -> None:
        config = AppConfig()
        config.generation.provider = "huggingface"
        with pytest.raises(ConfigurationError, match="Unknown generation provider"):
            build_generator(config)

    def test_anthropic_uses_generation_settings(self) -> None:
        config = AppConfig(anthropic_api_key="sk-test")
        config.generation.provider = "anthropic"
        config.generation.max_tokens = 1234
        config.generation.temperature = 0.9

        client = MagicMock()
        client.messages.create.return_value = _response("Short summary.")
        with patch("anthropic.Anthropic", return_value=client) as factory:
            generator = build_generator(config)
        factory.assert_called_once_with(api_key="sk-test")

        generator.condense("Long excerpt text", 30, 150)
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == config.generation.model
        assert (kwargs["max_tokens"], kwargs["temperature"]) == (1234, 0.9)

#!/usr/bin/env python3
"""Tests for the LLM providers and their factory.

SDK clients are patched at their import location; no network calls are made.
"""

import unittest
from types import SimpleNamespace
from unittest.mock import Mock, patch

import httpx
import pytest

from conftest import TEST_API_KEY
from shownotes.config import LLMBackendKind, LLMConfig
from shownotes.exceptions import LLMGenerationError
from shownotes.model_tables import LLMModel
from shownotes.providers import create_llm_backend
from shownotes.providers.anthropic.anthropic_provider import AnthropicProvider
from shownotes.providers.base import build_user_message, token_count
from shownotes.providers.cohere.cohere_provider import CohereProvider
from shownotes.providers.deepseek.deepseek_provider import DeepSeekProvider
from shownotes.providers.gemini.gemini_provider import GeminiProvider
from shownotes.providers.mistral.mistral_provider import MistralProvider
from shownotes.providers.ollama.ollama_provider import OllamaProvider
from shownotes.providers.openai.openai_provider import OpenAIProvider

PROMPT = "Write show notes.\n\n"
TRANSCRIPT = "[00:00] Hello"


def _cfg(backend, model_id, api_key=TEST_API_KEY, base_url=None):
    return LLMConfig(
        backend=backend, model=LLMModel(model_id, 1.0, 2.0), api_key=api_key, base_url=base_url
    )


def _chat_response(content, prompt_tokens=120, completion_tokens=80):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))] if content else [],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


@pytest.mark.unit
class TestHelpers(unittest.TestCase):
    """Test shared provider helpers."""

    def test_user_message(self):
        self.assertEqual(build_user_message("P", "T"), "P\nT")

    def test_token_count(self):
        self.assertEqual(token_count(12), 12)
        self.assertIsNone(token_count(None))
        self.assertIsNone(token_count(Mock()))
        self.assertIsNone(token_count(True))


@pytest.mark.unit
@patch("openai.OpenAI")
class TestOpenAIProvider(unittest.TestCase):
    """Test OpenAIProvider and the OpenAI-compatible vendors."""

    def test_generate(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = _chat_response("## Notes")
        provider = OpenAIProvider(_cfg(LLMBackendKind.CHATGPT, "gpt-4o-mini"))
        result = provider.generate(PROMPT, TRANSCRIPT)

        mock_openai.assert_called_once_with(api_key=TEST_API_KEY)
        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-4o-mini")
        self.assertEqual(kwargs["max_completion_tokens"], 4000)
        self.assertNotIn("max_tokens", kwargs)
        self.assertEqual(
            kwargs["messages"], [{"role": "user", "content": f"{PROMPT}\n{TRANSCRIPT}"}]
        )
        self.assertEqual(result.text, "## Notes")
        self.assertEqual((result.input_tokens, result.output_tokens), (120, 80))

    def test_compatible_vendor_uses_base_url_and_max_tokens(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = _chat_response("notes")
        provider = DeepSeekProvider(
            _cfg(LLMBackendKind.DEEPSEEK, "deepseek-chat", base_url="https://api.deepseek.com")
        )
        provider.generate(PROMPT, TRANSCRIPT)

        mock_openai.assert_called_once_with(
            api_key=TEST_API_KEY, base_url="https://api.deepseek.com"
        )
        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["max_tokens"], 4000)
        self.assertNotIn("max_completion_tokens", kwargs)

    def test_empty_response(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = _chat_response(None)
        provider = OpenAIProvider(_cfg(LLMBackendKind.CHATGPT, "gpt-4o"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)

    def test_api_error(self, mock_openai):
        mock_openai.return_value.chat.completions.create.side_effect = RuntimeError("429")
        provider = OpenAIProvider(_cfg(LLMBackendKind.CHATGPT, "gpt-4o"))
        with self.assertRaises(LLMGenerationError) as ctx:
            provider.generate(PROMPT, TRANSCRIPT)
        self.assertIn("429", str(ctx.exception))


@pytest.mark.unit
@patch("anthropic.Anthropic")
class TestAnthropicProvider(unittest.TestCase):
    """Test AnthropicProvider."""

    def test_concatenates_text_blocks(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="Part one. "),
                SimpleNamespace(type="tool_use"),
                SimpleNamespace(type="text", text="Part two."),
            ],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )
        provider = AnthropicProvider(_cfg(LLMBackendKind.CLAUDE, "claude-3-haiku-20240307"))
        result = provider.generate(PROMPT, TRANSCRIPT)

        self.assertEqual(result.text, "Part one. Part two.")
        kwargs = mock_anthropic.return_value.messages.create.call_args.kwargs
        self.assertEqual(kwargs["max_tokens"], 4000)
        self.assertEqual(kwargs["model"], "claude-3-haiku-20240307")

    def test_empty_content(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.return_value = SimpleNamespace(
            content=[], usage=None
        )
        provider = AnthropicProvider(_cfg(LLMBackendKind.CLAUDE, "claude-3-haiku-20240307"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)


@pytest.mark.unit
@patch("shownotes.utils.retry.time.sleep")
@patch("google.generativeai.GenerativeModel")
@patch("google.generativeai.configure")
class TestGeminiProvider(unittest.TestCase):
    """Test GeminiProvider, including its retries."""

    def _response(self, text="Gemini notes"):
        return SimpleNamespace(
            text=text,
            usage_metadata=SimpleNamespace(prompt_token_count=30, candidates_token_count=20),
        )

    def test_generate(self, mock_configure, mock_model, mock_sleep):
        mock_model.return_value.generate_content.return_value = self._response()
        provider = GeminiProvider(_cfg(LLMBackendKind.GEMINI, "gemini-1.5-flash"))
        result = provider.generate(PROMPT, TRANSCRIPT)

        mock_configure.assert_called_once_with(api_key=TEST_API_KEY)
        mock_model.assert_called_once_with("gemini-1.5-flash")
        self.assertEqual(result.text, "Gemini notes")
        self.assertEqual(result.output_tokens, 20)
        mock_sleep.assert_not_called()

    def test_retries_then_succeeds(self, _configure, mock_model, mock_sleep):
        mock_model.return_value.generate_content.side_effect = [
            RuntimeError("503"),
            self._response(),
        ]
        provider = GeminiProvider(_cfg(LLMBackendKind.GEMINI, "gemini-1.5-flash"))
        self.assertEqual(provider.generate(PROMPT, TRANSCRIPT).text, "Gemini notes")
        mock_sleep.assert_called_once_with(2.0)

    def test_gives_up_after_three_attempts(self, _configure, mock_model, mock_sleep):
        mock_model.return_value.generate_content.side_effect = RuntimeError("503")
        provider = GeminiProvider(_cfg(LLMBackendKind.GEMINI, "gemini-1.5-flash"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)
        self.assertEqual(mock_model.return_value.generate_content.call_count, 3)
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [2.0, 4.0])

    def test_empty_text(self, _configure, mock_model, _sleep):
        mock_model.return_value.generate_content.return_value = self._response(text="")
        provider = GeminiProvider(_cfg(LLMBackendKind.GEMINI, "gemini-1.5-flash"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)


@pytest.mark.unit
@patch("cohere.Client")
class TestCohereProvider(unittest.TestCase):
    """Test CohereProvider."""

    def test_generate(self, mock_client):
        mock_client.return_value.chat.return_value = SimpleNamespace(
            text="Cohere notes",
            meta=SimpleNamespace(tokens=SimpleNamespace(input_tokens=9, output_tokens=4)),
        )
        provider = CohereProvider(_cfg(LLMBackendKind.COHERE, "command-r"))
        result = provider.generate(PROMPT, TRANSCRIPT)

        self.assertEqual(result.text, "Cohere notes")
        self.assertEqual((result.input_tokens, result.output_tokens), (9, 4))
        kwargs = mock_client.return_value.chat.call_args.kwargs
        self.assertEqual(kwargs["message"], f"{PROMPT}\n{TRANSCRIPT}")

    def test_error(self, mock_client):
        mock_client.return_value.chat.side_effect = RuntimeError("unauthorized")
        provider = CohereProvider(_cfg(LLMBackendKind.COHERE, "command-r"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)


@pytest.mark.unit
@patch("mistralai.Mistral")
class TestMistralProvider(unittest.TestCase):
    """Test MistralProvider."""

    def test_generate(self, mock_mistral):
        mock_mistral.return_value.chat.complete.return_value = _chat_response("Mistral notes")
        provider = MistralProvider(_cfg(LLMBackendKind.MISTRAL, "open-mistral-nemo"))
        result = provider.generate(PROMPT, TRANSCRIPT)
        self.assertEqual(result.text, "Mistral notes")
        mock_mistral.assert_called_once_with(api_key=TEST_API_KEY)

    def test_no_choices(self, mock_mistral):
        mock_mistral.return_value.chat.complete.return_value = _chat_response(None)
        provider = MistralProvider(_cfg(LLMBackendKind.MISTRAL, "open-mistral-nemo"))
        with self.assertRaises(LLMGenerationError):
            provider.generate(PROMPT, TRANSCRIPT)


@pytest.mark.unit
@patch("shownotes.providers.ollama.ollama_provider.httpx.get")
@patch("openai.OpenAI")
class TestOllamaProvider(unittest.TestCase):
    """Test OllamaProvider's lazy server check."""

    def setUp(self):
        self.cfg = _cfg(
            LLMBackendKind.OLLAMA,
            "qwen2.5:0.5b",
            api_key=None,
            base_url="http://localhost:11434/v1",
        )

    def _tags(self, *names):
        resp = Mock()
        resp.raise_for_status.return_value = None
        resp.json.return_value = {"models": [{"name": name} for name in names]}
        return resp

    def test_validates_once_then_generates(self, mock_openai, mock_get):
        mock_get.return_value = self._tags("qwen2.5:0.5b", "llama3.2:1b")
        mock_openai.return_value.chat.completions.create.return_value = _chat_response("local")
        provider = OllamaProvider(self.cfg)
        mock_get.assert_not_called()

        provider.generate(PROMPT, TRANSCRIPT)
        provider.generate(PROMPT, TRANSCRIPT)

        mock_get.assert_called_once()
        self.assertEqual(mock_get.call_args.args[0], "http://localhost:11434/api/tags")
        mock_openai.assert_called_once_with(
            api_key="ollama", base_url="http://localhost:11434/v1"
        )

    def test_model_not_pulled(self, mock_openai, mock_get):
        mock_get.return_value = self._tags("llama3.2:1b")
        provider = OllamaProvider(self.cfg)
        with self.assertRaises(LLMGenerationError) as ctx:
            provider.generate(PROMPT, TRANSCRIPT)
        self.assertIn("ollama pull qwen2.5:0.5b", str(ctx.exception))
        mock_openai.return_value.chat.completions.create.assert_not_called()

    def test_untagged_model_matches_latest(self, mock_openai, mock_get):
        cfg = _cfg(
            LLMBackendKind.OLLAMA, "llama3.2", api_key=None, base_url="http://localhost:11434/v1"
        )
        mock_get.return_value = self._tags("llama3.2:latest")
        mock_openai.return_value.chat.completions.create.return_value = _chat_response("local")
        result = OllamaProvider(cfg).generate(PROMPT, TRANSCRIPT)
        self.assertEqual(result.text, "local")

    def test_server_down(self, _openai, mock_get):
        mock_get.side_effect = httpx.ConnectError("refused")
        provider = OllamaProvider(self.cfg)
        with self.assertRaises(LLMGenerationError) as ctx:
            provider.generate(PROMPT, TRANSCRIPT)
        self.assertIn("ollama serve", str(ctx.exception))


@pytest.mark.unit
class TestFactory(unittest.TestCase):
    """Test create_llm_backend dispatch."""

    @patch("openai.OpenAI")
    def test_openai_family(self, _openai):
        self.assertIsInstance(
            create_llm_backend(_cfg(LLMBackendKind.CHATGPT, "gpt-4o-mini")), OpenAIProvider
        )
        groq = create_llm_backend(
            _cfg(LLMBackendKind.GROQ, "llama-3.2-1b-preview", base_url="https://api.groq.com")
        )
        self.assertEqual(groq.name, "groq")

    @patch("anthropic.Anthropic")
    def test_claude(self, _anthropic):
        backend = create_llm_backend(_cfg(LLMBackendKind.CLAUDE, "claude-3-haiku-20240307"))
        self.assertIsInstance(backend, AnthropicProvider)
        self.assertEqual(backend.name, "claude")

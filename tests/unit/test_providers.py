"""Unit tests for provider clients and the provider factory.

SDK clients and HTTP sessions are replaced with mocks; nothing here touches
the network.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from neurolink_demo.llm.base import LLMResponse
from neurolink_demo.llm.exceptions import ProviderError, RateLimitError
from neurolink_demo.llm.providers import (
    PROVIDER_CLASSES,
    AnthropicProvider,
    AzureOpenAIProvider,
    GoogleAIProvider,
    HuggingFaceProvider,
    MistralProvider,
    OllamaProvider,
    OpenAIProvider,
    check_ollama_running,
    create_provider,
)
from neurolink_demo.llm.providers.vertex_provider import detect_auth_method
from neurolink_demo.llm.registry import ALL_PROVIDERS


def async_context(value=None, error=None):
    """MagicMock usable with ``async with``."""
    cm = MagicMock()
    if error is not None:
        cm.__aenter__ = AsyncMock(side_effect=error)
    else:
        cm.__aenter__ = AsyncMock(return_value=value)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


def http_response(status, json_body=None, text=""):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_body)
    response.text = AsyncMock(return_value=text)
    return response


# ============================================================================
# LLMResponse
# ============================================================================


class TestLLMResponse:
    """Token accounting on responses."""

    def test_total_tokens_reported(self):
        assert LLMResponse("x", usage={"total_tokens": 12}).total_tokens == 12

    def test_total_tokens_from_split(self):
        assert LLMResponse("x", usage={"input_tokens": 3, "output_tokens": 4}).total_tokens == 7

    def test_total_tokens_missing(self):
        assert LLMResponse("x").total_tokens == 0

    def test_total_tokens_garbage(self):
        assert LLMResponse("x", usage={"total_tokens": "lots"}).total_tokens == 0


# ============================================================================
# Factory
# ============================================================================


class TestCreateProvider:
    """Provider construction by name."""

    def test_every_provider_has_a_class(self):
        assert set(PROVIDER_CLASSES) == set(ALL_PROVIDERS)

    @pytest.mark.parametrize("name", ALL_PROVIDERS)
    def test_public_interface(self, name):
        provider_class = PROVIDER_CLASSES[name]
        methods = {
            attr for attr in dir(provider_class)
            if not attr.startswith("_") and callable(getattr(provider_class, attr))
        }

        assert methods == {"generate_content", "cleanup"}

    def test_unknown_provider(self):
        with pytest.raises(ProviderError, match="Unknown provider: nonexistent"):
            create_provider("nonexistent")

    def test_missing_credentials(self, clean_os_environ):
        with pytest.raises(ProviderError, match="openai is not configured"):
            create_provider("openai")

    def test_openai_with_default_model(self, clean_os_environ, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        provider = create_provider("openai")

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o"
        assert provider.api_key == "sk-test"

    def test_model_argument_wins(self, clean_os_environ, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")

        assert create_provider("openai").model == "gpt-4o-mini"
        assert create_provider("openai", model="gpt-4.1").model == "gpt-4.1"

    def test_mistral_uses_compatible_endpoint(self, clean_os_environ, monkeypatch):
        monkeypatch.setenv("MISTRAL_API_KEY", "m-test")

        provider = create_provider("mistral")

        assert isinstance(provider, MistralProvider)
        assert provider.base_url == "https://api.mistral.ai/v1"
        assert provider.model == "mistral-small"

    def test_azure_requires_endpoint(self, clean_os_environ, monkeypatch):
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "a-test")

        with pytest.raises(ProviderError, match="azure is not configured"):
            create_provider("azure")

    def test_azure_configured(self, clean_os_environ, monkeypatch):
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "a-test")
        monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")

        assert isinstance(create_provider("azure"), AzureOpenAIProvider)

    def test_ollama_needs_no_credentials(self, clean_os_environ):
        provider = create_provider("ollama")

        assert isinstance(provider, OllamaProvider)
        assert provider.model == "llama3.2:latest"


# ============================================================================
# SDK-backed providers
# ============================================================================


class TestOpenAIProvider:
    """Chat completions adapter."""

    @pytest.mark.asyncio
    async def test_generate_content(self):
        provider = OpenAIProvider({"api_key": "sk-test", "model": "gpt-4o"})
        completion = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="Hello!"), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=5, completion_tokens=2, total_tokens=7),
            model="gpt-4o-2024-08-06",
        )
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=completion)
        provider._client = client

        response = await provider.generate_content("Hi", max_tokens=5, temperature=0.1, system_prompt="Be terse")

        assert response.content == "Hello!"
        assert response.total_tokens == 7
        assert response.model == "gpt-4o-2024-08-06"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 5
        assert kwargs["messages"][0] == {"role": "system", "content": "Be terse"}
        assert "system_prompt" not in kwargs

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        provider = OpenAIProvider({"api_key": "sk-test"})
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=RuntimeError("Error code: 401"))
        provider._client = client

        with pytest.raises(RuntimeError, match="401"):
            await provider.generate_content("Hi")


class TestAnthropicProvider:
    """Messages API adapter."""

    @pytest.mark.asyncio
    async def test_generate_content(self):
        provider = AnthropicProvider({"api_key": "sk-ant-test"})
        message = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="Hello"), SimpleNamespace(type="tool_use")],
            usage=SimpleNamespace(input_tokens=4, output_tokens=3),
            model="claude-3-5-sonnet-20241022",
            stop_reason="end_turn",
        )
        client = MagicMock()
        client.messages.create.return_value = message
        provider._client = client

        response = await provider.generate_content("Hi", max_tokens=5)

        assert response.content == "Hello"
        assert response.total_tokens == 7
        assert set(vars(response)) == {"content", "provider", "model", "usage"}
        assert client.messages.create.call_args.kwargs["system"] == "You are a helpful AI assistant."


# ============================================================================
# REST providers
# ============================================================================


class TestGoogleAIProvider:
    """Gemini REST adapter."""

    def test_build_payload(self):
        payload = GoogleAIProvider._build_payload("Hi", 5, 0.1, "Be terse")

        assert payload["contents"][0]["parts"][0]["text"] == "Hi"
        assert payload["generationConfig"] == {"maxOutputTokens": 5, "temperature": 0.1}
        assert payload["systemInstruction"]["parts"][0]["text"] == "Be terse"

    def test_extract_text(self):
        data = {"candidates": [{"content": {"parts": [{"text": "Hel"}, {"text": "lo"}]}}]}
        assert GoogleAIProvider._extract_text(data) == "Hello"
        assert GoogleAIProvider._extract_text({"candidates": []}) is None

    @pytest.mark.asyncio
    async def test_generate_content(self):
        provider = GoogleAIProvider({"api_key": "g-test"})
        body = {
            "candidates": [{"content": {"parts": [{"text": "Hello"}]}}],
            "usageMetadata": {"promptTokenCount": 2, "candidatesTokenCount": 1, "totalTokenCount": 3},
        }

        with patch.object(provider, "_post_json", AsyncMock(return_value=body)) as post:
            response = await provider.generate_content("Hi")

        assert response.content == "Hello"
        assert response.total_tokens == 3
        url = post.call_args.args[0]
        assert url.endswith("/models/gemini-2.5-pro:generateContent")
        assert post.call_args.kwargs["headers"] == {"x-goog-api-key": "g-test"}

    @pytest.mark.asyncio
    async def test_http_error_carries_status(self):
        provider = GoogleAIProvider({"api_key": "g-test"})
        session = MagicMock()
        session.post.return_value = async_context(http_response(401, text="API key not valid"))

        with patch.object(provider, "_get_session", AsyncMock(return_value=session)):
            with pytest.raises(ProviderError, match="google-ai API error 401"):
                await provider.generate_content("Hi")

    @pytest.mark.asyncio
    async def test_http_429_is_rate_limit(self):
        provider = GoogleAIProvider({"api_key": "g-test"})
        session = MagicMock()
        session.post.return_value = async_context(http_response(429))

        with patch.object(provider, "_get_session", AsyncMock(return_value=session)):
            with pytest.raises(RateLimitError, match="429"):
                await provider.generate_content("Hi")


class TestHuggingFaceProvider:
    """Inference API adapter."""

    @pytest.mark.asyncio
    async def test_generate_content(self):
        provider = HuggingFaceProvider({"api_key": "hf-test"})

        with patch.object(
            provider, "_post_json", AsyncMock(return_value=[{"generated_text": "Hello"}])
        ) as post:
            response = await provider.generate_content("Hi", temperature=0.0)

        assert response.content == "Hello"
        payload = post.call_args.args[1]
        assert payload["parameters"]["temperature"] == 0.01
        assert post.call_args.kwargs["headers"] == {"Authorization": "Bearer hf-test"}


class TestVertexAuth:
    """Authentication method detection."""

    def test_service_account_file_first(self):
        env = {"GOOGLE_APPLICATION_CREDENTIALS": "/tmp/sa.json", "GOOGLE_AUTH_CLIENT_EMAIL": "x@y"}
        assert detect_auth_method(env) == "service_account_file"

    def test_environment_variables(self):
        assert detect_auth_method({"GOOGLE_AUTH_CLIENT_EMAIL": "x@y"}) == "environment_variables"

    def test_api_key(self):
        assert detect_auth_method({"GOOGLE_GENERATIVE_AI_API_KEY": "k"}) == "api_key"

    def test_none(self):
        assert detect_auth_method({}) == "none"


# ============================================================================
# Ollama
# ============================================================================


class TestOllamaProvider:
    """Local Ollama adapter."""

    @pytest.mark.asyncio
    async def test_generate_content(self):
        provider = OllamaProvider({"base_url": "http://localhost:11434"})
        body = {"response": " Hello \n", "model": "llama3.2:latest", "prompt_eval_count": 4, "eval_count": 6}

        with patch.object(provider, "_post_json", AsyncMock(return_value=body)) as post:
            response = await provider.generate_content("Hi", max_tokens=5, system_prompt="Be terse")

        assert response.content == "Hello"
        assert response.total_tokens == 10
        assert post.call_args.args[0] == "http://localhost:11434/api/generate"
        payload = post.call_args.args[1]
        assert payload["options"]["num_predict"] == 5
        assert payload["system"] == "Be terse"

    @pytest.mark.asyncio
    async def test_error_body(self):
        provider = OllamaProvider({})

        with patch.object(provider, "_post_json", AsyncMock(return_value={"error": "model 'x' not found"})):
            with pytest.raises(ProviderError, match="not found"):
                await provider.generate_content("Hi")


class TestCheckOllamaRunning:
    """Liveness check against /api/tags."""

    @pytest.mark.asyncio
    async def test_running(self):
        session = MagicMock()
        session.get.return_value = async_context(http_response(200))

        with patch("aiohttp.ClientSession", return_value=async_context(session)):
            assert await check_ollama_running("http://localhost:11434", 2.0) is True

        session.get.assert_called_once_with("http://localhost:11434/api/tags")

    @pytest.mark.asyncio
    async def test_non_200(self):
        session = MagicMock()
        session.get.return_value = async_context(http_response(500))

        with patch("aiohttp.ClientSession", return_value=async_context(session)):
            assert await check_ollama_running() is False

    @pytest.mark.asyncio
    async def test_timeout_is_not_running_and_not_retried(self):
        session = MagicMock()
        session.get.return_value = async_context(error=asyncio.TimeoutError())

        with patch("aiohttp.ClientSession", return_value=async_context(session)):
            assert await check_ollama_running("http://localhost:11434", 2.0) is False

        assert session.get.call_count == 1

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        with patch("aiohttp.ClientSession", side_effect=OSError("Connection refused")):
            assert await check_ollama_running() is False

"""Global test fixtures for the NeuroLink demo test suite."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from neurolink_demo.llm.base import BaseLLMProvider, LLMResponse
from neurolink_demo.llm.exceptions import ProviderError


# ==========================================
# Pytest Configuration
# ==========================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


# ==========================================
# Mock LLM Provider
# ==========================================

class MockProvider(BaseLLMProvider):
    """Mock LLM provider for testing."""

    def __init__(
        self,
        name: str = "mock",
        should_fail: bool = False,
        error_message: Optional[str] = None,
        response_content: Optional[str] = "Mock response",
        latency_ms: float = 0.0,
        usage: Optional[Dict[str, Any]] = None,
        model: str = "test-model",
    ):
        super().__init__({"api_key": "test-key", "model": model})
        self.name = name
        self.should_fail = should_fail or error_message is not None
        self.error_message = error_message or f"Provider {name} failed"
        self.response_content = response_content
        self.latency_ms = latency_ms
        self.usage = usage if usage is not None else {"total_tokens": 10}
        self.call_count = 0
        self.cleanup_count = 0
        self.calls: List[Dict[str, Any]] = []

    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        self.call_count += 1
        self.calls.append({
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
            **kwargs
        })

        if self.latency_ms:
            await asyncio.sleep(self.latency_ms / 1000)

        if self.should_fail:
            raise RuntimeError(self.error_message)

        return LLMResponse(
            content=self.response_content,
            provider=self.name,
            model=self.model,
            usage=dict(self.usage),
        )

    async def cleanup(self) -> None:
        self.cleanup_count += 1


class MockProviderFactory:
    """Stands in for ``create_provider``; hands out prepared mock providers."""

    def __init__(self, providers: Optional[Dict[str, MockProvider]] = None):
        self.providers = dict(providers or {})
        self.created: List[str] = []
        self.models: Dict[str, Optional[str]] = {}

    def __call__(self, name: str, model: Optional[str] = None, config=None) -> BaseLLMProvider:
        self.created.append(name)
        self.models[name] = model
        provider = self.providers.get(name)
        if provider is None:
            raise ProviderError(f"{name} is not configured: no mock registered")
        return provider


# ==========================================
# Environment fixtures
# ==========================================

@pytest.fixture
def empty_env() -> Dict[str, str]:
    """No provider credentials at all."""
    return {}


@pytest.fixture
def openai_anthropic_env() -> Dict[str, str]:
    """OpenAI and Anthropic configured; everything else unset."""
    return {
        "OPENAI_API_KEY": "sk-test-openai",
        "ANTHROPIC_API_KEY": "sk-ant-test",
    }


@pytest.fixture
def clean_os_environ(monkeypatch):
    """Strip provider variables from ``os.environ`` for code that reads it directly."""
    for name in (
        "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_AI_API_KEY", "MISTRAL_API_KEY",
        "GOOGLE_VERTEX_PROJECT", "GOOGLE_APPLICATION_CREDENTIALS", "GOOGLE_AUTH_CLIENT_EMAIL",
        "GOOGLE_GENERATIVE_AI_API_KEY", "AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT",
        "HUGGINGFACE_API_KEY", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION",
        "ENABLE_FALLBACK", "OPENAI_MODEL", "DEFAULT_PROVIDER", "ENABLE_STREAMING",
    ):
        monkeypatch.delenv(name, raising=False)

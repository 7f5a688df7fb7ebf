"""Base LLM provider interface for the NeuroLink demo server."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LLMResponse:
    """Text and token usage returned by an LLM provider."""

    def __init__(
        self,
        content: Optional[str],
        provider: str = "unknown",
        model: str = "unknown",
        usage: Optional[Dict[str, Any]] = None,
    ):
        self.content = content
        self.provider = provider
        self.model = model
        self.usage: Dict[str, Any] = usage or {}

    @property
    def total_tokens(self) -> int:
        """Total token count reported by the backend, or 0 when unknown."""
        total = self.usage.get("total_tokens")
        if total is None:
            # Backends that only report input/output split
            prompt = self.usage.get("prompt_tokens", self.usage.get("input_tokens"))
            completion = self.usage.get("completion_tokens", self.usage.get("output_tokens"))
            if prompt is None and completion is None:
                return 0
            total = (prompt or 0) + (completion or 0)
        try:
            return int(total)
        except (TypeError, ValueError):
            return 0

    def __str__(self) -> str:
        length = len(self.content) if self.content else 0
        return f"LLMResponse(provider={self.provider}, model={self.model}, length={length})"


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "base"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the provider with configuration."""
        self.config = config or {}
        self.api_key = self.config.get('api_key')
        self.model = self.config.get('model', 'default-model')
        self.base_url = self.config.get('base_url')
        self.timeout_seconds = self.config.get('timeout_seconds', 30)

    @abstractmethod
    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        """Generate content from prompt.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional provider-specific parameters (``system_prompt``)

        Returns:
            LLMResponse with generated content
        """
        pass

    async def cleanup(self) -> None:
        """Release network resources held by the provider."""
        return None

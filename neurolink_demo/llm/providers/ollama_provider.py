"""Ollama provider implementation.

Ollama runs models locally and needs no credentials; whether it can serve
requests is a matter of the server being up.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

import aiohttp

from ..base import LLMResponse
from ..exceptions import ProviderError
from .rest_base import RESTProvider

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


async def check_ollama_running(base_url: str = DEFAULT_OLLAMA_URL, timeout: float = 2.0) -> bool:
    """Liveness check against the local Ollama server.

    Args:
        base_url: Ollama server URL
        timeout: Total timeout in seconds

    Returns:
        True if ``/api/tags`` answers with HTTP 200
    """
    try:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(f"{base_url}/api/tags") as response:
                return response.status == 200
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        logger.info(f"Ollama connection test failed: {e or type(e).__name__}")
        return False


class OllamaProvider(RESTProvider):
    """Ollama local LLM provider implementation."""

    name = "ollama"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Ollama provider.

        Args:
            config: Configuration dictionary with Ollama settings
        """
        super().__init__(config)
        self.base_url = self.config.get('base_url') or os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL)
        self.model = self.config.get('model', 'llama3.2:latest')
        self.keep_alive = self.config.get('keep_alive', '5m')
        self.options = self.config.get('options', {})

    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        """Generate text using the Ollama ``/api/generate`` endpoint."""
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
                **self.options,
            },
            "keep_alive": self.keep_alive,
        }
        if kwargs.get('system_prompt'):
            payload["system"] = kwargs['system_prompt']

        try:
            result = await self._post_json(f"{self.base_url}/api/generate", payload)
        except aiohttp.ClientConnectorError as e:
            raise ProviderError(
                f"Ollama server not running at {self.base_url} (connection refused): {e}"
            ) from e

        if "error" in result:
            raise ProviderError(f"Ollama generation error: {result['error']}")

        prompt_tokens = result.get("prompt_eval_count", 0)
        completion_tokens = result.get("eval_count", 0)
        usage = {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        }

        content = (result.get("response") or "").strip()
        logger.info(f"Ollama response received: {len(content)} chars")
        return LLMResponse(content=content, provider=self.name, model=result.get("model", self.model), usage=usage)

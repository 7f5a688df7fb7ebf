"""OpenAI provider implementation."""

import logging
import os
from typing import Any, Dict, Optional

from ..base import BaseLLMProvider, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat completions provider."""

    name = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize OpenAI provider.

        Args:
            config: Configuration dictionary; ``api_key`` falls back to the
                provider's environment variable
        """
        super().__init__(config)
        self.api_key = self.config.get('api_key') or os.getenv(self.api_key_env)
        self.model = self.config.get('model', 'gpt-4o')
        self.base_url = self.config.get('base_url', self.default_base_url)
        self._client = None

        if not self.api_key:
            raise ValueError(f"{self.name} API key is required ({self.api_key_env})")

    def _build_client(self):
        from openai import AsyncOpenAI

        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    def _get_client(self):
        """Get or create the async SDK client."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        """Generate content using the chat completions API.

        Args:
            prompt: The prompt to send
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: ``system_prompt`` plus extra request parameters

        Returns:
            LLMResponse with generated content
        """
        client = self._get_client()
        system_prompt = kwargs.pop('system_prompt', None) or DEFAULT_SYSTEM_PROMPT

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt}
        ]

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                **kwargs
            )
        except Exception as e:
            logger.error(f"{self.name} content generation failed: {e}")
            raise

        content = response.choices[0].message.content if response.choices else None
        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        llm_response = LLMResponse(
            content=content,
            provider=self.name,
            model=getattr(response, 'model', None) or self.model,
            usage=usage,
        )

        logger.info(f"{self.name} response received: {len(content or '')} chars, {llm_response.total_tokens} tokens")
        return llm_response

    async def cleanup(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

"""Anthropic provider implementation."""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from ..base import BaseLLMProvider, LLMResponse
from .openai_provider import DEFAULT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation."""

    name = "anthropic"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Anthropic provider.

        Args:
            config: Configuration dictionary with Anthropic settings
        """
        super().__init__(config)
        self.api_key = self.config.get('api_key') or os.getenv("ANTHROPIC_API_KEY")
        self.model = self.config.get('model', 'claude-3-5-sonnet-20241022')
        self.base_url = self.config.get('base_url', 'https://api.anthropic.com')
        self._client = None
        self._validate_credentials()

    def _validate_credentials(self) -> None:
        if not self.api_key:
            raise ValueError("Anthropic API key is required (ANTHROPIC_API_KEY)")

    def _build_client(self):
        import anthropic

        return anthropic.Anthropic(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    def _get_client(self):
        """Get or create the SDK client."""
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
        """Generate content using the Messages API.

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

        try:
            # Sync client, run off the event loop
            response = await asyncio.to_thread(
                client.messages.create,
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": prompt}],
                **kwargs
            )
        except Exception as e:
            logger.error(f"{self.name} content generation failed: {e}")
            raise

        content = "".join(
            block.text for block in response.content if getattr(block, 'type', None) == 'text'
        )
        usage = {
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
            "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
        }

        llm_response = LLMResponse(
            content=content,
            provider=self.name,
            model=getattr(response, 'model', None) or self.model,
            usage=usage,
        )

        logger.info(f"{self.name} response received: {len(content)} chars")
        return llm_response

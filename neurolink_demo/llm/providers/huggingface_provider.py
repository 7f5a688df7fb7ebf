"""Hugging Face Inference API provider implementation."""

import logging
import os
from typing import Any, Dict, Optional

from ..base import LLMResponse
from .rest_base import RESTProvider

logger = logging.getLogger(__name__)


class HuggingFaceProvider(RESTProvider):
    """Hosted text-generation models on the Hugging Face Inference API."""

    name = "huggingface"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = self.config.get('api_key') or os.getenv("HUGGINGFACE_API_KEY")
        self.model = self.config.get('model', 'microsoft/DialoGPT-medium')
        self.base_url = self.config.get('base_url', 'https://api-inference.huggingface.co/models')

        if not self.api_key:
            raise ValueError("Hugging Face API key is required (HUGGINGFACE_API_KEY)")

    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        """Generate content with the text-generation task."""
        system_prompt = kwargs.get('system_prompt')
        inputs = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        payload = {
            "inputs": inputs,
            "parameters": {
                "max_new_tokens": max_tokens,
                # The API rejects a temperature of exactly zero
                "temperature": max(temperature, 0.01),
                "return_full_text": False,
            },
            "options": {"wait_for_model": True},
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        data = await self._post_json(f"{self.base_url}/{self.model}", payload, headers=headers)

        content = None
        if isinstance(data, list) and data:
            content = data[0].get("generated_text")
        elif isinstance(data, dict):
            content = data.get("generated_text")

        logger.info(f"Hugging Face response received: {len(content or '')} chars")
        return LLMResponse(content=content, provider=self.name, model=self.model)

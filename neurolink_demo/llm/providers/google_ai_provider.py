"""Google AI Studio (Gemini) provider implementation."""

import logging
import os
from typing import Any, Dict, Optional

from ..base import LLMResponse
from .rest_base import RESTProvider

logger = logging.getLogger(__name__)


class GoogleAIProvider(RESTProvider):
    """Gemini models through the Generative Language REST API."""

    name = "google-ai"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = self.config.get('api_key') or os.getenv("GOOGLE_AI_API_KEY")
        self.model = self.config.get('model', 'gemini-2.5-pro')
        self.base_url = self.config.get('base_url', 'https://generativelanguage.googleapis.com/v1beta')
        self._validate_credentials()

    def _validate_credentials(self) -> None:
        if not self.api_key:
            raise ValueError("Google AI API key is required (GOOGLE_AI_API_KEY)")

    def _endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _auth(self) -> Dict[str, Any]:
        """Headers and query parameters that authenticate a request."""
        return {"headers": {"x-goog-api-key": self.api_key}, "params": None}

    @staticmethod
    def _build_payload(prompt: str, max_tokens: int, temperature: float, system_prompt: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": temperature,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        return payload

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> Optional[str]:
        candidates = data.get("candidates") or []
        if not candidates:
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [part.get("text", "") for part in parts if "text" in part]
        return "".join(texts) if texts else None

    async def generate_content(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        **kwargs
    ) -> LLMResponse:
        """Generate content with ``generateContent``."""
        payload = self._build_payload(prompt, max_tokens, temperature, kwargs.get('system_prompt'))
        auth = await self._auth()
        data = await self._post_json(self._endpoint(), payload, headers=auth["headers"], params=auth["params"])

        metadata = data.get("usageMetadata") or {}
        usage = {}
        if metadata:
            usage = {
                "prompt_tokens": metadata.get("promptTokenCount", 0),
                "completion_tokens": metadata.get("candidatesTokenCount", 0),
                "total_tokens": metadata.get("totalTokenCount", 0),
            }

        content = self._extract_text(data)
        logger.info(f"{self.name} response received: {len(content or '')} chars")
        return LLMResponse(
            content=content,
            provider=self.name,
            model=data.get("modelVersion") or self.model,
            usage=usage,
        )

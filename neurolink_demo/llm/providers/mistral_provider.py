"""Mistral AI provider, via Mistral's OpenAI-compatible API."""

from typing import Any, Dict, Optional

from .openai_provider import OpenAIProvider


class MistralProvider(OpenAIProvider):
    """Mistral chat completions through the OpenAI SDK."""

    name = "mistral"
    api_key_env = "MISTRAL_API_KEY"
    default_base_url = "https://api.mistral.ai/v1"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        config.setdefault('model', 'mistral-small')
        super().__init__(config)

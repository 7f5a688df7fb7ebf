"""Azure OpenAI provider implementation."""

import os
from typing import Any, Dict, Optional

from .openai_provider import OpenAIProvider

DEFAULT_API_VERSION = "2024-10-21"


class AzureOpenAIProvider(OpenAIProvider):
    """Azure-hosted OpenAI deployments.

    The model name doubles as the deployment name unless
    ``AZURE_OPENAI_DEPLOYMENT`` is set.
    """

    name = "azure"
    api_key_env = "AZURE_OPENAI_API_KEY"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        config.setdefault('model', 'gpt-4o')
        config.setdefault('base_url', config.get('endpoint') or os.getenv("AZURE_OPENAI_ENDPOINT"))
        super().__init__(config)
        self.api_version = self.config.get('api_version') or os.getenv(
            "AZURE_OPENAI_API_VERSION", DEFAULT_API_VERSION
        )
        self.deployment = self.config.get('deployment') or os.getenv("AZURE_OPENAI_DEPLOYMENT") or self.model

        if not self.base_url:
            raise ValueError("azure endpoint is required (AZURE_OPENAI_ENDPOINT)")

    def _build_client(self):
        from openai import AsyncAzureOpenAI

        return AsyncAzureOpenAI(
            api_key=self.api_key,
            azure_endpoint=self.base_url,
            azure_deployment=self.deployment,
            api_version=self.api_version,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

"""LLM provider clients and the provider factory."""

import logging
from typing import Any, Callable, Dict, Optional, Type

from ..base import BaseLLMProvider
from ..exceptions import ProviderError
from ..registry import get_model_for_provider
from .anthropic_provider import AnthropicProvider
from .azure_provider import AzureOpenAIProvider
from .bedrock_provider import BedrockProvider
from .google_ai_provider import GoogleAIProvider
from .huggingface_provider import HuggingFaceProvider
from .mistral_provider import MistralProvider
from .ollama_provider import OllamaProvider, check_ollama_running
from .openai_provider import OpenAIProvider
from .vertex_provider import VertexProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Dict[str, Type[BaseLLMProvider]] = {
    "google-ai": GoogleAIProvider,
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "mistral": MistralProvider,
    "vertex": VertexProvider,
    "azure": AzureOpenAIProvider,
    "huggingface": HuggingFaceProvider,
    "bedrock": BedrockProvider,
    "ollama": OllamaProvider,
}

# Signature shared by create_provider and test doubles
ProviderFactory = Callable[..., BaseLLMProvider]


def create_provider(
    name: str,
    model: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> BaseLLMProvider:
    """Instantiate a provider client by name.

    Args:
        name: Provider name from the registry
        model: Model override; defaults to the environment/registry model
        config: Extra provider configuration

    Raises:
        ProviderError: Unknown provider, or the provider rejected its configuration
    """
    provider_class = PROVIDER_CLASSES.get(name)
    if provider_class is None:
        raise ProviderError(f"Unknown provider: {name}")

    provider_config = dict(config or {})
    provider_config['model'] = model or provider_config.get('model') or get_model_for_provider(name)

    try:
        return provider_class(provider_config)
    except ValueError as e:
        raise ProviderError(f"{name} is not configured: {e}") from e


__all__ = [
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "BedrockProvider",
    "GoogleAIProvider",
    "HuggingFaceProvider",
    "MistralProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "VertexProvider",
    "PROVIDER_CLASSES",
    "ProviderFactory",
    "check_ollama_running",
    "create_provider",
]

"""Provider selection, fallback and usage accounting.

This package provides:
- Provider registry (priority order, required configuration, default models)
- Provider clients behind a single factory
- Availability/configuration probing
- Sequential fallback across providers
- Error classification and usage statistics
"""

from .base import BaseLLMProvider, LLMResponse
from .classification import ErrorKind, classify_error, describe_error
from .exceptions import (
    AllProvidersFailedError,
    EmptyResponseError,
    LLMError,
    NoProvidersConfiguredError,
    ProviderError,
    RateLimitError,
)
from .fallback_chain import (
    AttemptTrail,
    FallbackChainConfig,
    FallbackSequencer,
    GenerationAttempt,
    GenerationOptions,
    GenerationResult,
)
from .probe import ProviderProber, ProviderStatus, best_provider
from .providers import create_provider
from .registry import (
    ALL_PROVIDERS,
    AUTO_PROVIDER,
    PROVIDERS,
    ProviderDescriptor,
    get_model_for_provider,
    is_fallback_enabled,
    is_provider_configured,
    model_override_key,
)
from .usage import UsageSnapshot, UsageStats

__all__ = [
    # Provider library
    "BaseLLMProvider",
    "LLMResponse",
    "create_provider",

    # Registry
    "ALL_PROVIDERS",
    "AUTO_PROVIDER",
    "PROVIDERS",
    "ProviderDescriptor",
    "get_model_for_provider",
    "is_fallback_enabled",
    "is_provider_configured",
    "model_override_key",

    # Errors
    "AllProvidersFailedError",
    "EmptyResponseError",
    "ErrorKind",
    "LLMError",
    "NoProvidersConfiguredError",
    "ProviderError",
    "RateLimitError",
    "classify_error",
    "describe_error",

    # Probing and fallback
    "AttemptTrail",
    "FallbackChainConfig",
    "FallbackSequencer",
    "GenerationAttempt",
    "GenerationOptions",
    "GenerationResult",
    "ProviderProber",
    "ProviderStatus",
    "best_provider",

    # Usage
    "UsageSnapshot",
    "UsageStats",
]

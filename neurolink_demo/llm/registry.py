"""Provider descriptors for every supported AI provider.

The descriptor set is fixed at import time and read-only afterwards. The
configuration checks here are local-only (environment lookups), they never
touch the network; live checks live in :mod:`neurolink_demo.llm.probe`.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

AUTO_PROVIDER = "auto"
OLLAMA = "ollama"
# Usage and metrics bucket for names outside the registry
UNKNOWN_PROVIDER = "unknown"


class MatchRule(str, Enum):
    """How a provider's required variables are matched."""
    ALL = "all"   # every variable must be set
    ANY = "any"   # at least one of several auth methods


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static configuration for one provider."""
    name: str
    required_env_vars: Tuple[str, ...]
    default_model: str
    match_rule: MatchRule = MatchRule.ALL
    optional_env_vars: Tuple[str, ...] = ()

    @property
    def model_override_key(self) -> str:
        return model_override_key(self.name)


# Priority order reflects cost/quality tradeoffs, it is never reordered at runtime.
ALL_PROVIDERS: Tuple[str, ...] = (
    "google-ai",
    "anthropic",
    "openai",
    "mistral",
    "vertex",
    "azure",
    "huggingface",
    "bedrock",
    OLLAMA,
)

PROVIDERS: Dict[str, ProviderDescriptor] = {
    "google-ai": ProviderDescriptor(
        name="google-ai",
        required_env_vars=("GOOGLE_AI_API_KEY",),
        default_model="gemini-2.5-pro",
    ),
    "anthropic": ProviderDescriptor(
        name="anthropic",
        required_env_vars=("ANTHROPIC_API_KEY",),
        default_model="claude-3-5-sonnet-20241022",
    ),
    "openai": ProviderDescriptor(
        name="openai",
        required_env_vars=("OPENAI_API_KEY",),
        default_model="gpt-4o",
        optional_env_vars=("OPENAI_MODEL",),
    ),
    "mistral": ProviderDescriptor(
        name="mistral",
        required_env_vars=("MISTRAL_API_KEY",),
        default_model="mistral-small",
    ),
    "vertex": ProviderDescriptor(
        name="vertex",
        required_env_vars=(
            "GOOGLE_VERTEX_PROJECT",
            "GOOGLE_APPLICATION_CREDENTIALS",
            "GOOGLE_AUTH_CLIENT_EMAIL",
        ),
        default_model="gemini-2.5-pro",
        match_rule=MatchRule.ANY,
        optional_env_vars=("GOOGLE_VERTEX_LOCATION", "VERTEX_MODEL"),
    ),
    "azure": ProviderDescriptor(
        name="azure",
        required_env_vars=("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT"),
        default_model="gpt-4o",
        optional_env_vars=("AZURE_OPENAI_API_VERSION", "AZURE_OPENAI_DEPLOYMENT"),
    ),
    "huggingface": ProviderDescriptor(
        name="huggingface",
        required_env_vars=("HUGGINGFACE_API_KEY",),
        default_model="microsoft/DialoGPT-medium",
    ),
    "bedrock": ProviderDescriptor(
        name="bedrock",
        required_env_vars=("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"),
        default_model=(
            "arn:aws:bedrock:us-east-2:225681119357:inference-profile/"
            "us.anthropic.claude-3-7-sonnet-20250219-v1:0"
        ),
        optional_env_vars=("AWS_REGION", "AWS_SESSION_TOKEN", "BEDROCK_MODEL"),
    ),
    OLLAMA: ProviderDescriptor(
        name=OLLAMA,
        required_env_vars=(),
        default_model="llama3.2:latest",
        optional_env_vars=("OLLAMA_BASE_URL",),
    ),
}

FALLBACK_DISABLED_VALUES = ("false", "0", "no", "off")

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def _env(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def is_known_provider(name: str) -> bool:
    return name in PROVIDERS


def stats_key(name: str) -> str:
    """Name to record usage under; unrecognised names share one bucket."""
    return name if is_known_provider(name) else UNKNOWN_PROVIDER


def get_descriptor(name: str) -> Optional[ProviderDescriptor]:
    return PROVIDERS.get(name)


def model_override_key(provider: str) -> str:
    """Environment key holding a per-provider model override.

    ``google-ai`` -> ``GOOGLE_AI_MODEL``. Total over all strings.
    """
    return f"{_NON_ALNUM.sub('_', provider.upper())}_MODEL"


def get_model_for_provider(provider: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve the model for a provider: env override, then its default."""
    override = _env(environ).get(model_override_key(provider))
    if override:
        return override
    descriptor = PROVIDERS.get(provider)
    if descriptor is not None:
        return descriptor.default_model
    return PROVIDERS["openai"].default_model


def is_provider_configured(provider: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Fast configuration check from environment variables only.

    Ollama has no credentials and counts as configured here; whether it is
    actually running is decided by the liveness probe.
    """
    if provider == OLLAMA:
        return True

    descriptor = PROVIDERS.get(provider)
    if descriptor is None:
        return False

    env = _env(environ)
    present = [bool(env.get(var)) for var in descriptor.required_env_vars]
    if descriptor.match_rule is MatchRule.ANY:
        return any(present)
    return all(present)


def configured_providers(
    environ: Optional[Mapping[str, str]] = None,
    order: Sequence[str] = ALL_PROVIDERS,
) -> List[str]:
    """Configured providers, in priority order unless another order is given."""
    return [name for name in order if is_provider_configured(name, environ)]


def is_fallback_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Read the global fallback toggle; on unless explicitly disabled."""
    value = _env(environ).get("ENABLE_FALLBACK", "")
    return value.strip().lower() not in FALLBACK_DISABLED_VALUES

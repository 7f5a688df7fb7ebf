"""Environment variable inspection for AI providers.

Reports, per provider, which required and optional variables are set, with
values masked, plus a few format checks that catch obvious copy/paste
mistakes. Nothing here touches the network.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional

from ..llm.providers.vertex_provider import detect_auth_method
from ..llm.registry import ALL_PROVIDERS, PROVIDERS, is_provider_configured

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIXES = ("your_", "change_this", "changeme", "CHANGE_ME")

AWS_REGION_PATTERN = re.compile(r"^[a-z]{2}-[a-z]+-\d$")
GCP_PROJECT_PATTERN = re.compile(r"^[a-z][a-z0-9-]{4,28}[a-z0-9]$")


@dataclass
class EnvVarStatus:
    """Presence of one environment variable."""
    name: str
    present: bool
    masked_value: Optional[str] = None
    placeholder: bool = False


@dataclass
class ProviderEnvReport:
    """Environment analysis for one provider."""
    provider: str
    configured: bool
    required: List[EnvVarStatus] = field(default_factory=list)
    optional: List[EnvVarStatus] = field(default_factory=list)
    checks: Dict[str, bool] = field(default_factory=dict)
    auth_method: Optional[str] = None

    @property
    def missing(self) -> List[str]:
        return [var.name for var in self.required if not var.present]

    @property
    def warnings(self) -> List[str]:
        messages = [f"{var.name} contains placeholder value" for var in self.required + self.optional
                    if var.placeholder]
        messages.extend(f"{name} check failed" for name, ok in self.checks.items() if not ok)
        return messages


def mask_value(value: Optional[str]) -> Optional[str]:
    """Mask a secret, keeping only enough to recognise it."""
    if not value:
        return None
    if len(value) > 12:
        return value[:8] + "..." + value[-4:]
    return "***"


def _var_status(name: str, env: Mapping[str, str]) -> EnvVarStatus:
    value = env.get(name)
    return EnvVarStatus(
        name=name,
        present=bool(value),
        masked_value=mask_value(value),
        placeholder=bool(value) and value.startswith(PLACEHOLDER_PREFIXES),
    )


def _openai_checks(env: Mapping[str, str]) -> Dict[str, bool]:
    key = env.get("OPENAI_API_KEY", "")
    if not key:
        return {}
    return {
        "key_format": key.startswith("sk-"),
        "key_length": len(key) > 40,
    }


def _bedrock_checks(env: Mapping[str, str]) -> Dict[str, bool]:
    checks = {}
    access_key = env.get("AWS_ACCESS_KEY_ID", "")
    if access_key:
        checks["access_key_format"] = access_key.startswith(("AKIA", "ASIA"))
    region = env.get("AWS_REGION", "")
    if region:
        checks["region_format"] = bool(AWS_REGION_PATTERN.match(region))
    return checks


def _vertex_checks(env: Mapping[str, str]) -> Dict[str, bool]:
    checks = {}
    project = env.get("GOOGLE_VERTEX_PROJECT", "")
    if project:
        checks["project_format"] = bool(GCP_PROJECT_PATTERN.match(project))
    credentials_file = env.get("GOOGLE_APPLICATION_CREDENTIALS", "")
    if credentials_file:
        checks["credentials_file_exists"] = os.path.isfile(credentials_file)
    return checks


FORMAT_CHECKS: Dict[str, Callable[[Mapping[str, str]], Dict[str, bool]]] = {
    "openai": _openai_checks,
    "bedrock": _bedrock_checks,
    "vertex": _vertex_checks,
}


def analyze_provider_env(
    provider: str,
    environ: Optional[Mapping[str, str]] = None,
) -> ProviderEnvReport:
    """Inspect the environment for one provider.

    Args:
        provider: Provider name from the registry
        environ: Environment mapping; ``os.environ`` when omitted

    Returns:
        ProviderEnvReport with masked values and format checks

    Raises:
        KeyError: If the provider is unknown
    """
    env = os.environ if environ is None else environ
    descriptor = PROVIDERS[provider]

    report = ProviderEnvReport(
        provider=provider,
        configured=is_provider_configured(provider, env),
        required=[_var_status(name, env) for name in descriptor.required_env_vars],
        optional=[_var_status(name, env) for name in descriptor.optional_env_vars],
    )

    check = FORMAT_CHECKS.get(provider)
    if check is not None:
        report.checks = check(env)

    if provider == "vertex":
        report.auth_method = detect_auth_method(env)

    for warning in report.warnings:
        logger.warning(f"{provider}: {warning}")

    return report


def analyze_environment(environ: Optional[Mapping[str, str]] = None) -> List[ProviderEnvReport]:
    """Environment reports for every provider, in priority order."""
    return [analyze_provider_env(name, environ) for name in ALL_PROVIDERS]

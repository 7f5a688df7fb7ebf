"""Provider availability and configuration probing.

A probe answers three questions about one provider: does it have the
configuration it needs, is it reachable, and were its credentials accepted.
Missing configuration is reported as status data and short-circuits before
any client is built. A configured provider gets one minimal, billable
generation request to verify authentication; callers that only need a cheap
check should look at ``configured`` from :func:`registry.is_provider_configured`.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .classification import (
    ErrorKind,
    classify_error,
    describe_error,
    error_message,
    is_authenticated_despite_failure,
)
from .fallback_chain import FallbackChainConfig
from .providers import ProviderFactory, check_ollama_running, create_provider
from .registry import (
    ALL_PROVIDERS,
    OLLAMA,
    get_descriptor,
    get_model_for_provider,
    is_known_provider,
    is_provider_configured,
)

logger = logging.getLogger(__name__)

OLLAMA_NOT_RUNNING = "Ollama is not running. Please start Ollama with: ollama serve"

PROBE_PROMPT = "Hi"
PROBE_MAX_TOKENS = 5
PROBE_TEMPERATURE = 0.1

OllamaCheck = Callable[[str, float], Awaitable[bool]]


@dataclass
class ProviderStatus:
    """Result of probing one provider.

    ``authenticated`` implies ``available`` implies ``configured``, except for
    a rate-limited probe: credentials were accepted but the call still failed.
    """
    configured: bool = False
    available: bool = False
    authenticated: bool = False
    model: str = ""
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["error_kind"] = self.error_kind.value if self.error_kind else None
        return data


class ProviderProber:
    """Checks configuration and liveness of providers."""

    def __init__(
        self,
        config: Optional[FallbackChainConfig] = None,
        provider_factory: ProviderFactory = create_provider,
        ollama_check: OllamaCheck = check_ollama_running,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._config = config or FallbackChainConfig()
        self._provider_factory = provider_factory
        self._ollama_check = ollama_check
        self._environ = environ

    async def _probe_ollama(self, status: ProviderStatus) -> ProviderStatus:
        try:
            running = await self._ollama_check(self._config.ollama_url, self._config.ollama_timeout)
        except Exception as e:
            logger.info(f"Ollama liveness check raised: {e}")
            running = False

        status.configured = status.available = status.authenticated = running
        if not running:
            status.error = OLLAMA_NOT_RUNNING
            status.error_kind = ErrorKind.CONNECTION_FAILURE
        return status

    async def probe(self, provider_name: str) -> ProviderStatus:
        """Probe one provider.

        Args:
            provider_name: Provider name from the registry

        Returns:
            ProviderStatus; never raises for provider failures
        """
        status = ProviderStatus(model=get_model_for_provider(provider_name, self._environ))

        if provider_name == OLLAMA:
            return await self._probe_ollama(status)

        if not is_known_provider(provider_name):
            status.error = f"Unknown provider: {provider_name}"
            return status

        if not is_provider_configured(provider_name, self._environ):
            # Names the full requirement, not only the unset part
            required = get_descriptor(provider_name).required_env_vars
            status.error = f"Missing required environment variables: {', '.join(required) or 'Unknown'}"
            return status

        status.configured = True
        provider = None
        try:
            provider = self._provider_factory(provider_name, model=status.model)
            response = await asyncio.wait_for(
                provider.generate_content(
                    prompt=PROBE_PROMPT,
                    max_tokens=PROBE_MAX_TOKENS,
                    temperature=PROBE_TEMPERATURE,
                ),
                timeout=self._config.probe_timeout,
            )
            if response is None or not response.content:
                raise ValueError(f"{provider_name} returned an empty response")

            status.available = True
            status.authenticated = True

        except asyncio.TimeoutError:
            status.error_kind = ErrorKind.CONNECTION_FAILURE
            status.error = describe_error(status.error_kind, "timeout")

        except Exception as e:
            raw = error_message(e)
            status.error_kind = classify_error(raw)
            status.error = describe_error(status.error_kind, raw)
            status.authenticated = is_authenticated_despite_failure(status.error_kind)
            logger.info(f"Probe of {provider_name} failed ({status.error_kind.value}): {raw}")

        finally:
            if provider is not None:
                try:
                    await provider.cleanup()
                except Exception as e:
                    logger.warning(f"Cleanup failed for '{provider_name}': {e}")

        return status

    async def probe_all(self, providers: Optional[List[str]] = None) -> "OrderedDict[str, ProviderStatus]":
        """Probe providers one after another, in priority order."""
        results: "OrderedDict[str, ProviderStatus]" = OrderedDict()
        for name in providers or ALL_PROVIDERS:
            results[name] = await self.probe(name)
        return results


def best_provider(statuses: Mapping[str, ProviderStatus]) -> Optional[str]:
    """First authenticated provider, in the mapping's (priority) order."""
    for name, status in statuses.items():
        if status.authenticated:
            return name
    return None

"""Provider fallback for text generation.

Given a requested provider (or ``"auto"``), builds an ordered candidate list
and walks it strictly in order, one attempt per provider, until one returns
text. The first success wins; if every candidate fails the caller gets a
single aggregate error naming each provider and its failure.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import metrics
from .base import LLMResponse
from .classification import ErrorKind, classify_error, error_message
from .exceptions import AllProvidersFailedError, EmptyResponseError, NoProvidersConfiguredError
from .providers import ProviderFactory, create_provider
from .registry import (
    ALL_PROVIDERS,
    AUTO_PROVIDER,
    configured_providers,
    get_model_for_provider,
    is_fallback_enabled,
    stats_key,
)
from .usage import UsageStats

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


class FallbackChainConfig(BaseSettings):
    """Configuration for provider fallback and probing.

    All values can be overridden via environment variables with FALLBACK_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="FALLBACK_")

    request_timeout: float = Field(
        default=30.0,
        description="Per-attempt timeout when the caller gives none (seconds)"
    )
    probe_timeout: float = Field(
        default=3.0,
        description="Timeout for the live authentication probe (seconds)"
    )
    ollama_timeout: float = Field(
        default=2.0,
        description="Timeout for the Ollama liveness check (seconds)"
    )
    ollama_url: str = Field(
        default="http://localhost:11434",
        description="Local Ollama server"
    )
    default_max_tokens: int = Field(
        default=500,
        description="Output budget unless the caller overrides it"
    )
    default_temperature: float = Field(
        default=0.7,
        description="Sampling temperature unless the caller overrides it"
    )


# ============================================================================
# Request / attempt / result types
# ============================================================================


@dataclass
class GenerationOptions:
    """Caller-supplied generation parameters; ``None`` means use the default."""
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    system_prompt: Optional[str] = None
    timeout: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerationAttempt:
    """Outcome of trying one candidate provider."""
    provider: str
    started_at: datetime
    succeeded: bool = False
    duration_ms: float = 0.0
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    response: Optional[LLMResponse] = field(default=None, repr=False)


class AttemptTrail:
    """Ordered attempts for one logical request, kept for diagnostics."""

    def __init__(self) -> None:
        self._attempts: List[GenerationAttempt] = []

    def append(self, attempt: GenerationAttempt) -> None:
        self._attempts.append(attempt)

    def __iter__(self) -> Iterator[GenerationAttempt]:
        return iter(self._attempts)

    def __len__(self) -> int:
        return len(self._attempts)

    @property
    def attempts(self) -> List[GenerationAttempt]:
        return list(self._attempts)

    def summary(self) -> str:
        return "; ".join(f"{a.provider}: {a.error_message}" for a in self._attempts if not a.succeeded)


@dataclass
class GenerationResult:
    """Successful generation, with how many candidates it took."""
    content: str
    provider: str
    model: str
    response_time_ms: int
    attempted_count: int
    fallback_used: bool
    usage: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "provider": self.provider,
            "model": self.model,
            "response_time": self.response_time_ms,
            "usage": self.usage,
            "attempted_providers": self.attempted_count,
            "fallback_used": self.fallback_used,
        }


# ============================================================================
# Fallback Sequencer
# ============================================================================


class FallbackSequencer:
    """Tries providers in priority order until one produces text.

    Example:
        sequencer = FallbackSequencer(usage=UsageStats())
        result = await sequencer.generate("auto", "Write a haiku")
        print(result.provider, result.fallback_used)
    """

    def __init__(
        self,
        config: Optional[FallbackChainConfig] = None,
        usage: Optional[UsageStats] = None,
        provider_factory: ProviderFactory = create_provider,
        providers: Optional[List[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the sequencer.

        Args:
            config: Timeouts and default generation budget
            usage: Usage counters to update; a private instance if omitted
            provider_factory: Builds a provider client from its name
            providers: Priority list; defaults to every supported provider
            environ: Environment mapping; ``os.environ`` when omitted
        """
        self._config = config or FallbackChainConfig()
        self.usage = usage if usage is not None else UsageStats()
        self._provider_factory = provider_factory
        self._priority = list(providers) if providers is not None else list(ALL_PROVIDERS)
        self._environ = environ

    @property
    def priority(self) -> List[str]:
        return list(self._priority)

    def build_candidates(self, requested_provider: str, fallback: Optional[bool] = None) -> List[str]:
        """Ordered providers to try for a request.

        Only the fast configuration check is used here; nothing is probed.
        Environment toggles are re-read on every call.

        Args:
            requested_provider: Provider name, or ``"auto"``
            fallback: Force fallback on or off for an explicit provider;
                ``None`` reads ``ENABLE_FALLBACK``
        """
        configured = configured_providers(self._environ, order=self._priority)

        if requested_provider == AUTO_PROVIDER:
            logger.info(f"Auto mode: will try providers in order: {', '.join(configured)}")
            return configured

        if fallback is None:
            fallback = is_fallback_enabled(self._environ)

        candidates = [requested_provider]
        if fallback:
            fallbacks = [p for p in configured if p != requested_provider]
            candidates.extend(fallbacks)
            logger.info(
                f"Fallback enabled: will try {requested_provider} first, then: {', '.join(fallbacks)}"
            )
        return candidates

    def _merge_params(self, options: GenerationOptions) -> Dict[str, Any]:
        """Explicit caller values win over the fixed defaults."""
        params: Dict[str, Any] = dict(options.extra)
        params["max_tokens"] = (
            options.max_tokens if options.max_tokens is not None else self._config.default_max_tokens
        )
        params["temperature"] = (
            options.temperature if options.temperature is not None else self._config.default_temperature
        )
        if options.system_prompt:
            params["system_prompt"] = options.system_prompt
        return params

    async def _attempt(
        self,
        provider_name: str,
        prompt: str,
        params: Dict[str, Any],
        timeout: float,
    ) -> GenerationAttempt:
        """Run one candidate; failures come back as data, never raised."""
        attempt = GenerationAttempt(provider=provider_name, started_at=datetime.now(timezone.utc))
        start_time = time.monotonic()
        provider = None

        try:
            model = get_model_for_provider(provider_name, self._environ)
            provider = self._provider_factory(provider_name, model=model)
            response = await asyncio.wait_for(
                provider.generate_content(prompt=prompt, **params),
                timeout=timeout,
            )
            if response is None or not (response.content or "").strip():
                raise EmptyResponseError(f"{provider_name} returned an empty response")

            attempt.succeeded = True
            attempt.response = response

        except asyncio.TimeoutError:
            attempt.error_message = f"Request timed out after {timeout:g}s"
            attempt.error_kind = ErrorKind.CONNECTION_FAILURE

        except Exception as e:
            attempt.error_message = error_message(e)
            attempt.error_kind = classify_error(e)

        finally:
            attempt.duration_ms = (time.monotonic() - start_time) * 1000
            if provider is not None:
                try:
                    await provider.cleanup()
                except Exception as e:
                    logger.warning(f"Cleanup failed for '{provider_name}': {e}")

        outcome = "success" if attempt.succeeded else (attempt.error_kind or ErrorKind.UNKNOWN).value
        metrics.record_attempt(stats_key(provider_name), outcome, attempt.duration_ms / 1000)
        return attempt

    async def generate(
        self,
        requested_provider: str,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        fallback: Optional[bool] = None,
    ) -> GenerationResult:
        """Generate text with automatic fallback.

        Args:
            requested_provider: Provider name, or ``"auto"``
            prompt: The prompt to send
            options: Caller overrides for budget, temperature, timeout
            fallback: Override ``ENABLE_FALLBACK`` for this call

        Returns:
            GenerationResult from the first candidate that returned text

        Raises:
            NoProvidersConfiguredError: The candidate list was empty
            AllProvidersFailedError: Every candidate failed
        """
        options = options or GenerationOptions()
        self.usage.record_request()
        start_time = time.monotonic()

        candidates = self.build_candidates(requested_provider, fallback=fallback)
        if not candidates:
            self.usage.record_failure()
            metrics.record_generate("no_providers")
            logger.error("No providers configured, nothing to try")
            raise NoProvidersConfiguredError()

        params = self._merge_params(options)
        timeout = options.timeout if options.timeout is not None else self._config.request_timeout
        trail = AttemptTrail()

        for index, provider_name in enumerate(candidates, start=1):
            logger.info(f"Attempting provider: {provider_name} ({index}/{len(candidates)})")
            attempt = await self._attempt(provider_name, prompt, params, timeout)
            trail.append(attempt)

            if attempt.succeeded:
                response = attempt.response
                tokens = response.total_tokens
                self.usage.record_attempt(stats_key(provider_name), succeeded=True, tokens=tokens)
                metrics.record_generate("success")

                response_time_ms = int((time.monotonic() - start_time) * 1000)
                logger.info(f"Success with {provider_name} in {response_time_ms}ms")
                return GenerationResult(
                    content=response.content,
                    provider=provider_name,
                    model=response.model if response.model not in (None, "", "unknown")
                    else get_model_for_provider(provider_name, self._environ),
                    response_time_ms=response_time_ms,
                    attempted_count=index,
                    fallback_used=index > 1,
                    usage=dict(response.usage),
                )

            self.usage.record_attempt(stats_key(provider_name), succeeded=False)
            logger.warning(
                f"{provider_name} failed ({attempt.error_kind.value}): {attempt.error_message}"
            )

        self.usage.record_failure()
        metrics.record_generate("failure")
        error = AllProvidersFailedError(trail.attempts)
        logger.error(f"All providers failed. Errors: {trail.summary()}")
        raise error

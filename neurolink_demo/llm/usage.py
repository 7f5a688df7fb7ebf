"""In-memory usage statistics for generate calls.

Counters live only for the lifetime of the process. Request handlers may run
on worker threads (sync FastAPI routes, uvicorn workers sharing an app), so
every update goes through a single lock.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass
class ProviderUsage:
    """Per-provider counters."""
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    tokens: int = 0


@dataclass
class UsageSnapshot:
    """Read-only copy of the usage counters at one point in time."""
    requests: int
    errors: int
    total_tokens: int
    providers: Dict[str, ProviderUsage]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def average_tokens_per_request(self) -> int:
        if self.requests == 0:
            return 0
        return round(self.total_tokens / self.requests)

    @property
    def error_rate(self) -> int:
        """Failed requests as a rounded percentage."""
        if self.requests == 0:
            return 0
        return round(self.errors / self.requests * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.requests,
            "total_tokens": self.total_tokens,
            "total_errors": self.errors,
            "provider_usage": {name: asdict(usage) for name, usage in self.providers.items()},
            "average_tokens_per_request": self.average_tokens_per_request,
            "error_rate": self.error_rate,
            "timestamp": self.timestamp.isoformat(),
        }


class UsageStats:
    """Process-wide usage counters, owned by whoever builds the sequencer.

    Update rules:
    - ``record_request`` once per logical generate call
    - ``record_attempt`` once per candidate provider tried
    - ``record_failure`` once when every candidate has failed
    - tokens come only from the successful attempt
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests = 0
        self.errors = 0
        self.total_tokens = 0
        self.providers: Dict[str, ProviderUsage] = {}

    def _provider(self, name: str) -> ProviderUsage:
        usage = self.providers.get(name)
        if usage is None:
            usage = self.providers[name] = ProviderUsage()
        return usage

    def record_request(self) -> None:
        with self._lock:
            self.requests += 1

    def record_attempt(self, provider: str, succeeded: bool, tokens: int = 0) -> None:
        """Record one candidate attempt; tokens are ignored for failures."""
        with self._lock:
            usage = self._provider(provider)
            usage.attempts += 1
            if succeeded:
                usage.successes += 1
                if tokens > 0:
                    usage.tokens += tokens
                    self.total_tokens += tokens
            else:
                usage.failures += 1

    def record_failure(self) -> None:
        with self._lock:
            self.errors += 1

    def snapshot(self) -> UsageSnapshot:
        with self._lock:
            return UsageSnapshot(
                requests=self.requests,
                errors=self.errors,
                total_tokens=self.total_tokens,
                providers=copy.deepcopy(self.providers),
            )

    def reset(self) -> None:
        with self._lock:
            self.requests = 0
            self.errors = 0
            self.total_tokens = 0
            self.providers = {}
        logger.debug("Usage statistics reset")

"""Shared plumbing for providers that talk plain HTTP through aiohttp."""

import logging
from typing import Any, Dict, Optional

import aiohttp

from ..base import BaseLLMProvider
from ..exceptions import ProviderError, RateLimitError

logger = logging.getLogger(__name__)


class RESTProvider(BaseLLMProvider):
    """Base class for JSON-over-HTTP providers."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session with connection pooling."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def cleanup(self) -> None:
        """Clean up resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """POST a JSON payload and return the decoded JSON body.

        Non-2xx answers raise with the HTTP status in the message so the
        failure can be classified from its text.
        """
        session = await self._get_session()
        async with session.post(url, json=payload, headers=headers, params=params) as response:
            if response.status == 429:
                raise RateLimitError(f"{self.name} API error 429: rate limit exceeded")
            if response.status >= 400:
                error_text = await response.text()
                logger.warning(f"{self.name} API error {response.status}: {error_text[:200]}")
                raise ProviderError(f"{self.name} API error {response.status}: {error_text}")
            return await response.json(content_type=None)

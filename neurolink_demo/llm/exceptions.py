"""LLM-related exceptions."""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .fallback_chain import GenerationAttempt


class LLMError(Exception):
    """Base LLM error."""
    pass


class ProviderError(LLMError):
    """Provider error."""
    pass


class RateLimitError(LLMError):
    """Rate limit error."""
    pass


class EmptyResponseError(ProviderError):
    """Provider answered without any text content."""
    pass


class FallbackChainError(LLMError):
    """Base error for the fallback chain."""
    pass


class AllProvidersFailedError(FallbackChainError):
    """Every candidate provider failed for one generate call."""

    def __init__(
        self,
        attempts: Optional[List["GenerationAttempt"]] = None,
        message: Optional[str] = None,
    ):
        self.attempts = list(attempts or [])
        self.attempted_count = len(self.attempts)
        if message is None:
            joined = "; ".join(f"{a.provider}: {a.error_message}" for a in self.attempts)
            message = f"Failed after {self.attempted_count} attempts: {joined}"
        self.message = message
        super().__init__(message)

    @property
    def providers(self) -> List[str]:
        return [a.provider for a in self.attempts]


class NoProvidersConfiguredError(AllProvidersFailedError):
    """The candidate list was empty, nothing was attempted."""

    def __init__(self, message: str = "No providers configured"):
        super().__init__(attempts=[], message=message)

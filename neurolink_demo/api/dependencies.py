"""Shared server state and FastAPI dependency getters."""

from typing import Optional

from fastapi import HTTPException, status

from neurolink_demo.config import DemoConfig
from neurolink_demo.llm import FallbackSequencer, ProviderProber, UsageStats

# Global instances, set by the application lifespan
demo_config: Optional[DemoConfig] = None
usage_stats: Optional[UsageStats] = None
prober: Optional[ProviderProber] = None
sequencer: Optional[FallbackSequencer] = None


def get_usage_stats() -> UsageStats:
    """Get the usage statistics instance."""
    if usage_stats is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Usage statistics not initialized"
        )
    return usage_stats


def get_prober() -> ProviderProber:
    """Get the provider prober instance."""
    if prober is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Provider prober not initialized"
        )
    return prober


def get_sequencer() -> FallbackSequencer:
    """Get the fallback sequencer instance."""
    if sequencer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fallback sequencer not initialized"
        )
    return sequencer


def get_demo_config() -> DemoConfig:
    return demo_config or DemoConfig()

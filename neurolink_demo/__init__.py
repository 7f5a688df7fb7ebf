"""NeuroLink demo: multi-provider text generation with automatic fallback.

Probes a fixed set of AI providers for configuration and liveness, routes
generation requests through them in priority order, and keeps usage
statistics for the running process.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core imports for public API
from neurolink_demo.llm.fallback_chain import FallbackSequencer, GenerationOptions, GenerationResult
from neurolink_demo.llm.probe import ProviderProber, ProviderStatus
from neurolink_demo.llm.providers import create_provider
from neurolink_demo.llm.usage import UsageStats

__all__ = [
    "__version__",
    "__license__",
    "FallbackSequencer",
    "GenerationOptions",
    "GenerationResult",
    "ProviderProber",
    "ProviderStatus",
    "UsageStats",
    "create_provider",
]

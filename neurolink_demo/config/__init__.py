"""Configuration management and environment inspection.

Handles YAML configuration loading, environment overrides,
logging setup and per-provider environment analysis.
"""

from neurolink_demo.config.exceptions import ConfigurationError
from neurolink_demo.config.loader import (
    DemoConfig,
    LoggingConfig,
    ProvidersConfig,
    ServerConfig,
    load_config,
    setup_logging,
)
from neurolink_demo.config.validate_env import (
    EnvVarStatus,
    ProviderEnvReport,
    analyze_environment,
    analyze_provider_env,
    mask_value,
)

__all__ = [
    "ConfigurationError",
    "DemoConfig",
    "LoggingConfig",
    "ProvidersConfig",
    "ServerConfig",
    "load_config",
    "setup_logging",
    "EnvVarStatus",
    "ProviderEnvReport",
    "analyze_environment",
    "analyze_provider_env",
    "mask_value",
]

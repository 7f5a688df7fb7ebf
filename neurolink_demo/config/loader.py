"""Configuration loader for the NeuroLink demo server."""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes')


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 9876
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class ProvidersConfig(BaseModel):
    """Provider selection defaults surfaced in status reports."""
    default_provider: str = "openai"
    streaming_enabled: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 3
    enable_console_logging: bool = True


class DemoConfig(BaseModel):
    """Main demo server configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[Union[str, Path]] = None) -> DemoConfig:
    """Load configuration from an optional YAML file plus environment variables.

    Args:
        config_path: Path to a YAML configuration file. Missing files are not an error.

    Returns:
        DemoConfig instance with loaded configuration

    Raises:
        ConfigurationError: If the file cannot be parsed or fails validation
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f) or {}
                logger.info(f"Loaded configuration from {config_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e
            if not isinstance(config_data, dict):
                raise ConfigurationError(f"{config_path} must contain a mapping")
        else:
            logger.info(f"Config file {config_path} not found, using defaults")

    config_data = _apply_environment_overrides(config_data)

    try:
        return DemoConfig.model_validate(config_data)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _apply_environment_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration.

    Args:
        config_data: Base configuration data from file

    Returns:
        Configuration data with environment overrides applied
    """
    if os.getenv('PORT'):
        config_data.setdefault('server', {})['port'] = os.getenv('PORT')

    if os.getenv('HOST'):
        config_data.setdefault('server', {})['host'] = os.getenv('HOST')

    if os.getenv('ALLOWED_ORIGINS'):
        config_data.setdefault('server', {})['cors_origins'] = [
            origin.strip() for origin in os.getenv('ALLOWED_ORIGINS').split(',') if origin.strip()
        ]

    if os.getenv('DEFAULT_PROVIDER'):
        config_data.setdefault('providers', {})['default_provider'] = os.getenv('DEFAULT_PROVIDER')

    if os.getenv('ENABLE_STREAMING'):
        config_data.setdefault('providers', {})['streaming_enabled'] = (
            os.getenv('ENABLE_STREAMING').lower() in TRUE_VALUES
        )

    if os.getenv('LOG_LEVEL'):
        config_data.setdefault('logging', {})['level'] = os.getenv('LOG_LEVEL')

    if os.getenv('LOG_FILE'):
        config_data.setdefault('logging', {})['file_path'] = os.getenv('LOG_FILE')

    return config_data


def setup_logging(config: DemoConfig) -> None:
    """Set up logging based on configuration.

    Args:
        config: Demo configuration instance
    """
    log_format = logging.Formatter(config.logging.format)
    handlers = []

    if config.logging.file_path:
        log_file = Path(config.logging.file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.logging.max_file_size_mb * 1024 * 1024,
            backupCount=config.logging.backup_count
        )
        file_handler.setFormatter(log_format)
        handlers.append(file_handler)

    if config.logging.enable_console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_format)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, config.logging.level.upper(), logging.INFO))

    logger.debug("Logging configured successfully")

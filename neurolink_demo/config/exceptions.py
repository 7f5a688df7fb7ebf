"""Configuration-related exceptions."""


class ConfigurationError(Exception):
    """Configuration error."""
    pass

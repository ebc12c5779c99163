"""Configuration module for squawker."""

from squawker.config.loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    EnvVarNotFoundError,
    load_config,
)
from squawker.config.models import (
    AppConfig,
    DatabaseConfig,
    FollowingConfig,
    LoggingConfig,
    NotificationConfig,
    ServerConfig,
    TransportConfig,
)

__all__ = [
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "EnvVarNotFoundError",
    # Functions
    "load_config",
    # Models
    "AppConfig",
    "DatabaseConfig",
    "FollowingConfig",
    "LoggingConfig",
    "NotificationConfig",
    "ServerConfig",
    "TransportConfig",
]

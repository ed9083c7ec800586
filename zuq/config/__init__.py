"""ZUQ configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/zuq/config.toml (user config)
4. /opt/zuq/config.toml (production install)
5. /etc/zuq/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from zuq.config.schema import (
    AuthConfig,
    DatabaseConfig,
    ImportConfig,
    ReportConfig,
    SecretsConfig,
    ServerConfig,
    StorageConfig,
    ZuqConfig,
)
from zuq.config.settings import Settings, get_settings, settings

__all__ = [
    "AuthConfig",
    "DatabaseConfig",
    "ImportConfig",
    "ReportConfig",
    "SecretsConfig",
    "ServerConfig",
    "Settings",
    "StorageConfig",
    "ZuqConfig",
    "get_settings",
    "settings",
]

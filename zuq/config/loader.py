"""Configuration loader for ZUQ.

Loads configuration from TOML files and secrets from .env files.
Environment variables can override any configuration value.
"""

import logging
import os
from pathlib import Path
from typing import Any

from zuq.config.schema import SecretsConfig, ZuqConfig

logger = logging.getLogger(__name__)

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/zuq/config.toml (user config)
    3. /opt/zuq/config.toml (production install)
    4. /etc/zuq/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "zuq" / "config.toml",
        Path("/opt/zuq/config.toml"),
        Path("/etc/zuq/config.toml"),
    ]


def get_secrets_search_paths() -> list[Path]:
    """Get the list of paths to search for secrets files.

    Same order as the config search paths, with secrets.env as file name.
    """
    return [
        Path.cwd() / "secrets.env",
        Path.home() / ".config" / "zuq" / "secrets.env",
        Path("/opt/zuq/secrets.env"),
        Path("/etc/zuq/secrets.env"),
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug("Found config file: %s", path)
            return path
    return None


def find_secrets_file() -> Path | None:
    """Find the first existing secrets file from search paths."""
    for path in get_secrets_search_paths():
        if path.exists() and path.is_file():
            logger.debug("Found secrets file: %s", path)
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a simple .env file into a dictionary.

    Supports:
    - KEY=value
    - KEY="quoted value"
    - # comments
    - Empty lines
    """
    env_vars: dict[str, str] = {}

    with open(path) as f:
        for line in f:
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            env_vars[key] = value

    return env_vars


# Keys converted from environment strings before validation
_INT_KEYS = {
    "port",
    "max_upload_mb",
    "max_rows",
    "movement_lookback_days",
    "order_lookback_days",
    "access_token_expire_minutes",
}
_BOOL_KEYS = {"debug", "enforce_https"}


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "ZUQ") -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - ZUQ_SERVER_HOST -> config_dict["server"]["host"]
    - ZUQ_DATABASE_MONGODB_URL -> config_dict["database"]["mongodb_url"]
    - ZUQ_IMPORT_MOVEMENT_LOOKBACK_DAYS -> config_dict["import"]["movement_lookback_days"]

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Server
        f"{prefix}_SERVER_HOST": ("server", "host"),
        f"{prefix}_SERVER_PORT": ("server", "port"),
        f"{prefix}_SERVER_DEBUG": ("server", "debug"),
        f"{prefix}_DEBUG": ("server", "debug"),  # Shorthand
        f"{prefix}_HOST": ("server", "host"),  # Shorthand
        f"{prefix}_PORT": ("server", "port"),  # Shorthand
        # Database
        f"{prefix}_DATABASE_MONGODB_URL": ("database", "mongodb_url"),
        f"{prefix}_DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
        f"{prefix}_MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
        f"{prefix}_MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
        # Storage
        f"{prefix}_STORAGE_DATA_DIR": ("storage", "data_dir"),
        f"{prefix}_STORAGE_MAX_UPLOAD_MB": ("storage", "max_upload_mb"),
        # Auth
        f"{prefix}_AUTH_ACCESS_TOKEN_EXPIRE_MINUTES": ("auth", "access_token_expire_minutes"),
        # Import
        f"{prefix}_IMPORT_MAX_ROWS": ("import", "max_rows"),
        f"{prefix}_IMPORT_MOVEMENT_LOOKBACK_DAYS": ("import", "movement_lookback_days"),
        f"{prefix}_IMPORT_ORDER_LOOKBACK_DAYS": ("import", "order_lookback_days"),
        # Reports
        f"{prefix}_REPORTS_COMPANY_NAME": ("reports", "company_name"),
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            section, key = path

            if section not in config_dict:
                config_dict[section] = {}

            if key in _INT_KEYS:
                config_dict[section][key] = int(value)
            elif key in _BOOL_KEYS:
                config_dict[section][key] = value.lower() in ("true", "1", "yes")
            else:
                config_dict[section][key] = value


def load_secrets(secrets_file: Path | None = None) -> SecretsConfig:
    """Load secrets from environment variables and optional secrets.env file.

    Environment variables take precedence over file values.
    """
    secrets_dict: dict[str, str | None] = {}

    if secrets_file is None:
        secrets_file = find_secrets_file()

    if secrets_file and secrets_file.exists():
        logger.info("Loading secrets from: %s", secrets_file)
        file_secrets = parse_env_file(secrets_file)
        if "ZUQ_SECRET_KEY" in file_secrets:
            secrets_dict["secret_key"] = file_secrets["ZUQ_SECRET_KEY"]

    value = os.environ.get("ZUQ_SECRET_KEY")
    if value:
        secrets_dict["secret_key"] = value

    return SecretsConfig(**secrets_dict)


def load_config(config_file: Path | None = None) -> ZuqConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        ZuqConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return ZuqConfig(**config_dict)

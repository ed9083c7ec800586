"""Global ZUQ settings: config.toml, secrets.env and ZUQ_* overrides behind one flat object."""

import logging
import secrets as secrets_module
from typing import Any

from zuq.config.loader import load_config, load_secrets
from zuq.config.schema import SecretsConfig, ZuqConfig

logger = logging.getLogger(__name__)

# Flat attribute -> (config section, field); a None section is the top level
FLAT_ATTRIBUTES: dict[str, tuple[str | None, str]] = {
    "app_name": (None, "app_name"),
    "debug": ("server", "debug"),
    "host": ("server", "host"),
    "port": ("server", "port"),
    "enforce_https": ("server", "enforce_https"),
    "rate_limit_per_minute": ("server", "rate_limit_per_minute"),
    "cors_origins": ("server", "cors_origins"),
    "mongodb_url": ("database", "mongodb_url"),
    "mongodb_database": ("database", "mongodb_database"),
    "min_pool_size": ("database", "min_pool_size"),
    "max_pool_size": ("database", "max_pool_size"),
    "data_dir": ("storage", "data_dir"),
    "max_upload_size_mb": ("storage", "max_upload_mb"),
    "max_upload_size_bytes": ("storage", "max_upload_bytes"),
    "access_token_expire_minutes": ("auth", "access_token_expire_minutes"),
    "auth_rate_limit_per_minute": ("auth", "auth_rate_limit_per_minute"),
    "import_max_rows": ("imports", "max_rows"),
    "movement_lookback_days": ("imports", "movement_lookback_days"),
    "order_lookback_days": ("imports", "order_lookback_days"),
    "company_name": ("reports", "company_name"),
    "pdf_paper_size": ("reports", "pdf_paper_size"),
    "pdf_margin_pt": ("reports", "pdf_margin_pt"),
}


class Settings:
    """Read-only flat view over ZuqConfig and SecretsConfig.

    ``settings.import_max_rows`` reads ``config.imports.max_rows``; the
    mapping lives in FLAT_ATTRIBUTES.
    """

    def __init__(
        self,
        config: ZuqConfig | None = None,
        secrets: SecretsConfig | None = None,
    ):
        self._config = config or load_config()
        self._secrets = secrets or load_secrets()

        if not self._secrets.secret_key:
            self._secrets.secret_key = secrets_module.token_urlsafe(32)
            logger.warning(
                "No ZUQ_SECRET_KEY configured; using a random key. "
                "Issued tokens stop working when the server restarts."
            )

    @property
    def config(self) -> ZuqConfig:
        return self._config

    @property
    def secrets(self) -> SecretsConfig:
        return self._secrets

    @property
    def secret_key(self) -> str:
        return self._secrets.secret_key or ""

    def __getattr__(self, name: str) -> Any:
        try:
            section, field = FLAT_ATTRIBUTES[name]
        except KeyError:
            raise AttributeError(f"Unknown setting: {name}") from None
        source = self._config if section is None else getattr(self._config, section)
        return getattr(source, field)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the loaded settings so the next access reloads them."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Module-level handle that defers loading until first attribute access."""

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()

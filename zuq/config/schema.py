"""Pydantic models for ZUQ configuration.

These models define the structure of config.toml and secrets.env files.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    enforce_https: bool = False
    rate_limit_per_minute: int = 60
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "zuq"
    # Connection pool settings
    min_pool_size: int = 10
    max_pool_size: int = 100


class StorageConfig(BaseModel):
    """File storage configuration."""

    data_dir: Path = Field(default_factory=lambda: Path("data"))
    max_upload_mb: int = 10

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class AuthConfig(BaseModel):
    """Authentication configuration."""

    access_token_expire_minutes: int = 120
    auth_rate_limit_per_minute: int = 30


class ImportConfig(BaseModel):
    """Bulk import configuration."""

    max_rows: int = 5000
    # Duplicate lookback windows; movements compare movement_date,
    # orders compare created_at.
    movement_lookback_days: int = 30
    order_lookback_days: int = 90


class ReportConfig(BaseModel):
    """KPI report configuration."""

    company_name: str = "ZUQ Performance"
    pdf_paper_size: str = "a4"
    pdf_margin_pt: int = 36


class ZuqConfig(BaseModel):
    """Main ZUQ configuration loaded from config.toml."""

    app_name: str = "ZUQ Inventory"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig, alias="import")
    reports: ReportConfig = Field(default_factory=ReportConfig)

    model_config = {"populate_by_name": True}


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    secret_key: str | None = None

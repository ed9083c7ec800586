"""Pydantic schemas for data export functionality."""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from zuq.models.base import utcnow


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"
    YAML = "yaml"
    JSON = "json"


class ExportMetadata(BaseModel):
    """Metadata attached to YAML/JSON exports."""

    exported_at: datetime = Field(default_factory=utcnow)
    table: str
    total_count: int
    format: str
    columns: list[str] = Field(default_factory=list)

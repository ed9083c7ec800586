"""ReportHistory document model for generated KPI reports."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class ReportStatus(str, Enum):
    """Status of a report generation."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class ReportHistory(Document):
    """A generated (or failed) KPI report."""

    user_id: Indexed(PydanticObjectId)
    report_name: str
    period_start: datetime
    period_end: datetime
    kpis_included: list[str] = Field(default_factory=list)
    file_format: str = "pdf"
    status: ReportStatus = ReportStatus.PENDING
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    class Settings:
        name = "report_history"

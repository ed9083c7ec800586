"""Pydantic schemas for bulk import functionality."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from zuq.models import ImportDataType
from zuq.services.import_service import ImportRecord, ImportSummary


class TemplateColumn(BaseModel):
    """One column of an import template."""

    name: str
    type: str
    required: bool
    description: str


class TemplateGuideEntry(BaseModel):
    """Template guide for one data type."""

    data_type: str
    label: str
    description: str
    columns: list[TemplateColumn]


class ValidationResponse(BaseModel):
    """Validated records returned for the preview step."""

    data_type: ImportDataType
    filename: str
    records: list[ImportRecord]
    summary: ImportSummary


class CommitRecord(BaseModel):
    """A record as sent back by the client: only the business fields count."""

    data: dict[str, str | int | float]


class ImportCommitRequest(BaseModel):
    """Records to persist plus the operator's duplicate decisions.

    ``approvals`` maps record index to decision and is applied after the
    bulk ``duplicate_action``.
    """

    data_type: ImportDataType
    filename: str = Field(..., min_length=1, max_length=255)
    records: list[CommitRecord]
    duplicate_action: Literal["approve_all", "reject_all"] | None = None
    approvals: dict[int, bool] = Field(default_factory=dict)


class ImportHistoryResponse(BaseModel):
    """An import history entry."""

    id: str
    user_id: str
    data_type: str
    original_filename: str
    total_records: int
    processed_records: int
    failed_records: int
    status: str
    error_details: list[dict[str, Any]] | None = None
    created_at: datetime
    completed_at: datetime | None = None

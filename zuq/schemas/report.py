"""Pydantic schemas for KPI reports."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from zuq.services.report_service import KPI_TYPES


class ReportRequest(BaseModel):
    """Parameters of a KPI report."""

    report_name: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    kpis: list[str] = Field(..., min_length=1)
    format: Literal["html", "pdf"] = "pdf"

    @model_validator(mode="after")
    def check_period_and_kpis(self) -> "ReportRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        unknown = [kpi for kpi in self.kpis if kpi not in KPI_TYPES]
        if unknown:
            raise ValueError(f"Unknown KPIs: {', '.join(unknown)}")
        return self


class ReportHistoryResponse(BaseModel):
    """A report history entry."""

    id: str
    report_name: str
    period_start: datetime
    period_end: datetime
    kpis_included: list[str]
    file_format: str
    status: str
    error_message: str | None = None
    created_at: datetime
    completed_at: datetime | None = None

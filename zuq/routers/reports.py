"""KPI report endpoints."""

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from zuq.config import settings
from zuq.dependencies import Repos
from zuq.schemas.report import ReportHistoryResponse, ReportRequest
from zuq.services import report_service
from zuq.services.auth import RequireAuth

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def create_report(
    request: ReportRequest,
    current_user: RequireAuth,
    repos: Repos,
) -> Response:
    """Generate a KPI report for a period and download it as HTML or PDF."""
    report = await report_service.generate_report(
        repos,
        user_id=str(current_user.id),
        report_name=request.report_name,
        start=request.start_date,
        end=request.end_date,
        kpis=request.kpis,
        file_format=request.format,
        company_name=settings.company_name,
        paper_size=settings.pdf_paper_size,
        margin=settings.pdf_margin_pt,
    )
    return Response(
        content=report.content,
        media_type=report.media_type,
        headers={"Content-Disposition": f"attachment; filename={report.filename}"},
    )


@router.get("/history", response_model=list[ReportHistoryResponse])
async def list_report_history(
    current_user: RequireAuth,
    repos: Repos,
) -> list[ReportHistoryResponse]:
    """List the current user's generated reports, newest first."""
    rows = await repos.report_history.find(sort="-created_at", user_id=str(current_user.id))
    return [ReportHistoryResponse(**row) for row in rows]

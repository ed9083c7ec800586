"""Export endpoints for downloading inventory tables."""

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse, Response

from zuq.dependencies import Repos
from zuq.schemas.export import ExportFormat
from zuq.services import export_service
from zuq.services.auth import RequireAuth

router = APIRouter()


@router.get("/{table}")
async def export_table(
    table: str,
    current_user: RequireAuth,
    repos: Repos,
    format: ExportFormat = Query(default=ExportFormat.CSV, description="Export format"),
) -> Response:
    """Export a table (equipment, suppliers, readers, movements, orders, maintenance).

    Returns the rows in the specified format (CSV, XLSX, YAML, or JSON).
    """
    try:
        rows = await export_service.load_table(repos, table)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown table: {table}",
        )

    headers = {
        "Content-Disposition": f"attachment; filename={export_service.generate_filename(table, format)}"
    }

    if format == ExportFormat.CSV:
        content = export_service.export_rows_to_csv(rows)
    elif format == ExportFormat.XLSX:
        content = export_service.export_rows_to_xlsx(rows, export_service.SHEET_TITLES[table])
    elif format == ExportFormat.YAML:
        content = export_service.export_rows_to_yaml(rows, table)
    else:
        return JSONResponse(content=export_service.export_rows_to_json(rows, table), headers=headers)

    return Response(
        content=content,
        media_type=export_service.get_content_type(format),
        headers=headers,
    )

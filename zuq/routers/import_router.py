"""Import endpoints: templates, validation preview, commit and history."""

import logging
from datetime import date

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import Response

from zuq.config import settings
from zuq.dependencies import Repos
from zuq.schemas.import_schemas import (
    ImportCommitRequest,
    ImportHistoryResponse,
    TemplateGuideEntry,
    ValidationResponse,
)
from zuq.services.auth import RequireAuth
from zuq.services.import_service import (
    SUPPORTED_EXTENSIONS,
    ImportParseError,
    MissingReferenceError,
    TemplateNotFoundError,
    UnsupportedDataTypeError,
    approve_all_duplicates,
    build_template_workbook,
    generate_import_report,
    get_rules,
    get_template_guide,
    import_report_filename,
    parse_import_file,
    reject_all_duplicates,
    save_import_data,
    set_approval,
    summarize,
    template_filename,
    validate_records,
)

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _get_file_extension(filename: str | None) -> str:
    """Extract file extension (with dot) from filename."""
    if not filename or "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[-1].lower()


async def _read_upload(file: UploadFile) -> bytes:
    """Read an upload in chunks, enforcing the configured size limit."""
    max_size = settings.max_upload_size_bytes
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(64 * 1024)  # 64 KB chunks
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds maximum size of {settings.max_upload_size_mb} MB",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.get("/templates", response_model=list[TemplateGuideEntry])
async def list_templates(current_user: RequireAuth) -> list[TemplateGuideEntry]:
    """Column guide for every importable data type."""
    return [TemplateGuideEntry(**entry) for entry in get_template_guide()]


@router.get("/templates/{data_type}")
async def download_template(data_type: str, current_user: RequireAuth) -> Response:
    """Download the XLSX template for a data type."""
    try:
        content = build_template_workbook(data_type)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={template_filename(data_type)}"},
    )


@router.post("/validate", response_model=ValidationResponse)
async def validate_upload(
    current_user: RequireAuth,
    repos: Repos,
    data_type: str = Form(..., description="equipamentos, fornecedores, leitoras, movimentacoes or pedidos"),
    file: UploadFile = File(..., description="CSV or XLSX spreadsheet"),
) -> ValidationResponse:
    """Parse and validate an uploaded file for the preview step.

    Nothing is stored; the client reviews errors and duplicates and then
    calls the commit endpoint.
    """
    try:
        get_rules(data_type)
    except UnsupportedDataTypeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    ext = _get_file_extension(file.filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '{ext}'. Allowed: CSV, XLSX",
        )

    content = await _read_upload(file)
    filename = file.filename or "unknown"

    try:
        rows = parse_import_file(content, filename, max_rows=settings.import_max_rows)
    except ImportParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    records = await validate_records(
        rows,
        data_type,
        repos,
        movement_lookback_days=settings.movement_lookback_days,
        order_lookback_days=settings.order_lookback_days,
    )
    return ValidationResponse(
        data_type=data_type,
        filename=filename,
        records=records,
        summary=summarize(records),
    )


@router.post("/commit", response_model=ImportHistoryResponse)
async def commit_import(
    request: ImportCommitRequest,
    current_user: RequireAuth,
    repos: Repos,
) -> ImportHistoryResponse:
    """Persist the importable records of a previewed file.

    Records are validated again here; only the business fields and the
    operator's duplicate decisions are taken from the client.
    """
    data_type = request.data_type.value
    records = await validate_records(
        [record.data for record in request.records],
        data_type,
        repos,
        movement_lookback_days=settings.movement_lookback_days,
        order_lookback_days=settings.order_lookback_days,
    )

    if request.duplicate_action == "approve_all":
        approve_all_duplicates(records)
    elif request.duplicate_action == "reject_all":
        reject_all_duplicates(records)

    try:
        for index, approved in request.approvals.items():
            set_approval(records, index, approved)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        history = await save_import_data(
            records, data_type, request.filename, str(current_user.id), repos
        )
    except MissingReferenceError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return ImportHistoryResponse(**history)


@router.get("/history", response_model=list[ImportHistoryResponse])
async def list_import_history(
    current_user: RequireAuth,
    repos: Repos,
) -> list[ImportHistoryResponse]:
    """List the current user's imports, newest first."""
    rows = await repos.import_history.find(sort="-created_at", user_id=str(current_user.id))
    return [ImportHistoryResponse(**row) for row in rows]


@router.get("/history/{import_id}/report")
async def download_import_report(
    import_id: str,
    current_user: RequireAuth,
    repos: Repos,
) -> Response:
    """Download the CSV report of one import."""
    history = await repos.import_history.get(import_id)
    if history is None or history.get("user_id") != str(current_user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Import not found",
        )

    filename = import_report_filename(history, date.today().isoformat())
    return Response(
        content=generate_import_report(history).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

"""Maintenance record endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from zuq.dependencies import Repos
from zuq.models import MaintenanceStatus
from zuq.schemas.inventory import MaintenanceCreate, MaintenanceResponse, MaintenanceUpdate, to_row
from zuq.services import maintenance_service
from zuq.services.auth import RequireAuth
from zuq.services.inventory_service import RecordNotFoundError

router = APIRouter()

_NULLABLE = frozenset({"expected_completion_date", "completion_date", "notes", "technician_notes"})


def _not_found(e: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[MaintenanceResponse])
async def list_maintenance(
    current_user: RequireAuth,
    repos: Repos,
    status_filter: MaintenanceStatus | None = Query(None, alias="status"),
) -> list[MaintenanceResponse]:
    """List maintenance records, most recently sent first."""
    records = await maintenance_service.list_maintenance(
        repos, status_filter.value if status_filter else None
    )
    return [MaintenanceResponse(**record) for record in records]


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    maintenance: MaintenanceCreate,
    current_user: RequireAuth,
    repos: Repos,
) -> MaintenanceResponse:
    try:
        record = await maintenance_service.create_maintenance(repos, to_row(maintenance))
    except RecordNotFoundError as e:
        raise _not_found(e)
    return MaintenanceResponse(**record)


@router.get("/{record_id}", response_model=MaintenanceResponse)
async def get_maintenance(record_id: str, current_user: RequireAuth, repos: Repos) -> MaintenanceResponse:
    try:
        record = await maintenance_service.get_maintenance(repos, record_id)
    except RecordNotFoundError as e:
        raise _not_found(e)
    return MaintenanceResponse(**record)


@router.put("/{record_id}", response_model=MaintenanceResponse)
async def update_maintenance(
    record_id: str,
    maintenance_update: MaintenanceUpdate,
    current_user: RequireAuth,
    repos: Repos,
) -> MaintenanceResponse:
    """Update a maintenance record; fields not sent are left unchanged."""
    changes = to_row(maintenance_update, partial=True, nullable=_NULLABLE)
    try:
        record = await maintenance_service.update_maintenance(repos, record_id, changes)
    except RecordNotFoundError as e:
        raise _not_found(e)
    return MaintenanceResponse(**record)


@router.post("/{record_id}/reopen", response_model=MaintenanceResponse)
async def reopen_maintenance(record_id: str, current_user: RequireAuth, repos: Repos) -> MaintenanceResponse:
    """Put a finished record back in progress."""
    try:
        record = await maintenance_service.reopen_maintenance(repos, record_id)
    except RecordNotFoundError as e:
        raise _not_found(e)
    return MaintenanceResponse(**record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(record_id: str, current_user: RequireAuth, repos: Repos) -> None:
    try:
        await maintenance_service.delete_maintenance(repos, record_id)
    except RecordNotFoundError as e:
        raise _not_found(e)

"""Equipment catalogue endpoints."""

from fastapi import APIRouter, HTTPException, status

from zuq.dependencies import Repos
from zuq.models import EquipmentCategory
from zuq.schemas.inventory import EquipmentCreate, EquipmentResponse, EquipmentUpdate, to_row
from zuq.services import inventory_service
from zuq.services.auth import RequireAuth

router = APIRouter()

_NULLABLE = frozenset({"average_price", "min_stock", "initial_stock", "supplier_id"})


def _not_found(e: inventory_service.RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(
    current_user: RequireAuth,
    repos: Repos,
    category: EquipmentCategory | None = None,
) -> list[EquipmentResponse]:
    """List equipment with the current stock of each item."""
    items = await inventory_service.list_equipment(repos, category.value if category else None)
    return [EquipmentResponse(**item) for item in items]


@router.post("", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_equipment(
    equipment: EquipmentCreate,
    current_user: RequireAuth,
    repos: Repos,
) -> EquipmentResponse:
    try:
        created = await inventory_service.create_equipment(repos, to_row(equipment), str(current_user.id))
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)
    return EquipmentResponse(**created)


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(equipment_id: str, current_user: RequireAuth, repos: Repos) -> EquipmentResponse:
    try:
        item = await inventory_service.get_equipment(repos, equipment_id)
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)
    return EquipmentResponse(**item)


@router.put("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: str,
    equipment_update: EquipmentUpdate,
    current_user: RequireAuth,
    repos: Repos,
) -> EquipmentResponse:
    """Update equipment fields; fields not sent are left unchanged."""
    changes = to_row(equipment_update, partial=True, nullable=_NULLABLE)
    try:
        item = await inventory_service.update_equipment(repos, equipment_id, changes)
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)
    return EquipmentResponse(**item)


@router.delete("/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(equipment_id: str, current_user: RequireAuth, repos: Repos) -> None:
    try:
        await inventory_service.delete_equipment(repos, equipment_id)
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)

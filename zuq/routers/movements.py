"""Stock movement endpoints."""

from fastapi import APIRouter, HTTPException, status

from zuq.dependencies import Repos
from zuq.models import MovementType
from zuq.schemas.inventory import MovementCreate, MovementResponse, MovementUpdate, to_row
from zuq.services import inventory_service
from zuq.services.auth import RequireAuth

router = APIRouter()


def _not_found(e: inventory_service.RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[MovementResponse])
async def list_movements(
    current_user: RequireAuth,
    repos: Repos,
    movement_type: MovementType | None = None,
    equipment_id: str | None = None,
) -> list[MovementResponse]:
    """List movements, newest first, optionally filtered by type or equipment."""
    movements = await inventory_service.list_movements(
        repos,
        movement_type=movement_type.value if movement_type else None,
        equipment_id=equipment_id,
    )
    return [MovementResponse(**movement) for movement in movements]


@router.post("", response_model=MovementResponse, status_code=status.HTTP_201_CREATED)
async def create_movement(
    movement: MovementCreate,
    current_user: RequireAuth,
    repos: Repos,
) -> MovementResponse:
    try:
        created = await inventory_service.create_movement(repos, to_row(movement), str(current_user.id))
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MovementResponse(**created)


@router.put("/{movement_id}", response_model=MovementResponse)
async def update_movement(
    movement_id: str,
    movement_update: MovementUpdate,
    current_user: RequireAuth,
    repos: Repos,
) -> MovementResponse:
    changes = to_row(movement_update, partial=True, nullable=frozenset({"notes"}))
    try:
        updated = await inventory_service.update_movement(repos, movement_id, changes)
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)
    return MovementResponse(**updated)


@router.delete("/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movement(movement_id: str, current_user: RequireAuth, repos: Repos) -> None:
    try:
        await inventory_service.delete_movement(repos, movement_id)
    except inventory_service.RecordNotFoundError as e:
        raise _not_found(e)

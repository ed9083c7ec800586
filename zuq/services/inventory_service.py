"""Equipment catalogue and stock movements.

Current stock of an equipment item is its initial stock plus every
``Entrada`` movement minus every ``Saída`` movement ever recorded.
"""

import logging
from collections import defaultdict
from typing import Any

from zuq.models import MovementType
from zuq.models.base import utcnow
from zuq.repositories import Repositories, Row

logger = logging.getLogger(__name__)


class RecordNotFoundError(LookupError):
    """A referenced equipment, supplier or movement does not exist."""


def stock_by_equipment(movements: list[Row]) -> dict[str, int]:
    """Net movement quantity per equipment id."""
    totals: dict[str, int] = defaultdict(int)
    for movement in movements:
        quantity = int(movement.get("quantity") or 0)
        if movement.get("movement_type") == MovementType.ENTRADA.value:
            totals[movement["equipment_id"]] += quantity
        else:
            totals[movement["equipment_id"]] -= quantity
    return dict(totals)


def with_stock(equipment: Row, totals: dict[str, int]) -> Row:
    return {**equipment, "stock": int(equipment.get("initial_stock") or 0) + totals.get(equipment["id"], 0)}


async def _require(repo, row_id: str, message: str) -> Row:
    row = await repo.get(row_id)
    if row is None:
        raise RecordNotFoundError(f"{message}: {row_id}")
    return row


async def _check_supplier(repos: Repositories, supplier_id: str | None) -> None:
    if supplier_id:
        await _require(repos.suppliers, supplier_id, "Fornecedor não encontrado")


# =============================================================================
# Equipment
# =============================================================================


async def list_equipment(repos: Repositories, category: str | None = None) -> list[Row]:
    """Equipment sorted by brand, each with its current ``stock``."""
    criteria = {"category": category} if category else {}
    equipment = await repos.equipment.find(sort="brand", **criteria)
    totals = stock_by_equipment(await repos.movements.list_all())
    return [with_stock(item, totals) for item in equipment]


async def get_equipment(repos: Repositories, equipment_id: str) -> Row:
    equipment = await _require(repos.equipment, equipment_id, "Equipamento não encontrado")
    movements = await repos.movements.find(equipment_id=equipment_id)
    return with_stock(equipment, stock_by_equipment(movements))


async def create_equipment(repos: Repositories, data: dict[str, Any], user_id: str | None) -> Row:
    await _check_supplier(repos, data.get("supplier_id"))
    now = utcnow()
    created = await repos.equipment.insert(
        {**data, "created_by": user_id, "created_at": now, "updated_at": now}
    )
    logger.info("Equipment %s created: %s %s", created["id"], created.get("brand"), created.get("model"))
    return with_stock(created, {})


async def update_equipment(repos: Repositories, equipment_id: str, changes: dict[str, Any]) -> Row:
    """Apply the given fields only; absent fields keep their values."""
    await _require(repos.equipment, equipment_id, "Equipamento não encontrado")
    if "supplier_id" in changes:
        await _check_supplier(repos, changes["supplier_id"])
    await repos.equipment.update(equipment_id, {**changes, "updated_at": utcnow()})
    return await get_equipment(repos, equipment_id)


async def delete_equipment(repos: Repositories, equipment_id: str) -> None:
    """Delete an equipment item; movements and readers that reference it are kept."""
    if not await repos.equipment.delete(equipment_id):
        raise RecordNotFoundError(f"Equipamento não encontrado: {equipment_id}")
    logger.info("Equipment %s deleted", equipment_id)


# =============================================================================
# Movements
# =============================================================================


async def list_movements(
    repos: Repositories,
    movement_type: str | None = None,
    equipment_id: str | None = None,
) -> list[Row]:
    """Movements, newest movement date first."""
    criteria: dict[str, Any] = {}
    if movement_type:
        criteria["movement_type"] = movement_type
    if equipment_id:
        criteria["equipment_id"] = equipment_id
    return await repos.movements.find(sort="-movement_date", **criteria)


async def get_movement(repos: Repositories, movement_id: str) -> Row:
    return await _require(repos.movements, movement_id, "Movimentação não encontrada")


async def create_movement(repos: Repositories, data: dict[str, Any], user_id: str | None) -> Row:
    """Record a stock entry or exit.

    Raises:
        RecordNotFoundError: If the equipment does not exist.
        ValueError: If the quantity is not positive.
    """
    if int(data.get("quantity") or 0) <= 0:
        raise ValueError("Quantidade deve ser um número inteiro positivo")
    await _require(repos.equipment, data["equipment_id"], "Equipamento não encontrado")

    now = utcnow()
    created = await repos.movements.insert(
        {
            **data,
            "movement_date": data.get("movement_date") or now,
            "created_by": user_id,
            "created_at": now,
            "updated_at": now,
        }
    )
    logger.info(
        "Movement %s: %s of %s for equipment %s",
        created["id"], created["movement_type"], created["quantity"], created["equipment_id"],
    )
    return created


async def update_movement(repos: Repositories, movement_id: str, changes: dict[str, Any]) -> Row:
    await get_movement(repos, movement_id)
    if "equipment_id" in changes:
        await _require(repos.equipment, changes["equipment_id"], "Equipamento não encontrado")
    return await repos.movements.update(movement_id, {**changes, "updated_at": utcnow()})


async def delete_movement(repos: Repositories, movement_id: str) -> None:
    if not await repos.movements.delete(movement_id):
        raise RecordNotFoundError(f"Movimentação não encontrada: {movement_id}")
    logger.info("Movement %s deleted", movement_id)

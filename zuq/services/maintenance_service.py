"""Maintenance records: equipment sent out for repair."""

import logging
from typing import Any

from zuq.models import MaintenanceStatus
from zuq.models.base import utcnow
from zuq.repositories import Repositories, Row
from zuq.services.inventory_service import RecordNotFoundError

logger = logging.getLogger(__name__)


async def _get(repos: Repositories, record_id: str) -> Row:
    record = await repos.maintenance.get(record_id)
    if record is None:
        raise RecordNotFoundError(f"Manutenção não encontrada: {record_id}")
    return record


async def _check_equipment(repos: Repositories, equipment_id: str) -> None:
    if await repos.equipment.get(equipment_id) is None:
        raise RecordNotFoundError(f"Equipamento não encontrado: {equipment_id}")


async def list_maintenance(repos: Repositories, status: str | None = None) -> list[Row]:
    """Maintenance records, most recently sent first."""
    criteria = {"status": status} if status else {}
    return await repos.maintenance.find(sort="-send_date", **criteria)


async def get_maintenance(repos: Repositories, record_id: str) -> Row:
    return await _get(repos, record_id)


async def create_maintenance(repos: Repositories, data: dict[str, Any]) -> Row:
    """Open a maintenance record.

    Raises:
        RecordNotFoundError: If the equipment does not exist.
    """
    await _check_equipment(repos, data["equipment_id"])
    now = utcnow()
    record = await repos.maintenance.insert(
        {
            "status": MaintenanceStatus.EM_ANDAMENTO.value,
            **data,
            "send_date": data.get("send_date") or now,
            "created_at": now,
            "updated_at": now,
        }
    )
    logger.info("Maintenance %s opened for equipment %s", record["id"], record["equipment_id"])
    return record


async def update_maintenance(repos: Repositories, record_id: str, changes: dict[str, Any]) -> Row:
    """Apply the given fields only."""
    record = await _get(repos, record_id)
    if "equipment_id" in changes:
        await _check_equipment(repos, changes["equipment_id"])
    updated = await repos.maintenance.update(record_id, {**changes, "updated_at": utcnow()})
    if updated["status"] != record["status"]:
        logger.info("Maintenance %s status changed: %s -> %s", record_id, record["status"], updated["status"])
    return updated


async def reopen_maintenance(repos: Repositories, record_id: str) -> Row:
    """Put a record back in progress and clear its completion date."""
    return await update_maintenance(
        repos,
        record_id,
        {"status": MaintenanceStatus.EM_ANDAMENTO.value, "completion_date": None},
    )


async def delete_maintenance(repos: Repositories, record_id: str) -> None:
    if not await repos.maintenance.delete(record_id):
        raise RecordNotFoundError(f"Manutenção não encontrada: {record_id}")
    logger.info("Maintenance %s deleted", record_id)

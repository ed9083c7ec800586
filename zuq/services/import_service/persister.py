"""Persist approved import records and keep the import history up to date."""

import logging
from datetime import datetime, time
from typing import Any

from zuq.models import ImportStatus, OrderStatus, ReaderCondition, ReaderStatus
from zuq.models.base import utcnow
from zuq.repositories import Repositories, Row

from .converters import as_text, br_date_to_iso, coerce_int, parse_br_date, parse_number
from .errors import MissingReferenceError, NotAuthenticatedError
from .records import ImportRecord, importable_records
from .validator import get_rules

logger = logging.getLogger(__name__)


async def _find_equipment(repos: Repositories, data: dict[str, Any]) -> Row:
    brand = as_text(data.get("equipamento_marca")) or ""
    model = as_text(data.get("equipamento_modelo")) or ""
    equipment = await repos.equipment.find_one(brand=brand, model=model)
    if equipment is None:
        raise MissingReferenceError(f"Equipamento não encontrado: {brand} {model}")
    return equipment


async def _find_supplier(repos: Repositories, name: str) -> Row:
    supplier = await repos.suppliers.find_one(name=name)
    if supplier is None:
        raise MissingReferenceError(f"Fornecedor não encontrado: {name}")
    return supplier


def _stamp(user_id: str, now: datetime) -> dict[str, Any]:
    return {"created_by": user_id, "created_at": now, "updated_at": now}


async def save_equipment(data: dict[str, Any], repos: Repositories, user_id: str, now: datetime) -> Row:
    supplier_id = None
    supplier_name = as_text(data.get("fornecedor_nome"))
    if supplier_name:
        supplier = await repos.suppliers.find_one(name=supplier_name)
        supplier_id = supplier["id"] if supplier else None

    return await repos.equipment.insert(
        {
            "brand": as_text(data.get("marca")),
            "model": as_text(data.get("modelo")),
            "category": as_text(data.get("categoria")),
            "average_price": parse_number(data.get("preco_medio")),
            "min_stock": coerce_int(data.get("estoque_minimo")),
            "initial_stock": coerce_int(data.get("estoque_inicial")),
            "supplier_id": supplier_id,
            **_stamp(user_id, now),
        }
    )


async def save_supplier(data: dict[str, Any], repos: Repositories, user_id: str, now: datetime) -> Row:
    return await repos.suppliers.insert(
        {
            "name": as_text(data.get("nome")),
            "cnpj": as_text(data.get("cnpj")),
            "contact_name": as_text(data.get("contato")),
            "phone": as_text(data.get("telefone")),
            "email": as_text(data.get("email")),
            "address": as_text(data.get("endereco")),
            "average_delivery_days": coerce_int(data.get("dias_entrega_media")),
            **_stamp(user_id, now),
        }
    )


async def save_reader(data: dict[str, Any], repos: Repositories, user_id: str, now: datetime) -> Row:
    equipment = await _find_equipment(repos, data)
    return await repos.readers.insert(
        {
            "code": as_text(data.get("codigo")),
            "equipment_id": equipment["id"],
            "status": as_text(data.get("status")) or ReaderStatus.DISPONIVEL.value,
            "condition": as_text(data.get("condicao")) or ReaderCondition.NOVO.value,
            "acquisition_date": br_date_to_iso(data.get("data_aquisicao")),
            **_stamp(user_id, now),
        }
    )


async def save_movement(data: dict[str, Any], repos: Repositories, user_id: str, now: datetime) -> Row:
    equipment = await _find_equipment(repos, data)
    day = parse_br_date(data.get("data"))
    movement_date = datetime.combine(day, time()) if day else now
    return await repos.movements.insert(
        {
            "equipment_id": equipment["id"],
            "movement_type": as_text(data.get("tipo_movimento")),
            "quantity": coerce_int(data.get("quantidade")),
            "movement_date": movement_date,
            "notes": as_text(data.get("observacoes")),
            **_stamp(user_id, now),
        }
    )


async def save_order(data: dict[str, Any], repos: Repositories, user_id: str, now: datetime) -> Row:
    equipment = await _find_equipment(repos, data)
    supplier = await _find_supplier(repos, as_text(data.get("fornecedor_nome")) or "")
    return await repos.orders.insert(
        {
            "equipment_id": equipment["id"],
            "supplier_id": supplier["id"],
            "quantity": coerce_int(data.get("quantidade")),
            "expected_arrival_date": br_date_to_iso(data.get("data_chegada_esperada")),
            "invoice_number": as_text(data.get("nota_fiscal")),
            "notes": as_text(data.get("observacoes")),
            "status": OrderStatus.PENDENTE.value,
            **_stamp(user_id, now),
        }
    )


SAVERS = {
    "equipamentos": save_equipment,
    "fornecedores": save_supplier,
    "leitoras": save_reader,
    "movimentacoes": save_movement,
    "pedidos": save_order,
}


async def save_import_data(
    records: list[ImportRecord],
    data_type: str,
    filename: str,
    user_id: str | None,
    repos: Repositories,
) -> Row:
    """Insert the importable records one by one and record the import.

    Writes are not transactional: when a record fails, earlier records stay
    stored, later ones are not attempted, the history entry is marked
    ``error`` and the exception is re-raised.

    Returns:
        The final import history row.

    Raises:
        NotAuthenticatedError: If no user is given.
        UnsupportedDataTypeError: If the data type is unknown.
        MissingReferenceError: If a record references unknown equipment or supplier.
    """
    if not user_id:
        raise NotAuthenticatedError()
    get_rules(data_type)
    saver = SAVERS[data_type]

    approved = importable_records(records)
    total = len(records)
    history = await repos.import_history.insert(
        {
            "user_id": user_id,
            "data_type": data_type,
            "original_filename": filename,
            "total_records": total,
            "processed_records": 0,
            "failed_records": total - len(approved),
            "status": ImportStatus.PENDING.value,
            "created_at": utcnow(),
        }
    )
    logger.info(
        "Importing %d of %d %s records from %s", len(approved), total, data_type, filename
    )

    saved = 0
    try:
        for record in approved:
            await saver(record.data, repos, user_id, utcnow())
            saved += 1
    except Exception as e:
        logger.warning(
            "Import %s failed after %d records: %s", history["id"], saved, e
        )
        await repos.import_history.update(
            history["id"],
            {
                "failed_records": total,
                "status": ImportStatus.ERROR.value,
                "error_details": [{"message": str(e)}],
                "completed_at": utcnow(),
            },
        )
        raise

    updated = await repos.import_history.update(
        history["id"],
        {
            "processed_records": len(approved),
            "status": ImportStatus.COMPLETED.value,
            "completed_at": utcnow(),
        },
    )
    logger.info("Import %s completed: %d records saved", history["id"], saved)
    return updated or history

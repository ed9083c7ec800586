"""Order receipt tracking: progress derived from order batches."""

import logging
from typing import Any

from zuq.models import OrderStatus
from zuq.models.base import utcnow
from zuq.repositories import Repositories, Row

logger = logging.getLogger(__name__)


class OrderNotFoundError(LookupError):
    """The order does not exist."""


def derive_status(ordered: int, received: int) -> OrderStatus:
    """Status implied by the received total."""
    if ordered > 0 and received >= ordered:
        return OrderStatus.RECEBIDO
    if received > 0:
        return OrderStatus.PARCIALMENTE_RECEBIDO
    return OrderStatus.PENDENTE


def compute_progress(order: Row, batches: list[Row]) -> dict[str, Any]:
    """Ordered, received and remaining quantities for an order.

    The percentage is informational; receiving more than ordered is allowed.
    """
    ordered = int(order.get("quantity") or 0)
    received = sum(int(batch.get("received_quantity") or 0) for batch in batches)
    percentage = round(received / ordered * 100, 2) if ordered else 0.0
    return {
        "order_id": order["id"],
        "ordered_quantity": ordered,
        "received_quantity": received,
        "remaining_quantity": max(ordered - received, 0),
        "percentage": percentage,
        "status": order.get("status", OrderStatus.PENDENTE.value),
        "derived_status": derive_status(ordered, received).value,
        "batch_count": len(batches),
    }


async def _get_order(repos: Repositories, order_id: str) -> Row:
    order = await repos.orders.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"Pedido não encontrado: {order_id}")
    return order


async def get_order_progress(repos: Repositories, order_id: str) -> dict[str, Any]:
    order = await _get_order(repos, order_id)
    batches = await repos.order_batches.find(order_id=order_id)
    return compute_progress(order, batches)


async def list_batches(repos: Repositories, order_id: str) -> list[Row]:
    await _get_order(repos, order_id)
    return await repos.order_batches.find(sort="created_at", order_id=order_id)


async def register_batch(repos: Repositories, order_id: str, batch: dict[str, Any]) -> Row:
    """Record a partial receipt and move the order to its derived status.

    Archived orders keep their status.

    Raises:
        OrderNotFoundError: If the order does not exist.
        ValueError: If the received quantity is not positive.
    """
    if int(batch.get("received_quantity") or 0) <= 0:
        raise ValueError("Quantidade recebida deve ser maior que zero")

    order = await _get_order(repos, order_id)
    now = utcnow()
    created = await repos.order_batches.insert(
        {**batch, "order_id": order_id, "created_at": now, "updated_at": now}
    )

    if order.get("status") != OrderStatus.ARQUIVADO.value:
        progress = await get_order_progress(repos, order_id)
        new_status = progress["derived_status"]
        if new_status != order.get("status"):
            await repos.orders.update(order_id, {"status": new_status, "updated_at": now})
            logger.info("Order %s status changed: %s -> %s", order_id, order.get("status"), new_status)

    return created

"""Tests for order progress and batch registration."""

import pytest
from httpx import AsyncClient

from zuq.models import OrderStatus
from zuq.repositories import Repositories, get_memory_repositories
from zuq.services.order_service import (
    OrderNotFoundError,
    compute_progress,
    derive_status,
    get_order_progress,
    register_batch,
)


@pytest.fixture
def repos() -> Repositories:
    return get_memory_repositories(
        orders=[
            {"id": "ord-1", "equipment_id": "eq-1", "supplier_id": "sup-1", "quantity": 10,
             "status": "Pendente"},
            {"id": "ord-2", "equipment_id": "eq-1", "supplier_id": "sup-1", "quantity": 4,
             "status": "Arquivado"},
        ]
    )


@pytest.mark.parametrize(
    "ordered,received,expected",
    [
        (10, 0, OrderStatus.PENDENTE),
        (10, 3, OrderStatus.PARCIALMENTE_RECEBIDO),
        (10, 10, OrderStatus.RECEBIDO),
        (10, 12, OrderStatus.RECEBIDO),
        (0, 0, OrderStatus.PENDENTE),
    ],
)
def test_derive_status(ordered, received, expected) -> None:
    assert derive_status(ordered, received) == expected


def test_compute_progress() -> None:
    order = {"id": "ord-1", "quantity": 8, "status": "Pendente"}
    progress = compute_progress(order, [{"received_quantity": 2}, {"received_quantity": 4}])
    assert progress == {
        "order_id": "ord-1",
        "ordered_quantity": 8,
        "received_quantity": 6,
        "remaining_quantity": 2,
        "percentage": 75.0,
        "status": "Pendente",
        "derived_status": "Parcialmente Recebido",
        "batch_count": 2,
    }


def test_compute_progress_zero_quantity() -> None:
    progress = compute_progress({"id": "x", "quantity": 0}, [])
    assert progress["percentage"] == 0.0
    assert progress["remaining_quantity"] == 0


@pytest.mark.asyncio
async def test_register_batches_updates_status(repos: Repositories) -> None:
    await register_batch(repos, "ord-1", {"received_quantity": 4})
    assert (await repos.orders.get("ord-1"))["status"] == "Parcialmente Recebido"

    await register_batch(repos, "ord-1", {"received_quantity": 6})
    assert (await repos.orders.get("ord-1"))["status"] == "Recebido"

    progress = await get_order_progress(repos, "ord-1")
    assert progress["received_quantity"] == 10
    assert progress["remaining_quantity"] == 0
    assert progress["batch_count"] == 2


@pytest.mark.asyncio
async def test_archived_order_keeps_status(repos: Repositories) -> None:
    await register_batch(repos, "ord-2", {"received_quantity": 4})
    assert (await repos.orders.get("ord-2"))["status"] == "Arquivado"


@pytest.mark.asyncio
async def test_register_batch_rejects_non_positive(repos: Repositories) -> None:
    with pytest.raises(ValueError, match="Quantidade recebida deve ser maior que zero"):
        await register_batch(repos, "ord-1", {"received_quantity": 0})
    assert await repos.order_batches.list_all() == []


@pytest.mark.asyncio
async def test_unknown_order(repos: Repositories) -> None:
    with pytest.raises(OrderNotFoundError):
        await get_order_progress(repos, "missing")


# =============================================================================
# Endpoints
# =============================================================================


@pytest.mark.asyncio
async def test_batch_endpoints(client: AsyncClient) -> None:
    response = await client.post(
        "/api/orders/ord-1/batches",
        json={"received_quantity": 3, "received_date": "2024-03-05", "tracking_code": "BR123"},
    )
    assert response.status_code == 201
    batch = response.json()
    assert batch["order_id"] == "ord-1"
    assert batch["received_date"] == "2024-03-05"

    batches = await client.get("/api/orders/ord-1/batches")
    assert [b["tracking_code"] for b in batches.json()] == ["BR123"]

    progress = await client.get("/api/orders/ord-1/progress")
    assert progress.status_code == 200
    assert progress.json()["percentage"] == 30.0
    assert progress.json()["status"] == "Parcialmente Recebido"


@pytest.mark.asyncio
async def test_batch_endpoint_validation(client: AsyncClient) -> None:
    response = await client.post("/api/orders/ord-1/batches", json={"received_quantity": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_progress_unknown_order(client: AsyncClient) -> None:
    response = await client.get("/api/orders/missing/progress")
    assert response.status_code == 404

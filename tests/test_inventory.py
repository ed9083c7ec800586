"""Tests for the equipment catalogue and stock movements."""

from datetime import datetime

import pytest
from httpx import AsyncClient

from zuq.repositories import Repositories
from zuq.services.inventory_service import (
    RecordNotFoundError,
    create_movement,
    get_equipment,
    list_equipment,
    stock_by_equipment,
)


@pytest.fixture
def repos(seeded_repos) -> Repositories:
    seeded_repos.movements.rows.extend(
        [
            {"id": "mov-1", "equipment_id": "eq-1", "movement_type": "Entrada", "quantity": 6,
             "movement_date": datetime(2024, 3, 2), "created_at": datetime(2024, 3, 2)},
            {"id": "mov-2", "equipment_id": "eq-1", "movement_type": "Saída", "quantity": 4,
             "movement_date": datetime(2024, 3, 5), "created_at": datetime(2024, 3, 5)},
        ]
    )
    return seeded_repos


def test_stock_by_equipment() -> None:
    movements = [
        {"equipment_id": "a", "movement_type": "Entrada", "quantity": 5},
        {"equipment_id": "a", "movement_type": "Saída", "quantity": 2},
        {"equipment_id": "b", "movement_type": "Saída", "quantity": 1},
    ]
    assert stock_by_equipment(movements) == {"a": 3, "b": -1}


@pytest.mark.asyncio
async def test_stock_includes_initial_stock(repos: Repositories) -> None:
    items = await list_equipment(repos)
    assert [(item["model"], item["stock"]) for item in items] == [("MC3300", 12)]
    assert (await get_equipment(repos, "eq-1"))["stock"] == 12


@pytest.mark.asyncio
async def test_create_movement_requires_equipment(repos: Repositories) -> None:
    with pytest.raises(RecordNotFoundError, match="Equipamento não encontrado: eq-9"):
        await create_movement(repos, {"equipment_id": "eq-9", "movement_type": "Entrada", "quantity": 1}, "u")


@pytest.mark.asyncio
async def test_create_movement_rejects_non_positive(repos: Repositories) -> None:
    with pytest.raises(ValueError, match="inteiro positivo"):
        await create_movement(repos, {"equipment_id": "eq-1", "movement_type": "Entrada", "quantity": 0}, "u")
    assert len(await repos.movements.list_all()) == 2


# =============================================================================
# Equipment endpoints
# =============================================================================


@pytest.mark.asyncio
async def test_equipment_crud(client: AsyncClient) -> None:
    response = await client.post(
        "/api/equipment",
        json={"brand": "Impinj", "model": "R700", "category": "Leitora", "initial_stock": 3,
              "supplier_id": "sup-1"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["stock"] == 3

    response = await client.put(f"/api/equipment/{created['id']}", json={"min_stock": 2})
    assert response.status_code == 200
    assert response.json()["min_stock"] == 2
    assert response.json()["brand"] == "Impinj"

    listing = await client.get("/api/equipment?category=Leitora")
    assert [item["model"] for item in listing.json()] == ["R700", "MC3300"]

    response = await client.delete(f"/api/equipment/{created['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/api/equipment/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_equipment_unknown_supplier(client: AsyncClient) -> None:
    response = await client.post(
        "/api/equipment",
        json={"brand": "Impinj", "model": "R700", "category": "Leitora", "supplier_id": "sup-9"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Fornecedor não encontrado: sup-9"


@pytest.mark.asyncio
async def test_equipment_invalid_category(client: AsyncClient) -> None:
    response = await client.post("/api/equipment", json={"brand": "X", "model": "Y", "category": "Antena"})
    assert response.status_code == 422


# =============================================================================
# Movement endpoints
# =============================================================================


@pytest.mark.asyncio
async def test_movement_endpoints_update_stock(client: AsyncClient) -> None:
    response = await client.post(
        "/api/movements",
        json={"equipment_id": "eq-1", "movement_type": "Entrada", "quantity": 5,
              "movement_date": "2024-03-10T09:00:00"},
    )
    assert response.status_code == 201
    movement = response.json()
    assert (await client.get("/api/equipment/eq-1")).json()["stock"] == 17

    response = await client.put(f"/api/movements/{movement['id']}", json={"movement_type": "Saída"})
    assert response.json()["movement_type"] == "Saída"
    assert (await client.get("/api/equipment/eq-1")).json()["stock"] == 7

    exits = await client.get("/api/movements?movement_type=Saída")
    assert [m["id"] for m in exits.json()] == [movement["id"], "mov-2"]

    assert (await client.delete(f"/api/movements/{movement['id']}")).status_code == 204
    assert (await client.get("/api/equipment/eq-1")).json()["stock"] == 12


@pytest.mark.asyncio
async def test_movement_fractional_quantity_rejected(client: AsyncClient) -> None:
    response = await client.post(
        "/api/movements",
        json={"equipment_id": "eq-1", "movement_type": "Entrada", "quantity": 0.5},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_movement_unknown_equipment(client: AsyncClient) -> None:
    response = await client.post(
        "/api/movements",
        json={"equipment_id": "eq-9", "movement_type": "Entrada", "quantity": 1},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_movement(client: AsyncClient) -> None:
    assert (await client.delete("/api/movements/missing")).status_code == 404

"""Pytest configuration and fixtures for ZUQ tests.

Repositories are the in-memory implementation and authentication is
overridden, so no MongoDB is needed.
"""

from collections.abc import AsyncGenerator
from datetime import datetime
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from zuq.dependencies import get_repositories
from zuq.main import app
from zuq.repositories import Repositories, get_memory_repositories
from zuq.services.auth import require_auth

TEST_USER_ID = "65f1a2b3c4d5e6f708192a3b"


@pytest.fixture
def test_user() -> SimpleNamespace:
    """Stand-in for the authenticated User document."""
    return SimpleNamespace(
        id=TEST_USER_ID,
        email="operador@zuq.com.br",
        username="operador",
        full_name="Operador de Estoque",
        is_active=True,
        is_superuser=False,
        last_login=None,
    )


@pytest.fixture
def repos() -> Repositories:
    return get_memory_repositories()


@pytest.fixture
def seeded_repos() -> Repositories:
    """Repositories with one supplier and one equipment that reference it."""
    created = datetime(2024, 3, 1, 12, 0, 0)
    return get_memory_repositories(
        suppliers=[
            {
                "id": "sup-1",
                "name": "RFID Brasil",
                "cnpj": "12.345.678/0001-90",
                "email": "vendas@rfidbrasil.com.br",
                "created_at": created,
            }
        ],
        equipment=[
            {
                "id": "eq-1",
                "brand": "Zebra",
                "model": "MC3300",
                "category": "Leitora",
                "average_price": 2500.0,
                "min_stock": 5,
                "initial_stock": 10,
                "supplier_id": "sup-1",
                "created_at": created,
            }
        ],
    )


@pytest_asyncio.fixture
async def client(
    repos: Repositories, test_user: SimpleNamespace
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with in-memory repositories and a logged-in user."""
    app.dependency_overrides[get_repositories] = lambda: repos
    app.dependency_overrides[require_auth] = lambda: test_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anon_client(repos: Repositories) -> AsyncGenerator[AsyncClient, None]:
    """Async test client without an authenticated user."""
    app.dependency_overrides[get_repositories] = lambda: repos

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

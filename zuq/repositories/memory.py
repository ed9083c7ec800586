"""In-memory repositories for tests and dry-run imports."""

import copy
from datetime import datetime
from typing import Any

from bson import ObjectId

from zuq.models.base import utcnow
from zuq.repositories.base import Repositories, Row, sort_rows


class MemoryRepository:
    """Dictionary-backed repository with the same contract as the Beanie one."""

    def __init__(self, rows: list[Row] | None = None):
        self.rows: list[Row] = []
        for row in rows or []:
            self._store(row)

    def _store(self, data: Row) -> Row:
        row = copy.deepcopy(data)
        row["id"] = str(row.get("id") or ObjectId())
        row.setdefault("created_at", utcnow())
        self.rows.append(row)
        return copy.deepcopy(row)

    @staticmethod
    def _matches(row: Row, criteria: dict[str, Any]) -> bool:
        return all(row.get(key) == value for key, value in criteria.items())

    async def list_all(self, sort: str | None = None) -> list[Row]:
        return sort_rows(copy.deepcopy(self.rows), sort)

    async def get(self, row_id: str) -> Row | None:
        for row in self.rows:
            if row["id"] == row_id:
                return copy.deepcopy(row)
        return None

    async def find(self, sort: str | None = None, **criteria: Any) -> list[Row]:
        found = [copy.deepcopy(row) for row in self.rows if self._matches(row, criteria)]
        return sort_rows(found, sort)

    async def find_one(self, **criteria: Any) -> Row | None:
        found = await self.find(**criteria)
        return found[0] if found else None

    async def list_range(
        self,
        field: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Row]:
        found = []
        for row in self.rows:
            value = row.get(field)
            if value is None:
                continue
            if start is not None and value < start:
                continue
            if end is not None and value > end:
                continue
            found.append(copy.deepcopy(row))
        return sort_rows(found, field)

    async def insert(self, data: Row) -> Row:
        return self._store(data)

    async def update(self, row_id: str, changes: Row) -> Row | None:
        for row in self.rows:
            if row["id"] == row_id:
                row.update(copy.deepcopy(changes))
                return copy.deepcopy(row)
        return None

    async def delete(self, row_id: str) -> bool:
        for index, row in enumerate(self.rows):
            if row["id"] == row_id:
                del self.rows[index]
                return True
        return False


def get_memory_repositories(**seed: list[Row]) -> Repositories:
    """Build in-memory repositories, optionally seeded per collection.

    Example: ``get_memory_repositories(equipment=[{"brand": "Zebra", ...}])``
    """
    names = [
        "equipment",
        "suppliers",
        "readers",
        "movements",
        "orders",
        "order_batches",
        "maintenance",
        "import_history",
        "report_history",
    ]
    unknown = set(seed) - set(names)
    if unknown:
        raise ValueError(f"Unknown collections: {', '.join(sorted(unknown))}")
    return Repositories(**{name: MemoryRepository(seed.get(name)) for name in names})

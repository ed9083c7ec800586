"""Repository interface shared by the Beanie and in-memory backends.

Repositories exchange plain dictionaries ("rows"): ``id`` and every
``*_id`` reference are strings, datetimes are naive UTC.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

Row = dict[str, Any]


class Repository(Protocol):
    """Minimal collection access used by the services."""

    async def list_all(self, sort: str | None = None) -> list[Row]: ...

    async def get(self, row_id: str) -> Row | None: ...

    async def find(self, sort: str | None = None, **criteria: Any) -> list[Row]: ...

    async def find_one(self, **criteria: Any) -> Row | None: ...

    async def list_range(
        self,
        field: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Row]: ...

    async def insert(self, data: Row) -> Row: ...

    async def update(self, row_id: str, changes: Row) -> Row | None: ...

    async def delete(self, row_id: str) -> bool: ...


@dataclass
class Repositories:
    """One repository per collection, injected into the services."""

    equipment: Repository
    suppliers: Repository
    readers: Repository
    movements: Repository
    orders: Repository
    order_batches: Repository
    maintenance: Repository
    import_history: Repository
    report_history: Repository

    def table(self, name: str) -> Repository:
        """Look up a repository by its exported table name."""
        return EXPORT_TABLES[name](self)


# Export name -> repository accessor
EXPORT_TABLES = {
    "equipment": lambda repos: repos.equipment,
    "suppliers": lambda repos: repos.suppliers,
    "readers": lambda repos: repos.readers,
    "movements": lambda repos: repos.movements,
    "orders": lambda repos: repos.orders,
    "maintenance": lambda repos: repos.maintenance,
}


def sort_rows(rows: list[Row], sort: str | None) -> list[Row]:
    """Sort rows by a ``field`` or ``-field`` spec, None values first."""
    if not sort:
        return rows
    reverse = sort.startswith("-")
    field = sort.lstrip("-+")
    return sorted(
        rows,
        key=lambda row: (row.get(field) is not None, row.get(field) or 0),
        reverse=reverse,
    )

"""Beanie-backed repositories used in production."""

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, PydanticObjectId
from bson.errors import InvalidId

from zuq.models import (
    Equipment,
    ImportHistory,
    InventoryMovement,
    MaintenanceRecord,
    Order,
    OrderBatch,
    Reader,
    ReportHistory,
    Supplier,
)
from zuq.repositories.base import Repositories, Row

logger = logging.getLogger(__name__)


def document_to_row(doc: Document) -> Row:
    """Convert a document to a plain row with string ids."""
    row = doc.model_dump(exclude={"revision_id"})
    row["id"] = str(doc.id)
    for key, value in row.items():
        if isinstance(value, PydanticObjectId):
            row[key] = str(value)
        elif isinstance(value, Enum):
            row[key] = value.value
    return row


def _to_query(criteria: dict[str, Any]) -> dict[str, Any]:
    """Convert string references in a criteria dict to ObjectIds."""
    query: dict[str, Any] = {}
    for key, value in criteria.items():
        if key == "id":
            query["_id"] = PydanticObjectId(value)
        elif key.endswith("_id") and isinstance(value, str):
            query[key] = PydanticObjectId(value)
        else:
            query[key] = value
    return query


def _sort_spec(sort: str | None) -> list[tuple[str, int]] | None:
    if not sort:
        return None
    direction = -1 if sort.startswith("-") else 1
    return [(sort.lstrip("-+"), direction)]


class BeanieRepository:
    """Repository over one Beanie document class."""

    def __init__(self, document: type[Document]):
        self.document = document

    async def list_all(self, sort: str | None = None) -> list[Row]:
        return await self.find(sort=sort)

    async def get(self, row_id: str) -> Row | None:
        try:
            doc = await self.document.get(PydanticObjectId(row_id))
        except InvalidId:
            return None
        return document_to_row(doc) if doc else None

    async def find(self, sort: str | None = None, **criteria: Any) -> list[Row]:
        try:
            query = self.document.find(_to_query(criteria))
        except InvalidId:
            return []
        spec = _sort_spec(sort)
        if spec:
            query = query.sort(spec)
        return [document_to_row(doc) for doc in await query.to_list()]

    async def find_one(self, **criteria: Any) -> Row | None:
        try:
            doc = await self.document.find_one(_to_query(criteria))
        except InvalidId:
            return None
        return document_to_row(doc) if doc else None

    async def list_range(
        self,
        field: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Row]:
        bounds: dict[str, datetime] = {}
        if start is not None:
            bounds["$gte"] = start
        if end is not None:
            bounds["$lte"] = end
        query = {field: bounds} if bounds else {}
        docs = await self.document.find(query).sort([(field, 1)]).to_list()
        return [document_to_row(doc) for doc in docs]

    async def insert(self, data: Row) -> Row:
        doc = self.document(**data)
        await doc.insert()
        return document_to_row(doc)

    async def update(self, row_id: str, changes: Row) -> Row | None:
        try:
            doc = await self.document.get(PydanticObjectId(row_id))
        except InvalidId:
            return None
        if doc is None:
            return None
        await doc.set(_to_query(changes))
        return document_to_row(doc)

    async def delete(self, row_id: str) -> bool:
        try:
            doc = await self.document.get(PydanticObjectId(row_id))
        except InvalidId:
            return False
        if doc is None:
            return False
        await doc.delete()
        return True


def get_beanie_repositories() -> Repositories:
    """Build the production repositories (requires ``init_db``)."""
    return Repositories(
        equipment=BeanieRepository(Equipment),
        suppliers=BeanieRepository(Supplier),
        readers=BeanieRepository(Reader),
        movements=BeanieRepository(InventoryMovement),
        orders=BeanieRepository(Order),
        order_batches=BeanieRepository(OrderBatch),
        maintenance=BeanieRepository(MaintenanceRecord),
        import_history=BeanieRepository(ImportHistory),
        report_history=BeanieRepository(ReportHistory),
    )

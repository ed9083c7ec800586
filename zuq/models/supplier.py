"""Supplier document model."""

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class Supplier(Document):
    """A supplier of equipment, identified by its CNPJ."""

    name: Indexed(str)
    cnpj: Optional[Indexed(str)] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    average_delivery_days: Optional[int] = None

    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "suppliers"

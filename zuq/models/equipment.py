"""Equipment document model (catalogue of RFID equipment types)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class EquipmentCategory(str, Enum):
    """Category of an equipment item."""

    LEITORA = "Leitora"
    SENSOR = "Sensor"
    RASTREADOR = "Rastreador"
    ACESSORIO = "Acessório"


class Equipment(Document):
    """An equipment model offered by one or more suppliers."""

    brand: Indexed(str)
    model: Indexed(str)
    category: EquipmentCategory
    average_price: Optional[float] = None
    min_stock: Optional[int] = None
    initial_stock: Optional[int] = None
    supplier_id: Optional[PydanticObjectId] = None

    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "equipment"

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, brand={self.brand}, model={self.model})>"

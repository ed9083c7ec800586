"""Inventory movement document model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class MovementType(str, Enum):
    """Direction of a stock movement."""

    ENTRADA = "Entrada"
    SAIDA = "Saída"


class InventoryMovement(Document):
    """A stock entry or exit for an equipment item."""

    equipment_id: Indexed(PydanticObjectId)
    movement_type: MovementType
    quantity: int = Field(gt=0)
    movement_date: Indexed(datetime) = Field(default_factory=utcnow)
    notes: Optional[str] = None

    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "inventory_movements"

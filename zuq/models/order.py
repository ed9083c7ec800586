"""Purchase order and order batch document models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class OrderStatus(str, Enum):
    """Lifecycle status of a purchase order."""

    PENDENTE = "Pendente"
    PARCIALMENTE_RECEBIDO = "Parcialmente Recebido"
    RECEBIDO = "Recebido"
    ARQUIVADO = "Arquivado"


class Order(Document):
    """A purchase order of equipment from a supplier."""

    equipment_id: PydanticObjectId
    supplier_id: PydanticObjectId
    quantity: int = Field(ge=0)
    expected_arrival_date: Optional[str] = None  # ISO YYYY-MM-DD
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDENTE

    created_by: Optional[PydanticObjectId] = None
    created_at: Indexed(datetime) = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "orders"


class OrderBatch(Document):
    """A partial receipt of an order."""

    order_id: Indexed(PydanticObjectId)
    received_quantity: int = Field(gt=0)
    received_date: Optional[str] = None  # ISO YYYY-MM-DD
    shipping_date: Optional[str] = None
    tracking_code: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "order_batches"

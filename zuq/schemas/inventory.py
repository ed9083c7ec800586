"""Pydantic schemas for equipment, stock movements and maintenance."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from zuq.models import EquipmentCategory, MaintenanceStatus, MovementType


class EquipmentCreate(BaseModel):
    """Schema for creating an equipment item."""

    brand: str = Field(..., min_length=1, max_length=255)
    model: str = Field(..., min_length=1, max_length=255)
    category: EquipmentCategory
    average_price: float | None = Field(None, ge=0)
    min_stock: int | None = Field(None, ge=0)
    initial_stock: int | None = Field(None, ge=0)
    supplier_id: str | None = None


class EquipmentUpdate(BaseModel):
    """Schema for updating equipment; only sent fields change."""

    brand: str | None = Field(None, min_length=1, max_length=255)
    model: str | None = Field(None, min_length=1, max_length=255)
    category: EquipmentCategory | None = None
    average_price: float | None = Field(None, ge=0)
    min_stock: int | None = Field(None, ge=0)
    initial_stock: int | None = Field(None, ge=0)
    supplier_id: str | None = None


class EquipmentResponse(BaseModel):
    """Equipment with its current stock."""

    id: str
    brand: str
    model: str
    category: str
    average_price: float | None = None
    min_stock: int | None = None
    initial_stock: int | None = None
    supplier_id: str | None = None
    stock: int = 0
    created_at: datetime


class MovementCreate(BaseModel):
    """Schema for recording a stock entry or exit."""

    equipment_id: str
    movement_type: MovementType
    quantity: int = Field(..., gt=0)
    movement_date: datetime | None = None
    notes: str | None = Field(None, max_length=2000)


class MovementUpdate(BaseModel):
    equipment_id: str | None = None
    movement_type: MovementType | None = None
    quantity: int | None = Field(None, gt=0)
    movement_date: datetime | None = None
    notes: str | None = Field(None, max_length=2000)


class MovementResponse(BaseModel):
    id: str
    equipment_id: str
    movement_type: str
    quantity: int
    movement_date: datetime
    notes: str | None = None
    created_at: datetime


class MaintenanceCreate(BaseModel):
    """Schema for sending equipment to maintenance."""

    equipment_id: str
    quantity: int = Field(1, gt=0)
    send_date: datetime | None = None
    expected_completion_date: date | None = None
    status: MaintenanceStatus = MaintenanceStatus.EM_ANDAMENTO
    notes: str | None = Field(None, max_length=2000)
    technician_notes: str | None = Field(None, max_length=2000)


class MaintenanceUpdate(BaseModel):
    equipment_id: str | None = None
    quantity: int | None = Field(None, gt=0)
    send_date: datetime | None = None
    expected_completion_date: date | None = None
    completion_date: date | None = None
    status: MaintenanceStatus | None = None
    notes: str | None = Field(None, max_length=2000)
    technician_notes: str | None = Field(None, max_length=2000)


class MaintenanceResponse(BaseModel):
    id: str
    equipment_id: str
    quantity: int
    send_date: datetime
    expected_completion_date: str | None = None
    completion_date: str | None = None
    status: str
    notes: str | None = None
    technician_notes: str | None = None
    created_at: datetime


def to_row(
    payload: BaseModel,
    partial: bool = False,
    nullable: frozenset[str] = frozenset(),
) -> dict[str, Any]:
    """Convert a request body to a repository row.

    Enums become their values, dates become ISO strings and aware
    datetimes become naive UTC. With ``partial`` only the fields the
    client sent are kept, and ``None`` is dropped unless the field is
    listed in ``nullable``.
    """
    data = payload.model_dump(exclude_unset=partial)
    row: dict[str, Any] = {}
    for key, value in data.items():
        if value is None and partial and key not in nullable:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
        elif isinstance(value, date):
            value = value.isoformat()
        row[key] = value
    return row

"""Maintenance record document model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class MaintenanceStatus(str, Enum):
    """Status of a maintenance record."""

    EM_ANDAMENTO = "Em Andamento"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"
    AGUARDANDO_PECAS = "Aguardando Peças"


class MaintenanceRecord(Document):
    """Equipment sent out for maintenance."""

    equipment_id: PydanticObjectId
    quantity: int = 1
    send_date: Indexed(datetime) = Field(default_factory=utcnow)
    expected_completion_date: Optional[str] = None
    completion_date: Optional[str] = None
    status: MaintenanceStatus = MaintenanceStatus.EM_ANDAMENTO
    notes: Optional[str] = None
    technician_notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "maintenance_records"

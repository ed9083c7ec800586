"""Reader document model (individually serialized RFID readers)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class ReaderStatus(str, Enum):
    """Operational status of a reader."""

    DISPONIVEL = "Disponível"
    EM_USO = "Em Uso"
    EM_MANUTENCAO = "Em Manutenção"


class ReaderCondition(str, Enum):
    """Physical condition of a reader."""

    NOVO = "Novo"
    RECONDICIONADO = "Recondicionado"


class Reader(Document):
    """A single reader unit, tracked by its code."""

    code: Indexed(str)
    equipment_id: PydanticObjectId
    status: ReaderStatus = ReaderStatus.DISPONIVEL
    condition: ReaderCondition = ReaderCondition.NOVO
    acquisition_date: Optional[str] = None  # ISO YYYY-MM-DD

    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "readers"

"""ImportHistory document model for tracking bulk imports."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from zuq.models.base import utcnow


class ImportDataType(str, Enum):
    """Kind of data carried by an import file."""

    EQUIPAMENTOS = "equipamentos"
    FORNECEDORES = "fornecedores"
    LEITORAS = "leitoras"
    MOVIMENTACOES = "movimentacoes"
    PEDIDOS = "pedidos"


class ImportStatus(str, Enum):
    """Status of an import."""

    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class ImportHistory(Document):
    """One bulk import run and its outcome."""

    user_id: Indexed(PydanticObjectId)
    data_type: ImportDataType
    original_filename: str
    total_records: int = 0
    processed_records: int = 0
    failed_records: int = 0
    status: ImportStatus = ImportStatus.PENDING
    error_details: Optional[list[dict[str, Any]]] = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    class Settings:
        name = "import_history"

"""MongoDB document models for ZUQ."""

from zuq.models.equipment import Equipment, EquipmentCategory
from zuq.models.supplier import Supplier
from zuq.models.reader import Reader, ReaderCondition, ReaderStatus
from zuq.models.movement import InventoryMovement, MovementType
from zuq.models.order import Order, OrderBatch, OrderStatus
from zuq.models.maintenance import MaintenanceRecord, MaintenanceStatus
from zuq.models.import_history import ImportDataType, ImportHistory, ImportStatus
from zuq.models.report_history import ReportHistory, ReportStatus
from zuq.models.user import User

__all__ = [
    # Inventory documents
    "Equipment",
    "Supplier",
    "Reader",
    "InventoryMovement",
    "Order",
    "OrderBatch",
    "MaintenanceRecord",
    # Bookkeeping documents
    "ImportHistory",
    "ReportHistory",
    "User",
    # Enums
    "EquipmentCategory",
    "ReaderStatus",
    "ReaderCondition",
    "MovementType",
    "OrderStatus",
    "MaintenanceStatus",
    "ImportDataType",
    "ImportStatus",
    "ReportStatus",
]

"""API routers for ZUQ."""

from zuq.routers import (
    auth,
    equipment,
    export,
    import_router,
    maintenance,
    movements,
    orders,
    reports,
)

__all__ = [
    "auth",
    "equipment",
    "export",
    "import_router",
    "maintenance",
    "movements",
    "orders",
    "reports",
]

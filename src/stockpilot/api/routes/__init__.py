"""API route modules."""

from stockpilot.api.routes.archive import router as archive_router
from stockpilot.api.routes.health import router as health_router
from stockpilot.api.routes.items import router as items_router
from stockpilot.api.routes.reports import router as reports_router
from stockpilot.api.routes.suggestions import router as suggestions_router
from stockpilot.api.routes.warehouses import router as warehouses_router

__all__ = [
    "health_router",
    "warehouses_router",
    "items_router",
    "reports_router",
    "archive_router",
    "suggestions_router",
]

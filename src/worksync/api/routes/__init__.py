"""API routes."""

from worksync.api.routes.employees import router as employees_router
from worksync.api.routes.health import router as health_router
from worksync.api.routes.payments import router as payments_router
from worksync.api.routes.worksheets import router as worksheets_router

__all__ = ["employees_router", "health_router", "payments_router", "worksheets_router"]

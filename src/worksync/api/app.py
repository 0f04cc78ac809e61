"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from worksync import __version__
from worksync.api.routes import (
    employees_router,
    health_router,
    payments_router,
    worksheets_router,
)
from worksync.config import Settings, get_settings
from worksync.database import Database
from worksync.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
    WorkSyncError,
)
from worksync.payroll import Payroll

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[WorkSyncError], int] = {
    ValidationError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_status(exc: WorkSyncError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Pass ``database`` to share an already-constructed store (tests do);
    otherwise one is built from ``settings.database_url``. The store is
    disposed on shutdown only when the app built it.
    """
    settings = settings or get_settings()
    owns_database = database is None
    payroll = Payroll(database or Database(settings.database_url, echo=settings.debug), settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        await payroll.start()
        yield
        if owns_database:
            await payroll.close()

    app = FastAPI(
        title="WorkSync Payroll API",
        description="Worksheet reconciliation and payment settlement",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.payroll = payroll

    # Exception handlers
    @app.exception_handler(WorkSyncError)
    async def worksync_exception_handler(
        request: Request, exc: WorkSyncError
    ) -> JSONResponse:
        """Map domain errors to HTTP responses."""
        code = error_status(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=code,
            content={"detail": str(exc), "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(worksheets_router, prefix="/api/v1")
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(payments_router, prefix="/api/v1")

    return app

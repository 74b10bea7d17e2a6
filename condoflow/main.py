"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from condoflow.api.routes import (
    auth,
    dashboard,
    health,
    readings,
    registrations,
    reports,
    units,
)
from condoflow.core.config import settings
from condoflow.core.database import Base, engine
from condoflow.core.logging_config import configure_logging

# Import models for Base.metadata.create_all
from condoflow.models import (  # noqa: F401
    Reading,
    RegistrationRequest,
    Unit,
    User,
)
from condoflow.services.reports import EmptyReportError
from condoflow.store.base import RecordStoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging()
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Condominium water and gas meter reading tracker",
    lifespan=lifespan,
)


@app.exception_handler(RecordStoreError)
async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    """Failed writes surface the backend's message as-is."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


@app.exception_handler(EmptyReportError)
async def empty_report_handler(request: Request, exc: EmptyReportError) -> JSONResponse:
    logger.info("No readings for report %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message},
    )


@app.get("/")
def root():
    """Service banner."""
    return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}


# Include API routers; the public intake goes before the guarded registration routes
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api")
app.include_router(registrations.public_router, prefix="/api")
app.include_router(registrations.router, prefix="/api")
app.include_router(units.router, prefix="/api")
app.include_router(readings.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(reports.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "condoflow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )

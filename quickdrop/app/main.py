"""
FastAPI Application Entry Point.

This is the main application file for the QuickDrop parcel backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from quickdrop.app.core.config import settings
from quickdrop.app.core.observability import ObservabilityMiddleware, configure_logging
from quickdrop.app.api.v1.router import router as api_v1_router
from quickdrop.app.db.session import init_db, close_db
from quickdrop.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from quickdrop.app.models.user import User  # noqa: F401
from quickdrop.app.models.rider import Rider  # noqa: F401
from quickdrop.app.models.parcel import Parcel  # noqa: F401
from quickdrop.app.models.payment import Payment  # noqa: F401
from quickdrop.app.models.earning import Earning  # noqa: F401
from quickdrop.app.models.audit_log import AuditLog  # noqa: F401

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.
    
    1. Creates database tables on startup.
    2. Disposes the engine on shutdown.
    """
    await init_db()
    logger.info("%s started", settings.app_name)
    yield
    await close_db()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel lifecycle, dispatch and rider settlement API",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    
    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.
    
    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "QuickDrop API is running",
        "docs": "/docs",
        "health": "/health",
    }

"""
FastAPI application factory.

Creates and configures the FastAPI app with:
- CORS middleware
- Route registration
- Exception handlers (workflow errors and unhandled exceptions)
- Startup/shutdown events
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blotter.core.config import get_settings
from blotter.core.database import init_db
from blotter.core.workflow.errors import (
    ConflictError,
    InvalidTransitionError,
    MissingDecisionError,
    NotFoundError,
    ValidationError,
    WorkflowError,
)

logger = logging.getLogger(__name__)
settings = get_settings()

ERROR_STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidTransitionError: 409,
    MissingDecisionError: 422,
    ValidationError: 422,
}


def error_status_code(exc: WorkflowError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Barangay Blotter API")
    logger.info(f"Case numbers: {settings.case_number_prefix}-<year>-<seq>")

    # Initialize database tables
    try:
        init_db()
    except Exception as e:
        logger.warning(f"Database init warning: {e}")

    yield

    # Shutdown
    logger.info("Shutting down API")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title="Barangay Blotter API",
        description="Blotter case filing and Katarungang Pambarangay workflow",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from blotter.api.routes import cases, health, hearings

    app.include_router(health.router, tags=["health"])
    app.include_router(cases.router, prefix="/api/cases", tags=["cases"])
    app.include_router(hearings.router, prefix="/api", tags=["hearings"])

    @app.exception_handler(WorkflowError)
    async def workflow_exception_handler(request: Request, exc: WorkflowError):
        status_code = error_status_code(exc)
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.detail}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.detail, "error_code": exc.error_code},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_code": "internal_error"},
        )

    return app


# Create default app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "blotter.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )

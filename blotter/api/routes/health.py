"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, text

from blotter.api.dependencies import get_db
from blotter.core.config import get_settings
from blotter.core.models.case import BlotterCase

router = APIRouter()


@router.get("/health")
def health_check():
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Detailed health check including database and configuration.
    """
    settings = get_settings()

    # Check database
    db_status = "healthy"
    case_count = None
    try:
        db.execute(text("SELECT 1"))
        case_count = db.query(func.count(BlotterCase.id)).scalar()
    except Exception as e:
        db_status = f"unhealthy: {e}"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "database": db_status,
        "database_backend": "sqlite" if settings.is_sqlite else "postgresql",
        "cases": case_count,
        "case_number_prefix": settings.case_number_prefix,
        "default_filing_fee": settings.default_filing_fee,
    }


@router.get("/")
def root():
    """API root - redirects to docs."""
    return {
        "name": "Barangay Blotter API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }

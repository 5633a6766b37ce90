"""
FastAPI dependencies.

Provides dependency injection for:
- Database sessions
- Authentication/authorization
- Configuration
- The acting user recorded on status updates
"""

from typing import Optional

from fastapi import Depends, HTTPException, Header, status
from sqlalchemy.orm import Session

from blotter.core.config import get_settings, Settings
from blotter.core.database import get_db
from blotter.core.services.case_service import CaseService
from blotter.core.services.hearing_service import HearingService


def get_settings_dep() -> Settings:
    """Settings dependency."""
    return get_settings()


def get_case_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> CaseService:
    return CaseService(db, settings)


def get_hearing_service(db: Session = Depends(get_db)) -> HearingService:
    return HearingService(db)


def get_actor(
    x_actor_id: Optional[str] = Header(None, alias="X-Actor-Id"),
    settings: Settings = Depends(get_settings_dep),
) -> str:
    """User recorded on status updates; falls back to settings.default_actor."""
    if x_actor_id and x_actor_id.strip():
        return x_actor_id.strip()
    return settings.default_actor


async def require_admin(
    x_api_key: str = Header(None, alias="X-API-Key"),
    authorization: str = Header(None),
    settings: Settings = Depends(get_settings_dep),
) -> bool:
    """
    Admin authentication dependency.

    Checks for valid admin API key in:
    - X-API-Key header
    - Authorization: Bearer <key> header

    Usage:
        @router.post("/{case_id}/status")
        def change_status(_: bool = Depends(require_admin)):
            ...
    """
    api_key = x_api_key

    # Also check Authorization header
    if not api_key and authorization:
        if authorization.startswith("Bearer "):
            api_key = authorization[7:]

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if api_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return True

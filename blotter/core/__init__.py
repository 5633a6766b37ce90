"""
Core module - shared functionality for the blotter service.

Provides:
- Configuration management
- Database connection and session handling
- ORM models
- Case workflow engine
- Case and hearing services
"""

from blotter.core.config import Settings, get_settings
from blotter.core.database import get_db, init_db, engine

__all__ = [
    "Settings",
    "get_settings",
    "get_db",
    "init_db",
    "engine",
]

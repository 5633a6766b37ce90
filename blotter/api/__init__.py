"""
API module - FastAPI application.

Provides REST API for:
- Public endpoints: cases, history, transition options, display steps, hearings
- Admin endpoints: filing, status transitions, filing fee, certification
"""

from blotter.api.main import create_app, app

__all__ = ["create_app", "app"]

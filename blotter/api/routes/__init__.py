"""
API routes.
"""

from blotter.api.routes import health, cases, hearings

__all__ = ["health", "cases", "hearings"]

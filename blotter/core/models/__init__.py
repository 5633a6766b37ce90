"""
Database models for blotter cases and their audit trail.
"""

from blotter.core.models.base import Base, TimestampMixin, GUID
from blotter.core.models.case import BlotterCase
from blotter.core.models.party import BlotterParty
from blotter.core.models.status_update import StatusUpdate
from blotter.core.models.hearing import Hearing

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "GUID",
    # Models
    "BlotterCase",
    "BlotterParty",
    "StatusUpdate",
    "Hearing",
]

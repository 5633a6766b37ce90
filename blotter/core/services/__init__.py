"""
Core services - persistence and case management on top of the ORM models.

Provides:
- CaseStore: compare-and-set (status and version) writes with their StatusUpdate
- CaseService (blotter.core.services.case_service): filing, listing, fees, CFA
- HearingService (blotter.core.services.hearing_service): hearing schedule

The case and hearing services depend on the workflow engine, which in turn
depends on CaseStore, so they are imported from their modules directly.
"""

from blotter.core.services.case_store import CaseStore, TransitionRecord

__all__ = [
    "CaseStore",
    "TransitionRecord",
]

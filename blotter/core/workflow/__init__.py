"""
Case workflow - status vocabulary, transition rules and errors.

The engine (blotter.core.workflow.engine) and the progress display
(blotter.core.workflow.display) are imported from their modules directly.
"""

from blotter.core.workflow.errors import (
    WorkflowError,
    InvalidTransitionError,
    MissingDecisionError,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from blotter.core.workflow.payload import TransitionPayload
from blotter.core.workflow.statuses import (
    CaseStatus,
    Outcome,
    ResolutionMethod,
    Priority,
    PartyType,
    HearingStatus,
    allowed_next_statuses,
    is_decision_point,
)

__all__ = [
    # Errors
    "WorkflowError",
    "InvalidTransitionError",
    "MissingDecisionError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    # Payload
    "TransitionPayload",
    # Vocabulary
    "CaseStatus",
    "Outcome",
    "ResolutionMethod",
    "Priority",
    "PartyType",
    "HearingStatus",
    "allowed_next_statuses",
    "is_decision_point",
]

"""
API schemas - Pydantic models for request/response validation.
"""

from blotter.api.schemas.common import PaginatedResponse, ErrorResponse
from blotter.api.schemas.case import (
    PartyCreate,
    PartyResponse,
    CaseCreate,
    CaseResponse,
    CaseDetail,
    CaseListResponse,
    StatusCountResponse,
    StatusUpdateResponse,
    TransitionOptionsResponse,
    DisplayStepResponse,
    FilingFeeRequest,
    CertificationResponse,
)
from blotter.api.schemas.hearing import (
    HearingCreate,
    HearingUpdate,
    HearingResponse,
    HearingListResponse,
)

__all__ = [
    # Common
    "PaginatedResponse",
    "ErrorResponse",
    # Case
    "PartyCreate",
    "PartyResponse",
    "CaseCreate",
    "CaseResponse",
    "CaseDetail",
    "CaseListResponse",
    "StatusCountResponse",
    "StatusUpdateResponse",
    "TransitionOptionsResponse",
    "DisplayStepResponse",
    "FilingFeeRequest",
    "CertificationResponse",
    # Hearing
    "HearingCreate",
    "HearingUpdate",
    "HearingResponse",
    "HearingListResponse",
]

"""
Hearing API routes.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from blotter.api.dependencies import get_hearing_service, require_admin
from blotter.api.schemas.common import ERROR_RESPONSES
from blotter.api.schemas.hearing import (
    HearingCreate,
    HearingListResponse,
    HearingResponse,
    HearingUpdate,
)
from blotter.core.services.hearing_service import HearingService
from blotter.core.workflow.statuses import HearingStatus

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/cases/{case_id}/hearings", response_model=HearingListResponse)
def list_hearings(
    case_id: UUID,
    status: Optional[HearingStatus] = Query(None, description="Filter by hearing status"),
    service: HearingService = Depends(get_hearing_service),
):
    """Hearings of a case in schedule order."""
    hearings = service.list_hearings(case_id, status=status)
    return HearingListResponse(
        items=[HearingResponse.model_validate(h) for h in hearings],
        total=len(hearings),
    )


@router.post("/cases/{case_id}/hearings", response_model=HearingResponse, status_code=201)
def schedule_hearing(
    case_id: UUID,
    data: HearingCreate,
    service: HearingService = Depends(get_hearing_service),
    _: bool = Depends(require_admin),
):
    """Schedule a mediation or conciliation hearing."""
    hearing = service.schedule_hearing(
        case_id,
        hearing_date=data.hearing_date,
        hearing_time=data.hearing_time,
        location=data.location,
        notes=data.notes,
    )
    return HearingResponse.model_validate(hearing)


@router.patch("/hearings/{hearing_id}", response_model=HearingResponse)
def update_hearing(
    hearing_id: UUID,
    data: HearingUpdate,
    service: HearingService = Depends(get_hearing_service),
    _: bool = Depends(require_admin),
):
    """Mark a hearing completed, cancelled or rescheduled."""
    hearing = service.update_hearing(
        hearing_id,
        status=data.status,
        notes=data.notes,
        hearing_date=data.hearing_date,
        hearing_time=data.hearing_time,
    )
    return HearingResponse.model_validate(hearing)

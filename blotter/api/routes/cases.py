"""
Blotter case API routes.

Workflow errors raised here (not found, conflict, invalid transition,
missing decision, validation) are turned into responses by the handler
registered in blotter.api.main.
"""

from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query

from blotter.api.dependencies import get_actor, get_case_service, require_admin
from blotter.api.schemas.case import (
    CaseCreate,
    CaseDetail,
    CaseListResponse,
    CaseResponse,
    CertificationResponse,
    DisplayStepResponse,
    FieldRuleResponse,
    FilingFeeRequest,
    StatusCountResponse,
    StatusUpdateResponse,
    TransitionOption,
    TransitionOptionsResponse,
)
from blotter.api.schemas.common import ERROR_RESPONSES
from blotter.core.services.case_service import CaseFilters, CaseService
from blotter.core.workflow.display import compute_display_steps
from blotter.core.workflow.payload import field_alias
from blotter.core.workflow.statuses import (
    CaseStatus,
    FieldRule,
    Priority,
    allowed_next_statuses,
    decision_point,
    entry_rule,
    exit_rule,
    status_label,
)
from blotter.core.workflow.engine import WorkflowEngine

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("", response_model=CaseListResponse)
def list_cases(
    status: Optional[CaseStatus] = Query(None, description="Filter by status"),
    priority: Optional[Priority] = Query(None, description="Filter by priority"),
    incident_type: Optional[str] = Query(None, description="Filter by incident type"),
    start_date: Optional[date] = Query(None, description="Incidents on or after"),
    end_date: Optional[date] = Query(None, description="Incidents on or before"),
    search: Optional[str] = Query(None, description="Search case number, incident and party names"),
    limit: int = Query(50, le=200),
    offset: int = Query(0, ge=0),
    service: CaseService = Depends(get_case_service),
):
    """
    List cases with optional filters.

    Newest reports first.
    """
    filters = CaseFilters(
        status=status,
        priority=priority,
        incident_type=incident_type,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    cases, total = service.list_cases(filters, limit=limit, offset=offset)

    return CaseListResponse(
        items=[CaseResponse.model_validate(c) for c in cases],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=CaseDetail, status_code=201)
def create_case(
    data: CaseCreate,
    service: CaseService = Depends(get_case_service),
    _: bool = Depends(require_admin),
):
    """File a new blotter case. The case starts in FILED."""
    case = service.create_case(data.model_dump())
    return CaseDetail.model_validate(case)


@router.get("/summary", response_model=StatusCountResponse)
def case_summary(service: CaseService = Depends(get_case_service)):
    """Case counts per status."""
    counts = service.status_summary()
    return StatusCountResponse(total=sum(counts.values()), by_status=counts)


@router.get("/by-number/{case_number}", response_model=CaseDetail)
def get_case_by_number(
    case_number: str,
    service: CaseService = Depends(get_case_service),
):
    """Get a case by its display number, e.g. BLT-2024-0001."""
    return CaseDetail.model_validate(service.get_case_by_number(case_number))


@router.get("/{case_id}", response_model=CaseDetail)
def get_case(
    case_id: UUID,
    service: CaseService = Depends(get_case_service),
):
    """Get case by ID with stage fields and parties."""
    return CaseDetail.model_validate(service.get_case(case_id))


@router.get("/{case_id}/history", response_model=list[StatusUpdateResponse])
def get_case_history(
    case_id: UUID,
    service: CaseService = Depends(get_case_service),
):
    """Status updates of a case, oldest first."""
    return [StatusUpdateResponse.model_validate(u) for u in service.get_history(case_id)]


@router.get("/{case_id}/transitions", response_model=TransitionOptionsResponse)
def get_transition_options(
    case_id: UUID,
    service: CaseService = Depends(get_case_service),
):
    """
    Statuses the case may move to next and the fields each one asks for.

    For decision points (MEDIATION, CONCILIATION) the outcome field decides
    the resulting status.
    """
    case = service.get_case(case_id)
    current = case.case_status
    allowed = allowed_next_statuses(current)
    point = decision_point(current)

    options = [
        TransitionOption(
            status=next_status,
            label=status_label(next_status),
            fields=_rule_response(entry_rule(next_status)),
        )
        for next_status in CaseStatus
        if next_status in allowed
    ]

    return TransitionOptionsResponse(
        case_id=case.id,
        status=current,
        decision_point=point is not None,
        outcome_field=field_alias(point.outcome_field) if point else None,
        exit_fields=_rule_response(exit_rule(current)),
        options=options,
    )


@router.get("/{case_id}/steps", response_model=list[DisplayStepResponse])
def get_display_steps(
    case_id: UUID,
    service: CaseService = Depends(get_case_service),
):
    """Progress bar steps derived from the case's status and stage dates."""
    case = service.get_case(case_id)
    return [DisplayStepResponse.model_validate(step) for step in compute_display_steps(case)]


@router.post("/{case_id}/status", response_model=CaseDetail)
def change_status(
    case_id: UUID,
    body: Dict[str, Any] = Body(..., examples=[{
        "status": "DOCKETED",
        "expectedStatus": "FILED",
        "expectedVersion": 1,
        "docketDate": "2024-01-10",
        "remarks": "Received in docket",
    }]),
    service: CaseService = Depends(get_case_service),
    actor: str = Depends(get_actor),
    _: bool = Depends(require_admin),
):
    """
    Propose a status transition.

    The body carries the selected `status`, the `expectedStatus` and
    `expectedVersion` the caller last saw, optional `remarks` and the stage
    fields of the transition.
    """
    payload = dict(body)
    requested = payload.pop("status", None)

    engine = WorkflowEngine(service.db, service.settings)
    case = engine.propose_transition(
        case_id,
        requested_status=requested,
        payload=payload,
        actor=actor,
    )
    return CaseDetail.model_validate(case)


@router.patch("/{case_id}/filing-fee", response_model=CaseDetail)
def confirm_filing_fee(
    case_id: UUID,
    data: Optional[FilingFeeRequest] = None,
    service: CaseService = Depends(get_case_service),
    actor: str = Depends(get_actor),
    _: bool = Depends(require_admin),
):
    """Mark the filing fee paid (docketing a FILED case) or unpaid."""
    data = data or FilingFeeRequest()
    case = service.confirm_filing_fee(
        case_id,
        paid=data.paid,
        actor=actor,
        expected_status=data.expected_status,
        expected_version=data.expected_version,
    )
    return CaseDetail.model_validate(case)


@router.post("/{case_id}/certificate", response_model=CertificationResponse)
def issue_certificate(
    case_id: UUID,
    service: CaseService = Depends(get_case_service),
    actor: str = Depends(get_actor),
    _: bool = Depends(require_admin),
):
    """Issue the Certification to File Action, or return the one already issued."""
    certification = service.issue_certification(case_id, actor=actor)
    return CertificationResponse.model_validate(certification)


def _rule_response(rule: FieldRule) -> FieldRuleResponse:
    return FieldRuleResponse(
        required=[field_alias(name) for name in rule.required],
        optional=[field_alias(name) for name in rule.optional],
    )

"""
Blotter case schemas for API requests/responses.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from blotter.api.schemas.common import PaginatedResponse
from blotter.core.workflow.statuses import CaseStatus, PartyType, Priority


class PartyCreate(BaseModel):
    """Complainant, respondent or witness on a new case."""
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1)
    contact_number: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    is_resident: bool = False


class PartyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    party_type: PartyType
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    full_name: str
    address: str
    contact_number: Optional[str] = None
    email: Optional[str] = None
    is_resident: bool = False


class CaseCreate(BaseModel):
    """New blotter entry. The case starts in FILED."""
    incident_type: str = Field(..., min_length=1, max_length=100)
    incident_date: date
    incident_time: Optional[str] = Field(None, max_length=20)
    incident_location: str = Field(..., min_length=1)
    incident_description: str = Field(..., min_length=1)
    report_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    filing_fee: Optional[float] = Field(None, ge=0)

    complainant: PartyCreate
    respondent: Optional[PartyCreate] = None
    witnesses: List[PartyCreate] = Field(default_factory=list)


class CaseResponse(BaseModel):
    """Case summary for list views."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    case_number: str
    status: CaseStatus
    version: int = 1
    priority: Priority
    incident_type: str
    incident_date: date
    incident_location: str
    report_date: date
    filing_fee: Optional[float] = None
    filing_fee_paid: bool = False


class CaseDetail(CaseResponse):
    """Full case with stage fields and parties."""
    incident_time: Optional[str] = None
    incident_description: str

    docket_date: Optional[date] = None
    summon_date: Optional[date] = None
    mediation_start_date: Optional[date] = None
    mediation_end_date: Optional[date] = None
    conciliation_start_date: Optional[date] = None
    conciliation_end_date: Optional[date] = None
    extension_date: Optional[date] = None
    certification_date: Optional[date] = None

    resolution_method: Optional[str] = None
    escalated_to: Optional[str] = None

    parties: List[PartyResponse] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CaseListResponse(PaginatedResponse[CaseResponse]):
    """Paginated list of cases."""
    pass


class StatusCountResponse(BaseModel):
    """Number of cases per status."""
    total: int
    by_status: Dict[str, int]


class StatusUpdateResponse(BaseModel):
    """One entry of a case's history."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sequence: int
    from_status: CaseStatus
    requested_status: CaseStatus
    status: CaseStatus
    actor: str
    remarks: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


class FieldRuleResponse(BaseModel):
    required: List[str]
    optional: List[str]


class TransitionOption(BaseModel):
    """A status the case may move to next, with the fields it needs."""
    status: CaseStatus
    label: str
    fields: FieldRuleResponse


class TransitionOptionsResponse(BaseModel):
    case_id: UUID
    status: CaseStatus
    decision_point: bool
    outcome_field: Optional[str] = None
    exit_fields: FieldRuleResponse
    options: List[TransitionOption]


class DisplayStepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: int
    label: str
    completed: bool
    current: bool
    skipped: bool
    decision_point: bool = False
    description: str = ""


class FilingFeeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    paid: bool = True
    expected_status: Optional[CaseStatus] = Field(None, alias="expectedStatus")
    expected_version: Optional[int] = Field(None, alias="expectedVersion", ge=1)


class CertificationResponse(BaseModel):
    """Certification to File Action data."""
    model_config = ConfigDict(from_attributes=True)

    case_id: UUID
    case_number: str
    complainant_name: Optional[str] = None
    complainant_address: Optional[str] = None
    respondent_name: Optional[str] = None
    respondent_address: Optional[str] = None
    issued_on: date
    valid_until: date

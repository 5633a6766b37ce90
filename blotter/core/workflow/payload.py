"""
Transition payload submitted with a status change.

Callers send camelCase keys (filingFee, docketDate, mediationOutcome, ...);
snake_case names are accepted too. Type coercion happens here; which fields
are required is decided by the engine from the transition table.
"""

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from blotter.core.workflow.errors import ValidationError
from blotter.core.workflow.statuses import DATE_FIELDS, CaseStatus, ResolutionMethod


class TransitionPayload(BaseModel):
    """Fields that may accompany a status transition."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    status: Optional[CaseStatus] = None
    expected_status: Optional[CaseStatus] = Field(None, alias="expectedStatus")
    expected_version: Optional[int] = Field(None, alias="expectedVersion", ge=1)
    remarks: Optional[str] = None

    # Filing
    filing_fee: Optional[float] = Field(None, alias="filingFee", ge=0)
    filing_fee_paid: Optional[bool] = Field(None, alias="filingFeePaid")

    # Stage dates
    docket_date: Optional[date] = Field(None, alias="docketDate")
    summon_date: Optional[date] = Field(None, alias="summonDate")
    mediation_start_date: Optional[date] = Field(None, alias="mediationStartDate")
    mediation_end_date: Optional[date] = Field(None, alias="mediationEndDate")
    conciliation_start_date: Optional[date] = Field(None, alias="conciliationStartDate")
    conciliation_end_date: Optional[date] = Field(None, alias="conciliationEndDate")
    extension_date: Optional[date] = Field(None, alias="extensionDate")
    certification_date: Optional[date] = Field(None, alias="certificationDate")

    # Decision outcomes; checked by the engine so a bad value is a missing decision
    mediation_outcome: Optional[str] = Field(None, alias="mediationOutcome")
    conciliation_outcome: Optional[str] = Field(None, alias="conciliationOutcome")

    # Terminal details
    resolution_method: Optional[ResolutionMethod] = Field(None, alias="resolutionMethod")
    escalated_to: Optional[str] = Field(None, alias="escalatedToEnt")

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data: Any) -> Any:
        # HTML forms submit "" for untouched inputs
        if isinstance(data, Mapping):
            return {
                key: (None if isinstance(value, str) and not value.strip() else value)
                for key, value in data.items()
            }
        return data

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def datetime_to_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("resolution_method", "mediation_outcome", "conciliation_outcome", mode="before")
    @classmethod
    def upper_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @classmethod
    def parse(cls, data: Optional[Mapping[str, Any]]) -> "TransitionPayload":
        """Build a payload, converting type errors into a workflow ValidationError."""
        try:
            return cls.model_validate(dict(data or {}))
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            loc = first.get("loc") or ("payload",)
            raise ValidationError(field_alias(str(loc[0])), first.get("msg", "invalid value")) from exc

    def supplied(self, name: str) -> bool:
        return getattr(self, name, None) is not None

    def snapshot(self, names) -> Dict[str, Any]:
        """JSON-safe dict of the supplied fields among `names`, keyed by alias."""
        result: Dict[str, Any] = {}
        for name in names:
            value = getattr(self, name, None)
            if value is None:
                continue
            if isinstance(value, date):
                value = value.isoformat()
            elif hasattr(value, "value"):
                value = value.value
            result[field_alias(name)] = value
        return result


def field_alias(name: str) -> str:
    """Wire name (camelCase) of a payload field."""
    field = TransitionPayload.model_fields.get(name)
    if field is not None and field.alias:
        return field.alias
    return name

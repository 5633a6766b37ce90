"""
Case workflow engine.

Decides whether a requested status change is allowed, which status the case
really moves to, and which payload fields are captured; then persists the
result through the case store.

Pure pieces (no database access):
- resolve_effective_status(current, requested, outcome)
- validate_transition(case, requested, payload) -> TransitionPlan

Persisting piece:
- WorkflowEngine(db).propose_transition(case_id, requested_status, payload)
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from blotter.core.config import Settings, get_settings
from blotter.core.models.case import BlotterCase
from blotter.core.services.case_store import CaseStore, TransitionRecord
from blotter.core.workflow.errors import (
    ConflictError,
    InvalidTransitionError,
    MissingDecisionError,
    ValidationError,
    WorkflowError,
)
from blotter.core.workflow.payload import TransitionPayload, field_alias
from blotter.core.workflow.statuses import (
    DATE_FIELDS,
    DATE_RANGES,
    DECISION_POINTS,
    LEGACY_STATUSES,
    OUTCOME_FIELDS,
    CaseStatus,
    Outcome,
    allowed_next_statuses,
    entry_rule,
    exit_rule,
)

logger = logging.getLogger(__name__)


@dataclass
class TransitionPlan:
    """Validated outcome of a transition request, ready to persist."""
    current: CaseStatus
    requested: CaseStatus
    effective: CaseStatus
    changes: Dict[str, Any] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)
    remarks: Optional[str] = None


def resolve_effective_status(
    current: CaseStatus,
    requested: CaseStatus,
    outcome: Optional[Union[Outcome, str]],
) -> CaseStatus:
    """
    Status a case actually moves to.

    Outside decision points this is the requested status. In MEDIATION and
    CONCILIATION the outcome decides: RESOLVED ends the case, UNRESOLVED
    moves it to the next settlement stage.

    Raises:
        MissingDecisionError: decision point without a RESOLVED/UNRESOLVED outcome
    """
    current = CaseStatus(current)
    requested = CaseStatus(requested)

    point = DECISION_POINTS.get(current)
    if point is None:
        return requested

    alias = field_alias(point.outcome_field)
    if outcome is None:
        raise MissingDecisionError(current, alias)
    try:
        parsed = Outcome(str(getattr(outcome, "value", outcome)).strip().upper())
    except ValueError:
        raise MissingDecisionError(current, alias, outcome)

    return point.destination(parsed)


def validate_transition(
    case: BlotterCase,
    requested: CaseStatus,
    payload: TransitionPayload,
    settings: Optional[Settings] = None,
) -> TransitionPlan:
    """
    Check a transition request against the transition table and field rules.

    Args:
        case: Case in its current persisted state
        requested: Status the caller selected
        payload: Submitted fields
        settings: Date window configuration (defaults to app settings)

    Returns:
        TransitionPlan with the column changes and the audit snapshot

    Raises:
        InvalidTransitionError, MissingDecisionError, ValidationError
    """
    settings = settings or get_settings()
    current = case.case_status
    requested = CaseStatus(requested)

    if requested not in allowed_next_statuses(current):
        raise InvalidTransitionError(current, requested)

    point = DECISION_POINTS.get(current)
    outcome = getattr(payload, point.outcome_field) if point else None
    effective = resolve_effective_status(current, requested, outcome)

    # A stage reached by an UNRESOLVED outcome gets its start date later
    deferred = point is not None and effective == point.unresolved and effective != requested

    entering = entry_rule(effective)
    selected = entry_rule(requested) if requested != effective else None
    leaving = exit_rule(current)

    required: List[str] = []
    if not deferred:
        required.extend(entering.required)
    if selected is not None:
        required.extend(selected.required)
    required.extend(leaving.required)

    applicable: List[str] = []
    for rule in (entering, selected, leaving):
        if rule is None:
            continue
        for name in rule.fields:
            if name in OUTCOME_FIELDS and (point is None or name != point.outcome_field):
                continue
            if name not in applicable:
                applicable.append(name)
    if point is not None and point.outcome_field not in applicable:
        applicable.append(point.outcome_field)

    _check_dates(case, payload, applicable, settings)

    for name in required:
        if not payload.supplied(name) and getattr(case, name, None) is None:
            raise ValidationError(
                field_alias(name),
                f"required to move from {current.value} to {effective.value}",
            )

    changes: Dict[str, Any] = {"status": effective.value}
    for name in applicable:
        if name in OUTCOME_FIELDS or not payload.supplied(name):
            continue
        value = getattr(payload, name)
        changes[name] = getattr(value, "value", value)

    return TransitionPlan(
        current=current,
        requested=requested,
        effective=effective,
        changes=changes,
        details=payload.snapshot(applicable),
        remarks=payload.remarks,
    )


def _check_dates(
    case: BlotterCase,
    payload: TransitionPayload,
    applicable: List[str],
    settings: Settings,
) -> None:
    earliest = settings.earliest_stage_date
    latest = settings.latest_stage_date

    for name in DATE_FIELDS:
        if name not in applicable or not payload.supplied(name):
            continue
        value: date = getattr(payload, name)
        if value < earliest or value > latest:
            raise ValidationError(
                field_alias(name),
                f"{value.isoformat()} is outside {earliest.isoformat()}..{latest.isoformat()}",
            )

    for end_name, start_name in DATE_RANGES.items():
        if end_name not in applicable or not payload.supplied(end_name):
            continue
        start = getattr(payload, start_name) if payload.supplied(start_name) else getattr(case, start_name, None)
        end = getattr(payload, end_name)
        if start is not None and end < start:
            raise ValidationError(
                field_alias(end_name),
                f"{end.isoformat()} is before {field_alias(start_name)} {start.isoformat()}",
            )


class WorkflowEngine:
    """
    Applies status transitions to blotter cases.

    Usage:
        engine = WorkflowEngine(db)
        case = engine.propose_transition(
            case_id,
            CaseStatus.DOCKETED,
            {"docketDate": "2024-01-10"},
            expected_status=CaseStatus.FILED,
            actor="secretary",
        )
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.store = CaseStore(db)

    def propose_transition(
        self,
        case_id,
        requested_status: Optional[Union[CaseStatus, str]] = None,
        payload: Optional[Union[TransitionPayload, Mapping[str, Any]]] = None,
        expected_status: Optional[Union[CaseStatus, str]] = None,
        actor: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> BlotterCase:
        """
        Validate and persist one transition.

        Args:
            case_id: Case to move
            requested_status: Selected next status (defaults to payload.status)
            payload: Stage fields, as TransitionPayload or a mapping of wire names
            expected_status: Status the caller saw as current (defaults to
                payload.expectedStatus, then to the status read now)
            actor: Who made the change (defaults to settings.default_actor)
            expected_version: Case version the caller saw (defaults to
                payload.expectedVersion, then to the version read now)

        Returns:
            The updated case

        Raises:
            NotFoundError, ConflictError, InvalidTransitionError,
            MissingDecisionError, ValidationError
        """
        case = self.store.read_case(case_id)
        if not isinstance(payload, TransitionPayload):
            payload = TransitionPayload.parse(payload)

        current = case.case_status

        try:
            expected = _as_status(expected_status or payload.expected_status or current, "expectedStatus")
            if expected != current:
                raise ConflictError(expected, current)
            version = _first_set(expected_version, payload.expected_version, case.version)
            if version != case.version:
                raise ConflictError(expected, current, version, case.version)

            requested = requested_status if requested_status is not None else payload.status
            if requested is None:
                raise ValidationError("status", "a requested status is required")
            try:
                requested = CaseStatus(getattr(requested, "value", requested))
            except ValueError:
                raise InvalidTransitionError(current, requested)

            if current in LEGACY_STATUSES:
                logger.warning(
                    f"Case {case.case_number}: bridging legacy status {current.value} to {requested.value}"
                )

            plan = validate_transition(case, requested, payload, self.settings)
        except WorkflowError as e:
            logger.info(f"Rejected transition for case {case.case_number}: {e.detail}")
            raise

        record = TransitionRecord(
            from_status=plan.current,
            requested_status=plan.requested,
            status=plan.effective,
            actor=actor or self.settings.default_actor,
            remarks=plan.remarks or f"Case status updated to {plan.effective.value}",
            details=plan.details,
        )
        updated = self.store.write_transition(case.id, expected, plan.changes, record, version)

        logger.info(
            f"Case {updated.case_number}: {plan.current.value} -> {plan.effective.value}"
            + (f" (requested {plan.requested.value})" if plan.requested != plan.effective else "")
        )
        return updated


def _first_set(*values):
    return next(v for v in values if v is not None)


def _as_status(value: Union[CaseStatus, str], name: str) -> CaseStatus:
    try:
        return CaseStatus(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(name, f"unknown status {value!r}")

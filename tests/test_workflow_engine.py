"""
Test WorkflowEngine.propose_transition against the database.
"""

import logging
from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import select, update

from blotter.core.models.case import BlotterCase
from blotter.core.models.status_update import StatusUpdate
from blotter.core.workflow.engine import WorkflowEngine
from blotter.core.workflow.errors import (
    ConflictError,
    InvalidTransitionError,
    MissingDecisionError,
    NotFoundError,
    ValidationError,
)
from blotter.core.workflow.statuses import CaseStatus


def _history(db_session, case):
    return list(db_session.scalars(
        select(StatusUpdate).where(StatusUpdate.case_id == case.id).order_by(StatusUpdate.sequence)
    ))


def test_docket_a_filed_case(db_session, make_case):
    """Test FILED -> DOCKETED with a docket date."""
    case = make_case(CaseStatus.FILED)

    updated = WorkflowEngine(db_session).propose_transition(
        case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-10"}, actor="secretary"
    )

    assert updated.status == "DOCKETED"
    assert updated.docket_date == date(2024, 1, 10)

    history = _history(db_session, case)
    assert len(history) == 1
    assert history[0].from_status == "FILED"
    assert history[0].requested_status == "DOCKETED"
    assert history[0].status == "DOCKETED"
    assert history[0].actor == "secretary"
    assert history[0].sequence == 1
    assert history[0].details == {"docketDate": "2024-01-10"}
    assert history[0].remarks == "Case status updated to DOCKETED"


def test_unresolved_mediation_moves_to_conciliation(db_session, make_case):
    """Test that an UNRESOLVED mediation lands in CONCILIATION, not MEDIATION."""
    case = make_case(CaseStatus.MEDIATION, mediation_start_date=date(2024, 2, 1))

    updated = WorkflowEngine(db_session).propose_transition(
        case.id, CaseStatus.MEDIATION, {"mediationOutcome": "UNRESOLVED"}
    )

    assert updated.status == "CONCILIATION"
    history = _history(db_session, case)
    assert history[-1].requested_status == "MEDIATION"
    assert history[-1].status == "CONCILIATION"
    assert history[-1].actor == "system"


def test_mediation_without_outcome_is_rejected(db_session, make_case):
    """Test that a mediation decision cannot be skipped."""
    case = make_case(CaseStatus.MEDIATION, mediation_start_date=date(2024, 2, 1))

    with pytest.raises(MissingDecisionError):
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.MEDIATION, {"mediationStartDate": "2024-02-01"}
        )

    db_session.refresh(case)
    assert case.status == "MEDIATION"
    assert _history(db_session, case) == []


def test_resolved_conciliation_requires_resolution_method(db_session, make_case):
    """Test that resolving in conciliation needs a resolution method."""
    case = make_case(CaseStatus.CONCILIATION, conciliation_start_date=date(2024, 3, 1))

    with pytest.raises(ValidationError) as exc_info:
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.CONCILIATION, {"conciliationOutcome": "RESOLVED"}
        )

    assert exc_info.value.field == "resolutionMethod"
    db_session.refresh(case)
    assert case.status == "CONCILIATION"
    assert case.resolution_method is None


def test_resolved_conciliation_with_method(db_session, make_case):
    """Test resolving a case during conciliation."""
    case = make_case(CaseStatus.CONCILIATION, conciliation_start_date=date(2024, 3, 1))

    updated = WorkflowEngine(db_session).propose_transition(
        case.id,
        CaseStatus.CONCILIATION,
        {"conciliationOutcome": "RESOLVED", "resolutionMethod": "AMICABLE", "conciliationEndDate": "2024-03-05"},
    )

    assert updated.status == "RESOLVED"
    assert updated.resolution_method == "AMICABLE"
    assert updated.conciliation_end_date == date(2024, 3, 5)


def test_certified_cannot_go_back_to_docketed(db_session, make_case):
    """Test that CERTIFIED only leads to ESCALATED."""
    case = make_case(CaseStatus.CERTIFIED, certification_date=date(2024, 4, 1))

    with pytest.raises(InvalidTransitionError):
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-10"}
        )

    db_session.refresh(case)
    assert case.status == "CERTIFIED"


def test_unknown_requested_status_is_invalid_transition(db_session, make_case):
    """Test that a status name outside the vocabulary is an invalid transition."""
    case = make_case(CaseStatus.FILED)

    with pytest.raises(InvalidTransitionError):
        WorkflowEngine(db_session).propose_transition(case.id, "ARCHIVED", {})


def test_requested_status_from_payload(db_session, make_case):
    """Test that the requested status may travel inside the payload."""
    case = make_case(CaseStatus.FILED)

    updated = WorkflowEngine(db_session).propose_transition(
        case.id, payload={"status": "DOCKETED", "docketDate": "2024-01-10"}
    )

    assert updated.status == "DOCKETED"


def test_missing_requested_status(db_session, make_case):
    """Test that a request without any status is a validation error."""
    case = make_case(CaseStatus.FILED)

    with pytest.raises(ValidationError) as exc_info:
        WorkflowEngine(db_session).propose_transition(case.id, payload={"docketDate": "2024-01-10"})
    assert exc_info.value.field == "status"


def test_unknown_case(db_session):
    """Test that an unknown case id is reported as not found."""
    with pytest.raises(NotFoundError):
        WorkflowEngine(db_session).propose_transition(uuid4(), CaseStatus.DOCKETED, {"docketDate": "2024-01-10"})


def test_stale_expected_status_is_conflict(db_session, make_case):
    """Test that the caller's expected status must match the stored one."""
    case = make_case(CaseStatus.DOCKETED, docket_date=date(2024, 1, 10))

    with pytest.raises(ConflictError) as exc_info:
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-10"}, expected_status=CaseStatus.FILED
        )

    assert exc_info.value.expected == "FILED"
    assert exc_info.value.actual == "DOCKETED"
    assert _history(db_session, case) == []


def test_conflict_checked_before_transition_rules(db_session, make_case):
    """Test that a stale expected status wins over an invalid target."""
    case = make_case(CaseStatus.SUMMONED, summon_date=date(2024, 1, 15))

    with pytest.raises(ConflictError):
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.ESCALATED, {"expectedStatus": "FILED"}
        )


def test_second_writer_with_same_expected_status_conflicts(db_session, make_case):
    """Test that only one of two writers that read FILED succeeds."""
    case = make_case(CaseStatus.FILED)
    engine = WorkflowEngine(db_session)

    engine.propose_transition(
        case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-10"}, expected_status=CaseStatus.FILED
    )
    with pytest.raises(ConflictError):
        engine.propose_transition(
            case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-11"}, expected_status=CaseStatus.FILED
        )

    db_session.refresh(case)
    assert case.status == "DOCKETED"
    assert case.docket_date == date(2024, 1, 10)
    history = _history(db_session, case)
    assert [h.from_status for h in history] == ["FILED"]


def test_full_path_to_escalation_keeps_complete_history(db_session, make_case):
    """Test a case through both failed settlements to the court."""
    case = make_case(CaseStatus.FILED)
    engine = WorkflowEngine(db_session)

    steps = [
        (CaseStatus.DOCKETED, {"docketDate": "2024-01-10"}),
        (CaseStatus.SUMMONED, {"summonDate": "2024-01-12"}),
        (CaseStatus.MEDIATION, {"mediationStartDate": "2024-01-20"}),
        (CaseStatus.MEDIATION, {"mediationOutcome": "UNRESOLVED", "conciliationStartDate": "2024-02-05"}),
        (CaseStatus.CONCILIATION, {"conciliationOutcome": "UNRESOLVED", "extensionDate": "2024-02-20"}),
        (CaseStatus.CERTIFIED, {"certificationDate": "2024-03-06"}),
        (CaseStatus.ESCALATED, {"escalatedToEnt": "Municipal Trial Court"}),
    ]
    for requested, payload in steps:
        case = engine.propose_transition(case.id, requested, payload)

    assert case.status == "ESCALATED"
    assert case.conciliation_start_date == date(2024, 2, 5)
    assert case.extension_date == date(2024, 2, 20)
    assert case.escalated_to == "Municipal Trial Court"

    history = _history(db_session, case)
    assert len(history) == len(steps)
    assert [h.sequence for h in history] == list(range(1, len(steps) + 1))
    assert [h.status for h in history] == [
        "DOCKETED", "SUMMONED", "MEDIATION", "CONCILIATION", "EXTENDED", "CERTIFIED", "ESCALATED",
    ]
    timestamps = [h.created_at for h in history]
    assert timestamps == sorted(timestamps)
    assert history[-1].status == case.status


def test_deferred_start_date_required_when_leaving(db_session, make_case):
    """Test that a stage entered without its start date cannot be left without it."""
    case = make_case(CaseStatus.MEDIATION, mediation_start_date=date(2024, 2, 1))
    engine = WorkflowEngine(db_session)
    engine.propose_transition(case.id, CaseStatus.MEDIATION, {"mediationOutcome": "UNRESOLVED"})

    with pytest.raises(ValidationError) as exc_info:
        engine.propose_transition(
            case.id, CaseStatus.CONCILIATION, {"conciliationOutcome": "UNRESOLVED", "extensionDate": "2024-03-01"}
        )
    assert exc_info.value.field == "conciliationStartDate"


def test_legacy_status_bridge_is_logged(db_session, make_case, caplog):
    """Test that legacy statuses may re-enter the flow and are flagged."""
    case = make_case(CaseStatus.PENDING)

    with caplog.at_level(logging.WARNING, logger="blotter.core.workflow.engine"):
        updated = WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.SUMMONED, {"summonDate": "2024-01-12"}
        )

    assert updated.status == "SUMMONED"
    assert any("legacy status PENDING" in record.getMessage() for record in caplog.records)


def test_lateral_correction_between_terminal_statuses(db_session, make_case):
    """Test moving a dismissed case to closed."""
    case = make_case(CaseStatus.DISMISSED)

    updated = WorkflowEngine(db_session).propose_transition(
        case.id, CaseStatus.CLOSED, {"remarks": "Recorded under the wrong status"}
    )

    assert updated.status == "CLOSED"
    assert _history(db_session, case)[0].remarks == "Recorded under the wrong status"


def test_store_rejects_write_after_concurrent_change(db_session, make_case):
    """Test the compare-and-set when the status changes between read and write."""
    from blotter.core.services.case_store import CaseStore, TransitionRecord

    case = make_case(CaseStatus.FILED)
    db_session.execute(
        update(BlotterCase).where(BlotterCase.id == case.id).values(status="DOCKETED", docket_date=date(2024, 1, 9))
    )
    db_session.commit()

    record = TransitionRecord(
        from_status=CaseStatus.FILED,
        requested_status=CaseStatus.DOCKETED,
        status=CaseStatus.DOCKETED,
        actor="secretary",
    )
    with pytest.raises(ConflictError):
        CaseStore(db_session).write_transition(
            case.id, CaseStatus.FILED, {"status": "DOCKETED", "docket_date": date(2024, 1, 10)}, record
        )

    db_session.expire_all()
    stored = db_session.get(BlotterCase, case.id)
    assert stored.docket_date == date(2024, 1, 9)
    assert _history(db_session, case) == []


def test_transition_increments_version(db_session, make_case):
    """Test that every write bumps the case version."""
    case = make_case(CaseStatus.FILED)
    assert case.version == 1

    updated = WorkflowEngine(db_session).propose_transition(case.id, CaseStatus.DOCKETED, {"docketDate": "2024-01-10"})

    assert updated.version == 2


def test_two_writers_that_read_escalated(db_session, make_case):
    """Test that a same-status correction and a later writer cannot both win."""
    case = make_case(
        CaseStatus.ESCALATED, certification_date=date(2024, 3, 6), escalated_to="Municipal Trial Court"
    )
    observed = case.version
    engine = WorkflowEngine(db_session)

    engine.propose_transition(
        case.id,
        CaseStatus.ESCALATED,
        {"escalatedToEnt": "RTC Branch 9"},
        expected_status=CaseStatus.ESCALATED,
        expected_version=observed,
    )
    with pytest.raises(ConflictError) as exc_info:
        engine.propose_transition(
            case.id,
            CaseStatus.RESOLVED,
            {"resolutionMethod": "AMICABLE"},
            expected_status=CaseStatus.ESCALATED,
            expected_version=observed,
        )

    assert exc_info.value.expected_version == observed
    assert exc_info.value.actual_version == observed + 1
    db_session.refresh(case)
    assert case.status == "ESCALATED"
    assert case.escalated_to == "RTC Branch 9"
    assert case.resolution_method is None
    assert [h.from_status for h in _history(db_session, case)] == ["ESCALATED"]


def test_expected_version_from_payload(db_session, make_case):
    """Test that expectedVersion in the payload is honoured."""
    case = make_case(CaseStatus.RESOLVED, resolution_method="AMICABLE")

    with pytest.raises(ConflictError):
        WorkflowEngine(db_session).propose_transition(
            case.id, CaseStatus.RESOLVED, {"resolutionMethod": "ARBITRATION", "expectedVersion": case.version + 1}
        )
    assert _history(db_session, case) == []


def test_store_rejects_same_status_write_after_concurrent_change(db_session, make_case):
    """Test the compare-and-set when another writer kept the status but changed the case."""
    from blotter.core.services.case_store import CaseStore, TransitionRecord

    case = make_case(CaseStatus.RESOLVED, resolution_method="AMICABLE")
    observed = case.version

    WorkflowEngine(db_session).propose_transition(
        case.id, CaseStatus.RESOLVED, {"resolutionMethod": "ARBITRATION"}, expected_version=observed
    )

    record = TransitionRecord(
        from_status=CaseStatus.RESOLVED,
        requested_status=CaseStatus.RESOLVED,
        status=CaseStatus.RESOLVED,
        actor="secretary",
    )
    with pytest.raises(ConflictError) as exc_info:
        CaseStore(db_session).write_transition(
            case.id, CaseStatus.RESOLVED, {"resolution_method": "WITHDRAWAL"}, record, observed
        )

    assert exc_info.value.actual == "RESOLVED"
    assert exc_info.value.actual_version == observed + 1
    db_session.expire_all()
    stored = db_session.get(BlotterCase, case.id)
    assert stored.resolution_method == "ARBITRATION"
    assert len(_history(db_session, case)) == 1

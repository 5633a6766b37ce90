"""
Test the progress steps derived from a case.
"""

from datetime import date

from blotter.core.models.case import BlotterCase
from blotter.core.workflow.display import compute_display_steps, step_index
from blotter.core.workflow.statuses import CaseStatus


def _case(status, **fields):
    values = dict(status=CaseStatus(status).value, filing_fee=100.0, filing_fee_paid=False)
    values.update(fields)
    return BlotterCase(**values)


def _flags(steps, attr):
    return [step.number for step in steps if getattr(step, attr)]


def test_nine_steps_in_order():
    """Test that every case shows the same nine steps."""
    steps = compute_display_steps(_case(CaseStatus.FILED))
    assert [s.number for s in steps] == list(range(1, 10))
    assert steps[0].label == "File Complaint"
    assert steps[-1].label == "Case Closed"
    assert _flags(steps, "decision_point") == [4, 5]


def test_filed_case():
    """Test a newly filed case with the fee unpaid."""
    steps = compute_display_steps(_case(CaseStatus.FILED))
    assert _flags(steps, "current") == [1]
    assert _flags(steps, "completed") == []
    assert _flags(steps, "skipped") == []
    assert steps[0].description == "PHP 100.00 (unpaid)"


def test_in_progress_case():
    """Test that earlier steps are complete and later ones pending."""
    case = _case(CaseStatus.SUMMONED, docket_date=date(2024, 1, 10), summon_date=date(2024, 1, 12))
    steps = compute_display_steps(case)
    assert _flags(steps, "completed") == [1, 2]
    assert _flags(steps, "current") == [3]
    assert _flags(steps, "skipped") == []
    assert steps[2].description == "2024-01-12"


def test_legacy_statuses_map_to_their_stage():
    """Test where the legacy statuses appear on the bar."""
    assert step_index(CaseStatus.PENDING) == 1
    assert step_index(CaseStatus.ONGOING) == 4
    assert step_index(CaseStatus.RESOLVED) == 9


def test_resolved_in_mediation_skips_later_stages():
    """Test a case settled during mediation."""
    case = _case(
        CaseStatus.RESOLVED,
        filing_fee_paid=True,
        docket_date=date(2024, 1, 10),
        summon_date=date(2024, 1, 12),
        mediation_start_date=date(2024, 1, 20),
        resolution_method="AMICABLE",
    )
    steps = compute_display_steps(case)
    assert _flags(steps, "completed") == [1, 2, 3, 4, 9]
    assert _flags(steps, "skipped") == [5, 6, 7, 8]
    assert _flags(steps, "current") == [9]
    assert steps[8].description == "AMICABLE"


def test_escalated_case():
    """Test a case escalated to court after certification."""
    case = _case(
        CaseStatus.ESCALATED,
        docket_date=date(2024, 1, 10),
        summon_date=date(2024, 1, 12),
        mediation_start_date=date(2024, 1, 20),
        conciliation_start_date=date(2024, 2, 5),
        extension_date=date(2024, 2, 20),
        certification_date=date(2024, 3, 6),
        escalated_to="Municipal Trial Court",
    )
    steps = compute_display_steps(case)
    assert _flags(steps, "completed") == [1, 2, 3, 4, 5, 6, 7, 8]
    assert _flags(steps, "current") == [8]
    assert _flags(steps, "skipped") == []
    assert steps[7].description == "Municipal Trial Court"


def test_dismissed_before_docketing():
    """Test a case withdrawn right after filing."""
    steps = compute_display_steps(_case(CaseStatus.DISMISSED))
    assert _flags(steps, "completed") == [1, 9]
    assert _flags(steps, "skipped") == [2, 3, 4, 5, 6, 7, 8]


def test_same_case_gives_same_steps():
    """Test that deriving the steps twice gives identical output."""
    case = _case(CaseStatus.CONCILIATION, docket_date=date(2024, 1, 10), mediation_start_date=date(2024, 1, 20))
    assert compute_display_steps(case) == compute_display_steps(case)


def test_dismissed_after_mediation_started():
    """Test that a dismissed case skips mediation onward even with dates on record."""
    steps = compute_display_steps(_case(
        CaseStatus.DISMISSED,
        docket_date=date(2024, 1, 10),
        summon_date=date(2024, 1, 12),
        mediation_start_date=date(2024, 1, 20),
        conciliation_start_date=date(2024, 2, 5),
    ))
    assert _flags(steps, "completed") == [1, 2, 3, 9]
    assert _flags(steps, "skipped") == [4, 5, 6, 7, 8]
    assert not any(step.completed and step.skipped for step in steps)

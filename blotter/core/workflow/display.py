"""
Progress display for a blotter case.

Derives the nine-step Katarungang Pambarangay progress bar from the case's
persisted status and stage dates. Nothing here is stored; calling
compute_display_steps twice on an unchanged case gives the same result.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from blotter.core.workflow.statuses import CaseStatus, TERMINAL_STATUSES

STEP_INDEX = {
    CaseStatus.FILED: 1,
    CaseStatus.PENDING: 1,
    CaseStatus.DOCKETED: 2,
    CaseStatus.SUMMONED: 3,
    CaseStatus.MEDIATION: 4,
    CaseStatus.ONGOING: 4,
    CaseStatus.CONCILIATION: 5,
    CaseStatus.EXTENDED: 6,
    CaseStatus.CERTIFIED: 7,
    CaseStatus.ESCALATED: 8,
    CaseStatus.RESOLVED: 9,
    CaseStatus.CLOSED: 9,
    CaseStatus.DISMISSED: 9,
}

CLOSING_STATUSES = frozenset({CaseStatus.RESOLVED, CaseStatus.CLOSED, CaseStatus.DISMISSED})

# Steps a dismissed case never shows as done (Mediation through Escalate)
DISMISSED_SKIP_FROM = 4


@dataclass(frozen=True)
class DisplayStep:
    number: int
    label: str
    completed: bool
    current: bool
    skipped: bool
    decision_point: bool = False
    description: str = ""


@dataclass(frozen=True)
class _StepDef:
    label: str
    marker: Optional[str] = None
    decision_point: bool = False
    describe: Optional[Callable[[Any], str]] = None


def _date_text(attr: str) -> Callable[[Any], str]:
    def describe(case: Any) -> str:
        value = getattr(case, attr, None)
        return value.isoformat() if value else ""
    return describe


def _fee_text(case: Any) -> str:
    fee = getattr(case, "filing_fee", None)
    if fee is None:
        return ""
    paid = "paid" if getattr(case, "filing_fee_paid", False) else "unpaid"
    return f"PHP {float(fee):.2f} ({paid})"


STEPS = (
    _StepDef("File Complaint", describe=_fee_text),
    _StepDef("Receive in Docket", marker="docket_date", describe=_date_text("docket_date")),
    _StepDef("Summon Respondent", marker="summon_date", describe=_date_text("summon_date")),
    _StepDef("Mediation", marker="mediation_start_date", decision_point=True,
             describe=_date_text("mediation_start_date")),
    _StepDef("Conciliation", marker="conciliation_start_date", decision_point=True,
             describe=_date_text("conciliation_start_date")),
    _StepDef("Extension", marker="extension_date", describe=_date_text("extension_date")),
    _StepDef("Certification to File Action", marker="certification_date",
             describe=_date_text("certification_date")),
    _StepDef("Escalate to Court", describe=lambda case: getattr(case, "escalated_to", None) or ""),
    _StepDef("Case Closed", describe=lambda case: getattr(case, "resolution_method", None) or ""),
)


def step_index(status: CaseStatus) -> int:
    """1-based position of a status on the progress bar."""
    return STEP_INDEX.get(CaseStatus(status), 1)


def compute_display_steps(case: Any) -> List[DisplayStep]:
    """
    Progress steps for a case.

    In-progress cases: steps before the current one are completed, later
    ones pending. Finished cases (resolved, closed, dismissed, escalated):
    a stage step counts as completed when its date is on record and as
    skipped when the case never reached it. A dismissed case shows every
    step from Mediation on as skipped, whatever dates are on record.
    """
    status = CaseStatus(case.status)
    index = step_index(status)
    finished = status in TERMINAL_STATUSES

    steps: List[DisplayStep] = []
    for number, step in enumerate(STEPS, start=1):
        completed = current = skipped = False

        if number == 1:
            completed = index > 1 or bool(getattr(case, "filing_fee_paid", False))
            current = index == 1
        elif number == 8:
            current = completed = status == CaseStatus.ESCALATED
            skipped = finished and not completed
        elif number == 9:
            current = completed = status in CLOSING_STATUSES
        elif status == CaseStatus.DISMISSED and number >= DISMISSED_SKIP_FROM:
            skipped = True
        elif finished:
            reached = getattr(case, step.marker, None) is not None
            completed = reached
            skipped = not reached
        else:
            completed = index > number
            current = index == number

        steps.append(DisplayStep(
            number=number,
            label=step.label,
            completed=completed,
            current=current,
            skipped=skipped,
            decision_point=step.decision_point,
            description=step.describe(case) if step.describe else "",
        ))
    return steps

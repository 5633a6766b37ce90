"""
Blotter case status vocabulary and the Katarungang Pambarangay transition table.

Everything the workflow engine needs to decide a transition lives here:
- CaseStatus and the other enums used by cases, parties and hearings
- TRANSITIONS: current status -> statuses that may be requested next
- DECISION_POINTS: statuses whose real destination depends on an outcome
- ENTRY_FIELDS / EXIT_FIELDS: payload fields captured when a status is
  entered or left

Adding a status is a one-place edit: give it a TRANSITIONS entry (checked at
import time) and, if it captures data, an ENTRY_FIELDS/EXIT_FIELDS rule.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class CaseStatus(str, Enum):
    FILED = "FILED"
    DOCKETED = "DOCKETED"
    SUMMONED = "SUMMONED"
    MEDIATION = "MEDIATION"
    CONCILIATION = "CONCILIATION"
    EXTENDED = "EXTENDED"
    CERTIFIED = "CERTIFIED"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
    DISMISSED = "DISMISSED"
    ESCALATED = "ESCALATED"
    # Legacy statuses kept for older records
    PENDING = "PENDING"
    ONGOING = "ONGOING"


class Outcome(str, Enum):
    RESOLVED = "RESOLVED"
    UNRESOLVED = "UNRESOLVED"


class ResolutionMethod(str, Enum):
    AMICABLE = "AMICABLE"
    ARBITRATION = "ARBITRATION"
    CONCILIATION = "CONCILIATION"
    WITHDRAWAL = "WITHDRAWAL"
    OTHER = "OTHER"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class PartyType(str, Enum):
    COMPLAINANT = "COMPLAINANT"
    RESPONDENT = "RESPONDENT"
    WITNESS = "WITNESS"


class HearingStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"


STATUS_LABELS: Dict[CaseStatus, str] = {
    CaseStatus.FILED: "Filed (Initial Filing)",
    CaseStatus.DOCKETED: "Received in Docket",
    CaseStatus.SUMMONED: "Respondent Summoned",
    CaseStatus.MEDIATION: "Mediation by Punong Barangay",
    CaseStatus.CONCILIATION: "Conciliation by Lupon",
    CaseStatus.EXTENDED: "15-day Extension",
    CaseStatus.CERTIFIED: "Certification to File Action (CFA)",
    CaseStatus.RESOLVED: "Case Resolved",
    CaseStatus.CLOSED: "Case Closed",
    CaseStatus.DISMISSED: "Case Dismissed/Withdrawn",
    CaseStatus.ESCALATED: "Escalated to Court",
    CaseStatus.PENDING: "Pending (Legacy)",
    CaseStatus.ONGOING: "Ongoing (Legacy)",
}

TERMINAL_STATUSES: FrozenSet[CaseStatus] = frozenset({
    CaseStatus.RESOLVED,
    CaseStatus.CLOSED,
    CaseStatus.DISMISSED,
    CaseStatus.ESCALATED,
})

LEGACY_STATUSES: FrozenSet[CaseStatus] = frozenset({
    CaseStatus.PENDING,
    CaseStatus.ONGOING,
})

TRANSITIONS: Dict[CaseStatus, FrozenSet[CaseStatus]] = {
    CaseStatus.FILED: frozenset({CaseStatus.DOCKETED}),
    CaseStatus.DOCKETED: frozenset({CaseStatus.SUMMONED}),
    CaseStatus.SUMMONED: frozenset({CaseStatus.MEDIATION}),
    # Decision points: the outcome picks the real destination
    CaseStatus.MEDIATION: frozenset({CaseStatus.MEDIATION}),
    CaseStatus.CONCILIATION: frozenset({CaseStatus.CONCILIATION}),
    CaseStatus.EXTENDED: frozenset({CaseStatus.CERTIFIED}),
    CaseStatus.CERTIFIED: frozenset({CaseStatus.ESCALATED}),
    # Terminal statuses allow lateral correction among themselves
    CaseStatus.RESOLVED: TERMINAL_STATUSES,
    CaseStatus.CLOSED: TERMINAL_STATUSES,
    CaseStatus.DISMISSED: TERMINAL_STATUSES,
    CaseStatus.ESCALATED: TERMINAL_STATUSES,
    # Legacy records may re-enter the flow at any of its first four stages
    CaseStatus.PENDING: frozenset({
        CaseStatus.FILED,
        CaseStatus.DOCKETED,
        CaseStatus.SUMMONED,
        CaseStatus.MEDIATION,
    }),
    CaseStatus.ONGOING: frozenset({
        CaseStatus.FILED,
        CaseStatus.DOCKETED,
        CaseStatus.SUMMONED,
        CaseStatus.MEDIATION,
    }),
}

_missing = set(CaseStatus) - set(TRANSITIONS)
if _missing:
    raise RuntimeError(f"No transition rule for statuses: {sorted(s.value for s in _missing)}")


@dataclass(frozen=True)
class DecisionPoint:
    """Where a decision state leads for each outcome."""
    outcome_field: str
    resolved: CaseStatus
    unresolved: CaseStatus

    def destination(self, outcome: "Outcome") -> CaseStatus:
        if outcome is Outcome.RESOLVED:
            return self.resolved
        return self.unresolved


DECISION_POINTS: Dict[CaseStatus, DecisionPoint] = {
    CaseStatus.MEDIATION: DecisionPoint(
        outcome_field="mediation_outcome",
        resolved=CaseStatus.RESOLVED,
        unresolved=CaseStatus.CONCILIATION,
    ),
    CaseStatus.CONCILIATION: DecisionPoint(
        outcome_field="conciliation_outcome",
        resolved=CaseStatus.RESOLVED,
        unresolved=CaseStatus.EXTENDED,
    ),
}

OUTCOME_FIELDS: FrozenSet[str] = frozenset(dp.outcome_field for dp in DECISION_POINTS.values())


@dataclass(frozen=True)
class FieldRule:
    """Payload fields captured at one end of a transition."""
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.required + self.optional


NO_FIELDS = FieldRule()

# Fields captured when a status is entered
ENTRY_FIELDS: Dict[CaseStatus, FieldRule] = {
    CaseStatus.FILED: FieldRule(optional=("filing_fee", "filing_fee_paid")),
    CaseStatus.DOCKETED: FieldRule(required=("docket_date",)),
    CaseStatus.SUMMONED: FieldRule(required=("summon_date",)),
    CaseStatus.MEDIATION: FieldRule(
        required=("mediation_start_date",),
        optional=("mediation_end_date", "mediation_outcome"),
    ),
    CaseStatus.CONCILIATION: FieldRule(
        required=("conciliation_start_date",),
        optional=("conciliation_end_date", "conciliation_outcome"),
    ),
    CaseStatus.EXTENDED: FieldRule(required=("extension_date",)),
    CaseStatus.CERTIFIED: FieldRule(required=("certification_date",)),
    CaseStatus.RESOLVED: FieldRule(required=("resolution_method",)),
    CaseStatus.ESCALATED: FieldRule(required=("escalated_to",)),
}

# Fields that must be on record before a status is left
EXIT_FIELDS: Dict[CaseStatus, FieldRule] = {
    CaseStatus.FILED: FieldRule(required=("filing_fee",), optional=("filing_fee_paid",)),
    CaseStatus.DOCKETED: FieldRule(required=("docket_date",)),
    CaseStatus.SUMMONED: FieldRule(required=("summon_date",)),
    CaseStatus.MEDIATION: FieldRule(required=("mediation_start_date",)),
    CaseStatus.CONCILIATION: FieldRule(required=("conciliation_start_date",)),
    CaseStatus.EXTENDED: FieldRule(required=("extension_date",)),
}

DATE_FIELDS: Tuple[str, ...] = (
    "docket_date",
    "summon_date",
    "mediation_start_date",
    "mediation_end_date",
    "conciliation_start_date",
    "conciliation_end_date",
    "extension_date",
    "certification_date",
)

# end date field -> start date field
DATE_RANGES: Dict[str, str] = {
    "mediation_end_date": "mediation_start_date",
    "conciliation_end_date": "conciliation_start_date",
}


def allowed_next_statuses(status: CaseStatus) -> FrozenSet[CaseStatus]:
    """Statuses that may be requested from `status`."""
    return TRANSITIONS[CaseStatus(status)]


def is_decision_point(status: CaseStatus) -> bool:
    return CaseStatus(status) in DECISION_POINTS


def decision_point(status: CaseStatus) -> Optional[DecisionPoint]:
    return DECISION_POINTS.get(CaseStatus(status))


def entry_rule(status: CaseStatus) -> FieldRule:
    return ENTRY_FIELDS.get(CaseStatus(status), NO_FIELDS)


def exit_rule(status: CaseStatus) -> FieldRule:
    return EXIT_FIELDS.get(CaseStatus(status), NO_FIELDS)


def status_label(status: CaseStatus) -> str:
    return STATUS_LABELS.get(CaseStatus(status), str(status))

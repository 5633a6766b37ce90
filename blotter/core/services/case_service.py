"""
Case service - filing, listing and the administrative actions around the
workflow (filing-fee confirmation, Certification to File Action).

Status changes always go through WorkflowEngine or CaseStore.write_transition,
so every change of a case after filing leaves a StatusUpdate behind.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from blotter.core.config import Settings, get_settings
from blotter.core.models.case import BlotterCase
from blotter.core.models.party import BlotterParty
from blotter.core.models.status_update import StatusUpdate
from blotter.core.services.case_store import CaseStore, TransitionRecord
from blotter.core.workflow.engine import WorkflowEngine
from blotter.core.workflow.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from blotter.core.workflow.statuses import CaseStatus, PartyType, Priority

logger = logging.getLogger(__name__)

CASE_NUMBER_ATTEMPTS = 3


@dataclass
class CaseFilters:
    """Filters for listing cases."""
    status: Optional[CaseStatus] = None
    priority: Optional[Priority] = None
    incident_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None


@dataclass
class Certification:
    """Data printed on a Certification to File Action."""
    case_id: Any
    case_number: str
    complainant_name: Optional[str]
    complainant_address: Optional[str]
    respondent_name: Optional[str]
    respondent_address: Optional[str]
    issued_on: date
    valid_until: date

    @classmethod
    def from_case(cls, case: BlotterCase, valid_days: int) -> "Certification":
        complainant = case.complainant
        respondent = case.respondent
        issued = case.certification_date or date.today()
        return cls(
            case_id=case.id,
            case_number=case.case_number,
            complainant_name=complainant.full_name if complainant else None,
            complainant_address=complainant.address if complainant else None,
            respondent_name=respondent.full_name if respondent else None,
            respondent_address=respondent.address if respondent else None,
            issued_on=issued,
            valid_until=issued + timedelta(days=valid_days),
        )


class CaseService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.store = CaseStore(db)
        self.engine = WorkflowEngine(db, self.settings)

    # ------------------------------------------------------------------
    # Filing
    # ------------------------------------------------------------------

    def next_case_number(self, year: Optional[int] = None) -> str:
        """Next free case number for the year, e.g. BLT-2024-0007."""
        year = year or date.today().year
        prefix = f"{self.settings.case_number_prefix}-{year}-"
        numbers = self.db.scalars(
            select(BlotterCase.case_number).where(BlotterCase.case_number.like(f"{prefix}%"))
        ).all()

        highest = 0
        for number in numbers:
            match = re.fullmatch(rf"{re.escape(prefix)}(\d+)", number)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}{highest + 1:04d}"

    def create_case(self, data: Mapping[str, Any]) -> BlotterCase:
        """
        File a new case in FILED status.

        Args:
            data: Incident fields plus `complainant` (required), `respondent`
                and `witnesses` party mappings

        Raises:
            ValidationError: no complainant given
        """
        complainant = data.get("complainant")
        if not complainant:
            raise ValidationError("complainant", "a complainant is required")

        parties = [(PartyType.COMPLAINANT, complainant)]
        if data.get("respondent"):
            parties.append((PartyType.RESPONDENT, data["respondent"]))
        for witness in data.get("witnesses") or []:
            parties.append((PartyType.WITNESS, witness))

        filing_fee = data.get("filing_fee")
        if filing_fee is None:
            filing_fee = self.settings.default_filing_fee
        report_date = data.get("report_date") or date.today()

        for attempt in range(1, CASE_NUMBER_ATTEMPTS + 1):
            case = BlotterCase(
                case_number=self.next_case_number(report_date.year),
                status=CaseStatus.FILED.value,
                priority=Priority(data.get("priority") or Priority.MEDIUM).value,
                incident_type=data["incident_type"],
                incident_date=data["incident_date"],
                incident_time=data.get("incident_time"),
                incident_location=data["incident_location"],
                incident_description=data["incident_description"],
                report_date=report_date,
                filing_fee=filing_fee,
                filing_fee_paid=False,
            )
            for party_type, party in parties:
                case.parties.append(_build_party(party_type, party))

            self.db.add(case)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                if attempt == CASE_NUMBER_ATTEMPTS:
                    raise
                logger.warning(f"Case number {case.case_number} taken, retrying ({attempt}/{CASE_NUMBER_ATTEMPTS})")
                continue

            self.db.refresh(case)
            logger.info(f"Filed case {case.case_number} ({case.incident_type})")
            return case

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get_case(self, case_id) -> BlotterCase:
        return self.store.read_case(case_id)

    def get_case_by_number(self, case_number: str) -> BlotterCase:
        case = self.db.scalar(select(BlotterCase).where(BlotterCase.case_number == case_number))
        if case is None:
            raise NotFoundError(case_number)
        return case

    def list_cases(
        self,
        filters: Optional[CaseFilters] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[BlotterCase], int]:
        """Filtered, paginated cases (newest report first) and the total count."""
        filters = filters or CaseFilters()
        query = self.db.query(BlotterCase).options(selectinload(BlotterCase.parties))

        if filters.status:
            query = query.filter(BlotterCase.status == CaseStatus(filters.status).value)
        if filters.priority:
            query = query.filter(BlotterCase.priority == Priority(filters.priority).value)
        if filters.incident_type:
            query = query.filter(BlotterCase.incident_type.ilike(f"%{filters.incident_type}%"))
        if filters.start_date:
            query = query.filter(BlotterCase.incident_date >= filters.start_date)
        if filters.end_date:
            query = query.filter(BlotterCase.incident_date <= filters.end_date)
        if filters.search:
            term = f"%{filters.search}%"
            query = query.filter(or_(
                BlotterCase.case_number.ilike(term),
                BlotterCase.incident_type.ilike(term),
                BlotterCase.incident_location.ilike(term),
                BlotterCase.incident_description.ilike(term),
                BlotterCase.parties.any(or_(
                    BlotterParty.first_name.ilike(term),
                    BlotterParty.last_name.ilike(term),
                )),
            ))

        total = query.count()
        cases = query.order_by(
            BlotterCase.report_date.desc(),
            BlotterCase.case_number.desc(),
        ).offset(offset).limit(limit).all()
        return cases, total

    def status_summary(self) -> Dict[str, int]:
        """Number of cases per status."""
        rows = self.db.execute(
            select(BlotterCase.status, func.count(BlotterCase.id)).group_by(BlotterCase.status)
        ).all()
        return {status: count for status, count in rows}

    def get_history(self, case_id) -> List[StatusUpdate]:
        case = self.store.read_case(case_id)
        return list(self.db.scalars(
            select(StatusUpdate)
            .where(StatusUpdate.case_id == case.id)
            .order_by(StatusUpdate.sequence)
        ))

    # ------------------------------------------------------------------
    # Administrative actions
    # ------------------------------------------------------------------

    def confirm_filing_fee(
        self,
        case_id,
        paid: bool,
        actor: Optional[str] = None,
        expected_status: Optional[CaseStatus] = None,
        expected_version: Optional[int] = None,
    ) -> BlotterCase:
        """
        Record payment of the filing fee.

        A FILED case whose fee is confirmed as paid is docketed today.
        Otherwise only the flag changes; the status stays and the change is
        still written to the history.
        """
        case = self.store.read_case(case_id)
        current = case.case_status
        expected = CaseStatus(expected_status) if expected_status else current
        if expected != current:
            raise ConflictError(expected, current)
        version = case.version if expected_version is None else expected_version
        if version != case.version:
            raise ConflictError(expected, current, version, case.version)

        if paid and current == CaseStatus.FILED:
            return self.engine.propose_transition(
                case.id,
                CaseStatus.DOCKETED,
                {
                    "filingFeePaid": True,
                    "docketDate": date.today(),
                    "remarks": "Filing fee has been paid. Case is now docketed.",
                },
                expected_status=expected,
                actor=actor,
                expected_version=version,
            )

        state = "paid" if paid else "unpaid"
        record = TransitionRecord(
            from_status=current,
            requested_status=current,
            status=current,
            actor=actor or self.settings.default_actor,
            remarks=f"Filing fee has been marked as {state}. Case status remains unchanged.",
            details={"filingFeePaid": paid},
        )
        updated = self.store.write_transition(
            case.id, expected, {"filing_fee_paid": paid}, record, version
        )
        logger.info(f"Case {updated.case_number}: filing fee marked {state}")
        return updated

    def issue_certification(
        self,
        case_id,
        actor: Optional[str] = None,
        certification_date: Optional[date] = None,
    ) -> Certification:
        """
        Issue (or re-read) the Certification to File Action.

        EXTENDED cases are moved to CERTIFIED; CERTIFIED cases return their
        existing certification.

        Raises:
            InvalidTransitionError: the case is in any other status
        """
        case = self.store.read_case(case_id)
        status = case.case_status

        if status == CaseStatus.EXTENDED:
            case = self.engine.propose_transition(
                case.id,
                CaseStatus.CERTIFIED,
                {
                    "certificationDate": certification_date or date.today(),
                    "remarks": "Certification to File Action (CFA) has been issued.",
                },
                expected_status=status,
                actor=actor,
                expected_version=case.version,
            )
        elif status != CaseStatus.CERTIFIED:
            raise InvalidTransitionError(status, CaseStatus.CERTIFIED)

        return Certification.from_case(case, self.settings.certification_valid_days)


def _build_party(party_type: PartyType, data: Mapping[str, Any]) -> BlotterParty:
    for name in ("first_name", "last_name", "address"):
        if not data.get(name):
            raise ValidationError(f"{party_type.value.lower()}.{name}", "required")
    return BlotterParty(
        party_type=party_type.value,
        first_name=data["first_name"],
        middle_name=data.get("middle_name"),
        last_name=data["last_name"],
        address=data["address"],
        contact_number=data.get("contact_number"),
        email=data.get("email"),
        is_resident=bool(data.get("is_resident", False)),
    )

"""
Blotter case model - one filed incident or dispute.

A case is created in FILED status and afterwards only changes through
workflow transitions (see blotter.core.workflow). Each stage of the
Katarungang Pambarangay process records its date on the case:

FILED -> DOCKETED -> SUMMONED -> MEDIATION -> [CONCILIATION] -> [EXTENDED]
      -> CERTIFIED -> ESCALATED, or RESOLVED / CLOSED / DISMISSED.
"""

import uuid
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, Column, Date, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship, Mapped

from blotter.core.models.base import Base, TimestampMixin, GUID
from blotter.core.workflow.statuses import CaseStatus, PartyType, Priority

if TYPE_CHECKING:
    from blotter.core.models.party import BlotterParty
    from blotter.core.models.status_update import StatusUpdate
    from blotter.core.models.hearing import Hearing


class BlotterCase(Base, TimestampMixin):
    """Blotter case with its current workflow status and stage fields."""

    __tablename__ = "blotter_cases"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    case_number = Column(
        String(50),
        nullable=False,
        unique=True,
        comment="Display number, e.g. BLT-2024-0001",
    )

    # Workflow
    status = Column(
        String(20),
        nullable=False,
        default=CaseStatus.FILED.value,
        index=True,
        comment="Current CaseStatus value",
    )
    version = Column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Incremented on every workflow write",
    )
    priority = Column(
        String(10),
        nullable=False,
        default=Priority.MEDIUM.value,
        index=True,
    )

    # Incident
    incident_type = Column(String(100), nullable=False, index=True)
    incident_date = Column(Date, nullable=False)
    incident_time = Column(String(20), comment="Free-form time, e.g. 14:30")
    incident_location = Column(Text, nullable=False)
    incident_description = Column(Text, nullable=False)
    report_date = Column(Date, nullable=False)

    # Filing fee
    filing_fee = Column(Numeric(10, 2, asdecimal=False))
    filing_fee_paid = Column(Boolean, nullable=False, default=False)

    # Stage dates
    docket_date = Column(Date)
    summon_date = Column(Date)
    mediation_start_date = Column(Date)
    mediation_end_date = Column(Date)
    conciliation_start_date = Column(Date)
    conciliation_end_date = Column(Date)
    extension_date = Column(Date)
    certification_date = Column(Date)

    # Terminal details
    resolution_method = Column(String(20), comment="Set when the case is RESOLVED")
    escalated_to = Column(Text, comment="Court or office the case was escalated to")

    # Relationships
    parties: Mapped[list["BlotterParty"]] = relationship(
        "BlotterParty",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="BlotterParty.party_type",
    )
    status_updates: Mapped[list["StatusUpdate"]] = relationship(
        "StatusUpdate",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="StatusUpdate.sequence",
    )
    hearings: Mapped[list["Hearing"]] = relationship(
        "Hearing",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="Hearing.hearing_date",
    )

    __table_args__ = (
        Index("ix_blotter_cases_status_priority", "status", "priority"),
        Index("ix_blotter_cases_report_date", "report_date"),
    )

    def __repr__(self) -> str:
        return f"<BlotterCase({self.case_number}, {self.status})>"

    @property
    def case_status(self) -> CaseStatus:
        return CaseStatus(self.status)

    def party(self, party_type: PartyType) -> Optional["BlotterParty"]:
        """First party of the given type, if any."""
        for p in self.parties:
            if p.party_type == party_type.value:
                return p
        return None

    @property
    def complainant(self) -> Optional["BlotterParty"]:
        return self.party(PartyType.COMPLAINANT)

    @property
    def respondent(self) -> Optional["BlotterParty"]:
        return self.party(PartyType.RESPONDENT)

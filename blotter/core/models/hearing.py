"""
Hearing model - a scheduled mediation/conciliation session for a case.

Hearings are informational; the workflow engine never reads them.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Column, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship, Mapped

from blotter.core.models.base import Base, TimestampMixin, GUID
from blotter.core.workflow.statuses import HearingStatus

if TYPE_CHECKING:
    from blotter.core.models.case import BlotterCase


class Hearing(Base, TimestampMixin):
    """Hearing session attached to a blotter case."""

    __tablename__ = "hearings"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    case_id = Column(
        GUID(),
        ForeignKey("blotter_cases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Scheduling
    hearing_date = Column(Date, nullable=False, index=True)
    hearing_time = Column(String(20), comment="Scheduled start time, e.g. 09:00")
    location = Column(Text, comment="Barangay hall room or other venue")

    status = Column(
        String(20),
        nullable=False,
        default=HearingStatus.SCHEDULED.value,
        index=True,
    )
    notes = Column(Text)

    case: Mapped["BlotterCase"] = relationship(
        "BlotterCase",
        back_populates="hearings",
    )

    __table_args__ = (
        Index("ix_hearings_case_date", "case_id", "hearing_date"),
    )

    def __repr__(self) -> str:
        return f"<Hearing({self.case_id}, {self.hearing_date}, {self.status})>"

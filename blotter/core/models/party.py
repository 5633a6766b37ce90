"""
Blotter party model - complainant, respondent or witness of a case.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship, Mapped

from blotter.core.models.base import Base, TimestampMixin, GUID

if TYPE_CHECKING:
    from blotter.core.models.case import BlotterCase


class BlotterParty(Base, TimestampMixin):
    """A person named in a blotter case."""

    __tablename__ = "blotter_parties"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    case_id = Column(
        GUID(),
        ForeignKey("blotter_cases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    party_type = Column(
        String(20),
        nullable=False,
        comment="COMPLAINANT, RESPONDENT or WITNESS",
    )

    first_name = Column(String(100), nullable=False, index=True)
    middle_name = Column(String(100))
    last_name = Column(String(100), nullable=False, index=True)
    address = Column(Text, nullable=False)
    contact_number = Column(String(50))
    email = Column(String(255))
    is_resident = Column(Boolean, nullable=False, default=False)

    case: Mapped["BlotterCase"] = relationship(
        "BlotterCase",
        back_populates="parties",
    )

    def __repr__(self) -> str:
        return f"<BlotterParty({self.party_type}: {self.full_name})>"

    @property
    def full_name(self) -> str:
        names = [self.first_name, self.middle_name, self.last_name]
        return " ".join(n for n in names if n)

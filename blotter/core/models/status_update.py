"""
Status update model - append-only audit trail of case transitions.

One row per transition, never updated or deleted. `sequence` numbers the
rows of a case from 1 and, together with `created_at`, gives the order in
which the transitions happened.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship, Mapped
from sqlalchemy.types import JSON

from blotter.core.models.base import Base, GUID

if TYPE_CHECKING:
    from blotter.core.models.case import BlotterCase


class StatusUpdate(Base):
    """One recorded transition of a blotter case."""

    __tablename__ = "status_updates"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    case_id = Column(
        GUID(),
        ForeignKey("blotter_cases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sequence = Column(Integer, nullable=False, comment="1-based position in the case history")

    from_status = Column(String(20), nullable=False, comment="Status the transition started from")
    requested_status = Column(String(20), nullable=False, comment="Status the caller asked for")
    status = Column(String(20), nullable=False, comment="Effective resulting status")

    actor = Column(String(255), nullable=False)
    remarks = Column(Text)
    details = Column(JSON, comment="Stage fields submitted with the transition")

    created_at = Column(DateTime(timezone=True), nullable=False)

    case: Mapped["BlotterCase"] = relationship(
        "BlotterCase",
        back_populates="status_updates",
    )

    __table_args__ = (
        Index("ix_status_updates_case_sequence", "case_id", "sequence", unique=True),
    )

    def __repr__(self) -> str:
        return f"<StatusUpdate(#{self.sequence} {self.from_status}->{self.status})>"

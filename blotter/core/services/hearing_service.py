"""
Hearing service - scheduling of mediation/conciliation sessions.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from blotter.core.models.hearing import Hearing
from blotter.core.services.case_store import CaseStore
from blotter.core.workflow.errors import NotFoundError
from blotter.core.workflow.statuses import HearingStatus

logger = logging.getLogger(__name__)


class HearingService:
    def __init__(self, db: Session):
        self.db = db
        self.store = CaseStore(db)

    def schedule_hearing(
        self,
        case_id,
        hearing_date: date,
        hearing_time: Optional[str] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Hearing:
        case = self.store.read_case(case_id)
        hearing = Hearing(
            case_id=case.id,
            hearing_date=hearing_date,
            hearing_time=hearing_time,
            location=location,
            notes=notes,
            status=HearingStatus.SCHEDULED.value,
        )
        self.db.add(hearing)
        self.db.commit()
        self.db.refresh(hearing)
        logger.info(f"Scheduled hearing for case {case.case_number} on {hearing_date}")
        return hearing

    def list_hearings(self, case_id, status: Optional[HearingStatus] = None) -> List[Hearing]:
        case = self.store.read_case(case_id)
        query = select(Hearing).where(Hearing.case_id == case.id)
        if status:
            query = query.where(Hearing.status == HearingStatus(status).value)
        return list(self.db.scalars(query.order_by(Hearing.hearing_date, Hearing.hearing_time)))

    def update_hearing(
        self,
        hearing_id,
        status: Optional[HearingStatus] = None,
        notes: Optional[str] = None,
        hearing_date: Optional[date] = None,
        hearing_time: Optional[str] = None,
    ) -> Hearing:
        """Change the status, notes or schedule of a hearing."""
        try:
            hearing_uuid = hearing_id if isinstance(hearing_id, uuid.UUID) else uuid.UUID(str(hearing_id))
        except ValueError:
            raise NotFoundError(hearing_id, entity="Hearing")

        hearing = self.db.get(Hearing, hearing_uuid)
        if hearing is None:
            raise NotFoundError(hearing_id, entity="Hearing")

        if status:
            hearing.status = HearingStatus(status).value
        if notes is not None:
            hearing.notes = notes
        if hearing_date:
            hearing.hearing_date = hearing_date
        if hearing_time:
            hearing.hearing_time = hearing_time

        self.db.commit()
        self.db.refresh(hearing)
        return hearing

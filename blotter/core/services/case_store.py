"""
Case store - persistence boundary of the workflow engine.

Two operations:
- read_case(id): load a case or raise NotFoundError
- write_transition(id, expected_status, changes, record, expected_version):
  compare-and-set the case row on its status and version and append one
  StatusUpdate, in a single database transaction

The compare-and-set is an
`UPDATE ... SET version = version + 1 WHERE id = :id AND status = :expected
AND version = :version`. If another writer changed the case first, even
without changing its status, no row matches and the write is rejected with
ConflictError instead of overwriting the newer state.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from blotter.core.models.case import BlotterCase
from blotter.core.models.status_update import StatusUpdate
from blotter.core.workflow.errors import ConflictError, NotFoundError
from blotter.core.workflow.statuses import CaseStatus

logger = logging.getLogger(__name__)


@dataclass
class TransitionRecord:
    """Audit data for one transition; the store assigns sequence and timestamp."""
    from_status: CaseStatus
    requested_status: CaseStatus
    status: CaseStatus
    actor: str
    remarks: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class CaseStore:
    """Reads cases and writes transitions for the workflow engine."""

    def __init__(self, db: Session):
        self.db = db

    def read_case(self, case_id: Union[str, uuid.UUID]) -> BlotterCase:
        case_uuid = _as_uuid(case_id)
        case = self.db.get(BlotterCase, case_uuid) if case_uuid else None
        if case is None:
            raise NotFoundError(case_id)
        return case

    def write_transition(
        self,
        case_id: Union[str, uuid.UUID],
        expected_status: CaseStatus,
        changes: Dict[str, Any],
        record: TransitionRecord,
        expected_version: Optional[int] = None,
    ) -> BlotterCase:
        """
        Apply `changes` to the case if it is still as the caller read it.

        Args:
            case_id: Case to update
            expected_status: Status the caller observed when it read the case
            changes: Column values to set (including the new status)
            record: Audit entry appended in the same transaction
            expected_version: Version the caller observed; None checks the
                status only

        Returns:
            The refreshed case

        Raises:
            NotFoundError: the case does not exist
            ConflictError: the case status is no longer `expected_status`, or
                another write happened after `expected_version`
        """
        case_uuid = _as_uuid(case_id)
        if case_uuid is None:
            raise NotFoundError(case_id)
        expected = CaseStatus(expected_status).value

        conditions = [BlotterCase.id == case_uuid, BlotterCase.status == expected]
        if expected_version is not None:
            conditions.append(BlotterCase.version == expected_version)

        try:
            result = self.db.execute(
                update(BlotterCase)
                .where(*conditions)
                .values(**changes, version=BlotterCase.version + 1)
                .execution_options(synchronize_session=False)
            )

            if result.rowcount != 1:
                current = self.db.execute(
                    select(BlotterCase.status, BlotterCase.version).where(BlotterCase.id == case_uuid)
                ).first()
                if current is None:
                    raise NotFoundError(case_id)
                raise ConflictError(expected, current.status, expected_version, current.version)

            last = self.db.execute(
                select(StatusUpdate.sequence, StatusUpdate.created_at)
                .where(StatusUpdate.case_id == case_uuid)
                .order_by(StatusUpdate.sequence.desc())
                .limit(1)
            ).first()

            self.db.add(StatusUpdate(
                case_id=case_uuid,
                sequence=(last.sequence + 1) if last else 1,
                from_status=CaseStatus(record.from_status).value,
                requested_status=CaseStatus(record.requested_status).value,
                status=CaseStatus(record.status).value,
                actor=record.actor,
                remarks=record.remarks,
                details=record.details or {},
                created_at=_next_timestamp(last.created_at if last else None),
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        case = self.db.get(BlotterCase, case_uuid)
        self.db.refresh(case)
        return case


def _as_uuid(value: Union[str, uuid.UUID, None]) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    """Current UTC time, never earlier than the previous audit entry."""
    now = datetime.now(timezone.utc)
    if previous is None:
        return now
    if previous.tzinfo is None:
        # SQLite hands back naive datetimes
        previous = previous.replace(tzinfo=timezone.utc)
    return max(now, previous)

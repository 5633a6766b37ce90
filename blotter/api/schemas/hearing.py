"""
Hearing schemas for API requests/responses.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from blotter.core.workflow.statuses import HearingStatus


class HearingCreate(BaseModel):
    hearing_date: date
    hearing_time: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    notes: Optional[str] = None


class HearingUpdate(BaseModel):
    status: Optional[HearingStatus] = None
    notes: Optional[str] = None
    hearing_date: Optional[date] = None
    hearing_time: Optional[str] = Field(None, max_length=20)


class HearingResponse(BaseModel):
    """Scheduled hearing of a case."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    case_id: UUID
    hearing_date: date
    hearing_time: Optional[str] = None
    location: Optional[str] = None
    status: HearingStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class HearingListResponse(BaseModel):
    items: List[HearingResponse]
    total: int

"""Pydantic schemas for data requests and status decisions."""

from datetime import datetime

from pydantic import Field

from datadesk.db.enums import RequestDecision, RequestStatus
from datadesk.schemas.base import ApiModel


class DataRequestCreate(ApiModel):
    request_type: str = Field(..., min_length=1, max_length=100)
    industry: str | None = Field(None, max_length=100)
    justification: str = Field(..., min_length=1, max_length=4000)


class DataRequestRead(ApiModel):
    id: int
    user_id: int
    request_type: str
    industry: str | None
    justification: str
    status: RequestStatus
    approved_by: int | None
    companies_assigned: int
    created_at: datetime
    updated_at: datetime


class StatusUpdate(ApiModel):
    """Body of PUT .../:id/status. Anything but approved/rejected is a 400."""

    status: RequestDecision

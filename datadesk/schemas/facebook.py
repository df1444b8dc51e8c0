"""Pydantic schemas for the Facebook data pool."""

from datetime import datetime

from pydantic import Field

from datadesk.db.enums import RequestStatus
from datadesk.schemas.base import ApiModel


class FacebookRequestCreate(ApiModel):
    justification: str = Field(..., min_length=1, max_length=4000)


class FacebookRequestRead(ApiModel):
    id: int
    user_id: int
    justification: str
    status: RequestStatus
    approved_by: int | None
    records_assigned: int
    created_at: datetime
    updated_at: datetime


class FacebookDataRead(ApiModel):
    id: int
    company_name: str
    address: str | None
    email: str | None
    contact: str | None
    products: list[str] = []
    services: list[str] = []
    quantity: int
    created_at: datetime

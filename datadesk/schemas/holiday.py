"""Pydantic schemas for holidays."""

from datetime import datetime

from pydantic import Field

from datadesk.db.enums import HolidayDuration
from datadesk.schemas.base import ApiModel


class HolidayCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: datetime
    description: str | None = None
    duration: HolidayDuration = HolidayDuration.FULL_DAY


class HolidayUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    date: datetime | None = None
    description: str | None = None
    duration: HolidayDuration | None = None


class HolidayRead(ApiModel):
    id: int
    name: str
    date: datetime
    description: str | None
    duration: HolidayDuration
    created_at: datetime

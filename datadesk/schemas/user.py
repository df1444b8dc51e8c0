"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from datadesk.db.enums import Role
from datadesk.schemas.base import ApiModel


class UserRead(ApiModel):
    """Response schema for reading a user (never includes the password hash)."""

    id: int
    username: str
    email: str
    full_name: str
    employee_id: str
    role: Role
    is_active: bool
    login_time: datetime | None
    created_at: datetime


class UserCreate(ApiModel):
    """Admin-side user creation."""

    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=255)
    employee_id: str = Field(..., min_length=1, max_length=50)
    role: Role = Role.EMPLOYEE


class UserUpdate(ApiModel):
    """Partial update; a password here is re-hashed."""

    username: str | None = Field(None, min_length=3, max_length=100)
    email: str | None = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str | None = Field(None, min_length=6, max_length=72)
    full_name: str | None = Field(None, min_length=1, max_length=255)
    employee_id: str | None = Field(None, min_length=1, max_length=50)
    role: Role | None = None
    is_active: bool | None = None

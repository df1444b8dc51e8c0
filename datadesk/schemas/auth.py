"""Authentication-related Pydantic schemas."""

from pydantic import Field

from datadesk.db.enums import Role
from datadesk.schemas.base import ApiModel


class UserSession(ApiModel):
    """
    Session context for authenticated requests.

    Returned by the get_current_session dependency and consulted by every
    capability check.
    """
    user_id: int
    role: Role  # Validated enum
    username: str
    full_name: str


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=72)


class RegisterRequest(ApiModel):
    """Self-registration. New accounts are always employees."""
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=255)
    employee_id: str = Field(..., min_length=1, max_length=50)

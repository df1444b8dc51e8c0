"""Pydantic schemas for API request/response models."""

from datadesk.schemas.auth import LoginRequest, RegisterRequest, UserSession
from datadesk.schemas.comment import CommentCreate, CommentRead
from datadesk.schemas.company import (
    AdminCompanyCreate,
    CompanyCreate,
    CompanyRead,
    CompanyUpdate,
)
from datadesk.schemas.data_request import DataRequestCreate, DataRequestRead, StatusUpdate
from datadesk.schemas.facebook import (
    FacebookDataRead,
    FacebookRequestCreate,
    FacebookRequestRead,
)
from datadesk.schemas.holiday import HolidayCreate, HolidayRead, HolidayUpdate
from datadesk.schemas.user import UserCreate, UserRead, UserUpdate

__all__ = [
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "UserSession",
    # Users
    "UserCreate",
    "UserRead",
    "UserUpdate",
    # Companies
    "AdminCompanyCreate",
    "CompanyCreate",
    "CompanyRead",
    "CompanyUpdate",
    # Comments
    "CommentCreate",
    "CommentRead",
    # Requests
    "DataRequestCreate",
    "DataRequestRead",
    "StatusUpdate",
    "FacebookRequestCreate",
    "FacebookRequestRead",
    "FacebookDataRead",
    # Holidays
    "HolidayCreate",
    "HolidayRead",
    "HolidayUpdate",
]

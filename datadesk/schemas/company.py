"""Pydantic schemas for companies."""

from datetime import datetime

from pydantic import Field

from datadesk.db.enums import CompanyCategory, CompanyStatus
from datadesk.schemas.base import ApiModel


class CompanyCreate(ApiModel):
    """Request to add a company."""
    name: str = Field(..., min_length=1, max_length=255)
    industry: str = Field(..., min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    company_size: str | None = Field(None, max_length=50)
    notes: str | None = None


class AdminCompanyCreate(CompanyCreate):
    """Admin-side creation; may bind the company to a user up front."""
    assigned_to_user_id: int | None = None


class CompanyUpdate(ApiModel):
    """Partial update of contact fields. Ownership and category are not editable here."""
    name: str | None = Field(None, min_length=1, max_length=255)
    industry: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    company_size: str | None = Field(None, max_length=50)
    notes: str | None = None
    status: CompanyStatus | None = None


class CompanyRead(ApiModel):
    id: int
    name: str
    industry: str
    email: str | None
    phone: str | None
    address: str | None
    website: str | None
    company_size: str | None
    notes: str | None
    status: CompanyStatus
    category: CompanyCategory
    assigned_to_user_id: int | None
    created_at: datetime
    updated_at: datetime

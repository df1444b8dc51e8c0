"""SQLAlchemy ORM models for users, companies, comments and allocation requests."""

from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint,
    func, text, true
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datadesk.db.base import Base
from datadesk.db.enums import (
    CompanyCategory, CompanyStatus, HolidayDuration, RequestStatus, Role
)

# JSONB on PostgreSQL, plain JSON elsewhere (tests run on SQLite).
JsonList = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# Users
# =============================================================================

class User(Base):
    """
    Dashboard user.

    username, email and employee_id are each unique; the password column
    holds a bcrypt hash and is never serialized.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    employee_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), server_default=text(f"'{Role.EMPLOYEE.value}'"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=true(), nullable=False)
    token_version: Mapped[int] = mapped_column(
        Integer, server_default=text("1"), nullable=False
    )
    login_time: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )

    # Relationships
    companies: Mapped[list["Company"]] = relationship(back_populates="assigned_to")


# =============================================================================
# Companies & Comments
# =============================================================================

class Company(Base):
    """
    A business record worked by at most one user.

    assigned_to_user_id is NULL while the company sits in the unassigned
    pool. category is the projection of the latest comment.
    """
    __tablename__ = "companies"
    __table_args__ = (
        Index("idx_companies_assigned_to", "assigned_to_user_id"),
        Index("idx_companies_category", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), server_default=text(f"'{CompanyStatus.ACTIVE.value}'"), nullable=False
    )
    category: Mapped[str] = mapped_column(
        String(20),
        server_default=text(f"'{CompanyCategory.ASSIGNED.value}'"),
        nullable=False,
    )
    assigned_to_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )

    # Relationships
    assigned_to: Mapped["User | None"] = relationship(back_populates="companies")
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Comment(Base):
    """
    Append-only annotation on a company.

    comment_date is supplied by the author; created_at is server time.
    """
    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_company", "company_id"),
        Index("idx_comments_user_date", "user_id", "comment_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    comment_date: Mapped[datetime] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )

    # Relationships
    company: Mapped["Company"] = relationship(back_populates="comments")


# =============================================================================
# Allocation Requests
# =============================================================================

class DataRequest(Base):
    """
    A user's ask for a batch of unassigned companies.

    companies_assigned is written once, in the approval transaction.
    """
    __tablename__ = "data_requests"
    __table_args__ = (
        Index("idx_data_requests_user", "user_id"),
        Index("idx_data_requests_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    request_type: Mapped[str] = mapped_column(String(100), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    justification: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), server_default=text(f"'{RequestStatus.PENDING.value}'"), nullable=False
    )
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    companies_assigned: Mapped[int] = mapped_column(
        Integer, server_default=text("0"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )


class FacebookDataRequest(Base):
    """Request for a sample of the shared Facebook data pool."""
    __tablename__ = "facebook_data_requests"
    __table_args__ = (
        Index("idx_facebook_requests_user", "user_id"),
        Index("idx_facebook_requests_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    justification: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), server_default=text(f"'{RequestStatus.PENDING.value}'"), nullable=False
    )
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    records_assigned: Mapped[int] = mapped_column(
        Integer, server_default=text("0"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )


class FacebookData(Base):
    """
    Lead record in the non-exclusive Facebook pool.

    The same record may be handed to many users; see AssignedFacebookData.
    """
    __tablename__ = "facebook_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact: Mapped[str | None] = mapped_column(String(50), nullable=True)
    products: Mapped[list[str]] = mapped_column(JsonList, default=list, nullable=False)
    services: Mapped[list[str]] = mapped_column(JsonList, default=list, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, server_default=text("0"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )


class AssignedFacebookData(Base):
    """Join row: a Facebook record handed to a user (once per pair)."""
    __tablename__ = "assigned_facebook_data"
    __table_args__ = (
        UniqueConstraint("facebook_data_id", "user_id", name="uq_assigned_facebook_data_pair"),
        Index("idx_assigned_facebook_data_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facebook_data_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("facebook_data.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    request_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("facebook_data_requests.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )

    # Relationships
    facebook_data: Mapped["FacebookData"] = relationship()


# =============================================================================
# Holidays
# =============================================================================

class Holiday(Base):
    __tablename__ = "holidays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[str] = mapped_column(
        String(20), server_default=text(f"'{HolidayDuration.FULL_DAY.value}'"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False
    )

"""Company CRUD outside the assignment engine."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from datadesk.core.exceptions import ForbiddenError, NotFoundError, ValidationFailure
from datadesk.db.models import Company, User
from datadesk.schemas.company import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)


def get_company(db: Session, company_id: int) -> Company | None:
    return db.get(Company, company_id)


def list_companies(db: Session) -> list[Company]:
    """All companies, most recently touched first."""
    return list(
        db.execute(
            select(Company).order_by(Company.updated_at.desc(), Company.id.desc())
        ).scalars().all()
    )


def list_user_companies(db: Session, user_id: int) -> list[Company]:
    """Companies owned by the user, most recently touched first."""
    return list(
        db.execute(
            select(Company)
            .where(Company.assigned_to_user_id == user_id)
            .order_by(Company.updated_at.desc(), Company.id.desc())
        ).scalars().all()
    )


def count_unassigned(db: Session) -> int:
    return db.execute(
        select(func.count(Company.id)).where(Company.assigned_to_user_id.is_(None))
    ).scalar_one()


def create_company(
    db: Session,
    data: CompanyCreate,
    assigned_to_user_id: int | None = None,
) -> Company:
    """
    Create a company, optionally owned from the start.

    Ownership set here is a manual entry, not a pool claim.
    """
    if assigned_to_user_id is not None and db.get(User, assigned_to_user_id) is None:
        raise ValidationFailure(
            "Invalid company data",
            errors=[{"field": "assignedToUserId", "message": "User does not exist"}],
        )

    company = Company(
        **data.model_dump(exclude={"assigned_to_user_id"}),
        assigned_to_user_id=assigned_to_user_id,
        updated_at=datetime.now(timezone.utc),
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("Created company %s (owner %s)", company.id, assigned_to_user_id)
    return company


def update_company(
    db: Session,
    company_id: int,
    data: CompanyUpdate,
    actor_user_id: int,
    actor_may_edit_any: bool,
) -> Company:
    """Update contact fields. Employees may only edit companies they own."""
    company = get_company(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    if not actor_may_edit_any and company.assigned_to_user_id != actor_user_id:
        raise ForbiddenError("You can only edit companies assigned to you")

    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "status" and value is not None:
            value = value.value
        setattr(company, field, value)
    company.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(company)
    return company


def delete_company(db: Session, company_id: int) -> None:
    """Delete a company and, by cascade, its comment history."""
    company = get_company(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    db.delete(company)
    db.commit()
    logger.info("Deleted company %s", company_id)

"""Categorization engine: comments and the company category they drive.

A company's category is a projection of its latest comment. Inserting the
comment and moving the category happen in one transaction, with the
company row locked so comments on the same company apply in commit order.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from datadesk.core.exceptions import NotFoundError, ValidationFailure
from datadesk.db.enums import CompanyCategory, CommentCategory
from datadesk.db.models import Comment, Company
from datadesk.db.transaction import atomic

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_category(category: CommentCategory | str) -> CommentCategory:
    try:
        return CommentCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in CommentCategory)
        raise ValidationFailure(
            "Invalid comment category",
            errors=[{"field": "category", "message": f"Must be one of: {allowed}"}],
        )


def add_comment(
    db: Session,
    company_id: int,
    user_id: int,
    content: str,
    category: CommentCategory | str,
    comment_date: datetime,
) -> Comment:
    """
    Record a comment and reclassify its company to the comment's category.

    Raises:
        ValidationFailure: bad category, blank content, or missing date
        NotFoundError: company does not exist (nothing is written)
        TransactionFailure: database error (everything rolled back)
    """
    category = _coerce_category(category)
    if not content or not content.strip():
        raise ValidationFailure(
            "Invalid comment",
            errors=[{"field": "content", "message": "Content must not be blank"}],
        )
    if not isinstance(comment_date, datetime):
        raise ValidationFailure(
            "Invalid comment",
            errors=[{"field": "commentDate", "message": "Must be a valid date and time"}],
        )
    # Naive dates are taken as UTC; everything is stored in UTC.
    if comment_date.tzinfo is None:
        comment_date = comment_date.replace(tzinfo=timezone.utc)
    comment_date = comment_date.astimezone(timezone.utc)

    with atomic(db, f"add comment to company {company_id}"):
        company_exists = db.execute(
            select(Company.id).where(Company.id == company_id).with_for_update()
        ).scalar_one_or_none()
        if company_exists is None:
            raise NotFoundError("Company not found")

        comment = Comment(
            company_id=company_id,
            user_id=user_id,
            content=content,
            category=category.value,
            comment_date=comment_date,
        )
        db.add(comment)
        db.flush()

        table = Company.__table__
        db.execute(
            update(table)
            .where(table.c.id == company_id)
            .values(category=category.value, updated_at=_now())
        )

    logger.info(
        "Comment %s by user %s moved company %s to '%s'",
        comment.id, user_id, company_id, category.value,
    )
    return comment


# =============================================================================
# Read side
# =============================================================================


def parse_category(category: str) -> CompanyCategory:
    """Parse a path segment into a list category, or raise ValidationFailure."""
    try:
        return CompanyCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in CompanyCategory)
        raise ValidationFailure(
            "Invalid category",
            errors=[{"field": "category", "message": f"Must be one of: {allowed}"}],
        )


def list_companies_by_category(
    db: Session,
    category: CompanyCategory,
    user_id: int | None = None,
) -> list[Company]:
    """Companies currently in a category, most recently touched first."""
    query = select(Company).where(Company.category == category.value)
    if user_id is not None:
        query = query.where(Company.assigned_to_user_id == user_id)
    query = query.order_by(Company.updated_at.desc(), Company.id.desc())
    return list(db.execute(query).scalars().all())


def list_comments_for_company(db: Session, company_id: int) -> list[Comment]:
    """Comment history for a company, newest first."""
    return list(
        db.execute(
            select(Comment)
            .where(Comment.company_id == company_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        ).scalars().all()
    )


def list_todays_comments(db: Session, user_id: int, now: datetime | None = None) -> list[Comment]:
    """The user's comments whose comment_date falls on the current UTC day."""
    now = now or _now()
    start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return list(
        db.execute(
            select(Comment)
            .where(
                Comment.user_id == user_id,
                Comment.comment_date >= start,
                Comment.comment_date < end,
            )
            .order_by(Comment.comment_date.desc())
        ).scalars().all()
    )

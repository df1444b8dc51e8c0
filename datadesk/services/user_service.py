"""User management: registration, admin edits, login bookkeeping."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from datadesk.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from datadesk.core.permissions import can_grant_role
from datadesk.core.security import hash_password, verify_password
from datadesk.db.enums import Role
from datadesk.db.models import User
from datadesk.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("username", "email", "employee_id")
_FIELD_LABELS = {"username": "username", "email": "email", "employee_id": "employeeId"}


def _check_unique(db: Session, values: dict, exclude_user_id: int | None = None) -> None:
    """Raise ConflictError naming the first unique field already taken."""
    for field in UNIQUE_FIELDS:
        value = values.get(field)
        if value is None:
            continue
        query = select(User.id).where(getattr(User, field) == value)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        if db.execute(query).first():
            label = _FIELD_LABELS[field]
            raise ConflictError(f"A user with this {label} already exists", field=label)


def _conflict_from_integrity_error(exc: IntegrityError) -> ConflictError:
    message = str(exc.orig).lower()
    for field in UNIQUE_FIELDS:
        if field in message:
            label = _FIELD_LABELS[field]
            return ConflictError(f"A user with this {label} already exists", field=label)
    return ConflictError("A user with these details already exists", field="username")


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def list_users(db: Session) -> list[User]:
    """All users, newest first."""
    return list(db.execute(select(User).order_by(User.created_at.desc(), User.id.desc())).scalars().all())


def create_user(db: Session, data: UserCreate) -> User:
    """Create a user with a hashed password."""
    values = data.model_dump()
    _check_unique(db, values)

    user = User(
        username=data.username,
        email=data.email,
        password=hash_password(data.password),
        full_name=data.full_name,
        employee_id=data.employee_id,
        role=data.role.value,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _conflict_from_integrity_error(exc)
    db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate, actor_role: Role) -> User:
    """Apply a partial update. Role changes to admin require an admin actor."""
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    updates = data.model_dump(exclude_unset=True)
    if updates.get("role") is not None and not can_grant_role(actor_role, updates["role"]):
        raise ForbiddenError("Only admins can grant the admin role")
    _check_unique(db, updates, exclude_user_id=user_id)

    for field, value in updates.items():
        if value is None:
            continue
        if field == "password":
            user.password = hash_password(value)
            # Password change revokes existing sessions
            user.token_version += 1
        elif field == "role":
            user.role = Role(value).value
        elif field == "is_active" and value is False:
            user.is_active = False
            user.token_version += 1
        else:
            setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _conflict_from_integrity_error(exc)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, actor_user_id: int) -> None:
    """Delete a user. Their companies return to the unassigned pool."""
    if user_id == actor_user_id:
        raise ForbiddenError("You cannot delete your own account")
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (by user %s)", user_id, actor_user_id)


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Return the active user matching the credentials, else None."""
    user = get_user_by_username(db, username)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password):
        return None
    return user


def touch_login_time(db: Session, user: User) -> None:
    user.login_time = datetime.now(timezone.utc)
    db.commit()

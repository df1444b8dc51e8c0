"""Request dependencies: db session, session cookie auth, capabilities, CSRF."""

from typing import Generator

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from datadesk.core.exceptions import ForbiddenError, UnauthenticatedError
from datadesk.core.permissions import Action, can
from datadesk.core.security import decode_session_token
from datadesk.db.enums import Role
from datadesk.db.models import User
from datadesk.db.session import SessionLocal
from datadesk.schemas.auth import UserSession


COOKIE_NAME = "datadesk_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """One session per request, closed when the response is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the session cookie to a User row.

    Any of these is a 401: no cookie, a token that fails to decode under
    every configured secret, a deleted or deactivated user, or a
    token_version older than the user's (a password change or
    deactivation bumps it).
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise UnauthenticatedError("Not authenticated")

    try:
        payload = decode_session_token(token)
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthenticatedError("Invalid session")

    user = db.get(User, user_id)
    if not user:
        raise UnauthenticatedError("User not found")

    if not user.is_active:
        raise UnauthenticatedError("Account disabled")

    if user.token_version != payload.get("token_version"):
        raise UnauthenticatedError("Session revoked")

    return user


def get_current_session(
    request: Request,
    db: Session = Depends(get_db)
) -> UserSession:
    """Authenticated caller as a UserSession (id, role, names)."""
    user = get_current_user(request, db)

    # A role string outside the enum is a data problem, not a crash
    if not Role.has_value(user.role):
        raise ForbiddenError(f"Unknown role '{user.role}'. Contact administrator.")

    return UserSession(
        user_id=user.id,
        role=Role(user.role),
        username=user.username,
        full_name=user.full_name,
    )


def require_capability(action: Action):
    """
    Build a dependency that returns the caller's UserSession when their role
    can perform `action` and raises 403 otherwise.

        session: UserSession = Depends(require_capability(Action.REQUEST_DECIDE))
    """
    def dependency(request: Request, db: Session = Depends(get_db)) -> UserSession:
        session = get_current_session(request, db)
        if not can(session.role, action):
            raise ForbiddenError(
                f"Role '{session.role.value}' not authorized for this action"
            )
        return session
    return dependency


def require_csrf_header(request: Request) -> None:
    """Reject state-changing requests that lack the X-Requested-With header."""
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise ForbiddenError(
            f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )

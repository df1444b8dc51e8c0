"""Authentication endpoints: register, login, logout, current user."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from datadesk.core.config import settings
from datadesk.core.deps import COOKIE_NAME, get_current_user, get_db, require_csrf_header
from datadesk.core.exceptions import UnauthenticatedError
from datadesk.core.rate_limit import auth_limit, limiter
from datadesk.core.security import create_session_token
from datadesk.db.enums import Role
from datadesk.schemas.auth import LoginRequest, RegisterRequest
from datadesk.schemas.user import UserCreate, UserRead
from datadesk.services import user_service

router = APIRouter(prefix="/api", tags=["auth"])


def _set_session_cookie(response: Response, user) -> None:
    token = create_session_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(auth_limit)
def register(
    request: Request,
    response: Response,
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Self-registration. Always creates an employee and logs them in."""
    user = user_service.create_user(
        db,
        UserCreate(**data.model_dump(), role=Role.EMPLOYEE),
    )
    user_service.touch_login_time(db, user)
    _set_session_cookie(response, user)
    return user


@router.post("/login", response_model=UserRead, dependencies=[Depends(require_csrf_header)])
@limiter.limit(auth_limit)
def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Check credentials and set the session cookie."""
    user = user_service.authenticate(db, data.username, data.password)
    if not user:
        raise UnauthenticatedError("Invalid username or password")
    user_service.touch_login_time(db, user)
    _set_session_cookie(response, user)
    return user


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/user", response_model=UserRead)
def me(user=Depends(get_current_user)):
    """Current authenticated user."""
    return user


@router.post("/user/login-time", dependencies=[Depends(require_csrf_header)])
def update_login_time(
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record that the user opened the dashboard."""
    user_service.touch_login_time(db, user)
    return {"status": "ok"}

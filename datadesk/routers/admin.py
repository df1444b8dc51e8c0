"""Admin endpoints: user management and direct company assignment."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from datadesk.core.deps import get_db, require_capability, require_csrf_header
from datadesk.core.exceptions import ForbiddenError
from datadesk.core.permissions import Action, can_grant_role
from datadesk.schemas.auth import UserSession
from datadesk.schemas.company import AdminCompanyCreate, CompanyRead
from datadesk.schemas.user import UserCreate, UserRead, UserUpdate
from datadesk.services import company_service, user_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


# =============================================================================
# Users
# =============================================================================


@router.get("/users", response_model=list[UserRead])
def list_users(
    session: UserSession = Depends(require_capability(Action.USER_VIEW)),
    db: Session = Depends(get_db),
):
    return user_service.list_users(db)


@router.post(
    "/users",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_user(
    data: UserCreate,
    session: UserSession = Depends(require_capability(Action.USER_CREATE)),
    db: Session = Depends(get_db),
):
    if not can_grant_role(session.role, data.role):
        raise ForbiddenError("Only admins can grant the admin role")
    return user_service.create_user(db, data)


@router.put(
    "/users/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_user(
    user_id: int,
    data: UserUpdate,
    session: UserSession = Depends(require_capability(Action.USER_UPDATE)),
    db: Session = Depends(get_db),
):
    return user_service.update_user(db, user_id, data, actor_role=session.role)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def delete_user(
    user_id: int,
    session: UserSession = Depends(require_capability(Action.USER_DELETE)),
    db: Session = Depends(get_db),
):
    user_service.delete_user(db, user_id, actor_user_id=session.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Companies
# =============================================================================


@router.post(
    "/companies",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_company(
    data: AdminCompanyCreate,
    session: UserSession = Depends(require_capability(Action.COMPANY_ASSIGN)),
    db: Session = Depends(get_db),
):
    """Create a company, optionally bound to a user (unassigned goes to the pool)."""
    return company_service.create_company(
        db, data, assigned_to_user_id=data.assigned_to_user_id
    )


@router.delete(
    "/companies/{company_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def delete_company(
    company_id: int,
    session: UserSession = Depends(require_capability(Action.COMPANY_DELETE)),
    db: Session = Depends(get_db),
):
    company_service.delete_company(db, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Company endpoints: lists (all, mine, per category) and CRUD."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from datadesk.core.deps import (
    get_current_session,
    get_db,
    require_capability,
    require_csrf_header,
)
from datadesk.core.exceptions import NotFoundError
from datadesk.core.permissions import Action, can
from datadesk.schemas.auth import UserSession
from datadesk.schemas.company import CompanyCreate, CompanyRead, CompanyUpdate
from datadesk.services import categorization_service, company_service

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("", response_model=list[CompanyRead])
def list_companies(
    session: UserSession = Depends(require_capability(Action.COMPANY_VIEW)),
    db: Session = Depends(get_db),
):
    """All companies."""
    return company_service.list_companies(db)


@router.get("/my", response_model=list[CompanyRead])
def list_my_companies(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Companies assigned to the current user."""
    return company_service.list_user_companies(db, session.user_id)


@router.get("/category/{category}", response_model=list[CompanyRead])
def list_companies_by_category(
    category: str,
    mine: bool = False,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Companies currently in a category.

    Employees always see only their own companies; roles that can decide
    requests see everyone's unless ?mine=true.
    """
    parsed = categorization_service.parse_category(category)
    own_only = mine or not can(session.role, Action.REQUEST_VIEW_PENDING)
    return categorization_service.list_companies_by_category(
        db, parsed, user_id=session.user_id if own_only else None
    )


@router.get("/{company_id}", response_model=CompanyRead)
def get_company(
    company_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    company = company_service.get_company(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    return company


@router.post(
    "",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_company(
    data: CompanyCreate,
    session: UserSession = Depends(require_capability(Action.COMPANY_CREATE)),
    db: Session = Depends(get_db),
):
    """Add a company; it is owned by the user who entered it."""
    return company_service.create_company(db, data, assigned_to_user_id=session.user_id)


@router.put(
    "/{company_id}",
    response_model=CompanyRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_company(
    company_id: int,
    data: CompanyUpdate,
    session: UserSession = Depends(require_capability(Action.COMPANY_UPDATE)),
    db: Session = Depends(get_db),
):
    return company_service.update_company(
        db,
        company_id,
        data,
        actor_user_id=session.user_id,
        actor_may_edit_any=can(session.role, Action.COMPANY_ASSIGN),
    )


@router.delete(
    "/{company_id}",
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

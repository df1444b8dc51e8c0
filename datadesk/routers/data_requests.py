"""Data request endpoints. Decisions run through the assignment engine."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from datadesk.core.deps import (
    get_current_session,
    get_db,
    require_capability,
    require_csrf_header,
)
from datadesk.core.permissions import Action
from datadesk.db.enums import RequestKind
from datadesk.schemas.auth import UserSession
from datadesk.schemas.data_request import DataRequestCreate, DataRequestRead, StatusUpdate
from datadesk.services import assignment_service, request_service

router = APIRouter(prefix="/api/data-requests", tags=["data-requests"])


@router.get("", response_model=list[DataRequestRead])
def list_my_requests(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The current user's request history."""
    return request_service.list_user_data_requests(db, session.user_id)


@router.get("/pending", response_model=list[DataRequestRead])
def list_pending_requests(
    session: UserSession = Depends(require_capability(Action.REQUEST_VIEW_PENDING)),
    db: Session = Depends(get_db),
):
    return request_service.list_pending_data_requests(db)


@router.post(
    "",
    response_model=DataRequestRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_request(
    data: DataRequestCreate,
    session: UserSession = Depends(require_capability(Action.REQUEST_CREATE)),
    db: Session = Depends(get_db),
):
    return request_service.create_data_request(db, session.user_id, data)


@router.put(
    "/{request_id}/status",
    response_model=DataRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_request_status(
    request_id: int,
    data: StatusUpdate,
    session: UserSession = Depends(require_capability(Action.REQUEST_DECIDE)),
    db: Session = Depends(get_db),
):
    """
    Approve or reject a pending request.

    Approval claims up to ASSIGNMENT_BATCH_SIZE unassigned companies for the
    requester; the response carries companiesAssigned.
    """
    return assignment_service.decide(
        db, RequestKind.DATA, request_id, session.user_id, data.status
    )

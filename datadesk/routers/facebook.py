"""Facebook data endpoints: requests, decisions, and the caller's assigned records."""

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
from datadesk.schemas.data_request import StatusUpdate
from datadesk.schemas.facebook import (
    FacebookDataRead,
    FacebookRequestCreate,
    FacebookRequestRead,
)
from datadesk.services import assignment_service, request_service

router = APIRouter(prefix="/api", tags=["facebook"])


@router.get("/facebook-data", response_model=list[FacebookDataRead])
def list_my_facebook_data(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Facebook records assigned to the current user."""
    return request_service.list_assigned_facebook_data(db, session.user_id)


@router.get("/facebook-requests", response_model=list[FacebookRequestRead])
def list_my_requests(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return request_service.list_user_facebook_requests(db, session.user_id)


@router.get("/facebook-requests/pending", response_model=list[FacebookRequestRead])
def list_pending_requests(
    session: UserSession = Depends(require_capability(Action.REQUEST_VIEW_PENDING)),
    db: Session = Depends(get_db),
):
    return request_service.list_pending_facebook_requests(db)


@router.post(
    "/facebook-requests",
    response_model=FacebookRequestRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_request(
    data: FacebookRequestCreate,
    session: UserSession = Depends(require_capability(Action.REQUEST_CREATE)),
    db: Session = Depends(get_db),
):
    return request_service.create_facebook_request(db, session.user_id, data)


@router.put(
    "/facebook-requests/{request_id}/status",
    response_model=FacebookRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_request_status(
    request_id: int,
    data: StatusUpdate,
    session: UserSession = Depends(require_capability(Action.REQUEST_DECIDE)),
    db: Session = Depends(get_db),
):
    """Approve (assign a pool sample) or reject a pending Facebook request."""
    return assignment_service.decide(
        db, RequestKind.FACEBOOK, request_id, session.user_id, data.status
    )

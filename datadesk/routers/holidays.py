"""Holiday calendar endpoints (admin-managed)."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from datadesk.core.deps import get_db, require_capability, require_csrf_header
from datadesk.core.permissions import Action
from datadesk.schemas.auth import UserSession
from datadesk.schemas.holiday import HolidayCreate, HolidayRead, HolidayUpdate
from datadesk.services import holiday_service

router = APIRouter(prefix="/api/holidays", tags=["holidays"])


@router.get("", response_model=list[HolidayRead])
def list_holidays(
    session: UserSession = Depends(require_capability(Action.HOLIDAY_VIEW)),
    db: Session = Depends(get_db),
):
    return holiday_service.list_holidays(db)


@router.post(
    "",
    response_model=HolidayRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_holiday(
    data: HolidayCreate,
    session: UserSession = Depends(require_capability(Action.HOLIDAY_MANAGE)),
    db: Session = Depends(get_db),
):
    return holiday_service.create_holiday(db, data)


@router.put(
    "/{holiday_id}",
    response_model=HolidayRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_holiday(
    holiday_id: int,
    data: HolidayUpdate,
    session: UserSession = Depends(require_capability(Action.HOLIDAY_MANAGE)),
    db: Session = Depends(get_db),
):
    return holiday_service.update_holiday(db, holiday_id, data)


@router.delete(
    "/{holiday_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def delete_holiday(
    holiday_id: int,
    session: UserSession = Depends(require_capability(Action.HOLIDAY_MANAGE)),
    db: Session = Depends(get_db),
):
    holiday_service.delete_holiday(db, holiday_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

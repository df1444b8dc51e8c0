"""Holiday calendar CRUD."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from datadesk.core.exceptions import NotFoundError
from datadesk.db.models import Holiday
from datadesk.schemas.holiday import HolidayCreate, HolidayUpdate


def list_holidays(db: Session) -> list[Holiday]:
    """Holidays in date order."""
    return list(db.execute(select(Holiday).order_by(Holiday.date, Holiday.id)).scalars().all())


def create_holiday(db: Session, data: HolidayCreate) -> Holiday:
    holiday = Holiday(
        name=data.name,
        date=data.date,
        description=data.description,
        duration=data.duration.value,
    )
    db.add(holiday)
    db.commit()
    db.refresh(holiday)
    return holiday


def update_holiday(db: Session, holiday_id: int, data: HolidayUpdate) -> Holiday:
    holiday = db.get(Holiday, holiday_id)
    if not holiday:
        raise NotFoundError("Holiday not found")
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field == "duration":
            value = value.value
        setattr(holiday, field, value)
    db.commit()
    db.refresh(holiday)
    return holiday


def delete_holiday(db: Session, holiday_id: int) -> None:
    holiday = db.get(Holiday, holiday_id)
    if not holiday:
        raise NotFoundError("Holiday not found")
    db.delete(holiday)
    db.commit()

"""Creating and listing allocation requests (decisions live in assignment_service)."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from datadesk.db.enums import RequestStatus
from datadesk.db.models import (
    AssignedFacebookData,
    DataRequest,
    FacebookData,
    FacebookDataRequest,
)
from datadesk.schemas.data_request import DataRequestCreate
from datadesk.schemas.facebook import FacebookRequestCreate

logger = logging.getLogger(__name__)


# =============================================================================
# Data requests
# =============================================================================

def create_data_request(db: Session, user_id: int, data: DataRequestCreate) -> DataRequest:
    request = DataRequest(
        user_id=user_id,
        request_type=data.request_type,
        industry=data.industry,
        justification=data.justification,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("User %s filed data request %s", user_id, request.id)
    return request


def list_user_data_requests(db: Session, user_id: int) -> list[DataRequest]:
    return list(
        db.execute(
            select(DataRequest)
            .where(DataRequest.user_id == user_id)
            .order_by(DataRequest.created_at.desc(), DataRequest.id.desc())
        ).scalars().all()
    )


def list_pending_data_requests(db: Session) -> list[DataRequest]:
    return list(
        db.execute(
            select(DataRequest)
            .where(DataRequest.status == RequestStatus.PENDING.value)
            .order_by(DataRequest.created_at.desc(), DataRequest.id.desc())
        ).scalars().all()
    )


# =============================================================================
# Facebook requests
# =============================================================================

def create_facebook_request(
    db: Session, user_id: int, data: FacebookRequestCreate
) -> FacebookDataRequest:
    request = FacebookDataRequest(user_id=user_id, justification=data.justification)
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("User %s filed facebook request %s", user_id, request.id)
    return request


def list_user_facebook_requests(db: Session, user_id: int) -> list[FacebookDataRequest]:
    return list(
        db.execute(
            select(FacebookDataRequest)
            .where(FacebookDataRequest.user_id == user_id)
            .order_by(FacebookDataRequest.created_at.desc(), FacebookDataRequest.id.desc())
        ).scalars().all()
    )


def list_pending_facebook_requests(db: Session) -> list[FacebookDataRequest]:
    return list(
        db.execute(
            select(FacebookDataRequest)
            .where(FacebookDataRequest.status == RequestStatus.PENDING.value)
            .order_by(FacebookDataRequest.created_at.desc(), FacebookDataRequest.id.desc())
        ).scalars().all()
    )


def list_assigned_facebook_data(db: Session, user_id: int) -> list[FacebookData]:
    """Facebook records handed to the user, most recent assignment first."""
    return list(
        db.execute(
            select(FacebookData)
            .join(AssignedFacebookData, AssignedFacebookData.facebook_data_id == FacebookData.id)
            .where(AssignedFacebookData.user_id == user_id)
            .order_by(AssignedFacebookData.created_at.desc(), AssignedFacebookData.id.desc())
        ).scalars().all()
    )


def count_facebook_pool(db: Session) -> int:
    return db.execute(select(func.count(FacebookData.id))).scalar_one()

"""Assignment engine: request decisions and the pool claims they trigger.

Approving a data request claims up to ASSIGNMENT_BATCH_SIZE unassigned
companies for the requester. Approving a Facebook request hands the
requester a random sample of the shared Facebook pool. Both run as one
transaction: the status flip, the claim and the claim count commit together
or not at all.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from datadesk.core.config import settings
from datadesk.core.exceptions import InvalidTransitionError, NotFoundError
from datadesk.db.enums import RequestDecision, RequestKind, RequestStatus
from datadesk.db.models import (
    AssignedFacebookData,
    Company,
    DataRequest,
    FacebookData,
    FacebookDataRequest,
)
from datadesk.db.transaction import atomic

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Status transition (pending → approved | rejected)
# =============================================================================


def _transition(
    db: Session,
    model: type[DataRequest] | type[FacebookDataRequest],
    request_id: int,
    approver_id: int,
    new_status: RequestStatus,
):
    """
    Flip a pending request to a terminal status.

    The guarded UPDATE is the lock: of two racing decisions on the same
    request, exactly one matches status='pending'.
    """
    table = model.__table__
    result = db.execute(
        update(table)
        .where(table.c.id == request_id, table.c.status == RequestStatus.PENDING.value)
        .values(status=new_status.value, approved_by=approver_id, updated_at=_now())
    )
    if result.rowcount == 0:
        existing = db.get(model, request_id)
        if existing is None:
            raise NotFoundError("Request not found")
        raise InvalidTransitionError(
            f"Request {request_id} is already {existing.status}",
            errors=[{"field": "status", "message": f"Request is already {existing.status}"}],
        )
    return db.get(model, request_id, populate_existing=True)


# =============================================================================
# Company pool (exclusive ownership)
# =============================================================================


def _claim_company(db: Session, company_id: int, user_id: int, now: datetime) -> bool:
    """Bind one company to the user if it is still unowned. Returns False if it was taken."""
    table = Company.__table__
    result = db.execute(
        update(table)
        .where(table.c.id == company_id, table.c.assigned_to_user_id.is_(None))
        .values(assigned_to_user_id=user_id, updated_at=now)
    )
    return result.rowcount == 1


def claim_unassigned_companies(db: Session, user_id: int, limit: int) -> list[int]:
    """
    Claim up to `limit` unassigned companies for the user, lowest id first.

    Candidate rows are locked with FOR UPDATE SKIP LOCKED so a concurrent
    approval moves on to the next free rows instead of waiting. Each row is
    then updated on its own, guarded by assigned_to_user_id IS NULL, and only
    rows the guard accepted are counted.

    Must run inside the caller's transaction.
    """
    candidate_ids = db.execute(
        select(Company.id)
        .where(Company.assigned_to_user_id.is_(None))
        .order_by(Company.id)
        .limit(limit)
        .with_for_update(skip_locked=True)
    ).scalars().all()

    now = _now()
    claimed: list[int] = []
    for company_id in candidate_ids:
        if _claim_company(db, company_id, user_id, now):
            claimed.append(company_id)
    return claimed


def approve_data_request(
    db: Session,
    request_id: int,
    approver_id: int,
    batch_size: int | None = None,
) -> DataRequest:
    """
    Approve a pending data request and claim companies for its requester.

    An empty pool is not an error: the request is approved with
    companies_assigned == 0.

    Raises:
        NotFoundError: no such request
        InvalidTransitionError: request is not pending
        TransactionFailure: database error (everything rolled back)
    """
    limit = batch_size if batch_size is not None else settings.ASSIGNMENT_BATCH_SIZE

    with atomic(db, f"approve data request {request_id}"):
        request = _transition(db, DataRequest, request_id, approver_id, RequestStatus.APPROVED)
        claimed = claim_unassigned_companies(db, request.user_id, limit)
        request.companies_assigned = len(claimed)

    logger.info(
        "Data request %s approved by user %s: %s companies assigned to user %s",
        request_id, approver_id, request.companies_assigned, request.user_id,
    )
    return request


def reject_data_request(db: Session, request_id: int, approver_id: int) -> DataRequest:
    """Reject a pending data request. No company is touched."""
    with atomic(db, f"reject data request {request_id}"):
        request = _transition(db, DataRequest, request_id, approver_id, RequestStatus.REJECTED)

    logger.info("Data request %s rejected by user %s", request_id, approver_id)
    return request


# =============================================================================
# Facebook pool (shared, one row per record/user pair)
# =============================================================================


def _insert_assignment(db: Session, facebook_data_id: int, user_id: int, request_id: int) -> bool:
    """Record a (record, user) pair. Returns False if the pair already existed."""
    values = {
        "facebook_data_id": facebook_data_id,
        "user_id": user_id,
        "request_id": request_id,
    }
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Facebook assignment is not supported on {dialect}")

    stmt = (
        insert(AssignedFacebookData.__table__)
        .values(**values)
        .on_conflict_do_nothing(index_elements=["facebook_data_id", "user_id"])
    )
    return db.execute(stmt).rowcount == 1


def assign_facebook_sample(db: Session, user_id: int, request_id: int, limit: int) -> list[int]:
    """
    Hand the user a random sample of up to `limit` Facebook records.

    Records already held by the user are silently skipped, so the number
    newly assigned may be below the sample size.
    """
    sample_ids = db.execute(
        select(FacebookData.id).order_by(func.random()).limit(limit)
    ).scalars().all()

    assigned: list[int] = []
    for facebook_data_id in sample_ids:
        if _insert_assignment(db, facebook_data_id, user_id, request_id):
            assigned.append(facebook_data_id)
    return assigned


def approve_facebook_request(
    db: Session,
    request_id: int,
    approver_id: int,
    batch_size: int | None = None,
) -> FacebookDataRequest:
    """Approve a pending Facebook request and assign a sample of the pool."""
    limit = batch_size if batch_size is not None else settings.FACEBOOK_BATCH_SIZE

    with atomic(db, f"approve facebook request {request_id}"):
        request = _transition(
            db, FacebookDataRequest, request_id, approver_id, RequestStatus.APPROVED
        )
        assigned = assign_facebook_sample(db, request.user_id, request.id, limit)
        request.records_assigned = len(assigned)

    logger.info(
        "Facebook request %s approved by user %s: %s records assigned to user %s",
        request_id, approver_id, request.records_assigned, request.user_id,
    )
    return request


def reject_facebook_request(
    db: Session, request_id: int, approver_id: int
) -> FacebookDataRequest:
    """Reject a pending Facebook request. The pool is not touched."""
    with atomic(db, f"reject facebook request {request_id}"):
        request = _transition(
            db, FacebookDataRequest, request_id, approver_id, RequestStatus.REJECTED
        )

    logger.info("Facebook request %s rejected by user %s", request_id, approver_id)
    return request


# =============================================================================
# Dispatch
# =============================================================================


@dataclass(frozen=True)
class DecisionHandlers:
    approve: Callable[[Session, int, int], object]
    reject: Callable[[Session, int, int], object]


def _handlers(kind: RequestKind) -> DecisionHandlers:
    # Looked up per call so tests can monkeypatch the module functions.
    if kind == RequestKind.DATA:
        return DecisionHandlers(approve=approve_data_request, reject=reject_data_request)
    return DecisionHandlers(approve=approve_facebook_request, reject=reject_facebook_request)


def decide(
    db: Session,
    kind: RequestKind,
    request_id: int,
    approver_id: int,
    decision: RequestDecision,
):
    """Apply an approve/reject decision to a request of the given kind."""
    handlers = _handlers(kind)
    if decision == RequestDecision.APPROVED:
        return handlers.approve(db, request_id, approver_id)
    return handlers.reject(db, request_id, approver_id)

"""Concurrent approvals never hand one company to two users."""
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from datadesk.core.exceptions import TransactionFailure
from datadesk.db.enums import RequestStatus
from datadesk.db.models import Company, DataRequest
from datadesk.db.session import SessionLocal, engine
from datadesk.services import assignment_service


def _approve_in_own_session(request_id: int, approver_id: int):
    session = SessionLocal()
    try:
        request = assignment_service.approve_data_request(session, request_id, approver_id)
        return request.companies_assigned
    except TransactionFailure:
        # Lost a lock race on backends without row locks; the request stays pending
        return None
    finally:
        session.close()


def test_parallel_approvals_never_double_assign(db, make_user, team_lead, make_company):
    pool_size = 25
    for _ in range(pool_size):
        make_company()
    requesters = [make_user() for _ in range(5)]
    requests = []
    for user in requesters:
        request = DataRequest(user_id=user.id, request_type="bulk", justification="Leads")
        db.add(request)
        requests.append(request)
    db.commit()
    request_ids = [r.id for r in requests]
    user_ids = [u.id for u in requesters]
    approver_id = team_lead.id
    db.close()

    with ThreadPoolExecutor(max_workers=len(request_ids)) as pool:
        results = list(pool.map(lambda rid: _approve_in_own_session(rid, approver_id), request_ids))

    claimed_total = sum(r for r in results if r is not None)
    assigned_rows = db.execute(
        select(func.count(Company.id)).where(Company.assigned_to_user_id.is_not(None))
    ).scalar_one()
    assert claimed_total == assigned_rows
    assert assigned_rows <= pool_size

    for user_id, request_id, claimed in zip(user_ids, request_ids, results):
        request = db.get(DataRequest, request_id)
        owned = db.execute(
            select(func.count(Company.id)).where(Company.assigned_to_user_id == user_id)
        ).scalar_one()
        if claimed is None:
            assert request.status == RequestStatus.PENDING.value
            assert owned == 0
        else:
            assert request.status == RequestStatus.APPROVED.value
            assert request.companies_assigned == owned == claimed


@pytest.mark.skipif(
    engine.dialect.name != "postgresql",
    reason="SKIP LOCKED behavior needs PostgreSQL",
)
def test_locked_rows_are_skipped_not_waited_on(db, make_user, team_lead, make_company):
    for _ in range(4):
        make_company()
    first_user, second_user = make_user(), make_user()
    request = DataRequest(user_id=second_user.id, request_type="bulk", justification="Leads")
    db.add(request)
    db.commit()

    holder = SessionLocal()
    try:
        held = assignment_service.claim_unassigned_companies(holder, first_user.id, 2)

        # Runs while `holder` still has its rows locked
        result = assignment_service.approve_data_request(db, request.id, team_lead.id)
        holder.commit()
    finally:
        holder.close()

    assert len(held) == 2
    assert result.companies_assigned == 2
    second_ids = db.execute(
        select(Company.id).where(Company.assigned_to_user_id == second_user.id)
    ).scalars().all()
    assert set(second_ids).isdisjoint(held)

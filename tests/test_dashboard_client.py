"""End-to-end: the async client and query cache against the real app."""
from datetime import datetime, timezone

import httpx
import pytest

from datadesk.client import cache as keys
from datadesk.client.api import ApiError, DashboardClient
from datadesk.client.cache import QueryCache
from datadesk.client.mutations import AddComment, UpdateRequestStatus, run_mutation
from datadesk.core.deps import get_db
from datadesk.db.enums import RequestKind
from datadesk.main import app
from tests.conftest import TEST_PASSWORD


@pytest.fixture
async def connect(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    opened = []

    async def _connect(user) -> DashboardClient:
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
        client = DashboardClient(http=http)
        opened.append(client)
        await client.login(user.username, TEST_PASSWORD)
        return client

    yield _connect

    for client in opened:
        await client.aclose()
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_request_approval_round_trip(db, employee, team_lead, make_company, connect):
    for _ in range(2):
        make_company()
    employee_client = await connect(employee)
    lead_client = await connect(team_lead)
    lead_cache = QueryCache()

    created = await employee_client.create_data_request(
        {"requestType": "bulk", "justification": "Pipeline is dry"}
    )
    pending = await lead_cache.fetch(keys.PENDING_DATA_REQUESTS, lead_client.load)
    assert [r["id"] for r in pending] == [created["id"]]

    result = await run_mutation(
        lead_cache, lead_client, UpdateRequestStatus(RequestKind.DATA, created["id"], "approved")
    )

    assert result["companiesAssigned"] == 2
    assert lead_cache.get(keys.PENDING_DATA_REQUESTS) == []
    mine = await employee_client.load(keys.MY_COMPANIES)
    assert len(mine) == 2


@pytest.mark.asyncio
async def test_rejected_comment_rolls_cache_back(db, employee, make_company, connect):
    company = make_company(assigned_to_user_id=employee.id)
    client = await connect(employee)
    cache = QueryCache()
    for key in (keys.MY_COMPANIES, keys.category("assigned"), keys.category("hot"), keys.TODAY_COMMENTS):
        await cache.fetch(key, client.load)
    before = cache.dump()
    notices = []

    # Empty content passes the client but not the server
    mutation = AddComment(company.id, employee.id, "", "hot", datetime.now(timezone.utc))
    with pytest.raises(ApiError) as exc_info:
        await run_mutation(cache, client, mutation, notify=notices.append)

    assert exc_info.value.status_code == 400
    assert "content" in exc_info.value.field_errors
    assert cache.dump() == before
    assert len(notices) == 1


@pytest.mark.asyncio
async def test_accepted_comment_converges_after_refetch(db, employee, make_company, connect):
    company = make_company(assigned_to_user_id=employee.id)
    client = await connect(employee)
    cache = QueryCache()
    await cache.fetch(keys.category("hot"), client.load)

    await run_mutation(
        cache, client, AddComment(company.id, employee.id, "Demo booked", "hot", datetime.now(timezone.utc))
    )

    assert cache.is_stale(keys.category("hot"))
    hot = await cache.fetch(keys.category("hot"), client.load)
    assert [c["id"] for c in hot] == [company.id]


@pytest.mark.asyncio
async def test_wrong_password_raises_api_error(db, employee):
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    async with DashboardClient(http=http) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.login(employee.username, "not-the-password")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_session_lifecycle(db, employee, connect):
    client = await connect(employee)

    me = await client.current_user()
    assert me["username"] == employee.username
    assert "password" not in me

    await client.logout()
    with pytest.raises(ApiError) as exc_info:
        await client.current_user()

    assert exc_info.value.status_code == 401

"""Tests for session authentication endpoints."""
import pytest
from httpx import ASGITransport, AsyncClient

from datadesk.core.deps import COOKIE_NAME
from datadesk.main import app
from tests.conftest import TEST_PASSWORD


REGISTRATION = {
    "username": "asha",
    "email": "asha@example.com",
    "password": "longenough",
    "fullName": "Asha Rao",
    "employeeId": "EMP-100",
}


@pytest.mark.asyncio
async def test_register_creates_employee_and_sets_cookie(client: AsyncClient):
    response = await client.post("/api/register", json=REGISTRATION)

    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "asha"
    assert data["role"] == "employee"
    assert data["employeeId"] == "EMP-100"
    assert "password" not in data
    assert COOKIE_NAME in response.cookies


@pytest.mark.asyncio
async def test_register_cannot_choose_role(client: AsyncClient):
    response = await client.post("/api/register", json={**REGISTRATION, "role": "admin"})

    assert response.status_code == 201
    assert response.json()["role"] == "employee"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,value,expected_field",
    [
        ("username", None, "username"),
        ("email", "taken@example.com", "email"),
        ("employeeId", "EMP-TAKEN", "employeeId"),
    ],
)
async def test_register_duplicate_names_the_field(
    client: AsyncClient, make_user, field, value, expected_field
):
    existing = make_user(email="taken@example.com", employee_id="EMP-TAKEN")
    payload = dict(REGISTRATION)
    payload[field] = value if value is not None else existing.username

    response = await client.post("/api/register", json=payload)

    assert response.status_code == 400
    assert response.json()["field"] == expected_field


@pytest.mark.asyncio
async def test_register_validates_body(client: AsyncClient):
    response = await client.post("/api/register", json={**REGISTRATION, "email": "not-an-email"})

    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert "email" in fields


@pytest.mark.asyncio
async def test_login_and_current_user(client: AsyncClient, employee):
    response = await client.post(
        "/api/login", json={"username": employee.username, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["loginTime"] is not None

    me = await client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["id"] == employee.id


@pytest.mark.asyncio
async def test_login_with_wrong_password(client: AsyncClient, employee):
    response = await client.post(
        "/api/login", json={"username": employee.username, "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password"


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client: AsyncClient, make_user):
    user = make_user(is_active=False)

    response = await client.post(
        "/api/login", json={"username": user.username, "password": TEST_PASSWORD}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_requests_without_session_are_401(client: AsyncClient):
    for path in ("/api/user", "/api/companies/my", "/api/data-requests", "/api/comments/today"):
        response = await client.get(path)
        assert response.status_code == 401, path


@pytest.mark.asyncio
async def test_mutations_require_csrf_header(db, employee, client_for):
    api = client_for(employee, csrf=False)

    response = await api.post(
        "/api/data-requests",
        json={"requestType": "bulk", "justification": "Need leads"},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient, employee):
    await client.post("/api/login", json={"username": employee.username, "password": TEST_PASSWORD})

    response = await client.post("/api/logout")

    assert response.status_code == 200
    assert (await client.get("/api/user")).status_code == 401


@pytest.mark.asyncio
async def test_bumped_token_version_revokes_session(db, employee, client_for):
    api = client_for(employee)
    employee.token_version += 1
    db.commit()

    response = await api.get("/api/user")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_cookie_is_401(db):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: "not-a-jwt"},
    ) as c:
        response = await c.get("/api/user")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_time_endpoint(db, employee, client_for):
    api = client_for(employee)

    response = await api.post("/api/user/login-time")

    assert response.status_code == 200
    db.refresh(employee)
    assert employee.login_time is not None


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"

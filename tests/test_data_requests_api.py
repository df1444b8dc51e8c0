"""Tests for data request endpoints and their approval flow."""
import pytest

from datadesk.db.models import Company, DataRequest


async def _file_request(api, **overrides):
    payload = {"requestType": "bulk", "industry": "Technology", "justification": "Pipeline is dry"}
    payload.update(overrides)
    response = await api.post("/api/data-requests", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_request_is_pending(db, employee, client_for):
    created = await _file_request(client_for(employee))

    assert created["status"] == "pending"
    assert created["userId"] == employee.id
    assert created["companiesAssigned"] == 0
    assert created["approvedBy"] is None


@pytest.mark.asyncio
async def test_team_lead_approval_assigns_companies(db, employee, team_lead, client_for, make_company):
    pool = [make_company() for _ in range(3)]
    created = await _file_request(client_for(employee))

    response = await client_for(team_lead).put(
        f"/api/data-requests/{created['id']}/status", json={"status": "approved"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["companiesAssigned"] == 3
    assert data["approvedBy"] == team_lead.id

    mine = await client_for(employee).get("/api/companies/my")
    assert sorted(c["id"] for c in mine.json()) == sorted(c.id for c in pool)


@pytest.mark.asyncio
@pytest.mark.parametrize("role_fixture", ["manager", "admin"])
async def test_managers_and_admins_can_decide(db, employee, client_for, request, role_fixture):
    decider = request.getfixturevalue(role_fixture)
    created = await _file_request(client_for(employee))

    response = await client_for(decider).put(
        f"/api/data-requests/{created['id']}/status", json={"status": "rejected"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert response.json()["companiesAssigned"] == 0


@pytest.mark.asyncio
async def test_employee_cannot_decide(db, employee, client_for, make_company):
    make_company()
    created = await _file_request(client_for(employee))

    response = await client_for(employee).put(
        f"/api/data-requests/{created['id']}/status", json={"status": "approved"}
    )

    assert response.status_code == 403
    assert db.get(DataRequest, created["id"]).status == "pending"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"status": "pending"}, {"status": "maybe"}, {}])
async def test_invalid_status_body_is_400(db, employee, team_lead, client_for, body):
    created = await _file_request(client_for(employee))

    response = await client_for(team_lead).put(
        f"/api/data-requests/{created['id']}/status", json=body
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"


@pytest.mark.asyncio
async def test_deciding_twice_is_400(db, employee, team_lead, client_for):
    created = await _file_request(client_for(employee))
    api = client_for(team_lead)
    await api.put(f"/api/data-requests/{created['id']}/status", json={"status": "approved"})

    response = await api.put(f"/api/data-requests/{created['id']}/status", json={"status": "rejected"})

    assert response.status_code == 400
    assert "already approved" in response.json()["message"]


@pytest.mark.asyncio
async def test_unknown_request_is_404(db, team_lead, client_for):
    response = await client_for(team_lead).put(
        "/api/data-requests/9999/status", json={"status": "approved"}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_pending_list_is_for_deciders(db, employee, team_lead, client_for):
    created = await _file_request(client_for(employee))

    assert (await client_for(employee).get("/api/data-requests/pending")).status_code == 403

    response = await client_for(team_lead).get("/api/data-requests/pending")
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_history_shows_only_own_requests(db, employee, make_user, client_for):
    colleague = make_user()
    mine = await _file_request(client_for(employee))
    await _file_request(client_for(colleague))

    response = await client_for(employee).get("/api/data-requests")

    assert [r["id"] for r in response.json()] == [mine["id"]]


@pytest.mark.asyncio
async def test_missing_justification_is_400(db, employee, client_for):
    response = await client_for(employee).post(
        "/api/data-requests", json={"requestType": "bulk"}
    )

    assert response.status_code == 400
    assert any(e["field"] == "justification" for e in response.json()["errors"])


@pytest.mark.asyncio
async def test_approval_leaves_other_owners_alone(db, employee, make_user, team_lead, client_for, make_company):
    other = make_user()
    kept = make_company(assigned_to_user_id=other.id)
    make_company()
    created = await _file_request(client_for(employee))

    response = await client_for(team_lead).put(
        f"/api/data-requests/{created['id']}/status", json={"status": "approved"}
    )

    assert response.json()["companiesAssigned"] == 1
    assert db.get(Company, kept.id).assigned_to_user_id == other.id

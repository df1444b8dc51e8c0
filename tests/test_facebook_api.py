"""Tests for Facebook data request endpoints."""
import pytest


@pytest.mark.asyncio
async def test_facebook_request_flow(db, employee, team_lead, client_for, make_facebook_data):
    make_facebook_data(4)
    employee_api = client_for(employee)

    created = await employee_api.post(
        "/api/facebook-requests", json={"justification": "Event leads"}
    )
    assert created.status_code == 201
    request_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    pending = await client_for(team_lead).get("/api/facebook-requests/pending")
    assert [r["id"] for r in pending.json()] == [request_id]

    decided = await client_for(team_lead).put(
        f"/api/facebook-requests/{request_id}/status", json={"status": "approved"}
    )
    assert decided.status_code == 200
    assert decided.json()["recordsAssigned"] == 4

    records = await employee_api.get("/api/facebook-data")
    assert records.status_code == 200
    assert len(records.json()) == 4
    assert records.json()[0]["products"] == ["Widgets"]

    history = await employee_api.get("/api/facebook-requests")
    assert history.json()[0]["status"] == "approved"


@pytest.mark.asyncio
async def test_employee_cannot_decide_facebook_request(db, employee, client_for):
    api = client_for(employee)
    created = await api.post("/api/facebook-requests", json={"justification": "Leads"})

    response = await api.put(
        f"/api/facebook-requests/{created.json()['id']}/status", json={"status": "approved"}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_rejected_facebook_request_cannot_be_approved(db, employee, team_lead, client_for, make_facebook_data):
    make_facebook_data(2)
    created = await client_for(employee).post("/api/facebook-requests", json={"justification": "Leads"})
    api = client_for(team_lead)
    path = f"/api/facebook-requests/{created.json()['id']}/status"

    assert (await api.put(path, json={"status": "rejected"})).status_code == 200
    response = await api.put(path, json={"status": "approved"})

    assert response.status_code == 400
    assert (await client_for(employee).get("/api/facebook-data")).json() == []

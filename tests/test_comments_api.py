"""Tests for comment endpoints and category lists."""
from datetime import datetime, timezone

import pytest


def _today_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


@pytest.mark.asyncio
async def test_comment_reclassifies_company(db, employee, client_for, make_company):
    company = make_company(assigned_to_user_id=employee.id)
    api = client_for(employee)

    response = await api.post(
        "/api/comments",
        json={
            "companyId": company.id,
            "content": "Wants a demo next week",
            "category": "hot",
            "commentDate": _today_iso(),
        },
    )

    assert response.status_code == 201
    assert response.json()["category"] == "hot"

    hot = await api.get("/api/companies/category/hot")
    assert [c["id"] for c in hot.json()] == [company.id]
    assert hot.json()[0]["category"] == "hot"
    assert (await api.get("/api/companies/category/assigned")).json() == []

    today = await api.get("/api/comments/today")
    assert [c["content"] for c in today.json()] == ["Wants a demo next week"]

    history = await api.get(f"/api/comments/company/{company.id}")
    assert len(history.json()) == 1


@pytest.mark.asyncio
async def test_followup_to_hot_scenario(db, employee, client_for, make_company):
    company = make_company(assigned_to_user_id=employee.id)
    api = client_for(employee)
    for category in ("followup", "hot"):
        await api.post(
            "/api/comments",
            json={
                "companyId": company.id,
                "content": f"Now {category}",
                "category": category,
                "commentDate": _today_iso(),
            },
        )

    hot = await api.get("/api/companies/category/hot")
    followup = await api.get("/api/companies/category/followup")

    assert [c["id"] for c in hot.json()] == [company.id]
    assert followup.json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"category": "assigned"}, "category"),
        ({"category": "lukewarm"}, "category"),
        ({"commentDate": "yesterday-ish"}, "commentDate"),
        ({"content": "   "}, "content"),
    ],
)
async def test_invalid_comment_is_400(db, employee, client_for, make_company, overrides, field):
    company = make_company(assigned_to_user_id=employee.id)
    payload = {
        "companyId": company.id,
        "content": "Note",
        "category": "hot",
        "commentDate": _today_iso(),
        **overrides,
    }

    response = await client_for(employee).post("/api/comments", json=payload)

    assert response.status_code == 400
    assert any(e["field"] == field for e in response.json()["errors"])
    db.refresh(company)
    assert company.category == "assigned"


@pytest.mark.asyncio
async def test_comment_on_missing_company_is_404(db, employee, client_for):
    response = await client_for(employee).post(
        "/api/comments",
        json={"companyId": 777, "content": "Hi", "category": "hot", "commentDate": _today_iso()},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_category_path_is_400(db, employee, client_for):
    response = await client_for(employee).get("/api/companies/category/lukewarm")

    assert response.status_code == 400

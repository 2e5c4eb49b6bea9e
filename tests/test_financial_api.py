import pytest

from roadtrack.models import UserRole
from roadtrack.services.funding import utilization_rate


def test_utilization_rate_handles_zero_allocation():
    assert utilization_rate(500, 2000) == 25.0
    assert utilization_rate(100, 0) == 0.0


@pytest.mark.anyio
async def test_create_funding_with_opening_transaction(client, admin_headers, make_project):
    project = make_project()
    response = await client.post(
        "/api/financial-tracking",
        json={
            "projectId": project.id,
            "fundingSource": "GOVERNMENT",
            "budgetAllocated": 2000000,
            "fundsReleased": 800000,
            "fundsUtilized": 500000,
            "transactionType": "RELEASE",
            "transactionAmount": 800000,
            "referenceNumber": "DOW-2024-017",
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["sourceName"] == "GOVERNMENT"
    assert body["utilizationRate"] == 25.0
    assert body["status"] == "ON_TRACK"
    assert len(body["transactions"]) == 1
    assert body["transactions"][0]["amount"] == 800000
    assert body["transactions"][0]["referenceNumber"] == "DOW-2024-017"


@pytest.mark.anyio
async def test_allocation_must_be_positive(client, admin_headers, make_project):
    project = make_project()
    response = await client.post(
        "/api/financial-tracking",
        json={"projectId": project.id, "fundingSource": "ADB", "budgetAllocated": 0},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid value for field: budgetAllocated"


@pytest.mark.anyio
async def test_summary_and_breakdown(client, admin_headers, make_project):
    project = make_project()
    for source, allocated, released, utilized, committed in (
        ("GOVERNMENT", 1000000, 600000, 300000, 150000),
        ("ADB", 3000000, 1400000, 700000, 350000),
        ("GOVERNMENT", 1000000, 0, 0, 0),
    ):
        created = await client.post(
            "/api/financial-tracking",
            json={
                "projectId": project.id,
                "fundingSource": source,
                "budgetAllocated": allocated,
                "fundsReleased": released,
                "fundsUtilized": utilized,
                "fundsCommitted": committed,
            },
            headers=admin_headers,
        )
        assert created.status_code == 201

    listed = await client.get("/api/financial-tracking", params={"projectId": project.id}, headers=admin_headers)
    body = listed.json()
    summary = body["summary"]
    assert summary["totalAllocated"] == 5000000
    assert summary["totalReleased"] == 2000000
    assert summary["utilizationRate"] == 20.0
    assert summary["releaseRate"] == 40.0
    assert summary["commitmentRate"] == 25.0
    assert summary["fundingSourcesCount"] == 3
    assert [(b["fundingSource"], b["count"]) for b in body["fundingBreakdown"]] == [("ADB", 1), ("GOVERNMENT", 2)]

    adb_only = await client.get(
        "/api/financial-tracking", params={"projectId": project.id, "fundingSource": "ADB"}, headers=admin_headers
    )
    assert [f["fundingSource"] for f in adb_only.json()["projectFunding"]] == ["ADB"]


@pytest.mark.anyio
async def test_update_recomputes_utilization(client, admin_headers, make_project):
    project = make_project()
    created = await client.post(
        "/api/financial-tracking",
        json={"projectId": project.id, "fundingSource": "WORLD_BANK", "budgetAllocated": 400000},
        headers=admin_headers,
    )
    funding_id = created.json()["id"]
    assert created.json()["utilizationRate"] == 0.0

    updated = await client.put(
        f"/api/financial-tracking/{funding_id}",
        json={"fundsUtilized": 100000, "status": "AT_RISK"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["utilizationRate"] == 25.0
    assert updated.json()["status"] == "AT_RISK"


@pytest.mark.anyio
async def test_financial_write_roles(client, make_user, headers_for, admin_headers, make_project):
    project = make_project()
    body = {"projectId": project.id, "fundingSource": "GOVERNMENT", "budgetAllocated": 1000}

    engineer = await client.post(
        "/api/financial-tracking", json=body, headers=headers_for(make_user(UserRole.SITE_ENGINEER))
    )
    assert engineer.status_code == 403

    manager_headers = headers_for(make_user(UserRole.PROGRAM_MANAGER))
    created = await client.post("/api/financial-tracking", json=body, headers=manager_headers)
    assert created.status_code == 201
    funding_id = created.json()["id"]

    not_admin = await client.delete(f"/api/financial-tracking/{funding_id}", headers=manager_headers)
    assert not_admin.status_code == 403
    deleted = await client.delete(f"/api/financial-tracking/{funding_id}", headers=admin_headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/financial-tracking/{funding_id}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Funding record not found"}

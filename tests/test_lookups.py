import pytest

from roadtrack.models import LookupValue
from roadtrack.services.lookups import LookupService


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _add_value(db_session, code, label, sort_order=0, category="funding_source"):
    db_session.add(LookupValue(category=category, code=code, label=label, sort_order=sort_order))
    db_session.commit()


def test_lookup_cache_serves_until_ttl_expires(db_session):
    clock = FakeClock()
    service = LookupService(ttl_seconds=60, clock=clock)
    _add_value(db_session, "GOVERNMENT", "Government Funding", 1)

    first = service.get(db_session, "funding_source")
    assert [item["code"] for item in first] == ["GOVERNMENT"]

    _add_value(db_session, "DEV_BANK", "Development Bank", 2)
    clock.now += 30
    assert [item["code"] for item in service.get(db_session, "funding_source")] == ["GOVERNMENT"]

    clock.now += 31
    assert [item["code"] for item in service.get(db_session, "funding_source")] == ["GOVERNMENT", "DEV_BANK"]


def test_invalidate_and_refresh_reload_category(db_session):
    service = LookupService(ttl_seconds=3600, clock=FakeClock())
    assert service.get(db_session, "report_type") == []

    _add_value(db_session, "WEEKLY", "Weekly Report", category="report_type")
    assert service.get(db_session, "report_type") == []
    assert [item["code"] for item in service.refresh(db_session, "report_type")] == ["WEEKLY"]

    _add_value(db_session, "DAILY", "Daily Report", category="report_type")
    service.invalidate()
    assert {item["code"] for item in service.get(db_session, "report_type")} == {"WEEKLY", "DAILY"}


def test_enum_categories_fall_back_to_enum_members(db_session):
    service = LookupService(ttl_seconds=60, clock=FakeClock())
    codes = [item["code"] for item in service.get(db_session, "qa_qc_status")]
    assert codes == ["PASS", "FAIL", "CONDITIONAL_PASS", "REWORK_REQUIRED"]
    severities = [item["code"] for item in service.get(db_session, "incident_severity")]
    assert severities == ["LOW", "MEDIUM", "HIGH", "CRITICAL"]


@pytest.mark.anyio
async def test_unknown_lookup_category_is_400(client, engineer_headers):
    response = await client.get("/api/lookups", params={"type": "colours"}, headers=engineer_headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Unknown lookup type")


@pytest.mark.anyio
async def test_admin_creates_lookup_value_and_cache_is_invalidated(client, admin_headers, engineer_headers):
    before = await client.get("/api/lookups", params={"type": "funding_source"}, headers=engineer_headers)
    assert before.status_code == 200
    assert before.json() == {"funding_source": []}

    created = await client.post(
        "/api/lookups",
        headers=admin_headers,
        json={"category": "funding_source", "code": "BILATERAL", "label": "Bilateral Aid", "sortOrder": 7},
    )
    assert created.status_code == 201

    after = await client.get("/api/lookups", params={"type": "funding_source"}, headers=engineer_headers)
    assert [item["code"] for item in after.json()["funding_source"]] == ["BILATERAL"]

    duplicate = await client.post(
        "/api/lookups",
        headers=admin_headers,
        json={"category": "funding_source", "code": "BILATERAL", "label": "Again"},
    )
    assert duplicate.status_code == 409


@pytest.mark.anyio
async def test_only_admin_can_create_lookup_values(client, engineer_headers):
    response = await client.post(
        "/api/lookups",
        headers=engineer_headers,
        json={"category": "funding_source", "code": "OTHER", "label": "Other"},
    )
    assert response.status_code == 403

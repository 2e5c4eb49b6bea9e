import pytest


@pytest.mark.anyio("asyncio")
async def test_healthcheck(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] in {"ok", "degraded"}
    assert payload["service"] == "roadtrack-backend"
    assert payload["dbStatus"] == "ok"
    assert payload["dbOk"] is True
    assert payload["migrationsStatus"] in {"up_to_date", "out_of_date", "unknown"}
    assert isinstance(payload["migrationsOk"], bool)


@pytest.mark.anyio("asyncio")
async def test_health_degrades_on_db_failure(monkeypatch, client):
    from roadtrack.routers import health as health_module

    monkeypatch.setattr(health_module, "_db_status", lambda: "error")

    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["dbStatus"] == "error"
    assert payload["dbOk"] is False
    assert payload["migrationsOk"] is False
    assert payload["migrationsStatus"] == "unknown"


@pytest.mark.anyio("asyncio")
async def test_unknown_route_uses_error_shape(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.json()

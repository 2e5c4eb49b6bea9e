import pytest
from sqlalchemy import select

from roadtrack.models import AuditLog, HSEIncident, UserRole


def _payload(project_id, **overrides):
    body = {
        "projectId": project_id,
        "incidentType": "NEAR_MISS",
        "severity": "LOW",
        "description": "Excavator swung close to a flagman",
        "incidentDate": "2024-06-15T08:30:00Z",
        "location": "Km 3.2, left shoulder",
    }
    body.update(overrides)
    return body


@pytest.mark.anyio
async def test_report_incident_requires_project_access(client, make_project, make_user, headers_for, grant_access):
    project = make_project()
    engineer = make_user(UserRole.SITE_ENGINEER)
    denied = await client.post("/api/hse-incidents", json=_payload(project.id), headers=headers_for(engineer))
    assert denied.status_code == 403
    assert denied.json()["error"] == "Access denied to this project"

    grant_access(engineer, project)
    allowed = await client.post("/api/hse-incidents", json=_payload(project.id), headers=headers_for(engineer))
    assert allowed.status_code == 201
    body = allowed.json()
    assert body["reportedBy"] == engineer.id
    assert body["status"] == "REPORTED"
    assert body["escalationRequired"] is False


@pytest.mark.anyio
async def test_missing_incident_fields_are_listed(client, admin_headers, make_project):
    project = make_project()
    response = await client.post(
        "/api/hse-incidents",
        json={"projectId": project.id, "incidentType": "INJURY", "severity": "HIGH"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: description, incidentDate, location"


@pytest.mark.anyio
async def test_high_severity_is_escalated_and_audited(client, db_session, admin_headers, make_project):
    project = make_project()
    response = await client.post(
        "/api/hse-incidents",
        json=_payload(project.id, incidentType="INJURY", severity="CRITICAL"),
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["escalationRequired"] is True

    entry = db_session.scalar(
        select(AuditLog).where(AuditLog.entity == "HSEIncident", AuditLog.entity_id == response.json()["id"])
    )
    assert entry.action == "INCIDENT_REPORTED"
    assert entry.data_json["severity"] == "CRITICAL"


@pytest.mark.anyio
async def test_incident_section_must_belong_to_project(client, admin_headers, make_project, make_section):
    project = make_project()
    foreign = make_section(make_project())
    response = await client.post(
        "/api/hse-incidents", json=_payload(project.id, sectionId=foreign.id), headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Section does not belong to this project"


@pytest.mark.anyio
async def test_list_incidents_filters_and_stats(client, admin_headers, engineer_headers, make_project):
    road = make_project("Ring Road")
    bypass = make_project("Ring Road")
    seeds = [
        (road, "INJURY", "HIGH", "INVESTIGATING", "2024-06-10T09:00:00Z"),
        (road, "NEAR_MISS", "LOW", "CLOSED", "2024-06-12T09:00:00Z"),
        (road, "NEAR_MISS", "MEDIUM", "REPORTED", "2024-06-20T09:00:00Z"),
        (bypass, "ENVIRONMENTAL", "LOW", "RESOLVED", "2024-06-15T09:00:00Z"),
    ]
    for project, incident_type, severity, state, when in seeds:
        created = await client.post(
            "/api/hse-incidents",
            json=_payload(project.id, incidentType=incident_type, severity=severity, status=state, incidentDate=when),
            headers=admin_headers,
        )
        assert created.status_code == 201

    everything = await client.get("/api/hse-incidents", headers=engineer_headers)
    body = everything.json()
    assert [i["incidentDate"][:10] for i in body["incidents"]] == [
        "2024-06-20",
        "2024-06-15",
        "2024-06-12",
        "2024-06-10",
    ]
    stats = body["stats"]
    assert stats["total"] == 4
    assert stats["openIncidents"] == 2
    assert stats["openIncidentRate"] == 50.0
    assert stats["bySeverity"] == {"HIGH": 1, "LOW": 2, "MEDIUM": 1}
    assert stats["byType"] == {"ENVIRONMENTAL": 1, "INJURY": 1, "NEAR_MISS": 2}
    assert stats["byStatus"] == {"CLOSED": 1, "INVESTIGATING": 1, "REPORTED": 1, "RESOLVED": 1}
    assert body["byProject"][str(road.id)]["count"] == 3
    assert body["byProject"][str(bypass.id)]["projectName"] == "Ring Road"
    assert body["byProject"][str(bypass.id)]["openIncidents"] == 0

    near_misses = await client.get(
        "/api/hse-incidents",
        params={"projectId": road.id, "incidentType": "NEAR_MISS", "severity": "low"},
        headers=engineer_headers,
    )
    assert [i["severity"] for i in near_misses.json()["incidents"]] == ["LOW"]

    in_june = await client.get(
        "/api/hse-incidents",
        params={"startDate": "2024-06-11", "endDate": "2024-06-15", "limit": 1},
        headers=engineer_headers,
    )
    assert [i["incidentDate"][:10] for i in in_june.json()["incidents"]] == ["2024-06-15"]

    open_only = await client.get("/api/hse-incidents", params={"status": "REPORTED"}, headers=engineer_headers)
    assert open_only.json()["stats"]["openIncidentRate"] == 100.0


@pytest.mark.anyio
async def test_empty_register_has_zero_rates(client, engineer_headers):
    response = await client.get("/api/hse-incidents", params={"incidentType": "NONE"}, headers=engineer_headers)
    assert response.status_code == 200
    assert response.json()["stats"]["total"] == 0
    assert response.json()["stats"]["openIncidentRate"] == 0.0
    assert response.json()["byProject"] == {}


@pytest.mark.anyio
async def test_unknown_severity_filter_is_400(client, engineer_headers):
    response = await client.get("/api/hse-incidents", params={"severity": "EXTREME"}, headers=engineer_headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid severity for HSEIncident: EXTREME")


@pytest.mark.anyio
async def test_follow_up_permissions(
    client, db_session, make_project, make_user, headers_for, grant_access
):
    project = make_project()
    reporter = make_user(UserRole.SITE_ENGINEER)
    grant_access(reporter, project)
    created = await client.post("/api/hse-incidents", json=_payload(project.id), headers=headers_for(reporter))
    incident_id = created.json()["id"]

    bystander = make_user(UserRole.ENGINEER)
    denied = await client.put(
        f"/api/hse-incidents/{incident_id}", json={"status": "INVESTIGATING"}, headers=headers_for(bystander)
    )
    assert denied.status_code == 403
    assert denied.json()["error"] == "Permission denied"

    own = await client.put(
        f"/api/hse-incidents/{incident_id}", json={"rootCause": "No exclusion zone"}, headers=headers_for(reporter)
    )
    assert own.status_code == 200
    assert own.json()["rootCause"] == "No exclusion zone"

    officer = make_user(UserRole.HSE_OFFICER)
    closed = await client.put(
        f"/api/hse-incidents/{incident_id}",
        json={"status": "CLOSED", "closureDate": "2024-06-20T00:00:00Z", "preventiveMeasures": ["Spotter"]},
        headers=headers_for(officer),
    )
    assert closed.status_code == 200
    assert closed.json()["status"] == "CLOSED"
    assert closed.json()["preventiveMeasures"] == ["Spotter"]

    entry = db_session.scalar(
        select(AuditLog)
        .where(AuditLog.entity == "HSEIncident", AuditLog.action == "INCIDENT_UPDATED")
        .order_by(AuditLog.id.desc())
    )
    assert entry.data_json["previous_status"] == "REPORTED"


@pytest.mark.anyio
async def test_null_status_on_follow_up_is_400(client, admin_headers, make_project):
    project = make_project()
    created = await client.post("/api/hse-incidents", json=_payload(project.id), headers=admin_headers)
    response = await client.put(
        f"/api/hse-incidents/{created.json()['id']}", json={"status": None}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid value for field: status"


@pytest.mark.anyio
async def test_delete_incident_needs_hse_role(client, db_session, admin_headers, make_project, make_user, headers_for):
    project = make_project()
    created = await client.post("/api/hse-incidents", json=_payload(project.id), headers=admin_headers)
    incident_id = created.json()["id"]

    manager = make_user(UserRole.PROGRAM_MANAGER)
    forbidden = await client.delete(f"/api/hse-incidents/{incident_id}", headers=headers_for(manager))
    assert forbidden.status_code == 403

    officer = make_user(UserRole.HSE_OFFICER)
    deleted = await client.delete(f"/api/hse-incidents/{incident_id}", headers=headers_for(officer))
    assert deleted.status_code == 204
    assert db_session.get(HSEIncident, incident_id) is None

    missing = await client.get(f"/api/hse-incidents/{incident_id}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "HSE incident not found"

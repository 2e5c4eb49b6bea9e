import pytest

from roadtrack.models import QualityReport, UserRole


def _payload(project_id, **overrides):
    body = {
        "projectId": project_id,
        "reportType": "MATERIAL_TESTING",
        "testDate": "2024-06-15T10:00:00Z",
        "qaQcStatus": "PASS",
        "materialType": "Aggregate",
        "testResults": {"compaction": 98.5},
    }
    body.update(overrides)
    return body


@pytest.mark.anyio
async def test_create_quality_report_requires_auth(client, make_project):
    project = make_project()
    response = await client.post("/api/quality-reports", json=_payload(project.id))
    assert response.status_code == 401


@pytest.mark.anyio
async def test_create_quality_report_requires_write_role(client, make_project, engineer_headers):
    project = make_project()
    response = await client.post("/api/quality-reports", json=_payload(project.id), headers=engineer_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


@pytest.mark.anyio
async def test_create_quality_report_requires_project_access(client, make_project, make_user, headers_for):
    project = make_project()
    officer = make_user(UserRole.QA_QC_OFFICER)
    response = await client.post("/api/quality-reports", json=_payload(project.id), headers=headers_for(officer))
    assert response.status_code == 403
    assert response.json()["error"] == "Access denied to this project"


@pytest.mark.anyio
async def test_create_quality_report_unknown_project_is_404(client, make_user, headers_for):
    officer = make_user(UserRole.QA_QC_OFFICER)
    response = await client.post("/api/quality-reports", json=_payload(999999), headers=headers_for(officer))
    assert response.status_code == 404
    assert response.json()["error"] == "Project not found"


@pytest.mark.anyio
async def test_create_quality_report_missing_fields_is_400(client, admin_headers, make_project):
    project = make_project()
    response = await client.post(
        "/api/quality-reports",
        json={"projectId": project.id, "reportType": "MATERIAL_TESTING"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: testDate, qaQcStatus"


@pytest.mark.anyio
async def test_create_quality_report_with_grant(
    client, db_session, make_project, make_user, headers_for, grant_access
):
    project = make_project()
    officer = make_user(UserRole.QA_QC_OFFICER)
    grant_access(officer, project)

    response = await client.post("/api/quality-reports", json=_payload(project.id), headers=headers_for(officer))
    assert response.status_code == 201
    body = response.json()
    assert body["reportedBy"] == officer.id
    assert body["qaQcStatus"] == "PASS"
    assert body["specCompliance"] == "PENDING"
    assert db_session.get(QualityReport, body["id"]) is not None


@pytest.mark.anyio
async def test_section_must_belong_to_project(client, admin_headers, make_project, make_section):
    project = make_project()
    foreign_section = make_section(make_project())
    response = await client.post(
        "/api/quality-reports",
        json=_payload(project.id, sectionId=foreign_section.id),
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.anyio
async def test_list_quality_reports_with_stats_and_filters(client, admin_headers, engineer_headers, make_project):
    project = make_project()
    for day, status in (("2024-06-10", "PASS"), ("2024-06-15", "PASS"), ("2024-06-20", "FAIL")):
        created = await client.post(
            "/api/quality-reports",
            json=_payload(project.id, testDate=f"{day}T08:00:00Z", qaQcStatus=status),
            headers=admin_headers,
        )
        assert created.status_code == 201

    response = await client.get(
        "/api/quality-reports", params={"projectId": project.id}, headers=engineer_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert [r["testDate"][:10] for r in body["reports"]] == ["2024-06-20", "2024-06-15", "2024-06-10"]
    assert body["stats"]["totalReports"] == 3
    assert body["stats"]["passRate"] == pytest.approx(66.67)
    assert body["stats"]["byStatus"] == {"FAIL": 1, "PASS": 2}

    ranged = await client.get(
        "/api/quality-reports",
        params={"projectId": project.id, "startDate": "2024-06-15", "endDate": "2024-06-15"},
        headers=engineer_headers,
    )
    assert [r["testDate"][:10] for r in ranged.json()["reports"]] == ["2024-06-15"]

    failed = await client.get(
        "/api/quality-reports", params={"projectId": project.id, "status": "FAIL"}, headers=engineer_headers
    )
    assert len(failed.json()["reports"]) == 1


@pytest.mark.anyio
async def test_list_quality_reports_rejects_bad_filters(client, engineer_headers):
    response = await client.get("/api/quality-reports", params={"projectId": "abc"}, headers=engineer_headers)
    assert response.status_code == 400
    assert "projectId" in response.json()["error"]

    response = await client.get(
        "/api/quality-reports",
        params={"startDate": "2024-07-01", "endDate": "2024-06-01"},
        headers=engineer_headers,
    )
    assert response.status_code == 400


@pytest.mark.anyio
async def test_update_quality_report_by_reporter_or_write_role(
    client, admin_headers, make_project, make_user, headers_for
):
    project = make_project()
    created = await client.post("/api/quality-reports", json=_payload(project.id), headers=admin_headers)
    report_id = created.json()["id"]

    engineer = make_user(UserRole.ENGINEER)
    denied = await client.put(
        f"/api/quality-reports/{report_id}", json={"qaQcStatus": "FAIL"}, headers=headers_for(engineer)
    )
    assert denied.status_code == 403

    officer = make_user(UserRole.QA_QC_OFFICER)
    updated = await client.put(
        f"/api/quality-reports/{report_id}",
        json={"qaQcStatus": "CONDITIONAL_PASS", "followUpRequired": True},
        headers=headers_for(officer),
    )
    assert updated.status_code == 200
    assert updated.json()["qaQcStatus"] == "CONDITIONAL_PASS"
    assert updated.json()["followUpRequired"] is True


@pytest.mark.anyio
async def test_delete_quality_report(client, admin_headers, make_project):
    project = make_project()
    created = await client.post("/api/quality-reports", json=_payload(project.id), headers=admin_headers)
    report_id = created.json()["id"]

    deleted = await client.delete(f"/api/quality-reports/{report_id}", headers=admin_headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/quality-reports/{report_id}", headers=admin_headers)
    assert missing.status_code == 404

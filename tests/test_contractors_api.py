import pytest


@pytest.mark.anyio
async def test_contractor_crud(client, admin_headers, engineer_headers):
    created = await client.post(
        "/api/contractors",
        headers=admin_headers,
        json={
            "name": "Highlands Paving Ltd",
            "licenseNumber": "PNG-CON-0042",
            "email": "office@highlandspaving.example.com",
            "certificationLevel": "B",
            "specializations": ["sealing", "drainage"],
        },
    )
    assert created.status_code == 201
    contractor = created.json()
    assert contractor["specializations"] == ["sealing", "drainage"]

    listed = await client.get("/api/contractors", params={"search": "paving"}, headers=engineer_headers)
    assert [c["id"] for c in listed.json()] == [contractor["id"]]

    updated = await client.put(
        f"/api/contractors/{contractor['id']}", headers=admin_headers, json={"isActive": False}
    )
    assert updated.json()["isActive"] is False

    active_only = await client.get("/api/contractors", params={"active": "true"}, headers=engineer_headers)
    assert contractor["id"] not in [c["id"] for c in active_only.json()]

    deleted = await client.delete(f"/api/contractors/{contractor['id']}", headers=admin_headers)
    assert deleted.status_code == 204


@pytest.mark.anyio
async def test_duplicate_contractor_name_and_license(client, admin_headers, make_contractor):
    existing = make_contractor("Sepik Builders")
    same_name = await client.post("/api/contractors", headers=admin_headers, json={"name": "Sepik Builders"})
    assert same_name.status_code == 409

    same_license = await client.post(
        "/api/contractors",
        headers=admin_headers,
        json={"name": "Different", "licenseNumber": existing.license_number},
    )
    assert same_license.status_code == 409


@pytest.mark.anyio
async def test_assign_contractor_to_project_and_sections(
    client, db_session, admin_headers, make_project, make_section, make_contractor
):
    project = make_project()
    section = make_section(project)
    contractor = make_contractor()

    response = await client.post(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": contractor.id, "contractValue": 125000.5, "sectionIds": [section.id]},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["contractStatus"] == "ACTIVE"
    assert body["contractValue"] == 125000.5
    assert body["contractor"]["name"] == contractor.name
    db_session.refresh(section)
    assert section.assigned_contractor_id == contractor.id

    again = await client.post(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": contractor.id},
    )
    assert again.status_code == 409

    rated = await client.put(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": contractor.id, "performanceRating": 4.5, "contractStatus": "COMPLETED"},
    )
    assert rated.status_code == 200
    assert rated.json()["performanceRating"] == 4.5
    assert rated.json()["contractStatus"] == "COMPLETED"

    listed = await client.get(f"/api/projects/{project.id}/contractors", headers=admin_headers)
    assert [a["contractorId"] for a in listed.json()] == [contractor.id]


@pytest.mark.anyio
async def test_assign_rejects_inactive_contractor_and_foreign_sections(
    client, admin_headers, make_project, make_section, make_contractor
):
    project = make_project()
    inactive = make_contractor(is_active=False)
    response = await client.post(
        f"/api/projects/{project.id}/contractors", headers=admin_headers, json={"contractorId": inactive.id}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Contractor is not active"

    foreign = make_section(make_project())
    response = await client.post(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": make_contractor().id, "sectionIds": [foreign.id]},
    )
    assert response.status_code == 400
    assert response.json()["details"] == [foreign.id]


@pytest.mark.anyio
async def test_update_missing_assignment_is_404(client, admin_headers, make_project, make_contractor):
    project = make_project()
    response = await client.put(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": make_contractor().id, "performanceRating": 3},
    )
    assert response.status_code == 404


@pytest.mark.anyio
async def test_rating_out_of_range_is_400(client, admin_headers, make_project, make_contractor):
    project = make_project()
    response = await client.put(
        f"/api/projects/{project.id}/contractors",
        headers=admin_headers,
        json={"contractorId": make_contractor().id, "performanceRating": 7},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid value for field: performanceRating"

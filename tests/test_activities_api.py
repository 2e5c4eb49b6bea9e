import pytest

from roadtrack.models import ConstructionActivity, UserRole


@pytest.fixture
def make_activity(db_session):
    def _factory(name="Line Drain Construction", *, is_active=True):
        activity = ConstructionActivity(name=name, description="Drainage works", is_active=is_active)
        db_session.add(activity)
        db_session.commit()
        db_session.refresh(activity)
        return activity

    return _factory


@pytest.mark.anyio
async def test_catalogue_is_admin_managed(client, admin_headers, engineer_headers, admin_user):
    forbidden = await client.post("/api/construction-activities", json={"name": "Bridges"}, headers=engineer_headers)
    assert forbidden.status_code == 403

    created = await client.post(
        "/api/construction-activities",
        json={"name": "  Bridge Construction ", "description": "Crossings"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Bridge Construction"
    assert body["color"] == "#3b82f6"
    assert body["createdBy"] == admin_user.id
    assert body["projectCount"] == 0

    listed = await client.get("/api/construction-activities", headers=engineer_headers)
    assert listed.json()["count"] == 1
    assert listed.json()["activities"][0]["name"] == "Bridge Construction"


@pytest.mark.anyio
async def test_activity_names_are_unique_ignoring_case(client, admin_headers, make_activity):
    make_activity("Road Sealing")
    duplicate = await client.post("/api/construction-activities", json={"name": "road sealing"}, headers=admin_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "An activity with this name already exists"


@pytest.mark.anyio
async def test_bad_color_is_400(client, admin_headers):
    response = await client.post(
        "/api/construction-activities", json={"name": "Culverts", "color": "blue"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid value for field: color"


@pytest.mark.anyio
async def test_retired_activities_leave_the_catalogue(client, admin_headers, make_activity):
    activity = make_activity()
    retired = await client.put(
        f"/api/construction-activities/{activity.id}", json={"isActive": False}, headers=admin_headers
    )
    assert retired.status_code == 200
    listed = await client.get("/api/construction-activities", headers=admin_headers)
    assert listed.json()["activities"] == []

    nameless = await client.put(
        f"/api/construction-activities/{activity.id}", json={"name": None}, headers=admin_headers
    )
    assert nameless.status_code == 400


@pytest.mark.anyio
async def test_assign_activity_to_project(client, admin_headers, make_project, make_activity, make_user, headers_for):
    project = make_project()
    activity = make_activity()
    foreman = make_user(UserRole.SUPERVISOR)

    engineer = make_user(UserRole.ENGINEER)
    forbidden = await client.post(
        f"/api/projects/{project.id}/activities", json={"activityId": activity.id}, headers=headers_for(engineer)
    )
    assert forbidden.status_code == 403

    assigned = await client.post(
        f"/api/projects/{project.id}/activities",
        json={"activityId": activity.id, "assignedUserId": foreman.id, "totalLength": 1200, "estimatedHours": 80},
        headers=admin_headers,
    )
    assert assigned.status_code == 201
    body = assigned.json()
    assert body["status"] == "PLANNED"
    assert body["priority"] == "MEDIUM"
    assert body["activity"] == {"id": activity.id, "name": "Line Drain Construction", "color": "#3b82f6"}

    again = await client.post(
        f"/api/projects/{project.id}/activities", json={"activityId": activity.id}, headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["error"] == "Activity already assigned to this project"

    listed = await client.get(f"/api/projects/{project.id}/activities", headers=headers_for(engineer))
    assert listed.json()["count"] == 1
    assert listed.json()["activities"][0]["assignedUserId"] == foreman.id

    started = await client.put(
        f"/api/projects/{project.id}/activities/{body['id']}",
        json={"status": "IN_PROGRESS", "assignedUserId": None},
        headers=admin_headers,
    )
    assert started.status_code == 200
    assert started.json()["status"] == "IN_PROGRESS"
    assert started.json()["assignedUserId"] is None


@pytest.mark.anyio
async def test_assignment_validates_references(client, admin_headers, make_project, make_activity):
    project = make_project()
    unknown = await client.post(
        f"/api/projects/{project.id}/activities", json={"activityId": 999999}, headers=admin_headers
    )
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "Activity not found"

    retired = make_activity("Old Method", is_active=False)
    inactive = await client.post(
        f"/api/projects/{project.id}/activities", json={"activityId": retired.id}, headers=admin_headers
    )
    assert inactive.status_code == 400
    assert inactive.json()["error"] == "Activity is not active"

    nobody = await client.post(
        f"/api/projects/{project.id}/activities",
        json={"activityId": make_activity().id, "assignedUserId": 999999},
        headers=admin_headers,
    )
    assert nobody.status_code == 404

    missing_project = await client.get("/api/projects/999999/activities", headers=admin_headers)
    assert missing_project.status_code == 404


@pytest.mark.anyio
async def test_activity_in_use_cannot_be_deleted(client, admin_headers, make_project, make_activity):
    project = make_project()
    activity = make_activity()
    assigned = await client.post(
        f"/api/projects/{project.id}/activities", json={"activityId": activity.id}, headers=admin_headers
    )

    blocked = await client.delete(f"/api/construction-activities/{activity.id}", headers=admin_headers)
    assert blocked.status_code == 400
    assert blocked.json() == {
        "error": "Cannot delete activity that is currently in use",
        "details": {"projectActivities": 1},
    }

    other_project = make_project()
    wrong_parent = await client.delete(
        f"/api/projects/{other_project.id}/activities/{assigned.json()['id']}", headers=admin_headers
    )
    assert wrong_parent.status_code == 404

    removed = await client.delete(
        f"/api/projects/{project.id}/activities/{assigned.json()['id']}", headers=admin_headers
    )
    assert removed.status_code == 204
    deleted = await client.delete(f"/api/construction-activities/{activity.id}", headers=admin_headers)
    assert deleted.status_code == 204


@pytest.mark.anyio
async def test_activity_feed_pages_newest_first(client, admin_headers, engineer_headers, make_project, make_activity):
    road = make_project()
    other = make_project()
    ids = []
    for name in ("Clearing", "Drains", "Sealing"):
        created = await client.post(
            f"/api/projects/{road.id}/activities", json={"activityId": make_activity(name).id}, headers=admin_headers
        )
        ids.append(created.json()["id"])
    await client.post(
        f"/api/projects/{other.id}/activities", json={"activityId": make_activity("Bridges").id}, headers=admin_headers
    )

    first = await client.get(
        "/api/activities", params={"projectId": road.id, "limit": 2}, headers=engineer_headers
    )
    assert first.status_code == 200
    assert [a["id"] for a in first.json()["activities"]] == [ids[2], ids[1]]
    assert first.json()["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    second = await client.get(
        "/api/activities", params={"projectId": road.id, "limit": 2, "offset": 2}, headers=engineer_headers
    )
    assert [a["id"] for a in second.json()["activities"]] == [ids[0]]
    assert second.json()["pagination"]["hasMore"] is False

    everything = await client.get("/api/activities", headers=engineer_headers)
    assert everything.json()["pagination"]["total"] == 4

    planned = await client.get("/api/activities", params={"status": "ON_HOLD"}, headers=engineer_headers)
    assert planned.json()["activities"] == []

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from roadtrack.models import (
    ConstructionPhase,
    ContractorProject,
    ContractStatus,
    GpsPoint,
    PointStatus,
    ProjectFunding,
    ProjectStatus,
    RoadSide,
)
from roadtrack.reports.filters import ReportFilters
from roadtrack.reports.service import REPORT_ASSEMBLERS, generate_report


@pytest.fixture
def network(db_session, make_province, make_project, make_section, make_contractor):
    """One province, two projects, sections, contracts, GPS points and funding."""

    province = make_province("Morobe Province", region="Momase", population=674000)
    contractor = make_contractor("Lae Civil Works", certification_level="A")
    road = make_project("Lae - Nadzab Road", province=province, status=ProjectStatus.IN_PROGRESS)
    done = make_project("Bulolo Bypass", province=province, status=ProjectStatus.COMPLETED)

    make_section(road, start_km=0, end_km=1, progress=10, budget_allocated="1000", budget_spent="250",
                 contractor=contractor)
    make_section(road, start_km=1, end_km=4, progress=30, budget_allocated="3000", budget_spent="750")
    make_section(done, start_km=0, end_km=2, progress=100, budget_allocated="500", budget_spent="500")

    db_session.add_all(
        [
            ContractorProject(
                contractor_id=contractor.id,
                project_id=road.id,
                contract_value=Decimal("150000.00"),
                contract_status=ContractStatus.ACTIVE,
                performance_rating=4.0,
            ),
            ContractorProject(
                contractor_id=contractor.id,
                project_id=done.id,
                contract_value=Decimal("50000.00"),
                contract_status=ContractStatus.COMPLETED,
                performance_rating=5.0,
            ),
        ]
    )
    points = [
        (-6.0, 146.9, ConstructionPhase.DRAIN, 120.0, datetime(2024, 6, 14, 9, tzinfo=UTC), 3.0),
        (-5.0, 147.1, ConstructionPhase.DRAIN, 80.0, datetime(2024, 6, 15, 9, tzinfo=UTC), 8.0),
        (-6.3, 146.5, ConstructionPhase.SEALING, 50.0, datetime(2024, 6, 15, 15, tzinfo=UTC), None),
    ]
    for lat, lng, phase, distance, ts, accuracy in points:
        db_session.add(
            GpsPoint(
                project_id=road.id,
                contractor_id=contractor.id,
                latitude=lat,
                longitude=lng,
                phase=phase,
                side=RoadSide.LEFT,
                distance=distance,
                accuracy=accuracy,
                status=PointStatus.COMPLETED,
                timestamp=ts,
            )
        )
    db_session.add(
        ProjectFunding(
            project_id=road.id,
            funding_source="GOVERNMENT",
            source_name="Government Funding",
            budget_allocated=Decimal("1000000"),
            funds_released=Decimal("500000"),
            funds_utilized=Decimal("250000"),
            funds_committed=Decimal("100000"),
            pending_claims=Decimal("0"),
        )
    )
    db_session.commit()
    return {"province": province, "road": road, "done": done, "contractor": contractor}


@pytest.mark.anyio
async def test_reports_require_auth(client):
    response = await client.get("/api/reports", params={"type": "overview"})
    assert response.status_code == 401


@pytest.mark.anyio
async def test_invalid_report_type_is_400(client, engineer_headers):
    response = await client.get("/api/reports", params={"type": "weather"}, headers=engineer_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid report type"


@pytest.mark.anyio
async def test_overview_report(client, engineer_headers, network):
    response = await client.get("/api/reports", params={"type": "overview"}, headers=engineer_headers)
    assert response.status_code == 200
    envelope = response.json()
    assert envelope["reportType"] == "overview"
    assert envelope["filters"] == {}
    data = envelope["data"]
    assert data["summary"]["totalProjects"] == 2
    assert data["summary"]["totalGpsPoints"] == 3
    assert data["summary"]["completionRate"] == 50.0
    assert sum(data["breakdowns"]["byStatus"].values()) == 2

    road = next(item for item in data["items"] if item["name"] == "Lae - Nadzab Road")
    assert road["progress"] == 25.0
    assert road["activeContractors"] == 1
    assert road["gpsPoints"] == 3
    assert road["province"] == "Morobe Province"


@pytest.mark.anyio
async def test_overview_report_filtered_by_project(client, engineer_headers, network):
    done = network["done"]
    response = await client.get(
        "/api/reports", params={"type": "overview", "projectId": done.id}, headers=engineer_headers
    )
    data = response.json()["data"]
    assert [item["id"] for item in data["items"]] == [done.id]
    assert data["summary"]["totalGpsPoints"] == 0
    assert response.json()["filters"] == {"projectId": done.id}


@pytest.mark.anyio
async def test_gps_report_bounds_and_date_filter(client, engineer_headers, network):
    response = await client.get("/api/reports", params={"type": "gps"}, headers=engineer_headers)
    summary = response.json()["data"]["summary"]
    assert summary["totalPoints"] == 3
    assert summary["totalDistance"] == 250.0
    assert summary["coordinateBounds"] == {"north": -5.0, "south": -6.3, "east": 147.1, "west": 146.5}
    assert summary["accuracyStats"] == {"averageAccuracy": 5.5, "highAccuracyPoints": 1}
    breakdowns = response.json()["data"]["breakdowns"]
    assert breakdowns["byPhase"] == {"DRAIN": 2, "SEALING": 1}
    assert breakdowns["dailyActivity"] == {"2024-06-14": 1, "2024-06-15": 2}

    one_day = await client.get(
        "/api/reports",
        params={"type": "gps", "startDate": "2024-06-15", "endDate": "2024-06-15"},
        headers=engineer_headers,
    )
    assert one_day.json()["data"]["summary"]["totalPoints"] == 2

    empty = await client.get(
        "/api/reports", params={"type": "gps", "startDate": "2030-01-01"}, headers=engineer_headers
    )
    assert empty.json()["data"]["summary"]["totalPoints"] == 0
    assert empty.json()["data"]["summary"]["coordinateBounds"] is None


@pytest.mark.anyio
async def test_progress_report_groups_by_phase(client, engineer_headers, network):
    response = await client.get("/api/reports", params={"type": "progress"}, headers=engineer_headers)
    data = response.json()["data"]
    assert data["breakdowns"]["byPhase"] == {
        "DRAIN": {"count": 2, "totalDistance": 200.0},
        "SEALING": {"count": 1, "totalDistance": 50.0},
    }
    road = data["breakdowns"]["byProject"][str(network["road"].id)]
    assert road["name"] == "Lae - Nadzab Road"
    assert road["count"] == 3
    assert len(data["items"]) == 3

    limited = await client.get(
        "/api/reports", params={"type": "progress", "limit": 1}, headers=engineer_headers
    )
    assert len(limited.json()["data"]["items"]) == 1
    assert limited.json()["data"]["summary"]["totalGpsPoints"] == 3


@pytest.mark.anyio
async def test_progress_report_keeps_same_named_projects_apart(
    client, db_session, engineer_headers, make_project
):
    first = make_project("Ring Road")
    second = make_project("Ring Road")
    for project, count in ((first, 2), (second, 1)):
        for _ in range(count):
            db_session.add(
                GpsPoint(
                    project_id=project.id,
                    latitude=-9.4,
                    longitude=147.2,
                    phase=ConstructionPhase.BASKET,
                    side=RoadSide.CENTER,
                    distance=10.0,
                )
            )
    db_session.commit()

    response = await client.get("/api/reports", params={"type": "progress"}, headers=engineer_headers)
    by_project = response.json()["data"]["breakdowns"]["byProject"]
    assert by_project[str(first.id)]["count"] == 2
    assert by_project[str(second.id)]["count"] == 1
    assert by_project[str(second.id)]["name"] == "Ring Road"
    assert by_project[str(first.id)]["totalDistance"] == 20.0


@pytest.mark.anyio
async def test_contractor_report(client, engineer_headers, network):
    response = await client.get("/api/reports", params={"type": "contractor"}, headers=engineer_headers)
    data = response.json()["data"]
    item = next(i for i in data["items"] if i["name"] == "Lae Civil Works")
    assert item["totalProjects"] == 2
    assert item["activeProjects"] == 1
    assert item["averageRating"] == 4.5
    assert item["totalContractValue"] == 200000.0

    scoped = await client.get(
        "/api/reports",
        params={"type": "contractor", "projectId": network["road"].id},
        headers=engineer_headers,
    )
    scoped_item = next(i for i in scoped.json()["data"]["items"] if i["name"] == "Lae Civil Works")
    assert scoped_item["totalProjects"] == 1
    assert [p["projectId"] for p in scoped_item["projects"]] == [network["road"].id]


@pytest.mark.anyio
async def test_province_report(client, engineer_headers, network):
    province = network["province"]
    response = await client.get(
        "/api/reports", params={"type": "province", "provinceId": province.id}, headers=engineer_headers
    )
    data = response.json()["data"]
    assert data["summary"]["totalProvinces"] == 1
    infrastructure = data["items"][0]["infrastructure"]
    assert infrastructure["totalProjects"] == 2
    assert infrastructure["completedProjects"] == 1
    assert infrastructure["totalGpsPoints"] == 3
    assert infrastructure["uniqueContractors"] == 1


@pytest.mark.anyio
async def test_financial_report(client, engineer_headers, network):
    response = await client.get(
        "/api/reports", params={"type": "financial", "projectId": network["road"].id}, headers=engineer_headers
    )
    data = response.json()["data"]
    summary = data["summary"]
    assert summary["totalContractValue"] == 150000.0
    assert summary["totalBudgetAllocated"] == 4000.0
    assert summary["totalBudgetSpent"] == 1000.0
    assert summary["budgetUtilization"] == 25.0
    assert summary["remainingBudget"] == 3000.0
    assert summary["funding"]["utilizationRate"] == 25.0
    assert summary["funding"]["releaseRate"] == 50.0
    assert summary["funding"]["commitmentRate"] == 20.0
    assert data["breakdowns"]["byFundingSource"]["GOVERNMENT"]["count"] == 1
    assert [item["budgetAllocated"] for item in data["items"]] == [1000.0, 3000.0]


@pytest.mark.anyio
async def test_export_csv_and_json(client, engineer_headers, network):
    csv_response = await client.get(
        "/api/reports/export", params={"type": "overview", "format": "csv"}, headers=engineer_headers
    )
    assert csv_response.status_code == 200
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=\"overview-report-" in csv_response.headers["content-disposition"]
    lines = csv_response.text.splitlines()
    assert lines[0] == "Overview Report"
    assert lines[3].startswith("Project Name,")
    assert len(lines) == 6

    json_response = await client.get(
        "/api/reports/export", params={"type": "gps", "format": "json"}, headers=engineer_headers
    )
    assert json_response.status_code == 200
    assert json_response.json()["data"]["summary"]["totalPoints"] == 3


@pytest.mark.anyio
async def test_export_rejects_unknown_format(client, engineer_headers):
    response = await client.get(
        "/api/reports/export", params={"type": "overview", "format": "xlsx"}, headers=engineer_headers
    )
    assert response.status_code == 400


@pytest.mark.parametrize("report_type", sorted(REPORT_ASSEMBLERS))
def test_reports_are_idempotent_and_empty_safe(db_session, report_type):
    filters = ReportFilters.build(projectId="424242")
    first = generate_report(db_session, report_type, filters)
    second = generate_report(db_session, report_type, filters)
    assert first["data"] == second["data"]
    assert set(first["data"]) == {"summary", "breakdowns", "items"}
    assert first["data"]["items"] == [] or report_type in {"contractor", "province"}


def test_same_filters_same_data_with_rows(db_session, network):
    filters = ReportFilters.build(projectId=str(network["road"].id))
    for report_type in REPORT_ASSEMBLERS:
        assert generate_report(db_session, report_type, filters)["data"] == generate_report(
            db_session, report_type, filters
        )["data"]

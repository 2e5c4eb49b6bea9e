"""Query-string dependencies shared by list and report endpoints."""
from fastapi import Query

from roadtrack.reports.filters import ReportFilters


def report_filters(
    project_id: str | None = Query(default=None, alias="projectId"),
    section_id: str | None = Query(default=None, alias="sectionId"),
    province_id: str | None = Query(default=None, alias="provinceId"),
    contractor_id: str | None = Query(default=None, alias="contractorId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    report_type: str | None = Query(default=None, alias="reportType"),
    status: str | None = Query(default=None),
    limit: str | None = Query(default=None),
) -> ReportFilters:
    """Collect the recognised filter parameters; malformed values raise FilterError (400)."""

    return ReportFilters.build(
        project_id=project_id,
        section_id=section_id,
        province_id=province_id,
        contractor_id=contractor_id,
        start_date=start_date,
        end_date=end_date,
        report_type=report_type,
        status=status,
        limit=limit,
    )


def incident_filters(
    project_id: str | None = Query(default=None, alias="projectId"),
    section_id: str | None = Query(default=None, alias="sectionId"),
    incident_type: str | None = Query(default=None, alias="incidentType"),
    severity: str | None = Query(default=None),
    status: str | None = Query(default=None),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    limit: str | None = Query(default=None),
) -> ReportFilters:
    """Filters for the HSE incident register."""

    return ReportFilters.build(
        project_id=project_id,
        section_id=section_id,
        incident_type=incident_type,
        severity=severity,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )


__all__ = ["incident_filters", "report_filters"]

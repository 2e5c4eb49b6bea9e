"""Report assemblers.

Each assembler fetches its own rows through :func:`apply_filters`, folds them
with the aggregators and returns ``{"summary", "breakdowns", "items"}`` made of
JSON-native values only. Ordering is explicit so identical filters over an
unchanged store yield identical data.
"""
from __future__ import annotations

from typing import Any, Callable

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from roadtrack.config import get_settings
from roadtrack.core.logging import get_logger
from roadtrack.models import (
    ContractStatus,
    Contractor,
    ContractorProject,
    GpsPoint,
    ProgressReport,
    Project,
    ProjectFunding,
    ProjectSection,
    ProjectStatus,
    Province,
    ScheduleStatus,
)
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.utils.errors import api_error
from roadtrack.utils.time import isoformat_or_none, utcnow

logger = get_logger(__name__)

Report = dict[str, Any]


def _money(value: Any) -> float:
    return round(agg.to_number(value), 2)


def _gps_counts(db: Session, project_ids: list[int]) -> dict[int, int]:
    if not project_ids:
        return {}
    rows = db.execute(
        select(GpsPoint.project_id, func.count(GpsPoint.id))
        .where(GpsPoint.project_id.in_(project_ids))
        .group_by(GpsPoint.project_id)
    ).all()
    return {project_id: count for project_id, count in rows}


def _province_name(project: Project | None) -> str | None:
    if project is None or project.province is None:
        return None
    return project.province.name


def overview_report(db: Session, filters: ReportFilters) -> Report:
    stmt = (
        select(Project)
        .options(
            selectinload(Project.province),
            selectinload(Project.sections),
            selectinload(Project.contractor_projects),
        )
        .order_by(Project.id)
    )
    stmt = apply_filters(
        stmt, Project, filters, allowed={"project_id", "province_id", "status", "start_date", "end_date"}
    )
    projects = list(db.scalars(stmt))
    gps_counts = _gps_counts(db, [p.id for p in projects])

    items = []
    for project in projects:
        items.append(
            {
                "id": project.id,
                "name": project.name,
                "projectCode": project.project_code,
                "province": _province_name(project),
                "status": project.status.value,
                "progress": agg.weighted_progress(project.sections),
                "totalDistance": project.total_distance,
                "totalSections": len(project.sections),
                "activeContractors": sum(
                    1 for cp in project.contractor_projects if cp.contract_status == ContractStatus.ACTIVE
                ),
                "gpsPoints": gps_counts.get(project.id, 0),
            }
        )

    summary = {
        "totalProjects": len(projects),
        "totalContractors": db.scalar(
            select(func.count(Contractor.id)).where(Contractor.is_active.is_(True))
        )
        or 0,
        "totalProvinces": db.scalar(select(func.count(Province.id))) or 0,
        "totalGpsPoints": sum(gps_counts.values()),
        "averageProgress": agg.average(item["progress"] for item in items),
        "completionRate": agg.rate(
            sum(1 for p in projects if p.status == ProjectStatus.COMPLETED), len(projects)
        ),
    }
    breakdowns = {
        "byStatus": agg.breakdown(projects, "status"),
        "byProvince": agg.breakdown(projects, _province_name),
    }
    return {"summary": summary, "breakdowns": breakdowns, "items": items}


def _gps_row(point: GpsPoint) -> dict[str, Any]:
    return {
        "id": point.id,
        "projectId": point.project_id,
        "project": point.project.name if point.project else None,
        "province": _province_name(point.project),
        "latitude": point.latitude,
        "longitude": point.longitude,
        "elevation": point.elevation,
        "accuracy": point.accuracy,
        "phase": point.phase.value,
        "side": point.side.value,
        "distance": point.distance,
        "status": point.status.value,
        "notes": point.notes,
        "user": point.user.name if point.user else None,
        "section": point.section.section_name if point.section else None,
        "contractor": point.contractor.name if point.contractor else None,
        "timestamp": isoformat_or_none(point.timestamp),
    }


def _gps_points(db: Session, filters: ReportFilters, allowed: set[str]) -> list[GpsPoint]:
    stmt = (
        select(GpsPoint)
        .options(
            selectinload(GpsPoint.project).selectinload(Project.province),
            selectinload(GpsPoint.user),
            selectinload(GpsPoint.section),
            selectinload(GpsPoint.contractor),
        )
        .order_by(GpsPoint.timestamp.desc(), GpsPoint.id.desc())
    )
    return list(db.scalars(apply_filters(stmt, GpsPoint, filters, allowed=allowed)))


def progress_report(db: Session, filters: ReportFilters) -> Report:
    allowed = {"project_id", "section_id", "start_date", "end_date"}
    points = _gps_points(db, filters, allowed)
    reports = list(
        db.scalars(
            apply_filters(
                select(ProgressReport).order_by(ProgressReport.report_date.desc(), ProgressReport.id.desc()),
                ProgressReport,
                filters,
                allowed=allowed,
            )
        )
    )

    # Project names are not unique; buckets are keyed by id and carry the name.
    by_project: dict[int, dict[str, Any]] = {}
    for point in points:
        bucket = by_project.setdefault(
            point.project_id,
            {
                "projectId": point.project_id,
                "name": point.project.name,
                "count": 0,
                "totalDistance": 0.0,
                "phases": {},
            },
        )
        bucket["count"] += 1
        bucket["totalDistance"] += agg.to_number(point.distance)
        bucket["phases"][point.phase.value] = bucket["phases"].get(point.phase.value, 0) + 1

    limit = filters.effective_limit(get_settings().REPORT_DEFAULT_LIMIT)
    summary = {
        "totalGpsPoints": len(points),
        "totalDistance": agg.total(points, "distance"),
        "totalProgressReports": len(reports),
        "averageProgress": agg.average(r.current_progress for r in reports),
        "averageDelta": agg.average(r.progress_delta for r in reports),
        "behindScheduleRate": agg.rate(
            sum(1 for r in reports if r.schedule_status == ScheduleStatus.BEHIND), len(reports)
        ),
    }
    breakdowns = {
        "byPhase": agg.grouped_totals(points, "phase", "distance", total_key="totalDistance"),
        "byProject": {str(key): by_project[key] for key in sorted(by_project)},
        "byScheduleStatus": agg.breakdown(reports, "schedule_status"),
        "dailyActivity": agg.daily_activity(points, "timestamp"),
    }
    items = [_gps_row(point) for point in points[:limit]]
    return {"summary": summary, "breakdowns": breakdowns, "items": items}


def contractor_report(db: Session, filters: ReportFilters) -> Report:
    stmt = (
        select(Contractor)
        .where(Contractor.is_active.is_(True))
        .options(
            selectinload(Contractor.project_assignments)
            .selectinload(ContractorProject.project)
            .selectinload(Project.province),
            selectinload(Contractor.sections),
        )
        .order_by(Contractor.name, Contractor.id)
    )
    contractors = list(db.scalars(apply_filters(stmt, Contractor, filters, allowed={"contractor_id"})))

    items = []
    all_assignments: list[ContractorProject] = []
    for contractor in contractors:
        assignments = sorted(contractor.project_assignments, key=lambda cp: cp.id)
        sections = contractor.sections
        if filters.project_id is not None:
            assignments = [cp for cp in assignments if cp.project_id == filters.project_id]
            sections = [s for s in sections if s.project_id == filters.project_id]
        all_assignments.extend(assignments)
        items.append(
            {
                "id": contractor.id,
                "name": contractor.name,
                "licenseNumber": contractor.license_number,
                "certificationLevel": contractor.certification_level,
                "specializations": list(contractor.specializations or []),
                "activeProjects": sum(1 for cp in assignments if cp.contract_status == ContractStatus.ACTIVE),
                "totalProjects": len(assignments),
                "assignedSections": len(sections),
                "averageRating": agg.average(cp.performance_rating for cp in assignments),
                "totalContractValue": _money(agg.total(assignments, "contract_value")),
                "projects": [
                    {
                        "projectId": cp.project_id,
                        "project": cp.project.name,
                        "province": _province_name(cp.project),
                        "contractValue": _money(cp.contract_value) if cp.contract_value is not None else None,
                        "status": cp.contract_status.value,
                        "rating": cp.performance_rating,
                    }
                    for cp in assignments
                ],
            }
        )

    summary = {
        "totalContractors": len(contractors),
        "totalAssignments": len(all_assignments),
        "activeAssignments": sum(1 for cp in all_assignments if cp.contract_status == ContractStatus.ACTIVE),
        "totalContractValue": _money(agg.total(all_assignments, "contract_value")),
        "averageRating": agg.average(cp.performance_rating for cp in all_assignments),
    }
    breakdowns = {
        "byCertificationLevel": agg.breakdown(contractors, "certification_level"),
        "byContractStatus": agg.breakdown(all_assignments, "contract_status"),
    }
    return {"summary": summary, "breakdowns": breakdowns, "items": items}


def province_report(db: Session, filters: ReportFilters) -> Report:
    stmt = (
        select(Province)
        .options(
            selectinload(Province.projects).selectinload(Project.sections),
            selectinload(Province.projects).selectinload(Project.contractor_projects),
        )
        .order_by(Province.name, Province.id)
    )
    provinces = list(db.scalars(apply_filters(stmt, Province, filters, allowed={"province_id"})))
    gps_counts = _gps_counts(db, [p.id for province in provinces for p in province.projects])

    items = []
    for province in provinces:
        projects = province.projects
        items.append(
            {
                "id": province.id,
                "name": province.name,
                "code": province.code,
                "region": province.region,
                "capital": province.capital,
                "population": province.population,
                "infrastructure": {
                    "totalProjects": len(projects),
                    "activeProjects": sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
                    "completedProjects": sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
                    "totalSections": sum(len(p.sections) for p in projects),
                    "totalGpsPoints": sum(gps_counts.get(p.id, 0) for p in projects),
                    "uniqueContractors": len(
                        {cp.contractor_id for p in projects for cp in p.contractor_projects}
                    ),
                },
                "projects": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "status": p.status.value,
                        "totalDistance": p.total_distance,
                        "progress": agg.weighted_progress(p.sections),
                        "sections": len(p.sections),
                        "gpsPoints": gps_counts.get(p.id, 0),
                    }
                    for p in projects
                ],
            }
        )

    summary = {
        "totalProvinces": len(provinces),
        "totalProjects": sum(item["infrastructure"]["totalProjects"] for item in items),
        "totalPopulation": int(agg.total(provinces, "population")),
    }
    breakdowns = {"byRegion": agg.breakdown(provinces, "region")}
    return {"summary": summary, "breakdowns": breakdowns, "items": items}


def gps_report(db: Session, filters: ReportFilters) -> Report:
    points = _gps_points(db, filters, {"project_id", "section_id", "contractor_id", "start_date", "end_date"})
    summary = {
        "totalPoints": len(points),
        "totalDistance": agg.total(points, "distance"),
        "coordinateBounds": agg.bounding_box(points),
        "accuracyStats": {
            "averageAccuracy": agg.average(p.accuracy for p in points),
            "highAccuracyPoints": sum(1 for p in points if p.accuracy is not None and p.accuracy < 5),
        },
    }
    breakdowns = {
        "byPhase": agg.breakdown(points, "phase"),
        "byStatus": agg.breakdown(points, "status"),
        "bySide": agg.breakdown(points, "side"),
        "dailyActivity": agg.daily_activity(points, "timestamp"),
    }
    return {"summary": summary, "breakdowns": breakdowns, "items": [_gps_row(p) for p in points]}


def financial_report(db: Session, filters: ReportFilters) -> Report:
    contracts = list(
        db.scalars(
            apply_filters(
                select(ContractorProject)
                .options(
                    selectinload(ContractorProject.project).selectinload(Project.province),
                    selectinload(ContractorProject.contractor),
                )
                .order_by(ContractorProject.id),
                ContractorProject,
                filters,
                allowed={"project_id"},
            )
        )
    )
    sections = list(
        db.scalars(
            apply_filters(
                select(ProjectSection)
                .options(selectinload(ProjectSection.project), selectinload(ProjectSection.assigned_contractor))
                .order_by(ProjectSection.project_id, ProjectSection.start_km, ProjectSection.id),
                ProjectSection,
                filters,
                allowed={"project_id"},
            )
        )
    )
    fundings = list(
        db.scalars(
            apply_filters(
                select(ProjectFunding).order_by(ProjectFunding.created_at.desc(), ProjectFunding.id.desc()),
                ProjectFunding,
                filters,
                allowed={"project_id", "start_date", "end_date"},
            )
        )
    )

    budget_allocated = agg.total(sections, "budget_allocated")
    budget_spent = agg.total(sections, "budget_spent")
    funds_allocated = agg.total(fundings, "budget_allocated")
    funds_released = agg.total(fundings, "funds_released")
    funds_utilized = agg.total(fundings, "funds_utilized")
    funds_committed = agg.total(fundings, "funds_committed")

    summary = {
        "totalContractValue": _money(agg.total(contracts, "contract_value")),
        "totalBudgetAllocated": _money(budget_allocated),
        "totalBudgetSpent": _money(budget_spent),
        "budgetUtilization": agg.rate(budget_spent, budget_allocated),
        "remainingBudget": _money(budget_allocated - budget_spent),
        "funding": {
            "totalAllocated": _money(funds_allocated),
            "totalReleased": _money(funds_released),
            "totalUtilized": _money(funds_utilized),
            "totalCommitted": _money(funds_committed),
            "pendingClaims": _money(agg.total(fundings, "pending_claims")),
            "utilizationRate": agg.rate(funds_utilized, funds_allocated),
            "releaseRate": agg.rate(funds_released, funds_allocated),
            "commitmentRate": agg.rate(funds_committed, funds_released),
            "fundingSourcesCount": len(fundings),
        },
    }

    by_source: dict[str, dict[str, float]] = {}
    for funding in fundings:
        bucket = by_source.setdefault(
            funding.funding_source,
            {"count": 0, "budgetAllocated": 0.0, "fundsReleased": 0.0, "fundsUtilized": 0.0},
        )
        bucket["count"] += 1
        bucket["budgetAllocated"] = _money(bucket["budgetAllocated"] + agg.to_number(funding.budget_allocated))
        bucket["fundsReleased"] = _money(bucket["fundsReleased"] + agg.to_number(funding.funds_released))
        bucket["fundsUtilized"] = _money(bucket["fundsUtilized"] + agg.to_number(funding.funds_utilized))

    breakdowns = {
        "byContractStatus": agg.breakdown(contracts, "contract_status"),
        "byFundingSource": dict(sorted(by_source.items())),
        "contracts": [
            {
                "id": cp.id,
                "project": cp.project.name,
                "province": _province_name(cp.project),
                "contractor": cp.contractor.name,
                "certification": cp.contractor.certification_level,
                "contractValue": _money(cp.contract_value) if cp.contract_value is not None else None,
                "status": cp.contract_status.value,
                "performanceRating": cp.performance_rating,
            }
            for cp in contracts
        ],
    }
    items = [
        {
            "id": section.id,
            "project": section.project.name,
            "section": section.section_name,
            "contractor": section.assigned_contractor.name if section.assigned_contractor else None,
            "budgetAllocated": _money(section.budget_allocated),
            "budgetSpent": _money(section.budget_spent),
            "utilization": agg.rate(agg.to_number(section.budget_spent), agg.to_number(section.budget_allocated)),
            "progress": section.progress_percentage,
        }
        for section in sections
    ]
    return {"summary": summary, "breakdowns": breakdowns, "items": items}


REPORT_ASSEMBLERS: dict[str, Callable[[Session, ReportFilters], Report]] = {
    "overview": overview_report,
    "progress": progress_report,
    "contractor": contractor_report,
    "province": province_report,
    "gps": gps_report,
    "financial": financial_report,
}


def generate_report(db: Session, report_type: str, filters: ReportFilters) -> Report:
    """Run the assembler for ``report_type`` and wrap it in the report envelope."""

    assembler = REPORT_ASSEMBLERS.get(report_type)
    if assembler is None:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid report type",
            f"Expected one of: {', '.join(REPORT_ASSEMBLERS)}",
        )
    data = assembler(db, filters)
    logger.info("Report generated", extra={"report_type": report_type, "filters": filters.as_dict()})
    return {
        "reportType": report_type,
        "generatedAt": utcnow().isoformat(),
        "filters": filters.as_dict(),
        "data": data,
    }


__all__ = [
    "REPORT_ASSEMBLERS",
    "contractor_report",
    "financial_report",
    "generate_report",
    "gps_report",
    "overview_report",
    "progress_report",
    "province_report",
]

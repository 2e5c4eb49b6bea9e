"""Progress report services.

Recording a report also moves the reported section forward and recomputes the
project's length-weighted overall progress.
"""
import logging
from typing import Any

from fastapi import status
from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.config import get_settings
from roadtrack.models import ProgressReport, Project, ProjectSection, ScheduleStatus, User
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.progress import ProgressReportCreate, ProgressReportUpdate
from roadtrack.security import ensure_project_access
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.services.projects import recompute_overall_progress, status_for_progress
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

# Percentage points either side of plan still counted as on track.
SCHEDULE_TOLERANCE = 5.0


def derive_schedule_status(current: float, planned: float) -> ScheduleStatus:
    variance = current - planned
    if variance < -SCHEDULE_TOLERANCE:
        return ScheduleStatus.BEHIND
    if variance > SCHEDULE_TOLERANCE:
        return ScheduleStatus.AHEAD
    return ScheduleStatus.ON_TRACK


def progress_stats(reports: list[ProgressReport]) -> dict[str, Any]:
    return {
        "total_reports": len(reports),
        "average_progress": agg.average(r.current_progress for r in reports),
        "average_delta": agg.average(r.progress_delta for r in reports),
        "by_schedule_status": agg.breakdown(reports, "schedule_status"),
        "by_type": agg.breakdown(reports, "report_type"),
    }


def list_reports(db: Session, filters: ReportFilters) -> dict[str, Any]:
    stmt = select(ProgressReport).order_by(ProgressReport.report_date.desc(), ProgressReport.id.desc())
    stmt = apply_filters(
        stmt,
        ProgressReport,
        filters,
        allowed={"project_id", "section_id", "report_type", "status", "start_date", "end_date"},
    )
    reports = list(db.scalars(stmt.limit(filters.effective_limit(get_settings().REPORT_DEFAULT_LIMIT))))
    return {"reports": reports, "stats": progress_stats(reports)}


def _section_for(db: Session, project_id: int, section_id: int | None) -> ProjectSection | None:
    if section_id is None:
        return None
    section = db.get(ProjectSection, section_id)
    if section is None or section.project_id != project_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Section not found or not part of project")
    return section


def _apply_progress(db: Session, project: Project, section: ProjectSection | None, current: float) -> None:
    if section is not None:
        section.progress_percentage = current
        section.status = status_for_progress(current)
    if project.sections or section is not None:
        recompute_overall_progress(db, project)
    else:
        # Projects without sections take the reported figure directly.
        project.overall_progress = current


def create_report(db: Session, payload: ProgressReportCreate, user: User) -> ProgressReport:
    project = get_or_404(db, Project, payload.project_id)
    ensure_project_access(db, user, project.id)
    section = _section_for(db, project.id, payload.section_id)

    data = payload.model_dump()
    if data["previous_progress"] is None:
        data["previous_progress"] = section.progress_percentage if section else project.overall_progress
    if data["planned_progress"] is None:
        data["planned_progress"] = data["current_progress"]
    if data["schedule_status"] is None:
        data["schedule_status"] = derive_schedule_status(data["current_progress"], data["planned_progress"])
    data["progress_delta"] = round(data["current_progress"] - data["previous_progress"], 2)

    report = ProgressReport(reported_by=user.id, **data)
    db.add(report)
    _apply_progress(db, project, section, report.current_progress)
    db.flush()

    log_audit(
        db,
        actor=actor_from_user(user),
        action="PROGRESS_REPORTED",
        entity="ProgressReport",
        entity_id=report.id,
        data={
            "project_id": project.id,
            "section_id": report.section_id,
            "current_progress": report.current_progress,
            "progress_delta": report.progress_delta,
            "schedule_status": report.schedule_status.value,
        },
    )
    db.commit()
    db.refresh(report)
    logger.info(
        "Progress report created",
        extra={"report_id": report.id, "project_id": project.id, "overall_progress": project.overall_progress},
    )
    return report


def update_report(db: Session, report_id: int, payload: ProgressReportUpdate, user: User) -> ProgressReport:
    report = get_or_404(db, ProgressReport, report_id, "Progress report")
    ensure_project_access(db, user, report.project_id)
    changes = payload.model_dump(exclude_unset=True)

    current = changes.get("current_progress", report.current_progress)
    planned = changes.get("planned_progress", report.planned_progress)
    if "current_progress" in changes:
        changes["progress_delta"] = round(current - report.previous_progress, 2)
    if changes.keys() & {"current_progress", "planned_progress"} and "schedule_status" not in changes:
        changes["schedule_status"] = derive_schedule_status(current, planned)

    applied = merge_fields(report, changes)
    if "current_progress" in applied:
        section = report.section
        _apply_progress(db, report.project, section, current)
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="PROGRESS_UPDATED",
            entity="ProgressReport",
            entity_id=report.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(report)
    logger.info("Progress report updated", extra={"report_id": report.id, "fields": sorted(applied)})
    return report


def delete_report(db: Session, report_id: int, user: User) -> None:
    report = get_or_404(db, ProgressReport, report_id, "Progress report")
    ensure_project_access(db, user, report.project_id)
    log_audit(
        db,
        actor=actor_from_user(user),
        action="PROGRESS_DELETED",
        entity="ProgressReport",
        entity_id=report.id,
        data={"project_id": report.project_id},
    )
    db.delete(report)
    db.commit()
    logger.info("Progress report deleted", extra={"report_id": report_id})


__all__ = [
    "SCHEDULE_TOLERANCE",
    "create_report",
    "delete_report",
    "derive_schedule_status",
    "list_reports",
    "progress_stats",
    "update_report",
]

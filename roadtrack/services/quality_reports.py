"""Quality / QA-QC report services."""
import logging
from typing import Any

from fastapi import status
from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.config import get_settings
from roadtrack.models import Project, ProjectSection, QaQcStatus, QualityReport, User, UserRole
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.quality import QualityReportCreate, QualityReportUpdate
from roadtrack.security import ensure_project_access
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

QUALITY_WRITE_ROLES = (
    UserRole.ADMIN,
    UserRole.QA_QC_OFFICER,
    UserRole.SITE_ENGINEER,
    UserRole.PROGRAM_MANAGER,
)
QUALITY_DELETE_ROLES = (UserRole.ADMIN, UserRole.QA_QC_OFFICER)


def quality_stats(reports: list[QualityReport]) -> dict[str, Any]:
    passed = sum(1 for r in reports if r.qa_qc_status == QaQcStatus.PASS)
    return {
        "total_reports": len(reports),
        "pass_rate": agg.rate(passed, len(reports)),
        "follow_up_required": sum(1 for r in reports if r.follow_up_required),
        "by_status": agg.breakdown(reports, "qa_qc_status"),
        "by_type": agg.breakdown(reports, "report_type"),
        "compliance": {
            "spec": agg.breakdown(reports, "spec_compliance"),
            "environmental": agg.breakdown(reports, "environmental_compliance"),
            "social": agg.breakdown(reports, "social_compliance"),
        },
    }


def list_reports(db: Session, filters: ReportFilters) -> dict[str, Any]:
    stmt = select(QualityReport).order_by(QualityReport.test_date.desc(), QualityReport.id.desc())
    stmt = apply_filters(
        stmt,
        QualityReport,
        filters,
        allowed={"project_id", "section_id", "report_type", "status", "start_date", "end_date"},
    )
    reports = list(db.scalars(stmt.limit(filters.effective_limit(get_settings().REPORT_DEFAULT_LIMIT))))
    return {"reports": reports, "stats": quality_stats(reports)}


def _check_section(db: Session, project_id: int, section_id: int | None) -> None:
    if section_id is None:
        return
    section = db.get(ProjectSection, section_id)
    if section is None or section.project_id != project_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Section does not belong to this project")


def create_report(db: Session, payload: QualityReportCreate, user: User) -> QualityReport:
    get_or_404(db, Project, payload.project_id)
    ensure_project_access(db, user, payload.project_id)
    _check_section(db, payload.project_id, payload.section_id)

    report = QualityReport(reported_by=user.id, **payload.model_dump())
    db.add(report)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="QUALITY_REPORTED",
        entity="QualityReport",
        entity_id=report.id,
        data={
            "project_id": report.project_id,
            "report_type": report.report_type,
            "qa_qc_status": report.qa_qc_status.value,
        },
    )
    db.commit()
    db.refresh(report)
    logger.info("Quality report created", extra={"report_id": report.id, "project_id": report.project_id})
    return report


def update_report(db: Session, report_id: int, payload: QualityReportUpdate, user: User) -> QualityReport:
    report = get_or_404(db, QualityReport, report_id, "Quality report")
    if user.role not in QUALITY_WRITE_ROLES and report.reported_by != user.id:
        raise api_error(status.HTTP_403_FORBIDDEN, "Insufficient permissions to update this report")

    changes = payload.model_dump(exclude_unset=True)
    if "section_id" in changes:
        _check_section(db, report.project_id, changes["section_id"])
    applied = merge_fields(report, changes)
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="QUALITY_UPDATED",
            entity="QualityReport",
            entity_id=report.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(report)
    logger.info("Quality report updated", extra={"report_id": report.id, "fields": sorted(applied)})
    return report


def delete_report(db: Session, report_id: int, user: User) -> None:
    report = get_or_404(db, QualityReport, report_id, "Quality report")
    log_audit(
        db,
        actor=actor_from_user(user),
        action="QUALITY_DELETED",
        entity="QualityReport",
        entity_id=report.id,
        data={"project_id": report.project_id},
    )
    db.delete(report)
    db.commit()
    logger.info("Quality report deleted", extra={"report_id": report_id})


__all__ = [
    "QUALITY_DELETE_ROLES",
    "QUALITY_WRITE_ROLES",
    "create_report",
    "delete_report",
    "list_reports",
    "quality_stats",
    "update_report",
]

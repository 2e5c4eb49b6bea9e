"""HSE incident register.

Any user with access to a project may report an incident on it. The reporter,
HSE officers and program managers follow it up; HIGH and CRITICAL incidents are
flagged for escalation and logged at WARNING.
"""
import logging
from typing import Any

from fastapi import status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from roadtrack.config import get_settings
from roadtrack.models import HSEIncident, Project, ProjectSection, User, UserRole
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.hse import HSEIncidentCreate, HSEIncidentUpdate
from roadtrack.security import ensure_project_access
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

HSE_FOLLOW_UP_ROLES = (UserRole.ADMIN, UserRole.HSE_OFFICER, UserRole.PROGRAM_MANAGER)
HSE_DELETE_ROLES = (UserRole.ADMIN, UserRole.HSE_OFFICER)


def incident_stats(incidents: list[HSEIncident]) -> dict[str, Any]:
    open_count = sum(1 for i in incidents if i.is_open)
    return {
        "total": len(incidents),
        "open_incidents": open_count,
        "open_incident_rate": agg.rate(open_count, len(incidents)),
        "by_status": agg.breakdown(incidents, "status"),
        "by_severity": agg.breakdown(incidents, "severity"),
        "by_type": agg.breakdown(incidents, "incident_type"),
    }


def incidents_by_project(incidents: list[HSEIncident]) -> dict[str, dict[str, Any]]:
    grouped: dict[int, dict[str, Any]] = {}
    for incident in incidents:
        bucket = grouped.setdefault(
            incident.project_id,
            {
                "project_id": incident.project_id,
                "project_name": incident.project.name,
                "count": 0,
                "open_incidents": 0,
            },
        )
        bucket["count"] += 1
        bucket["open_incidents"] += int(incident.is_open)
    return {str(key): grouped[key] for key in sorted(grouped)}


def list_incidents(db: Session, filters: ReportFilters) -> dict[str, Any]:
    stmt = (
        select(HSEIncident)
        .options(selectinload(HSEIncident.project))
        .order_by(HSEIncident.incident_date.desc(), HSEIncident.id.desc())
    )
    stmt = apply_filters(
        stmt,
        HSEIncident,
        filters,
        allowed={"project_id", "section_id", "incident_type", "severity", "status", "start_date", "end_date"},
    )
    incidents = list(db.scalars(stmt.limit(filters.effective_limit(get_settings().REPORT_DEFAULT_LIMIT))))
    return {
        "incidents": incidents,
        "stats": incident_stats(incidents),
        "by_project": incidents_by_project(incidents),
    }


def _check_section(db: Session, project_id: int, section_id: int | None) -> None:
    if section_id is None:
        return
    section = db.get(ProjectSection, section_id)
    if section is None or section.project_id != project_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Section does not belong to this project")


def create_incident(db: Session, payload: HSEIncidentCreate, user: User) -> HSEIncident:
    get_or_404(db, Project, payload.project_id)
    ensure_project_access(db, user, payload.project_id)
    _check_section(db, payload.project_id, payload.section_id)

    incident = HSEIncident(reported_by=user.id, **payload.model_dump())
    db.add(incident)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="INCIDENT_REPORTED",
        entity="HSEIncident",
        entity_id=incident.id,
        data={
            "project_id": incident.project_id,
            "incident_type": incident.incident_type,
            "severity": incident.severity.value,
            "location": incident.location,
        },
    )
    db.commit()
    db.refresh(incident)
    extra = {"incident_id": incident.id, "project_id": incident.project_id, "severity": incident.severity.value}
    if incident.escalation_required:
        logger.warning("HSE incident requires management attention", extra=extra)
    else:
        logger.info("HSE incident reported", extra=extra)
    return incident


def update_incident(db: Session, incident_id: int, payload: HSEIncidentUpdate, user: User) -> HSEIncident:
    incident = get_or_404(db, HSEIncident, incident_id, "HSE incident")
    if user.role not in HSE_FOLLOW_UP_ROLES and incident.reported_by != user.id:
        raise api_error(status.HTTP_403_FORBIDDEN, "Permission denied")

    previous_status = incident.status
    applied = merge_fields(incident, payload.model_dump(exclude_unset=True))
    if applied:
        data = audit_view(applied)
        if "status" in applied:
            data["previous_status"] = previous_status.value
        log_audit(
            db,
            actor=actor_from_user(user),
            action="INCIDENT_UPDATED",
            entity="HSEIncident",
            entity_id=incident.id,
            data=data,
        )
    db.commit()
    db.refresh(incident)
    logger.info("HSE incident updated", extra={"incident_id": incident.id, "fields": sorted(applied)})
    return incident


def delete_incident(db: Session, incident_id: int, user: User) -> None:
    incident = get_or_404(db, HSEIncident, incident_id, "HSE incident")
    log_audit(
        db,
        actor=actor_from_user(user),
        action="INCIDENT_DELETED",
        entity="HSEIncident",
        entity_id=incident.id,
        data={"project_id": incident.project_id, "incident_type": incident.incident_type},
    )
    db.delete(incident)
    db.commit()
    logger.info("HSE incident deleted", extra={"incident_id": incident_id})


__all__ = [
    "HSE_DELETE_ROLES",
    "HSE_FOLLOW_UP_ROLES",
    "create_incident",
    "delete_incident",
    "incident_stats",
    "incidents_by_project",
    "list_incidents",
    "update_incident",
]

"""Project and road-section services."""
import logging
from typing import Any

from fastapi import status
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from roadtrack.models import (
    Contractor,
    GpsPoint,
    HSEIncident,
    ProgressReport,
    Project,
    ProjectSection,
    Province,
    QualityReport,
    SectionStatus,
)
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.project import ProjectCreate, ProjectUpdate, SectionCreate, SectionUpdate
from roadtrack.services.common import audit_view, get_or_404, merge_fields, to_decimal
from roadtrack.utils.audit import log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

# Papua New Guinea bounding box.
PNG_LATITUDE = (-12.0, -1.0)
PNG_LONGITUDE = (140.0, 160.0)

_SECTION_MONEY = ("budget_allocated", "budget_spent")


def validate_coordinates(latitude: float | None, longitude: float | None) -> None:
    """Coordinates are optional but must come as a pair inside PNG."""

    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        raise api_error(
            status.HTTP_400_BAD_REQUEST, "Latitude and longitude must be provided together"
        )
    if not (PNG_LATITUDE[0] <= latitude <= PNG_LATITUDE[1]) or not (
        PNG_LONGITUDE[0] <= longitude <= PNG_LONGITUDE[1]
    ):
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Coordinates are outside Papua New Guinea",
            f"latitude must be within {PNG_LATITUDE}, longitude within {PNG_LONGITUDE}",
        )


def _ensure_province(db: Session, province_id: int | None) -> None:
    if province_id is not None:
        get_or_404(db, Province, province_id)


def _ensure_unique_code(db: Session, code: str | None, *, exclude_id: int | None = None) -> None:
    if not code:
        return
    stmt = select(Project.id).where(Project.project_code == code)
    if exclude_id is not None:
        stmt = stmt.where(Project.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise api_error(status.HTTP_409_CONFLICT, "Project code already exists", code)


def recompute_overall_progress(db: Session, project: Project) -> float:
    """Store the length-weighted section progress on the project."""

    db.flush()
    db.refresh(project, attribute_names=["sections"])
    project.overall_progress = agg.weighted_progress(project.sections)
    return project.overall_progress


def list_projects(db: Session, filters: ReportFilters) -> list[Project]:
    stmt = select(Project).order_by(Project.name, Project.id)
    stmt = apply_filters(stmt, Project, filters, allowed={"province_id", "status"})
    return list(db.scalars(stmt))


def get_project(db: Session, project_id: int) -> Project:
    stmt = (
        select(Project)
        .where(Project.id == project_id)
        .options(selectinload(Project.sections), selectinload(Project.province))
    )
    project = db.scalars(stmt).first()
    if project is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "Project not found")
    return project


def project_stats(db: Session, project: Project) -> dict[str, Any]:
    """Distance per phase and side, point status counts and weighted progress."""

    points = list(
        db.scalars(
            select(GpsPoint)
            .where(GpsPoint.project_id == project.id)
            .order_by(GpsPoint.timestamp.desc(), GpsPoint.id.desc())
        )
    )
    distance_by_phase: dict[str, dict[str, float]] = {}
    for point in points:
        sides = distance_by_phase.setdefault(point.phase.value, {})
        sides[point.side.value] = sides.get(point.side.value, 0.0) + agg.to_number(point.distance)

    return {
        "total_points": len(points),
        "weighted_progress": agg.weighted_progress(project.sections),
        "total_length": agg.total(project.sections, "length"),
        "distance_by_phase": dict(sorted(distance_by_phase.items())),
        "points_by_status": agg.breakdown(points, "status"),
        "sections_by_status": agg.breakdown(project.sections, "status"),
        "last_activity": points[0].timestamp if points else None,
    }


def create_project(db: Session, payload: ProjectCreate, *, actor: str) -> Project:
    validate_coordinates(payload.latitude, payload.longitude)
    _ensure_province(db, payload.province_id)
    _ensure_unique_code(db, payload.project_code)

    project = Project(**payload.model_dump())
    db.add(project)
    db.flush()

    log_audit(
        db,
        actor=actor,
        action="PROJECT_CREATED",
        entity="Project",
        entity_id=project.id,
        data={"name": project.name, "status": project.status.value, "province_id": project.province_id},
    )
    db.commit()
    db.refresh(project)
    logger.info("Project created", extra={"project_id": project.id})
    return project


def update_project(db: Session, project_id: int, payload: ProjectUpdate, *, actor: str) -> Project:
    project = get_or_404(db, Project, project_id)
    changes = payload.model_dump(exclude_unset=True)

    validate_coordinates(
        changes.get("latitude", project.latitude), changes.get("longitude", project.longitude)
    )
    if "province_id" in changes:
        _ensure_province(db, changes["province_id"])
    if "project_code" in changes:
        _ensure_unique_code(db, changes["project_code"], exclude_id=project.id)

    applied = merge_fields(project, changes)
    if applied:
        log_audit(
            db,
            actor=actor,
            action="PROJECT_UPDATED",
            entity="Project",
            entity_id=project.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(project)
    logger.info("Project updated", extra={"project_id": project.id, "fields": sorted(applied)})
    return project


def delete_project(db: Session, project_id: int, *, actor: str) -> None:
    project = get_or_404(db, Project, project_id)
    log_audit(
        db,
        actor=actor,
        action="PROJECT_DELETED",
        entity="Project",
        entity_id=project.id,
        data={"name": project.name},
    )
    db.delete(project)
    db.commit()
    logger.info("Project deleted", extra={"project_id": project_id})


def list_sections(db: Session, project_id: int) -> list[ProjectSection]:
    get_or_404(db, Project, project_id)
    stmt = (
        select(ProjectSection)
        .where(ProjectSection.project_id == project_id)
        .order_by(ProjectSection.start_km, ProjectSection.id)
    )
    return list(db.scalars(stmt))


def _get_section(db: Session, project_id: int, section_id: int) -> ProjectSection:
    section = db.get(ProjectSection, section_id)
    if section is None or section.project_id != project_id:
        raise api_error(status.HTTP_404_NOT_FOUND, "Section not found")
    return section


def _section_length(start_km: float, end_km: float, length: float | None) -> float:
    if end_km < start_km:
        raise api_error(status.HTTP_400_BAD_REQUEST, "endKm must not be before startKm")
    if length is not None:
        return length
    # Chainage is in kilometres, length in metres.
    return round((end_km - start_km) * 1000, 2)


def status_for_progress(progress: float) -> SectionStatus:
    if progress >= 100:
        return SectionStatus.COMPLETED
    if progress > 0:
        return SectionStatus.IN_PROGRESS
    return SectionStatus.NOT_STARTED


def create_section(db: Session, project_id: int, payload: SectionCreate, *, actor: str) -> ProjectSection:
    project = get_or_404(db, Project, project_id)
    if payload.assigned_contractor_id is not None:
        get_or_404(db, Contractor, payload.assigned_contractor_id)

    data = payload.model_dump()
    data["length"] = _section_length(payload.start_km, payload.end_km, payload.length)
    for key in _SECTION_MONEY:
        data[key] = to_decimal(data[key])
    if "status" not in payload.model_fields_set:
        data["status"] = status_for_progress(payload.progress_percentage)

    section = ProjectSection(project_id=project.id, **data)
    db.add(section)
    db.flush()
    recompute_overall_progress(db, project)

    log_audit(
        db,
        actor=actor,
        action="SECTION_CREATED",
        entity="ProjectSection",
        entity_id=section.id,
        data={"project_id": project.id, "section_name": section.section_name, "length": section.length},
    )
    db.commit()
    db.refresh(section)
    logger.info("Section created", extra={"project_id": project.id, "section_id": section.id})
    return section


def update_section(
    db: Session, project_id: int, section_id: int, payload: SectionUpdate, *, actor: str
) -> ProjectSection:
    section = _get_section(db, project_id, section_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("assigned_contractor_id") is not None:
        get_or_404(db, Contractor, changes["assigned_contractor_id"])

    start_km = changes.get("start_km", section.start_km)
    end_km = changes.get("end_km", section.end_km)
    if {"start_km", "end_km", "length"} & changes.keys():
        changes["length"] = _section_length(start_km, end_km, changes.get("length"))
    if "progress_percentage" in changes and "status" not in changes:
        changes["status"] = status_for_progress(changes["progress_percentage"])

    applied = merge_fields(section, changes, money_fields=_SECTION_MONEY)
    recompute_overall_progress(db, section.project)
    if applied:
        log_audit(
            db,
            actor=actor,
            action="SECTION_UPDATED",
            entity="ProjectSection",
            entity_id=section.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(section)
    logger.info("Section updated", extra={"section_id": section.id, "fields": sorted(applied)})
    return section


def delete_section(db: Session, project_id: int, section_id: int, *, actor: str) -> None:
    section = _get_section(db, project_id, section_id)
    project = section.project
    for model in (GpsPoint, QualityReport, ProgressReport, HSEIncident):
        db.execute(
            update(model)
            .where(model.section_id == section.id)
            .values(section_id=None)
            .execution_options(synchronize_session=False)
        )
    log_audit(
        db,
        actor=actor,
        action="SECTION_DELETED",
        entity="ProjectSection",
        entity_id=section.id,
        data={"project_id": project_id, "section_name": section.section_name},
    )
    db.delete(section)
    recompute_overall_progress(db, project)
    db.commit()
    logger.info("Section deleted", extra={"project_id": project_id, "section_id": section_id})


def project_counts(db: Session) -> dict[int, int]:
    """Number of projects per province id."""

    rows = db.execute(
        select(Project.province_id, func.count(Project.id))
        .where(Project.province_id.is_not(None))
        .group_by(Project.province_id)
    ).all()
    return {province_id: count for province_id, count in rows}


__all__ = [
    "PNG_LATITUDE",
    "PNG_LONGITUDE",
    "create_project",
    "create_section",
    "delete_project",
    "delete_section",
    "get_project",
    "list_projects",
    "list_sections",
    "project_counts",
    "project_stats",
    "recompute_overall_progress",
    "status_for_progress",
    "update_project",
    "update_section",
]

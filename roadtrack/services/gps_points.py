"""GPS observation logging services (append-only)."""
import logging

from fastapi import status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.config import get_settings
from roadtrack.models import Contractor, GpsPoint, Project, ProjectSection, User
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.gps_point import BulkImportRequest, GpsPointCreate
from roadtrack.services.common import get_or_404
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.errors import api_error
from roadtrack.utils.time import utcnow

logger = logging.getLogger(__name__)


def list_points(db: Session, filters: ReportFilters) -> list[GpsPoint]:
    stmt = select(GpsPoint).order_by(GpsPoint.timestamp.desc(), GpsPoint.id.desc())
    stmt = apply_filters(
        stmt,
        GpsPoint,
        filters,
        allowed={"project_id", "section_id", "contractor_id", "status", "start_date", "end_date"},
    )
    stmt = stmt.limit(filters.effective_limit(get_settings().REPORT_DEFAULT_LIMIT))
    return list(db.scalars(stmt))


def _check_references(db: Session, payload: GpsPointCreate) -> str | None:
    """Return a human-readable problem with the point's references, if any."""

    if db.get(Project, payload.project_id) is None:
        return "Project not found"
    if payload.section_id is not None:
        section = db.get(ProjectSection, payload.section_id)
        if section is None or section.project_id != payload.project_id:
            return "Section does not belong to this project"
    if payload.contractor_id is not None and db.get(Contractor, payload.contractor_id) is None:
        return "Contractor not found"
    return None


def _build_point(payload: GpsPointCreate, user: User) -> GpsPoint:
    data = payload.model_dump()
    data["timestamp"] = data["timestamp"] or utcnow()
    return GpsPoint(user_id=user.id, **data)


def create_point(db: Session, payload: GpsPointCreate, user: User) -> GpsPoint:
    get_or_404(db, Project, payload.project_id)
    problem = _check_references(db, payload)
    if problem is not None:
        raise api_error(status.HTTP_400_BAD_REQUEST, problem)

    point = _build_point(payload, user)
    db.add(point)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="GPS_POINT_ADDED",
        entity="GpsPoint",
        entity_id=point.id,
        data={"project_id": point.project_id, "phase": point.phase.value, "side": point.side.value},
    )
    db.commit()
    db.refresh(point)
    logger.info("GPS point recorded", extra={"point_id": point.id, "project_id": point.project_id})
    return point


def bulk_import(db: Session, payload: BulkImportRequest, user: User) -> dict:
    """Validate every row first; insert the batch only when all rows are valid."""

    get_or_404(db, Project, payload.project_id)
    valid: list[GpsPointCreate] = []
    errors: list[dict] = []
    for index, row in enumerate(payload.points, start=1):
        try:
            point = GpsPointCreate.model_validate({**row, "projectId": payload.project_id})
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            errors.append({"row": index, "error": f"{field}: {first['msg']}"})
            continue
        problem = _check_references(db, point)
        if problem is not None:
            errors.append({"row": index, "error": problem})
            continue
        valid.append(point)

    if errors:
        logger.warning(
            "GPS bulk import rejected",
            extra={"project_id": payload.project_id, "failed": len(errors), "rows": len(payload.points)},
        )
        raise api_error(status.HTTP_400_BAD_REQUEST, "Bulk import validation failed", errors)

    points = [_build_point(item, user) for item in valid]
    db.add_all(points)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="GPS_POINTS_IMPORTED",
        entity="Project",
        entity_id=payload.project_id,
        data={"count": len(points)},
    )
    db.commit()
    logger.info("GPS bulk import completed", extra={"project_id": payload.project_id, "imported": len(points)})
    return {"imported": len(points), "failed": 0, "errors": []}


__all__ = ["bulk_import", "create_point", "list_points"]

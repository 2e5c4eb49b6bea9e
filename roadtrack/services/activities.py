"""Construction activity catalogue and per-project activity assignments."""
import logging
from typing import Any

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from roadtrack.models import ConstructionActivity, Project, ProjectActivity, User, UserRole
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.activity import (
    ConstructionActivityCreate,
    ConstructionActivityUpdate,
    ProjectActivityCreate,
    ProjectActivityUpdate,
)
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

ACTIVITY_ASSIGN_ROLES = (UserRole.ADMIN, UserRole.MANAGER)
FEED_DEFAULT_LIMIT = 50


def _ensure_unique_name(db: Session, name: str, *, exclude_id: int | None = None) -> None:
    stmt = select(ConstructionActivity.id).where(
        func.lower(ConstructionActivity.name) == name.lower(),
        ConstructionActivity.is_active.is_(True),
    )
    if exclude_id is not None:
        stmt = stmt.where(ConstructionActivity.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise api_error(status.HTTP_409_CONFLICT, "An activity with this name already exists", name)


def list_catalogue(db: Session) -> list[ConstructionActivity]:
    stmt = (
        select(ConstructionActivity)
        .where(ConstructionActivity.is_active.is_(True))
        .order_by(ConstructionActivity.created_at.desc(), ConstructionActivity.id.desc())
    )
    return list(db.scalars(stmt))


def create_activity(db: Session, payload: ConstructionActivityCreate, user: User) -> ConstructionActivity:
    name = payload.name.strip()
    if not name:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Activity name is required")
    _ensure_unique_name(db, name)

    description = payload.description.strip() if payload.description else None
    activity = ConstructionActivity(
        name=name,
        description=description or None,
        color=payload.color,
        created_by=user.id,
    )
    db.add(activity)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="ACTIVITY_CREATED",
        entity="ConstructionActivity",
        entity_id=activity.id,
        data={"name": name, "color": activity.color},
    )
    db.commit()
    db.refresh(activity)
    logger.info("Construction activity created", extra={"activity_id": activity.id, "activity_name": name})
    return activity


def update_activity(
    db: Session, activity_id: int, payload: ConstructionActivityUpdate, user: User
) -> ConstructionActivity:
    activity = get_or_404(db, ConstructionActivity, activity_id, "Activity")
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise api_error(status.HTTP_400_BAD_REQUEST, "Activity name is required")
    # Renaming or reactivating must not clash with another active activity.
    active = changes.get("is_active", activity.is_active)
    if active and ("name" in changes or changes.get("is_active")):
        _ensure_unique_name(db, changes.get("name", activity.name), exclude_id=activity.id)

    applied = merge_fields(activity, changes)
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="ACTIVITY_UPDATED",
            entity="ConstructionActivity",
            entity_id=activity.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(activity)
    logger.info("Construction activity updated", extra={"activity_id": activity.id, "fields": sorted(applied)})
    return activity


def delete_activity(db: Session, activity_id: int, user: User) -> None:
    activity = get_or_404(db, ConstructionActivity, activity_id, "Activity")
    in_use = db.scalar(select(func.count(ProjectActivity.id)).where(ProjectActivity.activity_id == activity.id))
    if in_use:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Cannot delete activity that is currently in use",
            {"projectActivities": in_use},
        )
    log_audit(
        db,
        actor=actor_from_user(user),
        action="ACTIVITY_DELETED",
        entity="ConstructionActivity",
        entity_id=activity.id,
        data={"name": activity.name},
    )
    db.delete(activity)
    db.commit()
    logger.info("Construction activity deleted", extra={"activity_id": activity_id})


def _assignment_query():
    return select(ProjectActivity).options(
        selectinload(ProjectActivity.activity),
        selectinload(ProjectActivity.assigned_user),
    )


def list_project_activities(db: Session, project_id: int) -> list[ProjectActivity]:
    get_or_404(db, Project, project_id)
    stmt = (
        _assignment_query()
        .where(ProjectActivity.project_id == project_id)
        .order_by(ProjectActivity.created_at, ProjectActivity.id)
    )
    return list(db.scalars(stmt))


def assign_activity(db: Session, project_id: int, payload: ProjectActivityCreate, user: User) -> ProjectActivity:
    get_or_404(db, Project, project_id)
    activity = get_or_404(db, ConstructionActivity, payload.activity_id, "Activity")
    if not activity.is_active:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Activity is not active", activity.name)
    if payload.assigned_user_id is not None:
        get_or_404(db, User, payload.assigned_user_id)
    existing = db.scalar(
        select(ProjectActivity.id).where(
            ProjectActivity.project_id == project_id,
            ProjectActivity.activity_id == activity.id,
        )
    )
    if existing is not None:
        raise api_error(status.HTTP_409_CONFLICT, "Activity already assigned to this project")

    assignment = ProjectActivity(project_id=project_id, **payload.model_dump())
    db.add(assignment)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="ACTIVITY_ASSIGNED",
        entity="ProjectActivity",
        entity_id=assignment.id,
        data={
            "project_id": project_id,
            "activity_name": activity.name,
            "priority": assignment.priority.value,
            "assigned_user_id": assignment.assigned_user_id,
        },
    )
    db.commit()
    db.refresh(assignment)
    logger.info(
        "Activity assigned to project",
        extra={"project_id": project_id, "activity_id": activity.id, "assignment_id": assignment.id},
    )
    return assignment


def _get_assignment(db: Session, project_id: int, assignment_id: int) -> ProjectActivity:
    assignment = db.get(ProjectActivity, assignment_id)
    if assignment is None or assignment.project_id != project_id:
        raise api_error(status.HTTP_404_NOT_FOUND, "Project activity not found")
    return assignment


def update_assignment(
    db: Session, project_id: int, assignment_id: int, payload: ProjectActivityUpdate, user: User
) -> ProjectActivity:
    assignment = _get_assignment(db, project_id, assignment_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("assigned_user_id") is not None:
        get_or_404(db, User, changes["assigned_user_id"])

    applied = merge_fields(assignment, changes)
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="ACTIVITY_ASSIGNMENT_UPDATED",
            entity="ProjectActivity",
            entity_id=assignment.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(assignment)
    logger.info("Project activity updated", extra={"assignment_id": assignment.id, "fields": sorted(applied)})
    return assignment


def remove_assignment(db: Session, project_id: int, assignment_id: int, user: User) -> None:
    assignment = _get_assignment(db, project_id, assignment_id)
    log_audit(
        db,
        actor=actor_from_user(user),
        action="ACTIVITY_UNASSIGNED",
        entity="ProjectActivity",
        entity_id=assignment.id,
        data={"project_id": project_id, "activity_id": assignment.activity_id},
    )
    db.delete(assignment)
    db.commit()
    logger.info("Project activity removed", extra={"assignment_id": assignment_id, "project_id": project_id})


def activity_feed(db: Session, filters: ReportFilters, offset: int = 0) -> dict[str, Any]:
    """Newest assignments across projects, one page at a time."""

    allowed = {"project_id", "status"}
    count_stmt = apply_filters(select(func.count(ProjectActivity.id)), ProjectActivity, filters, allowed=allowed)
    total = db.scalar(count_stmt) or 0

    limit = filters.effective_limit(FEED_DEFAULT_LIMIT)
    stmt = apply_filters(
        _assignment_query().order_by(ProjectActivity.created_at.desc(), ProjectActivity.id.desc()),
        ProjectActivity,
        filters,
        allowed=allowed,
    )
    activities = list(db.scalars(stmt.offset(offset).limit(limit)))
    return {
        "activities": activities,
        "pagination": {"total": total, "limit": limit, "offset": offset, "has_more": offset + limit < total},
    }


__all__ = [
    "ACTIVITY_ASSIGN_ROLES",
    "activity_feed",
    "assign_activity",
    "create_activity",
    "delete_activity",
    "list_catalogue",
    "list_project_activities",
    "remove_assignment",
    "update_activity",
    "update_assignment",
]

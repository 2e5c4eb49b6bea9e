"""Milestone tracking services."""
import logging
from datetime import timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from roadtrack.models import Milestone, MilestoneStatus, MilestoneUpdate, Project, User, UserRole
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.milestone import MilestoneCreate, MilestoneUpdateIn
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.time import ensure_utc, utcnow

logger = logging.getLogger(__name__)

MILESTONE_WRITE_ROLES = (UserRole.ADMIN, UserRole.PROGRAM_MANAGER, UserRole.MANAGER)
UPCOMING_WINDOW = timedelta(days=30)


def milestone_stats(milestones: list[Milestone]) -> dict[str, Any]:
    now = utcnow()
    open_items = [m for m in milestones if m.status != MilestoneStatus.COMPLETED]
    completed = len(milestones) - len(open_items)
    return {
        "total": len(milestones),
        "completion_rate": agg.rate(completed, len(milestones)),
        "overdue": sum(1 for m in open_items if ensure_utc(m.planned_date) < now),
        "upcoming": sum(1 for m in open_items if now <= ensure_utc(m.planned_date) <= now + UPCOMING_WINDOW),
        "by_status": agg.breakdown(milestones, "status"),
        "by_category": agg.breakdown(milestones, "category"),
    }


def list_milestones(db: Session, filters: ReportFilters, *, category: str | None = None) -> dict[str, Any]:
    stmt = (
        select(Milestone)
        .options(selectinload(Milestone.updates))
        .order_by(Milestone.planned_date, Milestone.id)
    )
    stmt = apply_filters(stmt, Milestone, filters, allowed={"project_id", "status", "start_date", "end_date"})
    if category:
        stmt = stmt.where(Milestone.category == category)
    milestones = list(db.scalars(stmt))
    return {"milestones": milestones, "stats": milestone_stats(milestones)}


def create_milestone(db: Session, payload: MilestoneCreate, user: User) -> Milestone:
    get_or_404(db, Project, payload.project_id)
    data = payload.model_dump()
    if data["status"] == MilestoneStatus.COMPLETED and data["actual_date"] is None:
        data["actual_date"] = utcnow()
    milestone = Milestone(**data)
    db.add(milestone)
    db.flush()
    log_audit(
        db,
        actor=actor_from_user(user),
        action="MILESTONE_CREATED",
        entity="Milestone",
        entity_id=milestone.id,
        data={"project_id": milestone.project_id, "name": milestone.milestone_name},
    )
    db.commit()
    db.refresh(milestone)
    logger.info("Milestone created", extra={"milestone_id": milestone.id, "project_id": milestone.project_id})
    return milestone


def update_milestone(db: Session, milestone_id: int, payload: MilestoneUpdateIn, user: User) -> Milestone:
    """Merge the changes; a status change also appends a MilestoneUpdate row."""

    milestone = get_or_404(db, Milestone, milestone_id)
    changes = payload.model_dump(exclude_unset=True)
    notes = changes.pop("notes", None)
    previous_status = milestone.status
    new_status = changes.get("status")

    completing = new_status == MilestoneStatus.COMPLETED and changes.get("actual_date") is None
    if completing and milestone.actual_date is None:
        changes["actual_date"] = utcnow()

    applied = merge_fields(milestone, changes)
    if new_status is not None and new_status != previous_status:
        db.add(
            MilestoneUpdate(
                milestone_id=milestone.id,
                updated_by=user.id,
                previous_status=previous_status,
                new_status=new_status,
                notes=notes,
            )
        )
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="MILESTONE_UPDATED",
            entity="Milestone",
            entity_id=milestone.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(milestone)
    logger.info(
        "Milestone updated",
        extra={"milestone_id": milestone.id, "from": previous_status.value, "to": milestone.status.value},
    )
    return milestone


def delete_milestone(db: Session, milestone_id: int, user: User) -> None:
    milestone = get_or_404(db, Milestone, milestone_id)
    log_audit(
        db,
        actor=actor_from_user(user),
        action="MILESTONE_DELETED",
        entity="Milestone",
        entity_id=milestone.id,
        data={"project_id": milestone.project_id, "name": milestone.milestone_name},
    )
    db.delete(milestone)
    db.commit()
    logger.info("Milestone deleted", extra={"milestone_id": milestone_id})


__all__ = [
    "MILESTONE_WRITE_ROLES",
    "create_milestone",
    "delete_milestone",
    "list_milestones",
    "milestone_stats",
    "update_milestone",
]

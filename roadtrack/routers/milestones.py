"""Milestone endpoints."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import Milestone, User, UserRole
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.milestone import MilestoneCreate, MilestoneList, MilestoneRead, MilestoneUpdateIn
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import milestones as milestones_service
from roadtrack.services.common import get_or_404

router = APIRouter(prefix="/milestones", tags=["milestones"])

require_milestone_writer = require_roles(*milestones_service.MILESTONE_WRITE_ROLES)


@router.get("", response_model=MilestoneList)
def list_milestones(
    filters: ReportFilters = Depends(report_filters),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return milestones_service.list_milestones(db, filters, category=category)


@router.get("/{milestone_id}", response_model=MilestoneRead)
def get_milestone(
    milestone_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Milestone:
    return get_or_404(db, Milestone, milestone_id)


@router.post("", response_model=MilestoneRead, status_code=status.HTTP_201_CREATED)
def create_milestone(
    payload: MilestoneCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_milestone_writer),
) -> Milestone:
    return milestones_service.create_milestone(db, payload, user)


@router.put("/{milestone_id}", response_model=MilestoneRead)
def update_milestone(
    milestone_id: int,
    payload: MilestoneUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_milestone_writer),
) -> Milestone:
    return milestones_service.update_milestone(db, milestone_id, payload, user)


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_milestone(
    milestone_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(UserRole.ADMIN)),
) -> Response:
    milestones_service.delete_milestone(db, milestone_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Construction activity catalogue, project assignments and the activity feed."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import ConstructionActivity, ProjectActivity, User, UserRole
from roadtrack.reports.filters import ReportFilters
from roadtrack.schemas.activity import (
    ActivityFeed,
    ConstructionActivityCreate,
    ConstructionActivityList,
    ConstructionActivityRead,
    ConstructionActivityUpdate,
    ProjectActivityCreate,
    ProjectActivityList,
    ProjectActivityRead,
    ProjectActivityUpdate,
)
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import activities as activity_service

router = APIRouter(tags=["activities"])

require_admin = require_roles(UserRole.ADMIN)
require_assigner = require_roles(*activity_service.ACTIVITY_ASSIGN_ROLES)


@router.get("/construction-activities", response_model=ConstructionActivityList)
def list_construction_activities(
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    activities = activity_service.list_catalogue(db)
    return {"activities": activities, "count": len(activities)}


@router.post(
    "/construction-activities",
    response_model=ConstructionActivityRead,
    status_code=status.HTTP_201_CREATED,
)
def create_construction_activity(
    payload: ConstructionActivityCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
) -> ConstructionActivity:
    return activity_service.create_activity(db, payload, user)


@router.put("/construction-activities/{activity_id}", response_model=ConstructionActivityRead)
def update_construction_activity(
    activity_id: int,
    payload: ConstructionActivityUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
) -> ConstructionActivity:
    return activity_service.update_activity(db, activity_id, payload, user)


@router.delete("/construction-activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_construction_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
) -> Response:
    activity_service.delete_activity(db, activity_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/projects/{project_id}/activities", response_model=ProjectActivityList)
def list_project_activities(
    project_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    activities = activity_service.list_project_activities(db, project_id)
    return {"activities": activities, "count": len(activities)}


@router.post(
    "/projects/{project_id}/activities",
    response_model=ProjectActivityRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_project_activity(
    project_id: int,
    payload: ProjectActivityCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_assigner),
) -> ProjectActivity:
    return activity_service.assign_activity(db, project_id, payload, user)


@router.put("/projects/{project_id}/activities/{assignment_id}", response_model=ProjectActivityRead)
def update_project_activity(
    project_id: int,
    assignment_id: int,
    payload: ProjectActivityUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_assigner),
) -> ProjectActivity:
    return activity_service.update_assignment(db, project_id, assignment_id, payload, user)


@router.delete("/projects/{project_id}/activities/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_project_activity(
    project_id: int,
    assignment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_assigner),
) -> Response:
    activity_service.remove_assignment(db, project_id, assignment_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/activities", response_model=ActivityFeed)
def activity_feed(
    project_id: str | None = Query(default=None, alias="projectId"),
    activity_status: str | None = Query(default=None, alias="status"),
    limit: str | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    filters = ReportFilters.build(project_id=project_id, status=activity_status, limit=limit)
    return activity_service.activity_feed(db, filters, offset)

"""Project, section and contract-assignment endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import ContractorProject, Project, ProjectSection, User, UserRole
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.contractor import (
    ContractAssignmentCreate,
    ContractAssignmentRead,
    ContractAssignmentUpdate,
)
from roadtrack.schemas.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
    SectionCreate,
    SectionRead,
    SectionUpdate,
)
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import contractors as contractors_service
from roadtrack.services import projects as projects_service
from roadtrack.utils.audit import actor_from_user

router = APIRouter(prefix="/projects", tags=["projects"])

PROJECT_WRITE_ROLES = (UserRole.ADMIN, UserRole.MANAGER)
require_project_writer = require_roles(*PROJECT_WRITE_ROLES)


@router.get("", response_model=list[ProjectRead])
def list_projects(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Project]:
    return projects_service.list_projects(db, filters)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ProjectDetail:
    project = projects_service.get_project(db, project_id)
    return ProjectDetail(
        **ProjectRead.model_validate(project).model_dump(),
        sections=[SectionRead.model_validate(s) for s in project.sections],
        stats=projects_service.project_stats(db, project),
    )


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> Project:
    return projects_service.create_project(db, payload, actor=actor_from_user(user))


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> Project:
    return projects_service.update_project(db, project_id, payload, actor=actor_from_user(user))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> Response:
    projects_service.delete_project(db, project_id, actor=actor_from_user(user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/sections", response_model=list[SectionRead])
def list_sections(
    project_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[ProjectSection]:
    return projects_service.list_sections(db, project_id)


@router.post("/{project_id}/sections", response_model=SectionRead, status_code=status.HTTP_201_CREATED)
def create_section(
    project_id: int,
    payload: SectionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> ProjectSection:
    return projects_service.create_section(db, project_id, payload, actor=actor_from_user(user))


@router.put("/{project_id}/sections/{section_id}", response_model=SectionRead)
def update_section(
    project_id: int,
    section_id: int,
    payload: SectionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> ProjectSection:
    return projects_service.update_section(db, project_id, section_id, payload, actor=actor_from_user(user))


@router.delete("/{project_id}/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    project_id: int,
    section_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> Response:
    projects_service.delete_section(db, project_id, section_id, actor=actor_from_user(user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/contractors", response_model=list[ContractAssignmentRead])
def list_project_contractors(
    project_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[ContractorProject]:
    return contractors_service.list_assignments(db, project_id)


@router.post(
    "/{project_id}/contractors",
    response_model=ContractAssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_contractor(
    project_id: int,
    payload: ContractAssignmentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> ContractorProject:
    return contractors_service.assign_contractor(db, project_id, payload, actor=actor_from_user(user))


@router.put("/{project_id}/contractors", response_model=ContractAssignmentRead)
def update_contract(
    project_id: int,
    payload: ContractAssignmentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_project_writer),
) -> ContractorProject:
    return contractors_service.update_assignment(db, project_id, payload, actor=actor_from_user(user))

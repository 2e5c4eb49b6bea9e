"""User administration endpoints (ADMIN only)."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models.user import User, UserProjectAccess, UserRole
from roadtrack.schemas.user import ProjectAccessGrant, ProjectAccessRead, UserCreate, UserRead, UserUpdate
from roadtrack.security import require_roles
from roadtrack.services import users as users_service
from roadtrack.services.common import get_or_404
from roadtrack.utils.audit import actor_from_user

router = APIRouter(prefix="/users", tags=["users"])

require_admin = require_roles(UserRole.ADMIN)


@router.get("", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db), _admin: User = Depends(require_admin)) -> list[User]:
    return users_service.list_users(db)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> User:
    return users_service.create_user(db, payload, actor=actor_from_user(admin))


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db), _admin: User = Depends(require_admin)) -> User:
    return get_or_404(db, User, user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> User:
    return users_service.update_user(db, user_id, payload, actor=actor_from_user(admin))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)) -> Response:
    users_service.delete_user(db, user_id, actor=actor_from_user(admin))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/project-access", response_model=ProjectAccessRead)
def grant_project_access(
    user_id: int,
    payload: ProjectAccessGrant,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserProjectAccess:
    return users_service.grant_project_access(db, user_id, payload, actor=actor_from_user(admin))

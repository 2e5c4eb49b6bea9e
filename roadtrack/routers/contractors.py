"""Contractor registry endpoints."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import Contractor, User, UserRole
from roadtrack.schemas.contractor import ContractorCreate, ContractorRead, ContractorUpdate
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import contractors as contractors_service
from roadtrack.services.common import get_or_404
from roadtrack.utils.audit import actor_from_user

router = APIRouter(prefix="/contractors", tags=["contractors"])

require_contractor_writer = require_roles(UserRole.ADMIN, UserRole.MANAGER)


@router.get("", response_model=list[ContractorRead])
def list_contractors(
    active: bool | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Contractor]:
    return contractors_service.list_contractors(db, active=active, search=search)


@router.get("/{contractor_id}", response_model=ContractorRead)
def get_contractor(
    contractor_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Contractor:
    return get_or_404(db, Contractor, contractor_id)


@router.post("", response_model=ContractorRead, status_code=status.HTTP_201_CREATED)
def create_contractor(
    payload: ContractorCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_contractor_writer),
) -> Contractor:
    return contractors_service.create_contractor(db, payload, actor=actor_from_user(user))


@router.put("/{contractor_id}", response_model=ContractorRead)
def update_contractor(
    contractor_id: int,
    payload: ContractorUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_contractor_writer),
) -> Contractor:
    return contractors_service.update_contractor(db, contractor_id, payload, actor=actor_from_user(user))


@router.delete("/{contractor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contractor(
    contractor_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_contractor_writer),
) -> Response:
    contractors_service.delete_contractor(db, contractor_id, actor=actor_from_user(user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Lookup (reference value) endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import User, UserRole
from roadtrack.schemas.lookup import LookupItem, LookupValueCreate
from roadtrack.security import get_current_user, require_roles
from roadtrack.services.lookups import LookupService, create_value, get_lookup_service
from roadtrack.utils.audit import actor_from_user

router = APIRouter(prefix="/lookups", tags=["lookups"])


@router.get("", response_model=dict[str, list[LookupItem]])
def get_lookups(
    category: str | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
    service: LookupService = Depends(get_lookup_service),
    _user: User = Depends(get_current_user),
) -> dict:
    if category:
        return {category: service.get(db, category)}
    return service.get_all(db)


@router.post("", response_model=LookupItem, status_code=status.HTTP_201_CREATED)
def create_lookup(
    payload: LookupValueCreate,
    db: Session = Depends(get_db),
    service: LookupService = Depends(get_lookup_service),
    user: User = Depends(require_roles(UserRole.ADMIN)),
):
    return create_value(db, payload, actor=actor_from_user(user), service=service)


@router.post("/refresh", response_model=dict[str, list[LookupItem]])
def refresh_lookups(
    category: str | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
    service: LookupService = Depends(get_lookup_service),
    _user: User = Depends(require_roles(UserRole.ADMIN)),
) -> dict:
    if category:
        return {category: service.refresh(db, category)}
    service.invalidate()
    return service.get_all(db)

"""Financial tracking endpoints."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import ProjectFunding, User, UserRole
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.funding import FundingCreate, FundingList, FundingRead, FundingUpdate
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import funding as funding_service
from roadtrack.services.common import get_or_404

router = APIRouter(prefix="/financial-tracking", tags=["financial-tracking"])

FINANCE_WRITE_ROLES = (UserRole.ADMIN, UserRole.PROGRAM_MANAGER, UserRole.MANAGER)
require_finance_writer = require_roles(*FINANCE_WRITE_ROLES)


@router.get("", response_model=FundingList)
def list_funding(
    filters: ReportFilters = Depends(report_filters),
    funding_source: str | None = Query(default=None, alias="fundingSource"),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return funding_service.list_funding(db, filters, funding_source=funding_source)


@router.get("/{funding_id}", response_model=FundingRead)
def get_funding(
    funding_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ProjectFunding:
    return get_or_404(db, ProjectFunding, funding_id, "Funding record")


@router.post("", response_model=FundingRead, status_code=status.HTTP_201_CREATED)
def create_funding(
    payload: FundingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_finance_writer),
) -> ProjectFunding:
    return funding_service.create_funding(db, payload, user)


@router.put("/{funding_id}", response_model=FundingRead)
def update_funding(
    funding_id: int,
    payload: FundingUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_finance_writer),
) -> ProjectFunding:
    return funding_service.update_funding(db, funding_id, payload, user)


@router.delete("/{funding_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_funding(
    funding_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(UserRole.ADMIN)),
) -> Response:
    funding_service.delete_funding(db, funding_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

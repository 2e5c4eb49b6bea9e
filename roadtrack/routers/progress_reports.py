"""Progress report endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import ProgressReport, User
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.progress import (
    ProgressReportCreate,
    ProgressReportList,
    ProgressReportRead,
    ProgressReportUpdate,
)
from roadtrack.security import get_current_user
from roadtrack.services import progress_reports as progress_service
from roadtrack.services.common import get_or_404

router = APIRouter(prefix="/progress-reports", tags=["progress-reports"])


@router.get("", response_model=ProgressReportList)
def list_reports(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return progress_service.list_reports(db, filters)


@router.get("/{report_id}", response_model=ProgressReportRead)
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ProgressReport:
    return get_or_404(db, ProgressReport, report_id, "Progress report")


@router.post("", response_model=ProgressReportRead, status_code=status.HTTP_201_CREATED)
def create_report(
    payload: ProgressReportCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> ProgressReport:
    return progress_service.create_report(db, payload, user)


@router.put("/{report_id}", response_model=ProgressReportRead)
def update_report(
    report_id: int,
    payload: ProgressReportUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> ProgressReport:
    return progress_service.update_report(db, report_id, payload, user)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    progress_service.delete_report(db, report_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

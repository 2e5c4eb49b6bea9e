"""Quality / QA-QC report endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import QualityReport, User
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.quality import (
    QualityReportCreate,
    QualityReportList,
    QualityReportRead,
    QualityReportUpdate,
)
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import quality_reports as quality_service
from roadtrack.services.common import get_or_404

router = APIRouter(prefix="/quality-reports", tags=["quality-reports"])


@router.get("", response_model=QualityReportList)
def list_reports(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return quality_service.list_reports(db, filters)


@router.get("/{report_id}", response_model=QualityReportRead)
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> QualityReport:
    return get_or_404(db, QualityReport, report_id, "Quality report")


@router.post("", response_model=QualityReportRead, status_code=status.HTTP_201_CREATED)
def create_report(
    payload: QualityReportCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(*quality_service.QUALITY_WRITE_ROLES)),
) -> QualityReport:
    return quality_service.create_report(db, payload, user)


@router.put("/{report_id}", response_model=QualityReportRead)
def update_report(
    report_id: int,
    payload: QualityReportUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> QualityReport:
    return quality_service.update_report(db, report_id, payload, user)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(*quality_service.QUALITY_DELETE_ROLES)),
) -> Response:
    quality_service.delete_report(db, report_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

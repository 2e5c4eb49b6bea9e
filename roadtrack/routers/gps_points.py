"""GPS point logging endpoints (append-only)."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import GpsPoint, User
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import report_filters
from roadtrack.schemas.gps_point import BulkImportRequest, BulkImportResult, GpsPointCreate, GpsPointRead
from roadtrack.security import get_current_user
from roadtrack.services import gps_points as gps_service

router = APIRouter(prefix="/gps-points", tags=["gps-points"])


@router.get("", response_model=list[GpsPointRead])
def list_points(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[GpsPoint]:
    return gps_service.list_points(db, filters)


@router.post("", response_model=GpsPointRead, status_code=status.HTTP_201_CREATED)
def create_point(
    payload: GpsPointCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> GpsPoint:
    return gps_service.create_point(db, payload, user)


@router.post("/bulk-import", response_model=BulkImportResult, status_code=status.HTTP_201_CREATED)
def bulk_import(
    payload: BulkImportRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict:
    """Import a batch of points; any invalid row rejects the whole batch."""

    return gps_service.bulk_import(db, payload, user)

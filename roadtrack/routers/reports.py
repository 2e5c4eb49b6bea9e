"""Report generation and export endpoints."""
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import User
from roadtrack.reports.export import export_filename, to_csv, to_json
from roadtrack.reports.filters import ReportFilters
from roadtrack.reports.service import generate_report
from roadtrack.routers.params import report_filters
from roadtrack.schemas.report import ReportEnvelope
from roadtrack.security import get_current_user

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=ReportEnvelope)
def get_report(
    report_type: str = Query(default="overview", alias="type"),
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return generate_report(db, report_type, filters)


@router.get("/export")
def export_report(
    report_type: str = Query(default="overview", alias="type"),
    fmt: Literal["json", "csv"] = Query(default="json", alias="format"),
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Response:
    """Generate a report and return it as a downloadable file."""

    envelope = generate_report(db, report_type, filters)
    if fmt == "csv":
        body, media_type = to_csv(envelope), "text/csv"
    else:
        body, media_type = to_json(envelope), "application/json"
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(envelope, fmt)}"'},
    )

"""HSE incident endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models import HSEIncident, User
from roadtrack.reports.filters import ReportFilters
from roadtrack.routers.params import incident_filters
from roadtrack.schemas.hse import HSEIncidentCreate, HSEIncidentList, HSEIncidentRead, HSEIncidentUpdate
from roadtrack.security import get_current_user, require_roles
from roadtrack.services import hse_incidents as hse_service
from roadtrack.services.common import get_or_404

router = APIRouter(prefix="/hse-incidents", tags=["hse-incidents"])


@router.get("", response_model=HSEIncidentList)
def list_incidents(
    filters: ReportFilters = Depends(incident_filters),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> dict:
    return hse_service.list_incidents(db, filters)


@router.get("/{incident_id}", response_model=HSEIncidentRead)
def get_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> HSEIncident:
    return get_or_404(db, HSEIncident, incident_id, "HSE incident")


@router.post("", response_model=HSEIncidentRead, status_code=status.HTTP_201_CREATED)
def report_incident(
    payload: HSEIncidentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> HSEIncident:
    return hse_service.create_incident(db, payload, user)


@router.put("/{incident_id}", response_model=HSEIncidentRead)
def update_incident(
    incident_id: int,
    payload: HSEIncidentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> HSEIncident:
    return hse_service.update_incident(db, incident_id, payload, user)


@router.delete("/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(*hse_service.HSE_DELETE_ROLES)),
) -> Response:
    hse_service.delete_incident(db, incident_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""First-run setup endpoints (no authentication)."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models.user import User
from roadtrack.schemas.user import AdminCreate, SetupStatus, UserRead
from roadtrack.services import setup as setup_service

router = APIRouter(prefix="/setup", tags=["setup"])


@router.get("/status", response_model=SetupStatus)
def setup_status(db: Session = Depends(get_db)) -> dict[str, object]:
    return setup_service.setup_status(db)


@router.post("/create-admin", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_admin(payload: AdminCreate, db: Session = Depends(get_db)) -> User:
    """Create the initial administrator account."""

    return setup_service.create_admin(db, payload)

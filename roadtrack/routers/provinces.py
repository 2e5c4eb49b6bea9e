"""Province endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.schemas.province import ProvinceList
from roadtrack.security import get_current_user
from roadtrack.services import provinces as provinces_service

router = APIRouter(prefix="/provinces", tags=["provinces"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ProvinceList)
def list_provinces(db: Session = Depends(get_db)) -> dict:
    return provinces_service.list_provinces(db)

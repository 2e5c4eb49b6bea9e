"""Login and current-user endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roadtrack.db import get_db
from roadtrack.models.user import User
from roadtrack.schemas.user import LoginRequest, LoginResponse, UserRead
from roadtrack.security import create_access_token, get_current_user
from roadtrack.services import users as users_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    user = users_service.authenticate(db, payload.email, payload.password)
    return LoginResponse(token=create_access_token(user), user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)) -> User:
    return user

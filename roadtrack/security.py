# roadtrack/security.py
"""Security dependencies: password hashing, bearer tokens, role and project guards."""
from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Callable

import jwt
from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.config import get_settings
from roadtrack.core.logging import get_logger
from roadtrack.db import get_db
from roadtrack.models.user import User, UserProjectAccess, UserRole
from roadtrack.utils.errors import api_error
from roadtrack.utils.time import utcnow

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
http_bearer = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Unknown or malformed hash.
        return False


def create_access_token(user: User) -> str:
    """Issue a signed bearer token for ``user``."""

    settings = get_settings()
    now = utcnow()
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.JWT_TTL_SECONDS)).timestamp()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Invalid token") from exc


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token into an active user or fail with 401."""

    if creds is None:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    payload = decode_token(creds.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Invalid token subject") from exc

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return user


def require_roles(*allowed: UserRole) -> Callable[..., User]:
    """Enforce that the current user holds one of ``allowed`` roles (ADMIN always passes)."""

    if not allowed:
        raise RuntimeError("require_roles needs at least one UserRole")
    allowed_set = set(allowed)

    def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role == UserRole.ADMIN or user.role in allowed_set:
            return user
        logger.warning(
            "Role check rejected",
            extra={"user_id": user.id, "role": user.role.value, "allowed": sorted(r.value for r in allowed_set)},
        )
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            "Forbidden",
            f"Requires one of: {sorted(r.value for r in allowed_set)}",
        )

    return _dep


def has_project_access(db: Session, user: User, project_id: int) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    grant = db.scalar(
        select(UserProjectAccess.id).where(
            UserProjectAccess.user_id == user.id,
            UserProjectAccess.project_id == project_id,
            UserProjectAccess.is_active.is_(True),
        )
    )
    return grant is not None


def ensure_project_access(db: Session, user: User, project_id: int) -> None:
    """Raise 403 unless the user is ADMIN or holds an active grant on the project."""

    if not has_project_access(db, user, project_id):
        logger.warning("Project access denied", extra={"user_id": user.id, "project_id": project_id})
        raise api_error(status.HTTP_403_FORBIDDEN, "Access denied to this project")


__all__ = [
    "create_access_token",
    "decode_token",
    "ensure_project_access",
    "get_current_user",
    "get_password_hash",
    "has_project_access",
    "require_roles",
    "verify_password",
]

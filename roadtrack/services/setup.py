"""First-run setup: bootstrap administrator and setup status check."""
import logging

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from roadtrack.models import Project, User, UserRole
from roadtrack.schemas.user import AdminCreate
from roadtrack.security import get_password_hash
from roadtrack.services.users import ensure_email_free, check_password, normalize_email
from roadtrack.utils.audit import log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)


def admin_exists(db: Session) -> bool:
    return db.scalar(select(User.id).where(User.role == UserRole.ADMIN).limit(1)) is not None


def setup_status(db: Session) -> dict[str, object]:
    return {
        "has_admin": admin_exists(db),
        "user_count": db.scalar(select(func.count(User.id))) or 0,
        "project_count": db.scalar(select(func.count(Project.id))) or 0,
    }


def create_admin(db: Session, payload: AdminCreate) -> User:
    """Create the first ADMIN account; refused once any admin exists."""

    check_password(payload.password)
    if admin_exists(db):
        raise api_error(status.HTTP_403_FORBIDDEN, "Administrator already configured")
    email = normalize_email(payload.email)
    ensure_email_free(db, email)

    user = User(
        name=payload.name.strip(),
        email=email,
        password_hash=get_password_hash(payload.password),
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(user)
    db.flush()
    log_audit(
        db,
        actor="setup",
        action="ADMIN_CREATED",
        entity="User",
        entity_id=user.id,
        data={"email": user.email},
    )
    db.commit()
    db.refresh(user)
    logger.info("Administrator created", extra={"user_id": user.id})
    return user


__all__ = ["admin_exists", "create_admin", "setup_status"]

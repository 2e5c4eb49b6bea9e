"""User management and authentication services."""
import logging

from fastapi import status
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from roadtrack.models import (
    ConstructionActivity,
    GpsPoint,
    HSEIncident,
    MilestoneUpdate,
    ProgressReport,
    Project,
    ProjectActivity,
    QualityReport,
    User,
    UserProjectAccess,
)
from roadtrack.schemas.user import ProjectAccessGrant, UserCreate, UserUpdate
from roadtrack.security import get_password_hash, verify_password
from roadtrack.services.common import audit_view, get_or_404, merge_fields
from roadtrack.utils.audit import log_audit
from roadtrack.utils.errors import api_error
from roadtrack.utils.time import utcnow

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )


def get_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == normalize_email(email)))


def ensure_email_free(db: Session, email: str, *, exclude_id: int | None = None) -> None:
    existing = get_by_email(db, email)
    if existing is not None and existing.id != exclude_id:
        raise api_error(status.HTTP_409_CONFLICT, "User with this email already exists")


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_by_email(db, email)
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.warning("Login rejected", extra={"email_domain": normalize_email(email).split("@")[-1]})
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")
    user.last_login = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("User logged in", extra={"user_id": user.id})
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.name, User.id)))


def create_user(db: Session, payload: UserCreate, *, actor: str) -> User:
    check_password(payload.password)
    email = normalize_email(payload.email)
    ensure_email_free(db, email)

    user = User(
        name=payload.name.strip(),
        email=email,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
        is_active=payload.is_active,
    )
    db.add(user)
    db.flush()
    log_audit(
        db,
        actor=actor,
        action="USER_CREATED",
        entity="User",
        entity_id=user.id,
        data={"email": user.email, "role": user.role.value},
    )
    db.commit()
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate, *, actor: str) -> User:
    user = get_or_404(db, User, user_id)
    changes = payload.model_dump(exclude_unset=True)

    password = changes.pop("password", None)
    if password is not None:
        check_password(password)
        changes["password_hash"] = get_password_hash(password)
    if changes.get("email") is not None:
        changes["email"] = normalize_email(changes["email"])
        ensure_email_free(db, changes["email"], exclude_id=user.id)

    applied = merge_fields(user, changes)
    if applied:
        log_audit(
            db,
            actor=actor,
            action="USER_UPDATED",
            entity="User",
            entity_id=user.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(user)
    logger.info("User updated", extra={"user_id": user.id, "fields": sorted(applied)})
    return user


def delete_user(db: Session, user_id: int, *, actor: str) -> None:
    user = get_or_404(db, User, user_id)
    for column in (
        GpsPoint.user_id,
        QualityReport.reported_by,
        ProgressReport.reported_by,
        MilestoneUpdate.updated_by,
        HSEIncident.reported_by,
        ProjectActivity.assigned_user_id,
        ConstructionActivity.created_by,
    ):
        db.execute(
            update(column.class_)
            .where(column == user.id)
            .values({column.key: None})
            .execution_options(synchronize_session=False)
        )
    log_audit(db, actor=actor, action="USER_DELETED", entity="User", entity_id=user.id, data={"email": user.email})
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})


def grant_project_access(db: Session, user_id: int, payload: ProjectAccessGrant, *, actor: str) -> UserProjectAccess:
    """Create or update the user's grant on a project."""

    user = get_or_404(db, User, user_id)
    get_or_404(db, Project, payload.project_id)
    grant = db.scalar(
        select(UserProjectAccess).where(
            UserProjectAccess.user_id == user.id,
            UserProjectAccess.project_id == payload.project_id,
        )
    )
    if grant is None:
        grant = UserProjectAccess(user_id=user.id, project_id=payload.project_id)
        db.add(grant)
    grant.access_level = payload.access_level
    grant.is_active = payload.is_active
    db.flush()
    log_audit(
        db,
        actor=actor,
        action="PROJECT_ACCESS_GRANTED" if payload.is_active else "PROJECT_ACCESS_REVOKED",
        entity="UserProjectAccess",
        entity_id=grant.id,
        data={"user_id": user.id, "project_id": payload.project_id, "access_level": payload.access_level},
    )
    db.commit()
    db.refresh(grant)
    logger.info(
        "Project access changed",
        extra={"user_id": user.id, "project_id": payload.project_id, "active": payload.is_active},
    )
    return grant


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "authenticate",
    "check_password",
    "create_user",
    "delete_user",
    "ensure_email_free",
    "get_by_email",
    "grant_project_access",
    "list_users",
    "normalize_email",
    "update_user",
]

"""Liveness and schema-state check."""
from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from roadtrack.config import AppInfo, get_settings
from roadtrack.db import get_engine

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _db_status() -> str:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("DB health check failed")
        return "error"
    return "ok"


def _expected_migration_head() -> str | None:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    try:
        return ScriptDirectory.from_config(config).get_current_head()
    except CommandError:
        logger.exception("Failed to load Alembic head revision")
        return None


def _migrations_status() -> tuple[bool, str]:
    """Compare the database's alembic_version with the newest revision on disk."""

    expected_head = _expected_migration_head()
    if expected_head is None:
        return False, "unknown"
    try:
        with get_engine().connect() as conn:
            current = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    except SQLAlchemyError:
        logger.exception("Migration check failed")
        return False, "unknown"
    if current == expected_head:
        return True, "up_to_date"
    return False, "out_of_date"


@router.get("", summary="Health check")
def healthcheck() -> dict[str, object]:
    settings = get_settings()
    db_status = _db_status()
    db_ok = db_status == "ok"
    migration_ok, migration_status = _migrations_status() if db_ok else (False, "unknown")
    info = AppInfo()
    return {
        "status": "ok" if db_ok and migration_ok else "degraded",
        "service": info.name,
        "version": info.version,
        "env": settings.app_env,
        "dbOk": db_ok,
        "dbStatus": db_status,
        "migrationsOk": migration_ok,
        "migrationsStatus": migration_status,
    }

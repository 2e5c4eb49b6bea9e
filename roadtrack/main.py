"""ASGI entrypoint: app construction, lifespan and the JSON error contract."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roadtrack import db
from roadtrack.config import DEFAULT_JWT_SECRET, INSECURE_SECRET_ENVS, AppInfo, Settings, get_settings
from roadtrack.core.logging import get_logger, setup_logging
import roadtrack.models  # noqa: F401  registers the tables
from roadtrack.reports.filters import FilterError
from roadtrack.routers import get_api_router
from roadtrack.utils.errors import error_response

logger = get_logger(__name__)

# Environments where the schema may be created without Alembic.
SCHEMA_BOOTSTRAP_ENVS = {"dev", "local", "test"}


def _configure_middlewares(fastapi_app: FastAPI, settings: Settings) -> None:
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        # Report exports are downloaded by the browser client.
        expose_headers=["Content-Disposition"],
    )
    if settings.PROMETHEUS_ENABLED:
        from starlette_exporter import PrometheusMiddleware, handle_metrics

        fastapi_app.add_middleware(PrometheusMiddleware, app_name=AppInfo().name, group_paths=True)
        fastapi_app.add_route("/metrics", handle_metrics)
    if settings.SENTRY_DSN:
        import sentry_sdk

        sentry_sdk.init(dsn=settings.SENTRY_DSN, environment=settings.app_env, traces_sample_rate=0.2)


def _assert_jwt_secret(settings: Settings) -> None:
    """Refuse to sign tokens with the shipped default outside dev/local/test."""

    if settings.JWT_SECRET != DEFAULT_JWT_SECRET:
        return
    if settings.app_env.lower() not in INSECURE_SECRET_ENVS:
        logger.error("JWT_SECRET left at its default", extra={"env": settings.app_env})
        raise RuntimeError("Default JWT_SECRET in non-dev environment.")
    logger.warning("Signing tokens with the default JWT_SECRET", extra={"env": settings.app_env})


def _prepare_schema(settings: Settings) -> None:
    bootstrap = settings.ALLOW_DB_CREATE_ALL and settings.app_env.lower() in SCHEMA_BOOTSTRAP_ENVS
    if bootstrap:
        logger.warning("Creating tables from model metadata", extra={"env": settings.app_env})
        db.create_all()
    else:
        logger.info("Schema managed by Alembic", extra={"env": settings.app_env})


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    _assert_jwt_secret(settings)
    db.init_engine()
    _prepare_schema(settings)
    logger.info("roadtrack API started", extra={"env": settings.app_env, "version": app.version})
    try:
        yield
    finally:
        db.close_engine()
        logger.info("roadtrack API stopped", extra={"env": settings.app_env})


def create_app() -> FastAPI:
    info = AppInfo()
    fastapi_app = FastAPI(title=info.name, version=info.version, lifespan=lifespan)
    _configure_middlewares(fastapi_app, get_settings())
    fastapi_app.include_router(get_api_router())
    fastapi_app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    fastapi_app.add_exception_handler(RequestValidationError, validation_exception_handler)
    fastapi_app.add_exception_handler(FilterError, filter_exception_handler)
    fastapi_app.add_exception_handler(Exception, unhandled_exception_handler)
    return fastapi_app


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", exc_info=exc, extra={"path": request.url.path})
    payload = error_response("Internal server error", str(exc) or exc.__class__.__name__)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Services raise with the payload already shaped; framework 404/405s carry a string.
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content: dict[str, Any] = exc.detail
    else:
        content = error_response(str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing fields are listed by name; anything else names the first bad field."""

    errors = exc.errors()
    missing = [_field_name(err["loc"]) for err in errors if err.get("type") == "missing"]
    if missing:
        payload = error_response(f"Missing required fields: {', '.join(missing)}")
    else:
        details = [{"field": _field_name(err["loc"]), "message": err.get("msg", "")} for err in errors]
        first = details[0]["field"] if details else "body"
        payload = error_response(f"Invalid value for field: {first}", details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def filter_exception_handler(request: Request, exc: FilterError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response(str(exc)))


app = create_app()

__all__ = ["app", "create_app"]

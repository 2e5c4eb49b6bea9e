"""API routers for the road-construction tracker."""
from fastapi import APIRouter

from . import (
    activities,
    auth,
    contractors,
    financial,
    gps_points,
    health,
    hse_incidents,
    lookups,
    milestones,
    progress_reports,
    projects,
    provinces,
    quality_reports,
    reports,
    setup,
    users,
)


def get_api_router() -> APIRouter:
    """Return the root API router, mounted under ``/api``."""

    api_router = APIRouter(prefix="/api")
    api_router.include_router(health.router)
    api_router.include_router(setup.router)
    api_router.include_router(auth.router)
    api_router.include_router(users.router)
    api_router.include_router(provinces.router)
    api_router.include_router(projects.router)
    api_router.include_router(contractors.router)
    api_router.include_router(gps_points.router)
    api_router.include_router(quality_reports.router)
    api_router.include_router(milestones.router)
    api_router.include_router(progress_reports.router)
    api_router.include_router(financial.router)
    api_router.include_router(hse_incidents.router)
    api_router.include_router(activities.router)
    api_router.include_router(reports.router)
    api_router.include_router(lookups.router)
    return api_router

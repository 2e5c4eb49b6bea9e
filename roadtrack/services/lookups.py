"""Cached reference values served to forms and filters.

Lookup categories are read far more often than they change, so active rows are
cached per category for ``LOOKUP_CACHE_TTL_SECONDS``. Writes through this module
invalidate the affected category; ``refresh`` reloads one eagerly.
"""
import logging
import threading
import time
from enum import Enum
from typing import Any, Callable

from fastapi import status
from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.config import get_settings
from roadtrack.models import (
    ActivityPriority,
    ActivityStatus,
    ComplianceStatus,
    ConstructionPhase,
    ContractStatus,
    FundingStatus,
    IncidentSeverity,
    IncidentStatus,
    LookupValue,
    MilestoneStatus,
    PointStatus,
    ProjectStatus,
    QaQcStatus,
    RoadSide,
    ScheduleStatus,
    SectionStatus,
    UserRole,
)
from roadtrack.schemas.lookup import LookupValueCreate
from roadtrack.utils.audit import log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

# Categories that fall back to an enum when no rows are configured.
ENUM_CATEGORIES: dict[str, type[Enum]] = {
    "project_status": ProjectStatus,
    "section_status": SectionStatus,
    "contract_status": ContractStatus,
    "construction_phase": ConstructionPhase,
    "road_side": RoadSide,
    "point_status": PointStatus,
    "compliance_status": ComplianceStatus,
    "qa_qc_status": QaQcStatus,
    "milestone_status": MilestoneStatus,
    "schedule_status": ScheduleStatus,
    "funding_status": FundingStatus,
    "user_role": UserRole,
    "incident_severity": IncidentSeverity,
    "incident_status": IncidentStatus,
    "activity_priority": ActivityPriority,
    "activity_status": ActivityStatus,
}
CONFIGURABLE_CATEGORIES = (
    "report_type",
    "funding_source",
    "milestone_category",
    "project_type",
    "region",
    "incident_type",
)
KNOWN_CATEGORIES = tuple(sorted({*ENUM_CATEGORIES, *CONFIGURABLE_CATEGORIES}))

LookupItems = list[dict[str, Any]]


def _enum_items(enum_cls: type[Enum]) -> LookupItems:
    return [
        {"code": member.value, "label": member.value.replace("_", " ").title(), "sort_order": index}
        for index, member in enumerate(enum_cls)
    ]


class LookupService:
    """Per-category TTL cache over ``LookupValue`` rows."""

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, LookupItems]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl if self._ttl is not None else get_settings().LOOKUP_CACHE_TTL_SECONDS

    @staticmethod
    def check_category(category: str) -> str:
        if category not in KNOWN_CATEGORIES:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                f"Unknown lookup type: {category}",
                f"Known types: {', '.join(KNOWN_CATEGORIES)}",
            )
        return category

    def _load(self, db: Session, category: str) -> LookupItems:
        rows = db.scalars(
            select(LookupValue)
            .where(LookupValue.category == category, LookupValue.is_active.is_(True))
            .order_by(LookupValue.sort_order, LookupValue.label, LookupValue.id)
        ).all()
        if rows:
            return [{"code": r.code, "label": r.label, "sort_order": r.sort_order} for r in rows]
        enum_cls = ENUM_CATEGORIES.get(category)
        return _enum_items(enum_cls) if enum_cls is not None else []

    def get(self, db: Session, category: str) -> LookupItems:
        self.check_category(category)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(category)
            if entry is not None and entry[0] > now:
                return list(entry[1])
        items = self._load(db, category)
        with self._lock:
            self._entries[category] = (now + self.ttl, items)
        logger.debug("Lookup cache filled", extra={"category": category, "items": len(items)})
        return list(items)

    def get_all(self, db: Session) -> dict[str, LookupItems]:
        return {category: self.get(db, category) for category in KNOWN_CATEGORIES}

    def invalidate(self, category: str | None = None) -> None:
        with self._lock:
            if category is None:
                self._entries.clear()
            else:
                self._entries.pop(category, None)
        logger.info("Lookup cache invalidated", extra={"category": category or "*"})

    def refresh(self, db: Session, category: str) -> LookupItems:
        self.check_category(category)
        self.invalidate(category)
        return self.get(db, category)


lookup_service = LookupService()


def get_lookup_service() -> LookupService:
    return lookup_service


def create_value(db: Session, payload: LookupValueCreate, *, actor: str, service: LookupService) -> LookupValue:
    service.check_category(payload.category)
    existing = db.scalar(
        select(LookupValue.id).where(LookupValue.category == payload.category, LookupValue.code == payload.code)
    )
    if existing is not None:
        raise api_error(status.HTTP_409_CONFLICT, "Lookup value already exists", f"{payload.category}/{payload.code}")

    value = LookupValue(**payload.model_dump())
    db.add(value)
    db.flush()
    log_audit(
        db,
        actor=actor,
        action="LOOKUP_CREATED",
        entity="LookupValue",
        entity_id=value.id,
        data={"category": value.category, "code": value.code},
    )
    db.commit()
    db.refresh(value)
    service.invalidate(payload.category)
    logger.info("Lookup value created", extra={"category": value.category, "code": value.code})
    return value


__all__ = [
    "CONFIGURABLE_CATEGORIES",
    "ENUM_CATEGORIES",
    "KNOWN_CATEGORIES",
    "LookupService",
    "create_value",
    "get_lookup_service",
    "lookup_service",
]

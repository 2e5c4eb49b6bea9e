"""Schemas for the construction activity catalogue and project assignments."""
import re
from typing import Annotated

from pydantic import AfterValidator, Field

from roadtrack.models.activity import DEFAULT_ACTIVITY_COLOR, ActivityPriority, ActivityStatus

from .base import CamelModel, PartialUpdate, UtcDatetime

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _check_color(value: str) -> str:
    if not _HEX_COLOR.match(value):
        raise ValueError("Color must be a hex code such as #3b82f6")
    return value


HexColor = Annotated[str, AfterValidator(_check_color)]


class ConstructionActivityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    color: HexColor = DEFAULT_ACTIVITY_COLOR


class ConstructionActivityUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"description"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    color: HexColor | None = None
    is_active: bool | None = None


class ConstructionActivityRead(CamelModel):
    id: int
    name: str
    description: str | None
    color: str
    is_active: bool
    created_by: int | None
    project_count: int
    created_at: UtcDatetime


class ConstructionActivityList(CamelModel):
    activities: list[ConstructionActivityRead]
    count: int


class ProjectActivityCreate(CamelModel):
    activity_id: int
    assigned_user_id: int | None = None
    priority: ActivityPriority = ActivityPriority.MEDIUM
    estimated_hours: float | None = Field(default=None, ge=0)
    total_length: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ProjectActivityUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"assigned_user_id", "estimated_hours", "total_length", "notes"})

    assigned_user_id: int | None = None
    priority: ActivityPriority | None = None
    status: ActivityStatus | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    total_length: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ActivitySummary(CamelModel):
    id: int
    name: str
    color: str


class ProjectActivityRead(CamelModel):
    id: int
    project_id: int
    activity_id: int
    activity: ActivitySummary
    assigned_user_id: int | None
    priority: ActivityPriority
    status: ActivityStatus
    estimated_hours: float | None
    total_length: float | None
    notes: str | None
    created_at: UtcDatetime


class ProjectActivityList(CamelModel):
    activities: list[ProjectActivityRead]
    count: int


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ActivityFeed(CamelModel):
    activities: list[ProjectActivityRead]
    pagination: Pagination

"""Schemas for project milestones."""
from pydantic import Field

from roadtrack.models.milestone import MilestoneStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class MilestoneCreate(CamelModel):
    project_id: int
    milestone_name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    planned_date: UtcDatetime
    description: str | None = None
    actual_date: UtcDatetime | None = None
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED


class MilestoneUpdateIn(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"description", "actual_date", "notes"})

    milestone_name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    planned_date: UtcDatetime | None = None
    description: str | None = None
    actual_date: UtcDatetime | None = None
    status: MilestoneStatus | None = None
    notes: str | None = None


class MilestoneUpdateRead(CamelModel):
    id: int
    updated_by: int | None
    previous_status: MilestoneStatus
    new_status: MilestoneStatus
    notes: str | None
    created_at: UtcDatetime


class MilestoneRead(CamelModel):
    id: int
    project_id: int
    milestone_name: str
    description: str | None
    category: str
    planned_date: UtcDatetime
    actual_date: UtcDatetime | None
    status: MilestoneStatus
    created_at: UtcDatetime
    updates: list[MilestoneUpdateRead] = []


class MilestoneStats(CamelModel):
    total: int
    completion_rate: float
    overdue: int
    upcoming: int
    by_status: dict[str, int]
    by_category: dict[str, int]


class MilestoneList(CamelModel):
    milestones: list[MilestoneRead]
    stats: MilestoneStats

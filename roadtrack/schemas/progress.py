"""Schemas for progress reports."""
from pydantic import Field

from roadtrack.models.progress import ScheduleStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class ProgressReportCreate(CamelModel):
    project_id: int
    report_type: str = Field(min_length=1, max_length=100)
    report_date: UtcDatetime
    current_progress: float = Field(ge=0, le=100)
    section_id: int | None = None
    previous_progress: float | None = Field(default=None, ge=0, le=100)
    planned_progress: float | None = Field(default=None, ge=0, le=100)
    schedule_status: ScheduleStatus | None = None
    delay_reason: str | None = None
    works_completed: list[str] = Field(default_factory=list)
    weather_conditions: str | None = Field(default=None, max_length=200)
    site_conditions: str | None = Field(default=None, max_length=200)
    notes: str | None = None


class ProgressReportUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"delay_reason", "weather_conditions", "site_conditions", "notes"})

    report_type: str | None = Field(default=None, min_length=1, max_length=100)
    report_date: UtcDatetime | None = None
    current_progress: float | None = Field(default=None, ge=0, le=100)
    planned_progress: float | None = Field(default=None, ge=0, le=100)
    schedule_status: ScheduleStatus | None = None
    delay_reason: str | None = None
    works_completed: list[str] | None = None
    weather_conditions: str | None = Field(default=None, max_length=200)
    site_conditions: str | None = Field(default=None, max_length=200)
    notes: str | None = None


class ProgressReportRead(CamelModel):
    id: int
    project_id: int
    section_id: int | None
    reported_by: int | None
    report_type: str
    report_date: UtcDatetime
    previous_progress: float
    current_progress: float
    progress_delta: float
    planned_progress: float
    schedule_status: ScheduleStatus
    delay_reason: str | None
    works_completed: list[str]
    weather_conditions: str | None
    site_conditions: str | None
    notes: str | None
    created_at: UtcDatetime


class ProgressStats(CamelModel):
    total_reports: int
    average_progress: float
    average_delta: float
    by_schedule_status: dict[str, int]
    by_type: dict[str, int]


class ProgressReportList(CamelModel):
    reports: list[ProgressReportRead]
    stats: ProgressStats

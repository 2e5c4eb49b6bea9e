"""Schemas for projects and road sections."""
from pydantic import Field

from roadtrack.models.project import ProjectStatus, SectionStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    project_code: str | None = Field(default=None, max_length=50)
    description: str | None = None
    province_id: int | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    total_distance: float | None = Field(default=None, ge=0)
    latitude: float | None = None
    longitude: float | None = None
    sponsor: str | None = Field(default=None, max_length=200)
    team_lead: str | None = Field(default=None, max_length=200)
    project_type: str | None = Field(default=None, max_length=100)


class ProjectUpdate(PartialUpdate):
    """Partial update; only fields present in the body are merged."""

    NULLABLE_FIELDS = frozenset(
        {
            "project_code",
            "description",
            "province_id",
            "total_distance",
            "latitude",
            "longitude",
            "sponsor",
            "team_lead",
            "project_type",
        }
    )

    name: str | None = Field(default=None, min_length=1, max_length=200)
    project_code: str | None = Field(default=None, max_length=50)
    description: str | None = None
    province_id: int | None = None
    status: ProjectStatus | None = None
    total_distance: float | None = Field(default=None, ge=0)
    latitude: float | None = None
    longitude: float | None = None
    sponsor: str | None = Field(default=None, max_length=200)
    team_lead: str | None = Field(default=None, max_length=200)
    project_type: str | None = Field(default=None, max_length=100)
    is_active: bool | None = None


class ProjectRead(CamelModel):
    id: int
    name: str
    project_code: str | None
    description: str | None
    province_id: int | None
    status: ProjectStatus
    total_distance: float | None
    latitude: float | None
    longitude: float | None
    sponsor: str | None
    team_lead: str | None
    project_type: str | None
    overall_progress: float
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SectionCreate(CamelModel):
    section_name: str = Field(min_length=1, max_length=200)
    start_km: float = Field(ge=0)
    end_km: float = Field(ge=0)
    length: float | None = Field(default=None, ge=0)
    progress_percentage: float = Field(default=0.0, ge=0, le=100)
    status: SectionStatus = SectionStatus.NOT_STARTED
    budget_allocated: float = Field(default=0.0, ge=0)
    budget_spent: float = Field(default=0.0, ge=0)
    assigned_contractor_id: int | None = None


class SectionUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"assigned_contractor_id"})

    section_name: str | None = Field(default=None, min_length=1, max_length=200)
    start_km: float | None = Field(default=None, ge=0)
    end_km: float | None = Field(default=None, ge=0)
    length: float | None = Field(default=None, ge=0)
    progress_percentage: float | None = Field(default=None, ge=0, le=100)
    status: SectionStatus | None = None
    budget_allocated: float | None = Field(default=None, ge=0)
    budget_spent: float | None = Field(default=None, ge=0)
    assigned_contractor_id: int | None = None


class SectionRead(CamelModel):
    id: int
    project_id: int
    section_name: str
    start_km: float
    end_km: float
    length: float
    progress_percentage: float
    status: SectionStatus
    budget_allocated: float
    budget_spent: float
    assigned_contractor_id: int | None
    created_at: UtcDatetime


class ProjectStats(CamelModel):
    total_points: int
    weighted_progress: float
    total_length: float
    distance_by_phase: dict[str, dict[str, float]]
    points_by_status: dict[str, int]
    sections_by_status: dict[str, int]
    last_activity: UtcDatetime | None = None


class ProjectDetail(ProjectRead):
    sections: list[SectionRead] = []
    stats: ProjectStats

"""Schemas for HSE incidents."""
from pydantic import Field

from roadtrack.models.hse import IncidentSeverity, IncidentStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class HSEIncidentCreate(CamelModel):
    project_id: int
    incident_type: str = Field(min_length=1, max_length=100)
    severity: IncidentSeverity
    description: str = Field(min_length=1)
    incident_date: UtcDatetime
    location: str = Field(min_length=1, max_length=300)
    section_id: int | None = None
    persons_involved: list[str] = Field(default_factory=list)
    root_cause: str | None = None
    investigation: str | None = None
    preventive_measures: list[str] = Field(default_factory=list)
    status: IncidentStatus = IncidentStatus.REPORTED


class HSEIncidentUpdate(PartialUpdate):
    """Investigation follow-up; the reported facts stay as filed."""

    NULLABLE_FIELDS = frozenset({"root_cause", "investigation", "closure_date"})

    root_cause: str | None = None
    investigation: str | None = None
    preventive_measures: list[str] | None = None
    status: IncidentStatus | None = None
    closure_date: UtcDatetime | None = None


class HSEIncidentRead(CamelModel):
    id: int
    project_id: int
    section_id: int | None
    reported_by: int | None
    incident_type: str
    severity: IncidentSeverity
    status: IncidentStatus
    description: str
    incident_date: UtcDatetime
    location: str
    persons_involved: list[str]
    root_cause: str | None
    investigation: str | None
    preventive_measures: list[str]
    closure_date: UtcDatetime | None
    escalation_required: bool
    created_at: UtcDatetime


class IncidentStats(CamelModel):
    total: int
    open_incidents: int
    open_incident_rate: float
    by_status: dict[str, int]
    by_severity: dict[str, int]
    by_type: dict[str, int]


class ProjectIncidents(CamelModel):
    project_id: int
    project_name: str
    count: int
    open_incidents: int


class HSEIncidentList(CamelModel):
    incidents: list[HSEIncidentRead]
    stats: IncidentStats
    by_project: dict[str, ProjectIncidents]

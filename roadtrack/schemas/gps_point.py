"""Schemas for GPS field observations."""
from pydantic import Field

from roadtrack.models.gps_point import ConstructionPhase, PointStatus, RoadSide

from .base import CamelModel, UtcDatetime


class GpsPointCreate(CamelModel):
    project_id: int
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    phase: ConstructionPhase
    side: RoadSide
    section_id: int | None = None
    contractor_id: int | None = None
    elevation: float | None = None
    accuracy: float | None = Field(default=None, ge=0)
    distance: float = Field(default=0.0, ge=0)
    status: PointStatus = PointStatus.PENDING
    notes: str | None = None
    timestamp: UtcDatetime | None = None


class GpsPointRead(CamelModel):
    id: int
    project_id: int
    section_id: int | None
    contractor_id: int | None
    user_id: int | None
    latitude: float
    longitude: float
    elevation: float | None
    accuracy: float | None
    phase: ConstructionPhase
    side: RoadSide
    distance: float
    status: PointStatus
    notes: str | None
    timestamp: UtcDatetime


class BulkImportRequest(CamelModel):
    project_id: int
    points: list[dict] = Field(min_length=1, max_length=5000)


class BulkImportRowError(CamelModel):
    row: int
    error: str


class BulkImportResult(CamelModel):
    imported: int
    failed: int
    errors: list[BulkImportRowError]

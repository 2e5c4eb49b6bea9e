"""Health, safety and environment incident model."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import JSON, DateTime, Enum as SqlEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class IncidentSeverity(str, PyEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class IncidentStatus(str, PyEnum):
    REPORTED = "REPORTED"
    INVESTIGATING = "INVESTIGATING"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class HSEIncident(Base):
    """Safety or environmental incident recorded on a project site."""

    __tablename__ = "hse_incidents"

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("project_sections.id"), nullable=True)
    reported_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    incident_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    severity: Mapped[IncidentSeverity] = mapped_column(SqlEnum(IncidentSeverity), nullable=False)
    status: Mapped[IncidentStatus] = mapped_column(
        SqlEnum(IncidentStatus), nullable=False, default=IncidentStatus.REPORTED
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    incident_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    persons_involved: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    root_cause: Mapped[str | None] = mapped_column(Text, nullable=True)
    investigation: Mapped[str | None] = mapped_column(Text, nullable=True)
    preventive_measures: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    closure_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    project = relationship("Project", back_populates="hse_incidents")
    section = relationship("ProjectSection")
    reporter = relationship("User")

    @property
    def is_open(self) -> bool:
        return self.status in (IncidentStatus.REPORTED, IncidentStatus.INVESTIGATING)

    @property
    def escalation_required(self) -> bool:
        return self.severity in (IncidentSeverity.HIGH, IncidentSeverity.CRITICAL)

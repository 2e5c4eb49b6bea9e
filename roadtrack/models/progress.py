"""Progress report model."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import JSON, DateTime, Enum as SqlEnum, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ScheduleStatus(str, PyEnum):
    AHEAD = "AHEAD"
    ON_TRACK = "ON_TRACK"
    BEHIND = "BEHIND"


class ProgressReport(Base):
    """Periodic statement of physical progress for a project or section."""

    __tablename__ = "progress_reports"

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("project_sections.id"), nullable=True, index=True)
    reported_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    report_type: Mapped[str] = mapped_column(String(100), nullable=False)
    report_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    previous_progress: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    current_progress: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False)
    progress_delta: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    planned_progress: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    schedule_status: Mapped[ScheduleStatus] = mapped_column(
        SqlEnum(ScheduleStatus), nullable=False, default=ScheduleStatus.ON_TRACK
    )
    delay_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    works_completed: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    weather_conditions: Mapped[str | None] = mapped_column(String(200), nullable=True)
    site_conditions: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    project = relationship("Project", back_populates="progress_reports")
    section = relationship("ProjectSection")
    reporter = relationship("User")

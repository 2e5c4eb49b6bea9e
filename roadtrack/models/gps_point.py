"""GPS field observation model."""
from datetime import UTC, datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum as SqlEnum, Float, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ConstructionPhase(str, PyEnum):
    DRAIN = "DRAIN"
    BASKET = "BASKET"
    SEALING = "SEALING"


class RoadSide(str, PyEnum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CENTER = "CENTER"


class PointStatus(str, PyEnum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REVIEWED = "REVIEWED"


class GpsPoint(Base):
    """Append-only log entry of a surveyed location on a project."""

    __tablename__ = "gps_points"
    __table_args__ = (Index("ix_gps_points_project_timestamp", "project_id", "timestamp"),)

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("project_sections.id"), nullable=True)
    contractor_id: Mapped[int | None] = mapped_column(ForeignKey("contractors.id"), nullable=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    latitude: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False)
    elevation: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    accuracy: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    phase: Mapped[ConstructionPhase] = mapped_column(SqlEnum(ConstructionPhase), nullable=False)
    side: Mapped[RoadSide] = mapped_column(SqlEnum(RoadSide), nullable=False)
    distance: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    status: Mapped[PointStatus] = mapped_column(
        SqlEnum(PointStatus), nullable=False, default=PointStatus.PENDING
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz=UTC)
    )

    project = relationship("Project", back_populates="gps_points")
    section = relationship("ProjectSection")
    contractor = relationship("Contractor")
    user = relationship("User")

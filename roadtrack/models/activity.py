"""Construction activity catalogue and its per-project assignments."""
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Enum as SqlEnum,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from .base import Base

DEFAULT_ACTIVITY_COLOR = "#3b82f6"


class ActivityPriority(str, PyEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ActivityStatus(str, PyEnum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class ProjectActivity(Base):
    """A catalogue activity scheduled on one project."""

    __tablename__ = "project_activities"
    __table_args__ = (UniqueConstraint("project_id", "activity_id", name="uq_project_activity"),)

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    activity_id: Mapped[int] = mapped_column(ForeignKey("construction_activities.id"), nullable=False, index=True)
    assigned_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    priority: Mapped[ActivityPriority] = mapped_column(
        SqlEnum(ActivityPriority), nullable=False, default=ActivityPriority.MEDIUM
    )
    status: Mapped[ActivityStatus] = mapped_column(
        SqlEnum(ActivityStatus), nullable=False, default=ActivityStatus.PLANNED
    )
    estimated_hours: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    total_length: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    project = relationship("Project", back_populates="activities")
    activity = relationship("ConstructionActivity")
    assigned_user = relationship("User")


class ConstructionActivity(Base):
    """Kind of work (line drains, bridges, sealing...) that projects can schedule."""

    __tablename__ = "construction_activities"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_ACTIVITY_COLOR)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    creator = relationship("User")


# Number of projects the activity is scheduled on, loaded with the row.
ConstructionActivity.project_count = column_property(
    select(func.count(ProjectActivity.id))
    .where(ProjectActivity.activity_id == ConstructionActivity.id)
    .correlate_except(ProjectActivity)
    .scalar_subquery()
)

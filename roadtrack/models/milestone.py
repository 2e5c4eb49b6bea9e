"""Milestone model definitions."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum as SqlEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class MilestoneStatus(str, PyEnum):
    """Possible statuses for a milestone."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELAYED = "DELAYED"


class Milestone(Base):
    """Represents a planned delivery point of a project."""

    __tablename__ = "milestones"

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    milestone_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    planned_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actual_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[MilestoneStatus] = mapped_column(
        SqlEnum(MilestoneStatus), nullable=False, default=MilestoneStatus.NOT_STARTED
    )

    project = relationship("Project", back_populates="milestones")
    updates = relationship(
        "MilestoneUpdate",
        back_populates="milestone",
        cascade="all, delete-orphan",
        order_by="MilestoneUpdate.id.desc()",
    )


class MilestoneUpdate(Base):
    """Audit row written whenever a milestone changes status."""

    __tablename__ = "milestone_updates"

    milestone_id: Mapped[int] = mapped_column(ForeignKey("milestones.id"), nullable=False, index=True)
    updated_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    previous_status: Mapped[MilestoneStatus] = mapped_column(
        SqlEnum(MilestoneStatus, name="milestonepreviousstatus"), nullable=False
    )
    new_status: Mapped[MilestoneStatus] = mapped_column(
        SqlEnum(MilestoneStatus, name="milestonenewstatus"), nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    milestone = relationship("Milestone", back_populates="updates")

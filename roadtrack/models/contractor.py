"""Contractor and contract-assignment models."""
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum as SqlEnum,
    Float,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ContractStatus(str, PyEnum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


class Contractor(Base):
    """A construction company registered on the platform."""

    __tablename__ = "contractors"

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    license_number: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    certification_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    specializations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    project_assignments = relationship(
        "ContractorProject", back_populates="contractor", cascade="all, delete-orphan"
    )
    sections = relationship("ProjectSection", back_populates="assigned_contractor")


class ContractorProject(Base):
    """Join entity linking a contractor to a project under contract."""

    __tablename__ = "contractor_projects"
    __table_args__ = (
        UniqueConstraint("contractor_id", "project_id", name="uq_contractor_project"),
        CheckConstraint(
            "performance_rating IS NULL OR (performance_rating >= 0 AND performance_rating <= 5)",
            name="ck_contractor_project_rating_range",
        ),
    )

    contractor_id: Mapped[int] = mapped_column(ForeignKey("contractors.id"), nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    contract_value: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    contract_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    contract_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    performance_bond: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    contract_status: Mapped[ContractStatus] = mapped_column(
        SqlEnum(ContractStatus), nullable=False, default=ContractStatus.ACTIVE
    )
    performance_rating: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)

    contractor = relationship("Contractor", back_populates="project_assignments")
    project = relationship("Project", back_populates="contractor_projects")

"""Province, project and road-section models."""
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Enum as SqlEnum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ProjectStatus(str, PyEnum):
    """Lifecycle of a road project."""

    PLANNING = "PLANNING"
    TENDERING = "TENDERING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SectionStatus(str, PyEnum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Province(Base):
    """PNG top-level administrative region."""

    __tablename__ = "provinces"

    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    region: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    capital: Mapped[str | None] = mapped_column(String(120), nullable=True)
    population: Mapped[int | None] = mapped_column(Integer, nullable=True)

    projects = relationship("Project", back_populates="province", order_by="Project.id")


class Project(Base):
    """A road-construction project."""

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "overall_progress >= 0 AND overall_progress <= 100",
            name="ck_project_overall_progress_range",
        ),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    project_code: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    province_id: Mapped[int | None] = mapped_column(ForeignKey("provinces.id"), nullable=True, index=True)
    status: Mapped[ProjectStatus] = mapped_column(
        SqlEnum(ProjectStatus), nullable=False, default=ProjectStatus.PLANNING
    )
    total_distance: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float(asdecimal=False), nullable=True)
    sponsor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    team_lead: Mapped[str | None] = mapped_column(String(200), nullable=True)
    project_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    overall_progress: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    province = relationship("Province", back_populates="projects")
    sections = relationship(
        "ProjectSection",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectSection.start_km",
    )
    contractor_projects = relationship(
        "ContractorProject", back_populates="project", cascade="all, delete-orphan"
    )
    gps_points = relationship("GpsPoint", back_populates="project", cascade="all, delete-orphan")
    quality_reports = relationship("QualityReport", back_populates="project", cascade="all, delete-orphan")
    progress_reports = relationship("ProgressReport", back_populates="project", cascade="all, delete-orphan")
    milestones = relationship("Milestone", back_populates="project", cascade="all, delete-orphan")
    fundings = relationship("ProjectFunding", back_populates="project", cascade="all, delete-orphan")
    user_access = relationship("UserProjectAccess", back_populates="project", cascade="all, delete-orphan")
    hse_incidents = relationship("HSEIncident", back_populates="project", cascade="all, delete-orphan")
    activities = relationship("ProjectActivity", back_populates="project", cascade="all, delete-orphan")


class ProjectSection(Base):
    """A contiguous stretch of road within a project."""

    __tablename__ = "project_sections"
    __table_args__ = (
        CheckConstraint("length >= 0", name="ck_section_length_non_negative"),
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_section_progress_range",
        ),
    )

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    section_name: Mapped[str] = mapped_column(String(200), nullable=False)
    start_km: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    end_km: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    length: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    progress_percentage: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    status: Mapped[SectionStatus] = mapped_column(
        SqlEnum(SectionStatus), nullable=False, default=SectionStatus.NOT_STARTED
    )
    budget_allocated: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    budget_spent: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    assigned_contractor_id: Mapped[int | None] = mapped_column(
        ForeignKey("contractors.id"), nullable=True, index=True
    )

    project = relationship("Project", back_populates="sections")
    assigned_contractor = relationship("Contractor", back_populates="sections")

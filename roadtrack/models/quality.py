"""Quality / QA-QC report model."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import JSON, Boolean, DateTime, Enum as SqlEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ComplianceStatus(str, PyEnum):
    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"
    PENDING = "PENDING"
    REWORK_NEEDED = "REWORK_NEEDED"


class QaQcStatus(str, PyEnum):
    """Quality-gate outcome."""

    PASS = "PASS"
    FAIL = "FAIL"
    CONDITIONAL_PASS = "CONDITIONAL_PASS"
    REWORK_REQUIRED = "REWORK_REQUIRED"


class QualityReport(Base):
    """Material test, inspection or compliance report for a project section."""

    __tablename__ = "quality_reports"

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("project_sections.id"), nullable=True, index=True)
    reported_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    report_type: Mapped[str] = mapped_column(String(100), nullable=False)
    test_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    material_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    test_results: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    spec_compliance: Mapped[ComplianceStatus] = mapped_column(
        SqlEnum(ComplianceStatus, name="speccompliance"), nullable=False, default=ComplianceStatus.PENDING
    )
    environmental_compliance: Mapped[ComplianceStatus] = mapped_column(
        SqlEnum(ComplianceStatus, name="environmentalcompliance"),
        nullable=False,
        default=ComplianceStatus.PENDING,
    )
    social_compliance: Mapped[ComplianceStatus] = mapped_column(
        SqlEnum(ComplianceStatus, name="socialcompliance"), nullable=False, default=ComplianceStatus.PENDING
    )
    qa_qc_status: Mapped[QaQcStatus] = mapped_column(SqlEnum(QaQcStatus), nullable=False)
    deficiencies: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    corrective_actions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    inspection_findings: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendations: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    follow_up_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    project = relationship("Project", back_populates="quality_reports")
    section = relationship("ProjectSection")
    reporter = relationship("User")

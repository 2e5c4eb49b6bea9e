"""Schemas for quality / QA-QC reports."""
from typing import Any

from pydantic import Field

from roadtrack.models.quality import ComplianceStatus, QaQcStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class QualityReportCreate(CamelModel):
    project_id: int
    report_type: str = Field(min_length=1, max_length=100)
    test_date: UtcDatetime
    qa_qc_status: QaQcStatus
    section_id: int | None = None
    material_type: str | None = Field(default=None, max_length=100)
    test_results: dict[str, Any] = Field(default_factory=dict)
    spec_compliance: ComplianceStatus = ComplianceStatus.PENDING
    environmental_compliance: ComplianceStatus = ComplianceStatus.PENDING
    social_compliance: ComplianceStatus = ComplianceStatus.PENDING
    deficiencies: list[str] = Field(default_factory=list)
    corrective_actions: list[str] = Field(default_factory=list)
    inspection_findings: str | None = None
    recommendations: str | None = None
    follow_up_required: bool = False
    follow_up_date: UtcDatetime | None = None


class QualityReportUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset(
        {"section_id", "material_type", "inspection_findings", "recommendations", "follow_up_date"}
    )

    section_id: int | None = None
    report_type: str | None = Field(default=None, min_length=1, max_length=100)
    test_date: UtcDatetime | None = None
    qa_qc_status: QaQcStatus | None = None
    material_type: str | None = Field(default=None, max_length=100)
    test_results: dict[str, Any] | None = None
    spec_compliance: ComplianceStatus | None = None
    environmental_compliance: ComplianceStatus | None = None
    social_compliance: ComplianceStatus | None = None
    deficiencies: list[str] | None = None
    corrective_actions: list[str] | None = None
    inspection_findings: str | None = None
    recommendations: str | None = None
    follow_up_required: bool | None = None
    follow_up_date: UtcDatetime | None = None


class QualityReportRead(CamelModel):
    id: int
    project_id: int
    section_id: int | None
    reported_by: int | None
    report_type: str
    test_date: UtcDatetime
    material_type: str | None
    test_results: dict[str, Any]
    spec_compliance: ComplianceStatus
    environmental_compliance: ComplianceStatus
    social_compliance: ComplianceStatus
    qa_qc_status: QaQcStatus
    deficiencies: list[str]
    corrective_actions: list[str]
    inspection_findings: str | None
    recommendations: str | None
    follow_up_required: bool
    follow_up_date: UtcDatetime | None
    created_at: UtcDatetime


class QualityStats(CamelModel):
    total_reports: int
    pass_rate: float
    follow_up_required: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    compliance: dict[str, dict[str, int]]


class QualityReportList(CamelModel):
    reports: list[QualityReportRead]
    stats: QualityStats

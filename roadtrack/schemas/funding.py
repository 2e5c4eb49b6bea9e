"""Schemas for project funding and its transactions."""
from pydantic import Field

from roadtrack.models.funding import FundingStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class FundingCreate(CamelModel):
    project_id: int
    funding_source: str = Field(min_length=1, max_length=100)
    budget_allocated: float = Field(gt=0)
    source_name: str | None = Field(default=None, max_length=200)
    funds_released: float = Field(default=0.0, ge=0)
    funds_utilized: float = Field(default=0.0, ge=0)
    funds_committed: float = Field(default=0.0, ge=0)
    pending_claims: float = Field(default=0.0, ge=0)
    payment_certificates: int = Field(default=0, ge=0)
    status: FundingStatus = FundingStatus.ON_TRACK
    notes: str | None = None
    # Optional opening transaction
    transaction_type: str | None = Field(default=None, max_length=50)
    transaction_amount: float | None = None
    transaction_description: str | None = Field(default=None, max_length=500)
    reference_number: str | None = Field(default=None, max_length=100)
    approved_by: str | None = Field(default=None, max_length=200)


class FundingUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset({"notes"})

    funding_source: str | None = Field(default=None, min_length=1, max_length=100)
    source_name: str | None = Field(default=None, max_length=200)
    budget_allocated: float | None = Field(default=None, gt=0)
    funds_released: float | None = Field(default=None, ge=0)
    funds_utilized: float | None = Field(default=None, ge=0)
    funds_committed: float | None = Field(default=None, ge=0)
    pending_claims: float | None = Field(default=None, ge=0)
    payment_certificates: int | None = Field(default=None, ge=0)
    status: FundingStatus | None = None
    notes: str | None = None


class FundingTransactionRead(CamelModel):
    id: int
    transaction_type: str
    amount: float
    description: str | None
    transaction_date: UtcDatetime
    reference_number: str | None
    approved_by: str | None


class FundingRead(CamelModel):
    id: int
    project_id: int
    funding_source: str
    source_name: str
    budget_allocated: float
    funds_released: float
    funds_utilized: float
    funds_committed: float
    pending_claims: float
    payment_certificates: int
    utilization_rate: float
    status: FundingStatus
    notes: str | None
    created_at: UtcDatetime
    transactions: list[FundingTransactionRead] = []


class FundingSummary(CamelModel):
    total_allocated: float
    total_released: float
    total_utilized: float
    total_committed: float
    pending_claims: float
    utilization_rate: float
    release_rate: float
    commitment_rate: float
    funding_sources_count: int


class FundingSourceBreakdown(CamelModel):
    funding_source: str
    count: int
    budget_allocated: float
    funds_released: float
    funds_utilized: float


class FundingList(CamelModel):
    project_funding: list[FundingRead]
    summary: FundingSummary
    funding_breakdown: list[FundingSourceBreakdown]

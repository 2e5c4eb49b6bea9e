"""Schemas for contractors and contract assignments."""
from pydantic import EmailStr, Field

from roadtrack.models.contractor import ContractStatus

from .base import CamelModel, PartialUpdate, UtcDatetime


class ContractorCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    license_number: str | None = Field(default=None, max_length=100)
    contact_person: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    certification_level: str | None = Field(default=None, max_length=50)
    specializations: list[str] = Field(default_factory=list)
    is_active: bool = True


class ContractorUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset(
        {"license_number", "contact_person", "email", "phone", "address", "certification_level"}
    )

    name: str | None = Field(default=None, min_length=1, max_length=200)
    license_number: str | None = Field(default=None, max_length=100)
    contact_person: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    certification_level: str | None = Field(default=None, max_length=50)
    specializations: list[str] | None = None
    is_active: bool | None = None


class ContractorRead(CamelModel):
    id: int
    name: str
    license_number: str | None
    contact_person: str | None
    email: str | None
    phone: str | None
    address: str | None
    certification_level: str | None
    specializations: list[str]
    is_active: bool
    created_at: UtcDatetime


class ContractAssignmentCreate(CamelModel):
    contractor_id: int
    contract_value: float | None = Field(default=None, ge=0)
    contract_start_date: UtcDatetime | None = None
    contract_end_date: UtcDatetime | None = None
    performance_bond: float | None = Field(default=None, ge=0)
    contract_status: ContractStatus = ContractStatus.ACTIVE
    section_ids: list[int] = Field(default_factory=list)


class ContractAssignmentUpdate(PartialUpdate):
    NULLABLE_FIELDS = frozenset(
        {"contract_value", "contract_start_date", "contract_end_date", "performance_bond", "performance_rating"}
    )

    contractor_id: int
    contract_value: float | None = Field(default=None, ge=0)
    contract_start_date: UtcDatetime | None = None
    contract_end_date: UtcDatetime | None = None
    performance_bond: float | None = Field(default=None, ge=0)
    contract_status: ContractStatus | None = None
    performance_rating: float | None = Field(default=None, ge=0, le=5)


class ContractAssignmentRead(CamelModel):
    id: int
    contractor_id: int
    project_id: int
    contract_value: float | None
    contract_start_date: UtcDatetime | None
    contract_end_date: UtcDatetime | None
    performance_bond: float | None
    contract_status: ContractStatus
    performance_rating: float | None
    contractor: ContractorRead

"""Project funding record model definitions."""
import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum as SqlEnum, Float, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class FundingStatus(str, enum.Enum):
    """Health of a funding line."""

    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    DELAYED = "DELAYED"
    COMPLETED = "COMPLETED"


class ProjectFunding(Base):
    """Budget allocated to a project from one funding source."""

    __tablename__ = "project_fundings"
    __table_args__ = (
        Index("ix_project_fundings_project_id", "project_id"),
        Index("ix_project_fundings_funding_source", "funding_source"),
        Index("ix_project_fundings_created_at", "created_at"),
    )

    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False)
    funding_source: Mapped[str] = mapped_column(String(100), nullable=False)
    source_name: Mapped[str] = mapped_column(String(200), nullable=False)
    budget_allocated: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    funds_released: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    funds_utilized: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    funds_committed: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    pending_claims: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    payment_certificates: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    utilization_rate: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0.0)
    status: Mapped[FundingStatus] = mapped_column(
        SqlEnum(FundingStatus), nullable=False, default=FundingStatus.ON_TRACK
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    project = relationship("Project", back_populates="fundings")
    transactions = relationship(
        "FundingTransaction",
        back_populates="funding",
        cascade="all, delete-orphan",
        order_by="FundingTransaction.transaction_date.desc()",
    )


class FundingTransaction(Base):
    """Individual movement of money against a funding line."""

    __tablename__ = "funding_transactions"

    funding_id: Mapped[int] = mapped_column(ForeignKey("project_fundings.id"), nullable=False, index=True)
    transaction_type: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reference_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(200), nullable=True)

    funding = relationship("ProjectFunding", back_populates="transactions")

"""Financial tracking services for project funding lines."""
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from roadtrack.models import FundingTransaction, Project, ProjectFunding, User
from roadtrack.reports import aggregators as agg
from roadtrack.reports.filters import ReportFilters, apply_filters
from roadtrack.schemas.funding import FundingCreate, FundingUpdate
from roadtrack.services.common import audit_view, get_or_404, merge_fields, to_decimal
from roadtrack.utils.audit import actor_from_user, log_audit
from roadtrack.utils.time import utcnow

logger = logging.getLogger(__name__)

_MONEY_FIELDS = ("budget_allocated", "funds_released", "funds_utilized", "funds_committed", "pending_claims")


def utilization_rate(funds_utilized: Any, budget_allocated: Any) -> float:
    """Percentage of the allocation already spent (0 when nothing is allocated)."""

    return agg.rate(agg.to_number(funds_utilized), agg.to_number(budget_allocated))


def funding_summary(fundings: list[ProjectFunding]) -> dict[str, Any]:
    allocated = agg.total(fundings, "budget_allocated")
    released = agg.total(fundings, "funds_released")
    utilized = agg.total(fundings, "funds_utilized")
    committed = agg.total(fundings, "funds_committed")
    return {
        "total_allocated": round(allocated, 2),
        "total_released": round(released, 2),
        "total_utilized": round(utilized, 2),
        "total_committed": round(committed, 2),
        "pending_claims": round(agg.total(fundings, "pending_claims"), 2),
        "utilization_rate": agg.rate(utilized, allocated),
        "release_rate": agg.rate(released, allocated),
        "commitment_rate": agg.rate(committed, released),
        "funding_sources_count": len(fundings),
    }


def funding_breakdown(fundings: list[ProjectFunding]) -> list[dict[str, Any]]:
    groups: dict[str, list[ProjectFunding]] = {}
    for funding in fundings:
        groups.setdefault(funding.funding_source, []).append(funding)
    return [
        {
            "funding_source": source,
            "count": len(rows),
            "budget_allocated": round(agg.total(rows, "budget_allocated"), 2),
            "funds_released": round(agg.total(rows, "funds_released"), 2),
            "funds_utilized": round(agg.total(rows, "funds_utilized"), 2),
        }
        for source, rows in sorted(groups.items())
    ]


def list_funding(db: Session, filters: ReportFilters, *, funding_source: str | None = None) -> dict[str, Any]:
    stmt = (
        select(ProjectFunding)
        .options(selectinload(ProjectFunding.transactions))
        .order_by(ProjectFunding.created_at.desc(), ProjectFunding.id.desc())
    )
    stmt = apply_filters(stmt, ProjectFunding, filters, allowed={"project_id", "status", "start_date", "end_date"})
    if funding_source:
        stmt = stmt.where(ProjectFunding.funding_source == funding_source)
    fundings = list(db.scalars(stmt))
    return {
        "project_funding": fundings,
        "summary": funding_summary(fundings),
        "funding_breakdown": funding_breakdown(fundings),
    }


def create_funding(db: Session, payload: FundingCreate, user: User) -> ProjectFunding:
    """Create a funding line, optionally recording an opening transaction."""

    get_or_404(db, Project, payload.project_id)
    data = payload.model_dump(
        exclude={
            "transaction_type",
            "transaction_amount",
            "transaction_description",
            "reference_number",
            "approved_by",
        }
    )
    data["source_name"] = data["source_name"] or data["funding_source"]
    for key in _MONEY_FIELDS:
        data[key] = to_decimal(data[key])
    funding = ProjectFunding(**data)
    funding.utilization_rate = utilization_rate(funding.funds_utilized, funding.budget_allocated)
    db.add(funding)
    db.flush()

    if payload.transaction_type and payload.transaction_amount is not None:
        db.add(
            FundingTransaction(
                funding_id=funding.id,
                transaction_type=payload.transaction_type,
                amount=to_decimal(payload.transaction_amount),
                description=payload.transaction_description,
                transaction_date=utcnow(),
                reference_number=payload.reference_number,
                approved_by=payload.approved_by,
            )
        )

    log_audit(
        db,
        actor=actor_from_user(user),
        action="FUNDING_CREATED",
        entity="ProjectFunding",
        entity_id=funding.id,
        data={
            "project_id": funding.project_id,
            "funding_source": funding.funding_source,
            "budget_allocated": str(funding.budget_allocated),
        },
    )
    db.commit()
    db.refresh(funding)
    logger.info("Funding record created", extra={"funding_id": funding.id, "project_id": funding.project_id})
    return funding


def update_funding(db: Session, funding_id: int, payload: FundingUpdate, user: User) -> ProjectFunding:
    funding = get_or_404(db, ProjectFunding, funding_id, "Funding record")
    applied = merge_fields(funding, payload.model_dump(exclude_unset=True), money_fields=_MONEY_FIELDS)
    funding.utilization_rate = utilization_rate(funding.funds_utilized, funding.budget_allocated)
    if applied:
        log_audit(
            db,
            actor=actor_from_user(user),
            action="FUNDING_UPDATED",
            entity="ProjectFunding",
            entity_id=funding.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(funding)
    logger.info("Funding record updated", extra={"funding_id": funding.id, "fields": sorted(applied)})
    return funding


def delete_funding(db: Session, funding_id: int, user: User) -> None:
    funding = get_or_404(db, ProjectFunding, funding_id, "Funding record")
    log_audit(
        db,
        actor=actor_from_user(user),
        action="FUNDING_DELETED",
        entity="ProjectFunding",
        entity_id=funding.id,
        data={"project_id": funding.project_id, "funding_source": funding.funding_source},
    )
    db.delete(funding)
    db.commit()
    logger.info("Funding record deleted", extra={"funding_id": funding_id})


__all__ = [
    "create_funding",
    "delete_funding",
    "funding_breakdown",
    "funding_summary",
    "list_funding",
    "update_funding",
    "utilization_rate",
]

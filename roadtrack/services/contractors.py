"""Contractor registry and project assignment services."""
import logging

from fastapi import status
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from roadtrack.models import Contractor, ContractorProject, GpsPoint, Project, ProjectSection
from roadtrack.schemas.contractor import (
    ContractAssignmentCreate,
    ContractAssignmentUpdate,
    ContractorCreate,
    ContractorUpdate,
)
from roadtrack.services.common import audit_view, get_or_404, merge_fields, to_decimal
from roadtrack.utils.audit import log_audit
from roadtrack.utils.errors import api_error

logger = logging.getLogger(__name__)

_CONTRACT_MONEY = ("contract_value", "performance_bond")


def _ensure_unique(
    db: Session, *, name: str | None, license_number: str | None, exclude_id: int | None = None
) -> None:
    if name is not None:
        stmt = select(Contractor.id).where(func.lower(Contractor.name) == name.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Contractor.id != exclude_id)
        if db.scalar(stmt) is not None:
            raise api_error(status.HTTP_409_CONFLICT, "Contractor name already exists", name)
    if license_number:
        stmt = select(Contractor.id).where(Contractor.license_number == license_number)
        if exclude_id is not None:
            stmt = stmt.where(Contractor.id != exclude_id)
        if db.scalar(stmt) is not None:
            raise api_error(status.HTTP_409_CONFLICT, "License number already registered", license_number)


def list_contractors(
    db: Session, *, active: bool | None = None, search: str | None = None
) -> list[Contractor]:
    stmt = select(Contractor).order_by(Contractor.name, Contractor.id)
    if active is not None:
        stmt = stmt.where(Contractor.is_active.is_(active))
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(func.lower(Contractor.name).like(pattern), func.lower(Contractor.license_number).like(pattern))
        )
    return list(db.scalars(stmt))


def create_contractor(db: Session, payload: ContractorCreate, *, actor: str) -> Contractor:
    _ensure_unique(db, name=payload.name, license_number=payload.license_number)
    data = payload.model_dump()
    data["name"] = data["name"].strip()
    contractor = Contractor(**data)
    db.add(contractor)
    db.flush()
    log_audit(
        db,
        actor=actor,
        action="CONTRACTOR_CREATED",
        entity="Contractor",
        entity_id=contractor.id,
        data={"name": contractor.name, "license_number": contractor.license_number, "email": contractor.email},
    )
    db.commit()
    db.refresh(contractor)
    logger.info("Contractor created", extra={"contractor_id": contractor.id})
    return contractor


def update_contractor(db: Session, contractor_id: int, payload: ContractorUpdate, *, actor: str) -> Contractor:
    contractor = get_or_404(db, Contractor, contractor_id)
    changes = payload.model_dump(exclude_unset=True)
    _ensure_unique(
        db,
        name=changes.get("name"),
        license_number=changes.get("license_number"),
        exclude_id=contractor.id,
    )
    applied = merge_fields(contractor, changes)
    if applied:
        log_audit(
            db,
            actor=actor,
            action="CONTRACTOR_UPDATED",
            entity="Contractor",
            entity_id=contractor.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(contractor)
    logger.info("Contractor updated", extra={"contractor_id": contractor.id, "fields": sorted(applied)})
    return contractor


def delete_contractor(db: Session, contractor_id: int, *, actor: str) -> None:
    contractor = get_or_404(db, Contractor, contractor_id)
    db.execute(
        update(GpsPoint)
        .where(GpsPoint.contractor_id == contractor.id)
        .values(contractor_id=None)
        .execution_options(synchronize_session=False)
    )
    log_audit(
        db,
        actor=actor,
        action="CONTRACTOR_DELETED",
        entity="Contractor",
        entity_id=contractor.id,
        data={"name": contractor.name},
    )
    # Assigned sections keep their row; the ORM clears assigned_contractor_id.
    db.delete(contractor)
    db.commit()
    logger.info("Contractor deleted", extra={"contractor_id": contractor_id})


def list_assignments(db: Session, project_id: int) -> list[ContractorProject]:
    get_or_404(db, Project, project_id)
    stmt = (
        select(ContractorProject)
        .where(ContractorProject.project_id == project_id)
        .options(selectinload(ContractorProject.contractor))
        .order_by(ContractorProject.id)
    )
    return list(db.scalars(stmt))


def _assign_sections(db: Session, project_id: int, contractor_id: int, section_ids: list[int]) -> list[int]:
    if not section_ids:
        return []
    sections = list(db.scalars(select(ProjectSection).where(ProjectSection.id.in_(section_ids))))
    found = {s.id for s in sections if s.project_id == project_id}
    missing = sorted(set(section_ids) - found)
    if missing:
        raise api_error(
            status.HTTP_400_BAD_REQUEST, "Sections do not belong to this project", missing
        )
    for section in sections:
        section.assigned_contractor_id = contractor_id
    return sorted(found)


def assign_contractor(
    db: Session, project_id: int, payload: ContractAssignmentCreate, *, actor: str
) -> ContractorProject:
    """Attach a contractor to a project, optionally taking over some sections."""

    get_or_404(db, Project, project_id)
    contractor = get_or_404(db, Contractor, payload.contractor_id)
    if not contractor.is_active:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Contractor is not active")

    existing = db.scalar(
        select(ContractorProject.id).where(
            ContractorProject.project_id == project_id,
            ContractorProject.contractor_id == contractor.id,
        )
    )
    if existing is not None:
        raise api_error(status.HTTP_409_CONFLICT, "Contractor already assigned to this project")

    data = payload.model_dump(exclude={"section_ids"})
    for key in _CONTRACT_MONEY:
        data[key] = to_decimal(data[key])
    assignment = ContractorProject(project_id=project_id, **data)
    db.add(assignment)
    db.flush()
    sections = _assign_sections(db, project_id, contractor.id, payload.section_ids)

    log_audit(
        db,
        actor=actor,
        action="CONTRACTOR_ASSIGNED",
        entity="ContractorProject",
        entity_id=assignment.id,
        data={"project_id": project_id, "contractor_id": contractor.id, "section_ids": sections},
    )
    db.commit()
    db.refresh(assignment)
    logger.info(
        "Contractor assigned",
        extra={"project_id": project_id, "contractor_id": contractor.id, "assignment_id": assignment.id},
    )
    return assignment


def update_assignment(
    db: Session, project_id: int, payload: ContractAssignmentUpdate, *, actor: str
) -> ContractorProject:
    assignment = db.scalar(
        select(ContractorProject).where(
            ContractorProject.project_id == project_id,
            ContractorProject.contractor_id == payload.contractor_id,
        )
    )
    if assignment is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "Contract assignment not found")

    changes = payload.model_dump(exclude_unset=True, exclude={"contractor_id"})
    applied = merge_fields(assignment, changes, money_fields=_CONTRACT_MONEY)
    if applied:
        log_audit(
            db,
            actor=actor,
            action="CONTRACT_UPDATED",
            entity="ContractorProject",
            entity_id=assignment.id,
            data=audit_view(applied),
        )
    db.commit()
    db.refresh(assignment)
    logger.info("Contract assignment updated", extra={"assignment_id": assignment.id, "fields": sorted(applied)})
    return assignment


__all__ = [
    "assign_contractor",
    "create_contractor",
    "delete_contractor",
    "list_assignments",
    "list_contractors",
    "update_assignment",
    "update_contractor",
]

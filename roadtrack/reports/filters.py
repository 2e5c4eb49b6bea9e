"""Report filters: a typed record of recognised query keys and its SQL rendering."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any, Iterable

from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import Select

from roadtrack.models import (
    Contractor,
    ContractorProject,
    FundingTransaction,
    GpsPoint,
    HSEIncident,
    Milestone,
    ProgressReport,
    Project,
    ProjectFunding,
    ProjectSection,
    Province,
    QualityReport,
)
from roadtrack.utils.time import end_of_day, is_date_only, isoformat_or_none, parse_iso_utc

MAX_LIMIT = 1000

# Each entity keeps its own timestamp column for date ranges.
DATE_FIELDS: dict[type, str] = {
    QualityReport: "test_date",
    GpsPoint: "timestamp",
    ProgressReport: "report_date",
    Project: "created_at",
    ProjectFunding: "created_at",
    FundingTransaction: "transaction_date",
    Milestone: "planned_date",
    HSEIncident: "incident_date",
}

# Filter keys that map to a differently named column on a given entity.
_COLUMN_OVERRIDES: dict[tuple[type, str], str] = {
    (Project, "project_id"): "id",
    (ProjectSection, "section_id"): "id",
    (ProjectSection, "contractor_id"): "assigned_contractor_id",
    (Province, "province_id"): "id",
    (Contractor, "contractor_id"): "id",
    (QualityReport, "status"): "qa_qc_status",
    (ProgressReport, "status"): "schedule_status",
    (ContractorProject, "status"): "contract_status",
}

_EQUALITY_FIELDS = (
    "project_id",
    "section_id",
    "province_id",
    "contractor_id",
    "report_type",
    "status",
    "incident_type",
    "severity",
)
# Keys whose values are matched against an enum column.
_ENUM_FIELDS = {"status", "severity"}
_ID_FIELDS = {"project_id", "section_id", "province_id", "contractor_id"}


class FilterError(ValueError):
    """Raised when report parameters cannot be turned into filters."""


def _parse_bound(key: str, raw: Any, *, upper: bool) -> datetime:
    if isinstance(raw, datetime):
        value = raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    text = str(raw).strip()
    try:
        value = parse_iso_utc(text)
    except ValueError as exc:
        raise FilterError(f"Invalid date for {to_camel(key)}: {text}") from exc
    if is_date_only(text):
        # Whole-day bounds: a bare end date includes every record of that day.
        return end_of_day(value) if upper else datetime.combine(value.date(), time.min, tzinfo=timezone.utc)
    return value


def _parse_int(key: str, raw: Any) -> int:
    try:
        value = int(str(raw).strip())
    except ValueError as exc:
        raise FilterError(f"Invalid value for {to_camel(key)}: {raw}") from exc
    if value <= 0:
        raise FilterError(f"Invalid value for {to_camel(key)}: {raw}")
    return value


@dataclass(frozen=True)
class ReportFilters:
    """Optional constraints recognised by report and list queries."""

    project_id: int | None = None
    section_id: int | None = None
    province_id: int | None = None
    contractor_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    report_type: str | None = None
    status: str | None = None
    incident_type: str | None = None
    severity: str | None = None
    limit: int | None = None

    @classmethod
    def build(cls, **params: Any) -> "ReportFilters":
        """Build filters from raw query parameters.

        Keys may be snake_case or camelCase. Empty values are dropped; unknown keys
        and malformed values raise :class:`FilterError`.
        """

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for raw_key, raw in params.items():
            key = to_snake(raw_key)
            if key not in known:
                raise FilterError(f"Unknown filter: {raw_key}")
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            if key in _ID_FIELDS:
                values[key] = _parse_int(key, raw)
            elif key == "limit":
                values[key] = min(_parse_int(key, raw), MAX_LIMIT)
            elif key in ("start_date", "end_date"):
                values[key] = _parse_bound(key, raw, upper=key == "end_date")
            else:
                values[key] = raw.value if isinstance(raw, Enum) else str(raw).strip()

        start, end = values.get("start_date"), values.get("end_date")
        if start is not None and end is not None and start > end:
            raise FilterError("startDate must not be after endDate")
        return cls(**values)

    def effective_limit(self, default: int) -> int:
        return self.limit if self.limit is not None else default

    def as_dict(self) -> dict[str, Any]:
        """JSON-native camelCase view of the present filters."""

        out: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            out[to_camel(key)] = isoformat_or_none(value) if isinstance(value, datetime) else value
        return out


def column_for(entity: type, key: str):
    """Return the mapped column ``key`` filters on for ``entity`` (or None)."""

    name = _COLUMN_OVERRIDES.get((entity, key), key)
    return getattr(entity, name, None)


def _coerce_enum(entity: type, key: str, column, value: str) -> Any:
    enum_cls = getattr(column.type, "enum_class", None)
    if enum_cls is None:
        return value
    try:
        return enum_cls(value.upper())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise FilterError(f"Invalid {to_camel(key)} for {entity.__name__}: {value} (expected one of {allowed})") from exc


def apply_filters(
    stmt: Select,
    entity: type,
    filters: ReportFilters,
    *,
    allowed: Iterable[str] | None = None,
) -> Select:
    """Add the present, permitted filters to ``stmt`` as WHERE constraints.

    Absent values impose nothing. Date bounds are inclusive and use the
    entity's own column from :data:`DATE_FIELDS`.
    """

    permitted = set(allowed) if allowed is not None else None

    def _ok(key: str) -> bool:
        return permitted is None or key in permitted

    for key in _EQUALITY_FIELDS:
        value = getattr(filters, key)
        if value is None or not _ok(key):
            continue
        column = column_for(entity, key)
        if column is None:
            continue
        if key in _ENUM_FIELDS:
            value = _coerce_enum(entity, key, column, value)
        stmt = stmt.where(column == value)

    date_name = DATE_FIELDS.get(entity)
    if date_name is not None:
        date_column = getattr(entity, date_name)
        if filters.start_date is not None and _ok("start_date"):
            stmt = stmt.where(date_column >= filters.start_date)
        if filters.end_date is not None and _ok("end_date"):
            stmt = stmt.where(date_column <= filters.end_date)
    return stmt


__all__ = ["DATE_FIELDS", "FilterError", "ReportFilters", "apply_filters", "column_for"]

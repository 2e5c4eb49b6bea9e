"""Serialise a generated report envelope to JSON or CSV."""
from __future__ import annotations

import csv
import io
import json
from typing import Any

# Per report type: (header, key in each item) pairs for the CSV table.
CSV_COLUMNS: dict[str, list[tuple[str, str]]] = {
    "overview": [
        ("Project Name", "name"),
        ("Province", "province"),
        ("Status", "status"),
        ("Progress (%)", "progress"),
        ("Sections", "totalSections"),
        ("Active Contractors", "activeContractors"),
        ("GPS Points", "gpsPoints"),
    ],
    "gps": [
        ("ID", "id"),
        ("Project", "project"),
        ("Province", "province"),
        ("Latitude", "latitude"),
        ("Longitude", "longitude"),
        ("Elevation", "elevation"),
        ("Accuracy", "accuracy"),
        ("Phase", "phase"),
        ("Side", "side"),
        ("Distance", "distance"),
        ("Status", "status"),
        ("User", "user"),
        ("Section", "section"),
        ("Contractor", "contractor"),
        ("Timestamp", "timestamp"),
    ],
    "contractor": [
        ("Name", "name"),
        ("License Number", "licenseNumber"),
        ("Certification", "certificationLevel"),
        ("Active Projects", "activeProjects"),
        ("Total Projects", "totalProjects"),
        ("Assigned Sections", "assignedSections"),
        ("Average Rating", "averageRating"),
        ("Total Contract Value", "totalContractValue"),
    ],
    "province": [
        ("Province", "name"),
        ("Code", "code"),
        ("Region", "region"),
        ("Capital", "capital"),
        ("Population", "population"),
        ("Total Projects", "infrastructure.totalProjects"),
        ("Active Projects", "infrastructure.activeProjects"),
        ("Completed Projects", "infrastructure.completedProjects"),
        ("GPS Points", "infrastructure.totalGpsPoints"),
    ],
    "progress": [
        ("Project", "project"),
        ("Province", "province"),
        ("Phase", "phase"),
        ("Side", "side"),
        ("Distance", "distance"),
        ("Status", "status"),
        ("User", "user"),
        ("Section", "section"),
        ("Timestamp", "timestamp"),
    ],
    "financial": [
        ("Project", "project"),
        ("Section", "section"),
        ("Contractor", "contractor"),
        ("Budget Allocated", "budgetAllocated"),
        ("Budget Spent", "budgetSpent"),
        ("Utilization (%)", "utilization"),
        ("Progress (%)", "progress"),
    ],
}


def to_json(envelope: dict[str, Any]) -> str:
    """Lossless JSON rendering: ``json.loads(to_json(r)) == r``."""

    return json.dumps(envelope, indent=2, ensure_ascii=False)


def _lookup(item: dict[str, Any], path: str) -> Any:
    value: Any = item
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


def to_csv(envelope: dict[str, Any]) -> str:
    """Title and generation lines, then one table row per report item."""

    report_type = str(envelope.get("reportType", "report"))
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([f"{report_type.capitalize()} Report"])
    writer.writerow([f"Generated: {envelope.get('generatedAt', '')}"])
    writer.writerow([])

    columns = CSV_COLUMNS.get(report_type)
    data = envelope.get("data") or {}
    if columns is None:
        writer.writerow(["data"])
        writer.writerow([json.dumps(data)])
        return buf.getvalue()

    writer.writerow([header for header, _ in columns])
    for item in data.get("items", []):
        writer.writerow([_cell(_lookup(item, key)) for _, key in columns])
    return buf.getvalue()


def export_filename(envelope: dict[str, Any], fmt: str) -> str:
    stamp = str(envelope.get("generatedAt", ""))[:10] or "report"
    return f"{envelope.get('reportType', 'report')}-report-{stamp}.{fmt}"


__all__ = ["CSV_COLUMNS", "export_filename", "to_csv", "to_json"]

"""Province listing."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from roadtrack.models import Province
from roadtrack.reports import aggregators as agg
from roadtrack.services.projects import project_counts


def list_provinces(db: Session) -> dict[str, Any]:
    """Provinces with project counts, plus the same list grouped by region."""

    provinces = list(db.scalars(select(Province).order_by(Province.name, Province.id)))
    counts = project_counts(db)
    rows = [
        {
            "id": p.id,
            "name": p.name,
            "code": p.code,
            "region": p.region,
            "capital": p.capital,
            "population": p.population,
            "project_count": counts.get(p.id, 0),
        }
        for p in provinces
    ]
    by_region: dict[str, list[dict[str, Any]]] = {}
    for row in rows:
        by_region.setdefault(row["region"], []).append(row)
    return {
        "provinces": rows,
        "by_region": dict(sorted(by_region.items())),
        "counts": {"total": len(rows), "by_region": agg.breakdown(provinces, "region")},
    }


__all__ = ["list_provinces"]

"""Pure folds over already-fetched rows.

Every function here is side-effect free and safe on empty input: divisions go
through :func:`ratio`, so no result is ever NaN or raises ZeroDivisionError.
"""
from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from roadtrack.utils.time import ensure_utc

Key = str | Callable[[Any], Any]


def _extract(row: Any, key: Key) -> Any:
    if callable(key):
        return key(row)
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def _label(value: Any, missing: str) -> str:
    if value is None or value == "":
        return missing
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def to_number(value: Any) -> float:
    """Coerce money/metric values (Decimal, int, None) to float."""

    if value is None:
        return 0.0
    return float(value)


def ratio(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, or 0 when the denominator is not positive."""

    if not denominator or denominator <= 0:
        return 0.0
    return float(numerator) / float(denominator)


def rate(matching: float, total: float, digits: int = 2) -> float:
    """Percentage of ``matching`` over ``total`` (0 on empty)."""

    return round(ratio(matching, total) * 100, digits)


def breakdown(rows: Iterable[Any], key: Key, *, missing: str = "Unknown") -> dict[str, int]:
    """Count rows per category; counts always sum to ``len(rows)``."""

    counts: Counter[str] = Counter(_label(_extract(row, key), missing) for row in rows)
    return dict(sorted(counts.items()))


def total(rows: Iterable[Any], key: Key) -> float:
    return sum(to_number(_extract(row, key)) for row in rows)


def average(values: Iterable[Any], digits: int = 2) -> float:
    """Mean of non-``None`` values; 0 when nothing remains."""

    present = [to_number(v) for v in values if v is not None]
    return round(ratio(sum(present), len(present)), digits)


def grouped_totals(
    rows: Iterable[Any],
    key: Key,
    value: Key,
    *,
    missing: str = "Unknown",
    total_key: str = "total",
) -> dict[str, dict[str, float]]:
    """Per-category ``{count, <total_key>}`` pairs, e.g. GPS distance per phase."""

    groups: dict[str, dict[str, float]] = {}
    for row in rows:
        bucket = groups.setdefault(_label(_extract(row, key), missing), {"count": 0, total_key: 0.0})
        bucket["count"] += 1
        bucket[total_key] += to_number(_extract(row, value))
    return dict(sorted(groups.items()))


def bounding_box(points: Sequence[Any]) -> dict[str, float] | None:
    """Return ``{north, south, east, west}`` over point coordinates, ``None`` if empty."""

    if not points:
        return None
    lats = [to_number(_extract(p, "latitude")) for p in points]
    lngs = [to_number(_extract(p, "longitude")) for p in points]
    return {"north": max(lats), "south": min(lats), "east": max(lngs), "west": min(lngs)}


def weighted_progress(sections: Iterable[Any], digits: int = 2) -> float:
    """``Σ(progress × length) / Σ(length)``, 0 when the total length is 0."""

    weighted = 0.0
    length_total = 0.0
    for section in sections:
        length = to_number(_extract(section, "length"))
        weighted += to_number(_extract(section, "progress_percentage")) * length
        length_total += length
    result = ratio(weighted, length_total)
    return round(min(max(result, 0.0), 100.0), digits)


def _day_of(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value).date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def daily_activity(rows: Iterable[Any], key: Key = "timestamp") -> dict[str, int]:
    """Histogram of rows per UTC calendar day, keyed by ISO date."""

    counts: Counter[str] = Counter()
    for row in rows:
        day = _day_of(_extract(row, key))
        if day is not None:
            counts[day] += 1
    return dict(sorted(counts.items()))


__all__ = [
    "average",
    "bounding_box",
    "breakdown",
    "daily_activity",
    "grouped_totals",
    "rate",
    "ratio",
    "to_number",
    "total",
    "weighted_progress",
]

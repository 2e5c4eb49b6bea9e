"""Small helpers shared by the resource services."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, TypeVar

from fastapi import status
from sqlalchemy.orm import Session

from roadtrack.models.base import Base
from roadtrack.utils.errors import api_error

ModelT = TypeVar("ModelT", bound=Base)

_DECIMAL_QUANT = Decimal("0.01")


def to_decimal(amount: Decimal | float | int | str | None) -> Decimal | None:
    """Normalize amount inputs to two-decimal ``Decimal`` values."""

    if amount is None:
        return None
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return value.quantize(_DECIMAL_QUANT, rounding=ROUND_HALF_UP)


def get_or_404(db: Session, model: type[ModelT], entity_id: int, label: str | None = None) -> ModelT:
    instance = db.get(model, entity_id)
    if instance is None:
        raise api_error(status.HTTP_404_NOT_FOUND, f"{label or model.__name__} not found")
    return instance


def merge_fields(
    instance: Any,
    changes: dict[str, Any],
    *,
    money_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Apply a partial update and return the fields that actually changed."""

    money = set(money_fields)
    applied: dict[str, Any] = {}
    for key, value in changes.items():
        if key in money:
            value = to_decimal(value)
        if getattr(instance, key) != value:
            setattr(instance, key, value)
            applied[key] = value
    return applied


def audit_view(changes: dict[str, Any]) -> dict[str, Any]:
    """JSON-safe copy of ``changes`` for the audit log."""

    out: dict[str, Any] = {}
    for key, value in changes.items():
        if isinstance(value, Decimal):
            out[key] = str(value)
        elif hasattr(value, "isoformat"):
            out[key] = value.isoformat()
        elif hasattr(value, "value"):
            out[key] = value.value
        else:
            out[key] = value
    return out


__all__ = ["audit_view", "get_or_404", "merge_fields", "to_decimal"]

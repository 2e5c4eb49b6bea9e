"""Audit trail helpers: PII masking and the AuditLog writer."""
from __future__ import annotations

from typing import Any, Callable, Mapping

from sqlalchemy.orm import Session

from roadtrack.models.audit import AuditLog
from roadtrack.utils.time import utcnow


def _mask_email(value: Any) -> str:
    text = str(value)
    if "@" not in text:
        return "***"
    return f"***@{text.split('@', 1)[1]}"


def _mask_tail(keep: int) -> Callable[[Any], str]:
    def _mask(value: Any) -> str:
        compact = str(value).replace(" ", "")
        if len(compact) <= keep:
            return "***"
        return f"***{compact[-keep:]}"

    return _mask


def _redact(value: Any) -> str:
    return "***redacted***"


# Field name -> masking rule; user accounts and contractor contacts.
MASKING_RULES: dict[str, Callable[[Any], str]] = {
    "email": _mask_email,
    "phone": _mask_tail(3),
    "contact_person": _redact,
    "password": _redact,
    "password_hash": _redact,
    "token": _redact,
}


def sanitize_payload_for_audit(data: Any) -> Any:
    """Return a copy of ``data`` with personal fields masked, at any depth."""

    if isinstance(data, Mapping):
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            rule = MASKING_RULES.get(key)
            sanitized[key] = rule(value) if rule and value is not None else sanitize_payload_for_audit(value)
        return sanitized
    if isinstance(data, list):
        return [sanitize_payload_for_audit(item) for item in data]
    return data


def log_audit(
    db: Session,
    *,
    actor: str,
    action: str,
    entity: str,
    entity_id: int | None,
    data: dict | None = None,
) -> None:
    """Stage an AuditLog row in the caller's transaction."""

    db.add(
        AuditLog(
            actor=actor,
            action=action,
            entity=entity,
            entity_id=entity_id if entity_id is not None else 0,
            data_json=sanitize_payload_for_audit(data or {}),
            at=utcnow(),
        )
    )


def actor_from_user(user: Any, fallback: str = "system") -> str:
    """``user:<id>`` for an authenticated user, ``fallback`` otherwise."""

    user_id = getattr(user, "id", None)
    return f"user:{user_id}" if user_id is not None else fallback


__all__ = ["MASKING_RULES", "actor_from_user", "log_audit", "sanitize_payload_for_audit"]

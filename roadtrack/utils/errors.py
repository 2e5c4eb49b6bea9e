"""Utility helpers for standardized error responses."""
from typing import Any

from fastapi import HTTPException


def error_response(message: str, details: Any | None = None) -> dict[str, Any]:
    """Return the standard ``{error, details?}`` payload."""

    payload: dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    return payload


def api_error(status_code: int, message: str, details: Any | None = None) -> HTTPException:
    """Build an ``HTTPException`` carrying the standard payload."""

    return HTTPException(status_code=status_code, detail=error_response(message, details))


__all__ = ["error_response", "api_error"]

"""Report envelope schema."""
from typing import Any

from .base import CamelModel


class ReportEnvelope(CamelModel):
    report_type: str
    generated_at: str
    filters: dict[str, Any]
    data: dict[str, Any]

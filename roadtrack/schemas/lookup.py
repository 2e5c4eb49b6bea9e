"""Schemas for lookup values."""
from pydantic import Field

from .base import CamelModel


class LookupValueCreate(CamelModel):
    category: str = Field(min_length=1, max_length=50)
    code: str = Field(min_length=1, max_length=100)
    label: str = Field(min_length=1, max_length=200)
    sort_order: int = 0
    is_active: bool = True


class LookupItem(CamelModel):
    code: str
    label: str
    sort_order: int = 0

"""Shared pydantic base classes."""
from datetime import datetime
from typing import Annotated, Any, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from roadtrack.utils.time import ensure_utc


# SQLite returns naive datetimes; everything is stored as UTC.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Schema exchanged as camelCase JSON, populated by field name internally."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PartialUpdate(CamelModel):
    """Body of a PUT: omitted fields are left alone, explicit ``null`` clears a field.

    Only fields listed in ``NULLABLE_FIELDS`` may be cleared; ``null`` for any
    other field is a validation error naming that field.
    """

    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name not in cls.NULLABLE_FIELDS:
            raise ValueError("Field cannot be null")
        return value

"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from threadline.core.errors import FieldError


class RequestModel(BaseModel):
    """Request body accepting camelCase keys (snake_case also works)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResponseModel(BaseModel):
    """Response body built from records and serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldErrorOut(ResponseModel):
    """A validation failure attributed to one input field."""

    field: str
    message: str

    @classmethod
    def from_errors(cls, errors: list[FieldError]) -> list[FieldErrorOut]:
        return [cls(field=e.field, message=e.message) for e in errors]

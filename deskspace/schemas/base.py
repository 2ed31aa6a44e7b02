"""Shared schema base: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every request/response schema.

    Serialises with camelCase aliases (``folderId``, ``fileUrl``) and accepts
    either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def strip_required(value: str, label: str = "Name") -> str:
    """Strip surrounding whitespace and reject an empty result."""
    value = value.strip()
    if not value:
        raise ValueError(f"{label} cannot be empty")
    return value

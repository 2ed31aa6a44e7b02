"""Vault schemas: one payload class per credential type."""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import ApiModel, strip_required


class _Entry(ApiModel):
    model_config = ConfigDict(extra="forbid")

    name: str

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        # Clients send the full form with unused fields as null.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)


class PasswordEntry(_Entry):
    type: Literal["password"]
    username: Optional[str] = None
    password: str = Field(min_length=1)


class ApiKeyEntry(_Entry):
    type: Literal["apikey"]
    api_key: str = Field(min_length=1)


class ValueEntry(_Entry):
    type: Literal["value"]
    value: str = Field(min_length=1)


VaultEntry = Annotated[
    Union[PasswordEntry, ApiKeyEntry, ValueEntry],
    Field(discriminator="type"),
]


class VaultItemResponse(ApiModel):
    id: str
    name: str
    type: str
    username: Optional[str] = None
    password: Optional[str] = None
    api_key: Optional[str] = None
    value: Optional[str] = None
    created_at: datetime
    updated_at: datetime

"""
The persisted note record.

Layout is the compatibility contract with data already in the store:
  {"text": str, "userId": str, "createdAt": int ms, "updatedAt": int ms}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import (
    BeforeValidator,
    ConfigDict,
    PlainSerializer,
    WithJsonSchema,
    model_validator,
)

from pynotes.utils import underscore_to_camelcase

from ._base import FSModel


def _from_millis(v):
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    # Firestore sends int64 values as decimal strings
    if isinstance(v, bool):
        raise TypeError("Expected milliseconds since epoch, got bool")
    if isinstance(v, (int, float)):
        iv = int(v)
    elif isinstance(v, str) and v.lstrip("-").isdigit():
        iv = int(v)
    else:
        raise TypeError("Expected milliseconds since epoch as int or digit string")
    return datetime.fromtimestamp(iv / 1000.0, tz=timezone.utc)


def to_millis(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(round(dt.timestamp() * 1000))


def from_millis(ms: int) -> datetime:
    return _from_millis(ms)


MillisDateTime = Annotated[
    datetime,
    BeforeValidator(_from_millis),
    PlainSerializer(to_millis, return_type=int),
    WithJsonSchema({"type": "integer", "description": "milliseconds since Unix epoch"}),
]


class NoteRecord(FSModel):
    """A note as stored, keyed by camelCase field names."""

    text: str
    user_id: str
    created_at: MillisDateTime
    updated_at: MillisDateTime

    model_config = FSModel.model_config | ConfigDict(
        alias_generator=underscore_to_camelcase,
        json_schema_extra={
            "example": {
                "text": "Buy milk",
                "userId": "u1",
                "createdAt": 1700000000000,
                "updatedAt": 1700000000000,
            }
        },
    )

    @model_validator(mode="after")
    def _check_order(self) -> "NoteRecord":
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)

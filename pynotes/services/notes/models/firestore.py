"""
Firestore REST "wire" models for the notes collection.
- Typed document values, documents, and the structured query used by the
  live query (filter by owner, newest first).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, JsonValue

from ._base import FSModel

# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class FSValue(FSModel):
    """
    One typed value under ``document.fields``. Exactly one key is set on the
    wire, e.g. {"stringValue": "x"} or {"integerValue": "1700000000000"}.
    """

    stringValue: Optional[str] = None
    integerValue: Optional[str] = None
    doubleValue: Optional[float] = None
    booleanValue: Optional[bool] = None
    timestampValue: Optional[str] = None
    nullValue: Optional[JsonValue] = None

    @property
    def value(self) -> Any:
        if self.stringValue is not None:
            return self.stringValue
        if self.integerValue is not None:
            return int(self.integerValue)
        if self.doubleValue is not None:
            return self.doubleValue
        if self.booleanValue is not None:
            return self.booleanValue
        if self.timestampValue is not None:
            return self.timestampValue
        return None

    @classmethod
    def of(cls, value: Any) -> "FSValue":
        # bool first: it is an int subclass
        if value is None:
            return cls(nullValue=None)
        if isinstance(value, bool):
            return cls(booleanValue=value)
        if isinstance(value, int):
            return cls(integerValue=str(value))
        if isinstance(value, float):
            return cls(doubleValue=value)
        if isinstance(value, str):
            return cls(stringValue=value)
        raise TypeError(f"Unsupported Firestore value: {type(value).__name__}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Plain dict -> Firestore ``fields`` payload."""
    return {
        key: FSValue.of(val).model_dump(exclude_none=True) or {"nullValue": None}
        for key, val in data.items()
    }


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class FSDocument(FSModel):
    """
    A document as returned by get/create/patch/runQuery.

    ``name`` is the full resource path:
      projects/{project}/databases/{db}/documents/{collection}/{id}
    """

    name: str
    fields: Dict[str, FSValue] = Field(default_factory=dict)
    createTime: Optional[str] = None
    updateTime: Optional[str] = None

    @property
    def document_id(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    def to_python(self) -> Dict[str, Any]:
        return {key: val.value for key, val in self.fields.items()}


# ---------------------------------------------------------------------------
# Structured query (request side)
# ---------------------------------------------------------------------------


class FSOperator(str, Enum):
    EQUAL = "EQUAL"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN = "GREATER_THAN"


class FSDirection(str, Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class FSFieldReference(FSModel):
    fieldPath: str


class FSFieldFilter(FSModel):
    field: FSFieldReference
    op: FSOperator
    value: FSValue


class FSFilter(FSModel):
    fieldFilter: FSFieldFilter


class FSOrder(FSModel):
    field: FSFieldReference
    direction: FSDirection = FSDirection.ASCENDING


class FSCollectionSelector(FSModel):
    collectionId: str


class FSStructuredQuery(FSModel):
    from_: List[FSCollectionSelector] = Field(alias="from")
    where: Optional[FSFilter] = None
    orderBy: Optional[List[FSOrder]] = None


class FSRunQueryRequest(FSModel):
    structuredQuery: FSStructuredQuery


class FSRunQueryItem(FSModel):
    """
    One element of the runQuery response array. An empty result set still
    returns one item carrying only ``readTime``.
    """

    document: Optional[FSDocument] = None
    readTime: Optional[str] = None
    skippedResults: Optional[int] = None
    done: Optional[bool] = None


def owner_query(collection: str, owner_id: str) -> FSRunQueryRequest:
    """userId == owner_id, ordered by updatedAt descending."""
    return FSRunQueryRequest(
        structuredQuery=FSStructuredQuery(
            from_=[FSCollectionSelector(collectionId=collection)],
            where=FSFilter(
                fieldFilter=FSFieldFilter(
                    field=FSFieldReference(fieldPath="userId"),
                    op=FSOperator.EQUAL,
                    value=FSValue.of(owner_id),
                )
            ),
            orderBy=[
                FSOrder(
                    field=FSFieldReference(fieldPath="updatedAt"),
                    direction=FSDirection.DESCENDING,
                )
            ],
        )
    )

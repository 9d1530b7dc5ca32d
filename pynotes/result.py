"""Outcome of a controller intent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Result:
    """Success flag plus the error that caused a failure, if any.

    Truthy when the request was accepted. Acceptance does not mean the
    observable state has changed yet; that arrives through change feeds.
    """

    ok: bool
    error: Optional[Exception] = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    @classmethod
    def success(cls) -> "Result":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: Exception) -> "Result":
        return cls(ok=False, error=error)

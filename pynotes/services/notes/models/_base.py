"""Base model for the Firestore and Identity Toolkit wire payloads."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

# Google APIs add response keys over time; PYNOTES_EXTRA=forbid is strict
_EXTRA = os.getenv("PYNOTES_EXTRA", "ignore").strip().lower()
if _EXTRA not in {"allow", "forbid", "ignore"}:
    _EXTRA = "ignore"


class FSModel(BaseModel):
    model_config = ConfigDict(extra=_EXTRA, populate_by_name=True)

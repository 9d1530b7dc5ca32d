"""Auth data: the session user and identity toolkit token payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import ConfigDict, Field

from pynotes.services.notes.models._base import FSModel
from pynotes.utils import underscore_to_camelcase


@dataclass(frozen=True)
class User:
    """The signed-in identity. ``email`` may be empty."""

    uid: str
    email: str = ""


class SignInResponse(FSModel):
    """accounts:signUp / accounts:signInWithPassword response."""

    id_token: str
    refresh_token: str
    expires_in: int
    local_id: str
    email: Optional[str] = None

    model_config = FSModel.model_config | ConfigDict(
        alias_generator=underscore_to_camelcase,
    )

    def to_user(self) -> User:
        return User(uid=self.local_id, email=self.email or "")


class RefreshResponse(FSModel):
    """securetoken.googleapis.com/v1/token response (snake_case on the wire)."""

    id_token: str
    refresh_token: str
    expires_in: int
    user_id: str
    project_id: Optional[str] = Field(default=None)

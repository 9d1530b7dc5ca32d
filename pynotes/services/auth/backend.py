"""
The auth collaborator consumed by SessionController.

AuthBackend is the seam. MemoryAuthBackend keeps accounts in process and
reports the same failure codes as Firebase; FirebaseAuthBackend lives in
``firebase.py``.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Dict, Optional, Protocol

from pynotes.events import Broadcast
from pynotes.exceptions import AuthErrorCode
from pynotes.validators import MIN_PASSWORD_LENGTH, validate_email

from .errors import AuthBackendError
from .models import User

LOGGER = logging.getLogger(__name__)


class AuthBackend(Protocol):
    @property
    def current_user(self) -> Optional[User]: ...

    def auth_state_changes(self) -> AsyncIterator[Optional[User]]:
        """The current value first, then every change."""
        ...

    async def sign_up(self, email: str, password: str) -> User: ...

    async def sign_in(self, email: str, password: str) -> User: ...

    async def sign_out(self) -> None: ...


class _BroadcastingBackend:
    """Holds the current user and fans out changes to it."""

    def __init__(self) -> None:
        self._user: Optional[User] = None
        self._changes: Broadcast[Optional[User]] = Broadcast()

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    async def auth_state_changes(self) -> AsyncIterator[Optional[User]]:
        receiver = self._changes.subscribe()
        try:
            yield self._user
            async for user in receiver:
                yield user
        finally:
            receiver.close()

    def _set_user(self, user: Optional[User]) -> None:
        if user == self._user:
            return
        self._user = user
        self._changes.publish(user)


@dataclass
class _Account:
    uid: str
    password: str
    disabled: bool = False


class MemoryAuthBackend(_BroadcastingBackend):
    """In-process accounts keyed by email."""

    def __init__(
        self,
        *,
        fail_sign_out: bool = False,
        uid_factory: Optional[Callable[[], str]] = None,
    ):
        super().__init__()
        self.fail_sign_out = fail_sign_out
        self._new_uid = uid_factory or (lambda: uuid.uuid4().hex[:28])
        self._accounts: Dict[str, _Account] = {}

    def add_account(self, email: str, password: str, *, disabled: bool = False) -> User:
        account = _Account(uid=self._new_uid(), password=password, disabled=disabled)
        self._accounts[email.lower()] = account
        return User(uid=account.uid, email=email)

    def disable(self, email: str) -> None:
        self._accounts[email.lower()].disabled = True

    async def sign_up(self, email: str, password: str) -> User:
        if validate_email(email):
            raise AuthBackendError(AuthErrorCode.INVALID_EMAIL)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthBackendError(AuthErrorCode.WEAK_PASSWORD)
        if email.lower() in self._accounts:
            raise AuthBackendError(AuthErrorCode.EMAIL_ALREADY_IN_USE)
        user = self.add_account(email, password)
        LOGGER.debug("Signed up %s as %s", email, user.uid)
        self._set_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> User:
        if validate_email(email):
            raise AuthBackendError(AuthErrorCode.INVALID_EMAIL)
        account = self._accounts.get(email.lower())
        if account is None:
            raise AuthBackendError(AuthErrorCode.USER_NOT_FOUND)
        if account.disabled:
            raise AuthBackendError(AuthErrorCode.USER_DISABLED)
        if account.password != password:
            raise AuthBackendError(AuthErrorCode.WRONG_PASSWORD)
        user = User(uid=account.uid, email=email)
        self._set_user(user)
        return user

    async def sign_out(self) -> None:
        # the local session ends even when the remote call fails
        try:
            if self.fail_sign_out:
                raise AuthBackendError(
                    AuthErrorCode.UNKNOWN, "sign-out request failed"
                )
        finally:
            self._set_user(None)

    def expire_session(self) -> None:
        """Drop the current user as if the session was revoked remotely."""
        self._set_user(None)

"""
Session state controller.

Tracks the signed-in user reported by the auth collaborator and republishes
it on ``changes``. A successful sign-in/up also reads the collaborator's current
user, so the session follows it even when the change feed stays quiet.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from pynotes.events import Broadcast, ChangeNotifier
from pynotes.exceptions import AuthError, AuthErrorCode
from pynotes.result import Result

from .backend import AuthBackend
from .errors import AuthBackendError
from .models import User

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionViewState:
    user: Optional[User] = None
    is_loading: bool = False
    error_message: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class SessionController(ChangeNotifier):
    def __init__(self, backend: AuthBackend):
        super().__init__()
        self._backend = backend
        self._user: Optional[User] = backend.current_user
        self._is_loading = False
        self._error: Optional[AuthError] = None
        self._task: Optional[asyncio.Task] = None
        self.changes: Broadcast[Optional[User]] = Broadcast()

    async def __aenter__(self) -> "SessionController":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def backend(self) -> AuthBackend:
        return self._backend

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[AuthError]:
        return self._error

    @property
    def error_message(self) -> str:
        return str(self._error) if self._error is not None else ""

    @property
    def view(self) -> SessionViewState:
        return SessionViewState(
            user=self._user,
            is_loading=self._is_loading,
            error_message=self.error_message,
        )

    # ------------------------------ Lifecycle --------------------------------

    async def start(self) -> None:
        """Start following the collaborator's auth state feed."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._follow(), name="auth-state-changes"
        )

    async def close(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            await asyncio.wait({task})
        self.changes.close()

    async def _follow(self) -> None:
        try:
            async for user in self._backend.auth_state_changes():
                self._apply(user)
        except asyncio.CancelledError:
            raise
        except Exception:
            LOGGER.exception("Auth state feed failed; treating session as lost")
            self._apply(None)

    def _apply(self, user: Optional[User]) -> None:
        if user == self._user:
            return
        self._user = user
        if user is None:
            LOGGER.info("Signed out")
        else:
            LOGGER.info("Signed in as %s", user.email or user.uid)
        if not self.changes.closed:
            self.changes.publish(user)
        self.notify_listeners()

    # ------------------------------ Intents ----------------------------------

    def clear_error(self) -> None:
        if self._error is None:
            return
        self._error = None
        self.notify_listeners()

    def _set_loading(self, loading: bool) -> None:
        self._is_loading = loading
        self.notify_listeners()

    async def sign_up(self, email: str, password: str) -> Result:
        return await self._request("sign up", self._backend.sign_up, email, password)

    async def sign_in(self, email: str, password: str) -> Result:
        return await self._request("sign in", self._backend.sign_in, email, password)

    async def _request(
        self,
        label: str,
        call: Callable[[str, str], Awaitable[User]],
        email: str,
        password: str,
    ) -> Result:
        error: Optional[AuthError] = None
        self._error = None
        self._set_loading(True)
        try:
            await call(email.strip(), password)
        except AuthBackendError as exc:
            error = AuthError(exc.code)
            LOGGER.warning("%s failed: %s (%s)", label, exc.code.value, exc)
        except Exception:
            error = AuthError(AuthErrorCode.UNKNOWN)
            LOGGER.exception("%s failed unexpectedly", label)
        finally:
            self._error = error
            self._set_loading(False)
        if error is not None:
            return Result.failure(error)
        # the feed publishes nothing when the backend already held this user
        self._apply(self._backend.current_user)
        return Result.success()

    async def sign_out(self) -> Result:
        """Clear the session locally even when the remote call fails."""
        self._set_loading(True)
        try:
            await self._backend.sign_out()
        except Exception as exc:
            LOGGER.warning("Remote sign-out failed, clearing session locally: %s", exc)
        finally:
            self._apply(None)
            self._set_loading(False)
        return Result.success()

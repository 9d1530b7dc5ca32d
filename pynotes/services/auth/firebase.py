"""Firebase Authentication backend over the REST API."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Callable, Optional

from .backend import _BroadcastingBackend
from .client import IdentityToolkitClient
from .models import User

LOGGER = logging.getLogger(__name__)

# refresh this long before the id token expires
_EXPIRY_MARGIN = 60.0


class FirebaseAuthBackend(_BroadcastingBackend):
    """
    AuthBackend holding the id/refresh token pair of the signed-in user.

    ``get_id_token`` is the token provider for the Firestore client. It is
    called from worker threads and refreshes the id token when it is about to
    expire.
    """

    def __init__(
        self,
        client: IdentityToolkitClient,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self._client = client
        self._clock = clock
        self._token_lock = threading.Lock()
        self._id_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._expires_at = 0.0

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def _store_tokens(self, id_token: str, refresh_token: str, expires_in: int) -> None:
        with self._token_lock:
            self._id_token = id_token
            self._refresh_token = refresh_token
            self._expires_at = self._clock() + expires_in

    def get_id_token(self) -> Optional[str]:
        with self._token_lock:
            if self._refresh_token is None:
                return None
            if self._clock() < self._expires_at - _EXPIRY_MARGIN:
                return self._id_token
            refresh_token = self._refresh_token
        LOGGER.debug("Id token expired or expiring, refreshing")
        resp = self._client.refresh(refresh_token)
        self._store_tokens(resp.id_token, resp.refresh_token, resp.expires_in)
        return resp.id_token

    async def sign_up(self, email: str, password: str) -> User:
        resp = await asyncio.to_thread(self._client.sign_up, email, password)
        self._store_tokens(resp.id_token, resp.refresh_token, resp.expires_in)
        user = resp.to_user()
        self._set_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> User:
        resp = await asyncio.to_thread(self._client.sign_in, email, password)
        self._store_tokens(resp.id_token, resp.refresh_token, resp.expires_in)
        user = resp.to_user()
        self._set_user(user)
        return user

    async def restore(self, refresh_token: str, email: str = "") -> User:
        """Resume a saved session from its refresh token."""
        resp = await asyncio.to_thread(self._client.refresh, refresh_token)
        self._store_tokens(resp.id_token, resp.refresh_token, resp.expires_in)
        user = User(uid=resp.user_id, email=email)
        LOGGER.info("Restored session for %s", email or user.uid)
        self._set_user(user)
        return user

    async def sign_out(self) -> None:
        # Firebase has no server-side sign-out for password sessions
        with self._token_lock:
            self._id_token = None
            self._refresh_token = None
            self._expires_at = 0.0
        self._set_user(None)

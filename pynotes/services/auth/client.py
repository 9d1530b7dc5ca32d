"""
Blocking client for the Firebase Auth REST endpoints.

  - accounts:signUp
  - accounts:signInWithPassword
  - securetoken refresh (grant_type=refresh_token)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from pynotes.exceptions import AuthErrorCode

from .errors import AuthBackendError, map_firebase_error
from .models import RefreshResponse, SignInResponse

LOGGER = logging.getLogger(__name__)

IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"


class IdentityToolkitClient:
    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        *,
        identity_url: str = IDENTITY_URL,
        token_url: str = SECURE_TOKEN_URL,
    ):
        self._api_key = api_key
        self._session = session or requests.Session()
        self._identity_url = identity_url.rstrip("/")
        self._token_url = token_url

    def sign_up(self, email: str, password: str) -> SignInResponse:
        LOGGER.info("Creating account for %s", email)
        data = self._post(
            f"{self._identity_url}/accounts:signUp",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        return self._parse(SignInResponse, data)

    def sign_in(self, email: str, password: str) -> SignInResponse:
        LOGGER.info("Signing in %s", email)
        data = self._post(
            f"{self._identity_url}/accounts:signInWithPassword",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        return self._parse(SignInResponse, data)

    def refresh(self, refresh_token: str) -> RefreshResponse:
        LOGGER.debug("Refreshing id token")
        data = self._post(
            self._token_url,
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
        return self._parse(RefreshResponse, data)

    def _post(
        self,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            resp = self._session.post(
                url, params={"key": self._api_key}, json=json, data=data
            )
        except requests.RequestException as exc:
            LOGGER.error("POST to %s failed: %s", url, exc)
            raise AuthBackendError(AuthErrorCode.UNKNOWN, str(exc)) from exc
        try:
            body = resp.json()
        except ValueError:
            body = None
        if resp.status_code >= 400:
            message = None
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                message = body["error"].get("message")
            code = map_firebase_error(message)
            LOGGER.warning(
                "POST to %s failed with %d: %s", url, resp.status_code, message
            )
            raise AuthBackendError(code, message)
        if not isinstance(body, dict):
            raise AuthBackendError(AuthErrorCode.UNKNOWN, "Invalid JSON response")
        return body

    @staticmethod
    def _parse(model, data: Dict[str, Any]):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            LOGGER.error("Unexpected auth response shape: %s", exc)
            raise AuthBackendError(
                AuthErrorCode.UNKNOWN, "Unexpected auth response"
            ) from exc

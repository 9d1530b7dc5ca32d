"""Failures reported by auth collaborators and their closed-code mapping."""

from __future__ import annotations

from typing import Optional

from pynotes.exceptions import AuthErrorCode


class AuthBackendError(Exception):
    """A collaborator-specific failure carrying a closed ``AuthErrorCode``."""

    def __init__(self, code: AuthErrorCode, detail: Optional[str] = None):
        self.code = AuthErrorCode(code)
        self.detail = detail
        super().__init__(detail or self.code.value)


# Firebase REST error strings; some arrive as "CODE : explanation"
FIREBASE_ERROR_CODES = {
    "WEAK_PASSWORD": AuthErrorCode.WEAK_PASSWORD,
    "EMAIL_EXISTS": AuthErrorCode.EMAIL_ALREADY_IN_USE,
    "EMAIL_NOT_FOUND": AuthErrorCode.USER_NOT_FOUND,
    "USER_NOT_FOUND": AuthErrorCode.USER_NOT_FOUND,
    "INVALID_PASSWORD": AuthErrorCode.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": AuthErrorCode.WRONG_PASSWORD,
    "INVALID_EMAIL": AuthErrorCode.INVALID_EMAIL,
    "MISSING_EMAIL": AuthErrorCode.INVALID_EMAIL,
    "USER_DISABLED": AuthErrorCode.USER_DISABLED,
    "TOO_MANY_ATTEMPTS_TRY_LATER": AuthErrorCode.TOO_MANY_REQUESTS,
    "OPERATION_NOT_ALLOWED": AuthErrorCode.OPERATION_NOT_ALLOWED,
    "PASSWORD_LOGIN_DISABLED": AuthErrorCode.OPERATION_NOT_ALLOWED,
}


def map_firebase_error(message: Optional[str]) -> AuthErrorCode:
    if not message:
        return AuthErrorCode.UNKNOWN
    key = message.split(":", 1)[0].strip().upper()
    return FIREBASE_ERROR_CODES.get(key, AuthErrorCode.UNKNOWN)

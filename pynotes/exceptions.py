"""Library exceptions."""

from enum import Enum
from typing import Optional


class PyNotesException(Exception):
    """Generic pynotes exception."""


class PyNotesConfigError(PyNotesException):
    """Missing or invalid configuration."""


# Notes
class NoteError(PyNotesException):
    """Base for errors surfaced by note intents."""


class EmptyNoteError(NoteError):
    """Note text is blank. Raised before any store call."""

    def __init__(self, message: str = "Note cannot be empty"):
        super().__init__(message)


class StoreFailureError(NoteError):
    """Wraps any store-layer failure for create/update/delete/subscribe."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


# Auth
class AuthErrorCode(str, Enum):
    """Closed set of authentication failure codes."""

    WEAK_PASSWORD = "weak-password"
    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    USER_NOT_FOUND = "user-not-found"
    WRONG_PASSWORD = "wrong-password"
    INVALID_EMAIL = "invalid-email"
    USER_DISABLED = "user-disabled"
    TOO_MANY_REQUESTS = "too-many-requests"
    OPERATION_NOT_ALLOWED = "operation-not-allowed"
    UNKNOWN = "unknown"


AUTH_ERROR_MESSAGES = {
    AuthErrorCode.WEAK_PASSWORD: "The password provided is too weak.",
    AuthErrorCode.EMAIL_ALREADY_IN_USE: "The account already exists for that email.",
    AuthErrorCode.USER_NOT_FOUND: "No user found for that email.",
    AuthErrorCode.WRONG_PASSWORD: "Wrong password provided for that user.",
    AuthErrorCode.INVALID_EMAIL: "The email address is not valid.",
    AuthErrorCode.USER_DISABLED: "This user has been disabled.",
    AuthErrorCode.TOO_MANY_REQUESTS: "Too many requests. Try again later.",
    AuthErrorCode.OPERATION_NOT_ALLOWED: "Signing in with Email and Password is not enabled.",
    AuthErrorCode.UNKNOWN: "An unexpected error occurred. Please try again.",
}


class AuthError(PyNotesException):
    """Authentication failure with a user-facing message."""

    def __init__(self, code: AuthErrorCode):
        self.code = AuthErrorCode(code)
        super().__init__(AUTH_ERROR_MESSAGES[self.code])

    @classmethod
    def from_code(cls, code: Optional[str]) -> "AuthError":
        """Build from a raw code string; unrecognized codes become ``unknown``."""
        try:
            return cls(AuthErrorCode(code))
        except ValueError:
            return cls(AuthErrorCode.UNKNOWN)

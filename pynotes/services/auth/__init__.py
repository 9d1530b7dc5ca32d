"""Public API for the auth service."""

from .backend import AuthBackend, MemoryAuthBackend
from .client import IdentityToolkitClient
from .errors import AuthBackendError, map_firebase_error
from .firebase import FirebaseAuthBackend
from .models import User
from .session import SessionController, SessionViewState

__all__ = [
    "AuthBackend",
    "AuthBackendError",
    "FirebaseAuthBackend",
    "IdentityToolkitClient",
    "MemoryAuthBackend",
    "SessionController",
    "SessionViewState",
    "User",
    "map_firebase_error",
]

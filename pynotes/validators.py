"""
Input validators shared by the CLI and the controllers.

Each returns an error message when the value is rejected, ``None`` otherwise.
"""

import re
from typing import Optional

EMAIL_RE = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$")
MIN_PASSWORD_LENGTH = 6


def validate_email(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Email is required"
    if not EMAIL_RE.match(value):
        return "Please enter a valid email address"
    return None


def validate_password(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Password is required"
    if len(value) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def validate_note_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Note text is required"
    if not value.strip():
        return "Note cannot be empty"
    return None

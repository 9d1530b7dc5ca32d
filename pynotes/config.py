"""
Configuration for the Firebase-backed notes client.

Values come from ``config.json`` in the config directory
(``~/.config/pynotes`` or ``$PYNOTES_CONFIG_DIR``), overridden by
environment variables:
  PYNOTES_API_KEY, PYNOTES_PROJECT_ID, PYNOTES_DATABASE, PYNOTES_COLLECTION,
  PYNOTES_POLL_INTERVAL
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from pynotes.exceptions import PyNotesConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = os.path.expanduser("~/.config/pynotes")

_ENV_KEYS = {
    "api_key": "PYNOTES_API_KEY",
    "project_id": "PYNOTES_PROJECT_ID",
    "database": "PYNOTES_DATABASE",
    "collection": "PYNOTES_COLLECTION",
    "poll_interval": "PYNOTES_POLL_INTERVAL",
}


def get_config_dir(env: Mapping[str, str] = os.environ) -> str:
    return env.get("PYNOTES_CONFIG_DIR") or DEFAULT_CONFIG_DIR


def get_config_path(env: Mapping[str, str] = os.environ) -> str:
    return os.path.join(get_config_dir(env), "config.json")


def get_session_path(env: Mapping[str, str] = os.environ) -> str:
    return os.path.join(get_config_dir(env), "session.json")


def read_json(path: str) -> Dict[str, Any]:
    """Load a JSON object; a missing file is an empty config."""
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise PyNotesConfigError(f"{path} must contain a JSON object")
    return data


def write_json(path: str, data: Dict[str, Any]) -> None:
    """Write with owner-only permissions; the files may hold tokens."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    os.chmod(path, 0o600)


@dataclass(frozen=True)
class NotesConfig:
    api_key: Optional[str] = None
    project_id: Optional[str] = None
    database: str = "(default)"
    collection: str = "notes"
    poll_interval: float = 2.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NotesConfig":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        if "poll_interval" in values:
            try:
                values["poll_interval"] = float(values["poll_interval"])
            except (TypeError, ValueError) as exc:
                raise PyNotesConfigError(
                    f"poll_interval must be a number, got {values['poll_interval']!r}"
                ) from exc
            if values["poll_interval"] <= 0:
                raise PyNotesConfigError("poll_interval must be positive")
        return cls(**values)

    @classmethod
    def load(
        cls, path: Optional[str] = None, env: Mapping[str, str] = os.environ
    ) -> "NotesConfig":
        path = path or get_config_path(env)
        try:
            data = read_json(path)
        except (json.JSONDecodeError, OSError) as exc:
            raise PyNotesConfigError(f"Could not load {path}: {exc}") from exc
        for name, var in _ENV_KEYS.items():
            if env.get(var):
                data[name] = env[var]
        LOGGER.debug("Loaded config from %s", path)
        return cls.from_mapping(data)

    def require_remote(self) -> None:
        """Raise unless the Firebase project settings are present."""
        missing = [
            var
            for name, var in (
                ("api_key", "PYNOTES_API_KEY"),
                ("project_id", "PYNOTES_PROJECT_ID"),
            )
            if not getattr(self, name)
        ]
        if missing:
            raise PyNotesConfigError(
                "Missing Firebase settings: " + ", ".join(missing)
            )

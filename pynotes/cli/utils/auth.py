"""Utility functions for the pynotes CLI auth commands."""

import json
import os
from typing import Any, Dict, Optional

import requests
import typer
from rich.console import Console
from rich.panel import Panel

from pynotes.config import (
    NotesConfig,
    get_config_path,
    get_session_path,
    read_json,
    write_json,
)
from pynotes.exceptions import AuthErrorCode, PyNotesConfigError
from pynotes.services.auth import (
    AuthBackendError,
    FirebaseAuthBackend,
    IdentityToolkitClient,
    SessionController,
    User,
)
from pynotes.services.notes import FirestoreNotesClient, FirestoreNoteStore
from pynotes.utils import (
    delete_password_in_keyring,
    get_password_from_keyring,
    password_exists_in_keyring,
    store_password_in_keyring,
)
from pynotes.validators import validate_email, validate_password

console = Console()


def load_config() -> Dict[str, Any]:
    """Load configuration from file."""
    try:
        return read_json(get_config_path())
    except (json.JSONDecodeError, OSError, PyNotesConfigError) as exc:
        console.print(f"[yellow]Warning:[/yellow] Could not load config file: {exc}")
    return {}


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    try:
        write_json(get_config_path(), config)
    except OSError as exc:
        console.print(f"[yellow]Warning:[/yellow] Could not save config file: {exc}")


def load_session() -> Dict[str, Any]:
    try:
        return read_json(get_session_path())
    except (json.JSONDecodeError, OSError, PyNotesConfigError):
        return {}


def save_session(backend: FirebaseAuthBackend) -> None:
    """Persist the refresh token so later commands skip the password."""
    user = backend.current_user
    if user is None or backend.refresh_token is None:
        return
    write_json(
        get_session_path(),
        {
            "email": user.email,
            "uid": user.uid,
            "refresh_token": backend.refresh_token,
        },
    )


def remove_session_files(username: Optional[str]) -> None:
    """Remove the saved session and the keyring password of ``username``."""
    session_path = get_session_path()
    if os.path.exists(session_path):
        os.remove(session_path)
    if username and password_exists_in_keyring(username):
        delete_password_in_keyring(username)


def get_notes_config() -> NotesConfig:
    try:
        config = NotesConfig.load()
        config.require_remote()
    except PyNotesConfigError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        console.print(
            Panel(
                "Set your Firebase web API key and project id, either in\n"
                f"{get_config_path()} or via PYNOTES_API_KEY / PYNOTES_PROJECT_ID.",
                title="Configuration Required",
                border_style="red",
            )
        )
        raise typer.Exit(1) from exc
    return config


def build_backend(config: NotesConfig) -> FirebaseAuthBackend:
    client = IdentityToolkitClient(config.api_key or "", requests.Session())
    return FirebaseAuthBackend(client)


def build_store(config: NotesConfig, backend: FirebaseAuthBackend) -> FirestoreNoteStore:
    client = FirestoreNotesClient(
        config.project_id or "",
        requests.Session(),
        database=config.database,
        collection=config.collection,
        token_provider=backend.get_id_token,
        api_key=config.api_key,
    )
    return FirestoreNoteStore(client, poll_interval=config.poll_interval)


def _get_username(provided_username: Optional[str] = None) -> str:
    """Determine the email to use: argument > session file > config > prompt."""
    username = (
        provided_username
        or load_session().get("email")
        or load_config().get("username")
    )
    while not username or validate_email(username):
        if username:
            console.print(f"[yellow]{validate_email(username)}[/yellow]")
        username = typer.prompt("Email")
    return username


def _get_password(username: str, provided_password: Optional[str] = None) -> str:
    """Get password from provided value, keyring, or prompt."""
    if provided_password:
        return provided_password
    password = get_password_from_keyring(username)
    if not password:
        password = typer.prompt("Password", hide_input=True)
    return password


def _maybe_store_password(username: str, password: str) -> None:
    if not password_exists_in_keyring(username):
        if typer.confirm("Save password in keyring?", default=False):
            store_password_in_keyring(username, password)


def _handle_failed_login(
    username: str, failure_count: int, max_retries: int, message: str
) -> None:
    """Handle failed login attempt."""
    # If stored password didn't work, delete it
    if password_exists_in_keyring(username):
        delete_password_in_keyring(username)

    if failure_count >= max_retries:
        console.print(f"[bold red]Error:[/bold red] {message}")
        console.print(
            Panel(
                "Please check your email and password are correct.\n"
                "Use `pynotes auth signup` to create an account.",
                title="Authentication Help",
                border_style="red",
            )
        )
        raise typer.Exit(1)
    console.print(
        f"[bold yellow]Warning:[/bold yellow] {message} "
        f"Attempts remaining: {max_retries - failure_count}"
    )


async def restore_session(backend: FirebaseAuthBackend) -> bool:
    """Resume the saved session, if any. Returns True when signed in."""
    saved = load_session()
    refresh_token = saved.get("refresh_token")
    if not refresh_token:
        return False
    try:
        await backend.restore(refresh_token, saved.get("email", ""))
    except AuthBackendError:
        return False
    save_session(backend)
    return True


async def sign_up(
    backend: FirebaseAuthBackend, username: Optional[str], password: Optional[str]
) -> Optional[User]:
    resolved_username = _get_username(username)
    resolved_password = password or typer.prompt(
        "Password", hide_input=True, confirmation_prompt=True
    )
    invalid = validate_password(resolved_password)
    if invalid:
        console.print(f"[bold red]Error:[/bold red] {invalid}")
        raise typer.Exit(1)

    session = SessionController(backend)
    result = await session.sign_up(resolved_username, resolved_password)
    if not result:
        console.print(f"[bold red]Error:[/bold red] {result.message}")
        raise typer.Exit(1)
    save_session(backend)
    _maybe_store_password(resolved_username, resolved_password)
    return backend.current_user


async def login(
    backend: FirebaseAuthBackend,
    username: Optional[str] = None,
    password: Optional[str] = None,
    max_retries: int = 3,
) -> Optional[User]:
    """Sign in with retries; only wrong passwords are retried."""
    resolved_username = _get_username(username)
    session = SessionController(backend)
    failure_count = 0

    while failure_count < max_retries:
        current_password = _get_password(resolved_username, password)
        result = await session.sign_in(resolved_username, current_password)
        if result:
            save_session(backend)
            _maybe_store_password(resolved_username, current_password)
            return backend.current_user

        code = getattr(result.error, "code", AuthErrorCode.UNKNOWN)
        if code is not AuthErrorCode.WRONG_PASSWORD:
            console.print(f"[bold red]Error:[/bold red] {result.message}")
            raise typer.Exit(1)
        failure_count += 1
        password = None
        _handle_failed_login(
            resolved_username, failure_count, max_retries, result.message
        )

    console.print("[bold red]Error:[/bold red] Failed to authenticate")
    raise typer.Exit(1)


async def get_signed_in_backend(
    username: Optional[str] = None, password: Optional[str] = None
) -> FirebaseAuthBackend:
    """Authenticated backend from the saved session, or after a login."""
    config = get_notes_config()
    backend = build_backend(config)
    if not await restore_session(backend):
        await login(backend, username, password)
    return backend

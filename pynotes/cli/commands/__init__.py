"""Command modules for the pynotes CLI."""

from pynotes.cli.commands import auth, notes

__all__ = ["auth", "notes"]

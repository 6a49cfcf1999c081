"""CLI commands."""

from .resolve import resolve_command

__all__ = ["resolve_command"]

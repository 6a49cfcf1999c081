"""Registry commands for component inspection."""

from .info import info_command

__all__ = ["info_command"]

"""Command handlers exposed by the stdio server."""

from .registry import CommandHandler, CommandError, CommandRegistry

__all__ = ["CommandHandler", "CommandError", "CommandRegistry"]

"""Namespaced command table for the index service."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

CommandHandler = Callable[[dict[str, object]], dict[str, object]]
DEFAULT_NAMESPACE = "index"


@dataclass(slots=True, frozen=True)
class CommandError(Exception):
    """A request the command layer refuses, carrying a stable error code."""

    code: str
    message: str


class CommandRegistry:
    """Handlers keyed by ``<namespace>.<command>`` in registration order."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._prefix = f"{namespace}."
        self._handlers: dict[str, CommandHandler] = {}

    def qualify(self, command: str) -> str:
        """Return the namespaced form of a bare or already-qualified command."""
        if command.startswith(self._prefix):
            return command
        return self._prefix + command

    def register(self, command: str, handler: CommandHandler) -> None:
        name = self.qualify(command)
        if name in self._handlers:
            raise ValueError(f"Command already registered: {name}")
        self._handlers[name] = handler

    def names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Run the handler registered under the exact qualified ``name``."""
        handler = self._handlers.get(name)
        if handler is None:
            raise CommandError(code="UNKNOWN_COMMAND", message=f"Unknown command: {name}")
        return handler(arguments)

from __future__ import annotations

import pytest

from rootdex.tools import CommandError, CommandRegistry


def test_registry_namespaces_commands_in_registration_order() -> None:
    registry = CommandRegistry()
    registry.register("alpha", lambda _: {"command": "alpha"})
    registry.register("index.beta", lambda _: {"command": "beta"})

    assert registry.names() == ("index.alpha", "index.beta")
    assert registry.qualify("refresh") == "index.refresh"
    assert registry.qualify("index.refresh") == "index.refresh"


def test_registry_dispatches_qualified_command() -> None:
    registry = CommandRegistry()
    registry.register("echo", lambda payload: {"payload": payload})

    result = registry.dispatch("index.echo", {"k": "v"})

    assert result == {"payload": {"k": "v"}}


def test_registry_rejects_duplicate_registration() -> None:
    registry = CommandRegistry()
    registry.register("status", lambda _: {})

    with pytest.raises(ValueError, match="already registered: index.status"):
        registry.register("index.status", lambda _: {})


def test_registry_rejects_unknown_and_bare_commands() -> None:
    registry = CommandRegistry()
    registry.register("status", lambda _: {})

    for name in ("index.nope", "status"):
        with pytest.raises(CommandError) as excinfo:
            registry.dispatch(name, {})
        assert excinfo.value.code == "UNKNOWN_COMMAND"
        assert excinfo.value.message == f"Unknown command: {name}"

"""Built-in index commands and their argument validation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict

from rootdex.commands import Commands
from rootdex.config import MAX_DISPLAY_WIDTH, MIN_DISPLAY_WIDTH, Settings
from rootdex.tools.registry import CommandHandler, CommandError, CommandRegistry

MAX_AUDIT_ENTRIES = 200
QUIET_FALLBACK_REASONS = {None, "disabled"}


def register_builtin_tools(
    registry: CommandRegistry,
    commands: Commands,
    settings: Settings,
    read_audit_entries: Callable[[str | None, int], list[dict[str, object]]],
) -> None:
    """Register the index command set."""
    registry.register("status", _status_handler(commands, settings))
    registry.register("refresh", _refresh_handler(commands))
    registry.register("candidates", _candidates_handler(commands))
    registry.register("find", _find_handler(commands))
    registry.register("list", _list_handler(commands))
    registry.register("prune", _prune_handler(commands))
    registry.register("info", _info_handler(commands))
    registry.register("audit_log", _audit_log_handler(read_audit_entries))


def _status_handler(commands: Commands, settings: Settings) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        status = commands.status()
        return {
            "index_status": status.index_status,
            "last_refresh_timestamp": status.last_refresh_timestamp,
            "indexed_file_count": status.indexed_file_count,
            "last_strategy": status.last_strategy,
            "source_count": len(settings.sources),
            "effective_config": settings.to_public_dict(),
        }

    return handler


def _refresh_handler(commands: Commands) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        silent_value = arguments.get("silent", False)
        if not isinstance(silent_value, bool):
            raise CommandError(
                code="INVALID_PARAMS",
                message="index.refresh silent must be a boolean.",
            )
        result = commands.refresh(silent=silent_value)
        reason = result.get("fallback_reason")
        if reason not in QUIET_FALLBACK_REASONS:
            result["__warnings__"] = [f"External scanner unavailable ({reason}); used walk."]
        return result

    return handler


def _candidates_handler(commands: Commands) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        width = _width_argument(arguments, "index.candidates")
        candidates = commands.candidates(width)
        return {
            "count": len(candidates),
            "candidates": [asdict(candidate) for candidate in candidates],
        }

    return handler


def _find_handler(commands: Commands) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        choice = arguments.get("choice")
        if not isinstance(choice, str) or not choice.strip():
            raise CommandError(
                code="INVALID_PARAMS",
                message="index.find choice must be a non-empty string.",
            )
        width = _width_argument(arguments, "index.find")
        path = commands.find(lambda _candidates: choice, width)
        return {"path": path}

    return handler


def _list_handler(commands: Commands) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        width = _width_argument(arguments, "index.list")
        widths = commands.widths(width)
        rows = commands.list_rows(width)
        return {
            "columns": asdict(widths),
            "rows": [asdict(row) for row in rows],
        }

    return handler


def _prune_handler(commands: Commands) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return commands.prune()

    return handler


def _info_handler(commands: Commands) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = arguments.get("path")
        if not isinstance(path_value, str) or not path_value:
            raise CommandError(
                code="INVALID_PARAMS",
                message="index.info path must be a non-empty string.",
            )
        entry = commands.info(path_value)
        return {"entry": asdict(entry) if entry is not None else None}

    return handler


def _audit_log_handler(
    read_audit_entries: Callable[[str | None, int], list[dict[str, object]]],
) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        since_value = arguments.get("since")
        limit_value = arguments.get("limit", MAX_AUDIT_ENTRIES)

        since: str | None = since_value if isinstance(since_value, str) else None
        limit = limit_value if isinstance(limit_value, int) else MAX_AUDIT_ENTRIES
        if limit < 1:
            limit = 1
        if limit > MAX_AUDIT_ENTRIES:
            limit = MAX_AUDIT_ENTRIES

        return {"entries": read_audit_entries(since, limit)}

    return handler


def _width_argument(arguments: dict[str, object], command: str) -> int | None:
    value = arguments.get("width")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise CommandError(
            code="INVALID_PARAMS",
            message=f"{command} width must be an integer.",
        )
    if value < MIN_DISPLAY_WIDTH or value > MAX_DISPLAY_WIDTH:
        raise CommandError(
            code="INVALID_PARAMS",
            message=(
                f"{command} width must be between {MIN_DISPLAY_WIDTH} and {MAX_DISPLAY_WIDTH}."
            ),
        )
    return value

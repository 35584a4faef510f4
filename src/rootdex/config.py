"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "rootdex.toml"
DATA_DIR_NAME = ".rootdex"
DEFAULT_SCANNER_COMMAND = "fd"
MIN_DISPLAY_WIDTH = 40
MAX_DISPLAY_WIDTH = 1_000


@dataclass(slots=True, frozen=True)
class Source:
    """A configured root directory and its display alias."""

    root: str
    alias: str


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """File enumeration settings."""

    extensions: tuple[str, ...] = ()
    use_external_scanner: bool = True
    scanner_command: str = DEFAULT_SCANNER_COMMAND
    scanner_args: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Candidate search-key settings."""

    search_in_path: bool = False


@dataclass(slots=True, frozen=True)
class DisplayConfig:
    """Display settings; width None means ask the terminal."""

    width: int | None = None


@dataclass(slots=True, frozen=True)
class Settings:
    """Fully merged configuration."""

    workspace: Path
    data_dir: Path
    sources: tuple[Source, ...]
    index: IndexConfig
    search: SearchConfig
    display: DisplayConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for status responses."""
        return {
            "workspace": str(self.workspace),
            "data_dir": str(self.data_dir),
            "sources": [{"root": source.root, "alias": source.alias} for source in self.sources],
            "index": {
                "extensions": list(self.index.extensions),
                "use_external_scanner": self.index.use_external_scanner,
                "scanner_command": self.index.scanner_command,
                "scanner_args": list(self.index.scanner_args),
            },
            "search": {
                "search_in_path": self.search.search_in_path,
            },
            "display": {
                "width": self.display.width,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    use_external_scanner: bool | None = None
    search_in_path: bool | None = None
    display_width: int | None = None


def default_config(workspace: Path) -> Settings:
    """Build default config for a given workspace directory."""
    resolved = workspace.resolve()
    return Settings(
        workspace=resolved,
        data_dir=resolved / DATA_DIR_NAME,
        sources=(),
        index=IndexConfig(),
        search=SearchConfig(),
        display=DisplayConfig(),
    )


def load_config_file(workspace: Path) -> dict[str, object]:
    """Load optional rootdex.toml from the workspace."""
    config_path = workspace / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _parse_sources(value: object, workspace: Path) -> tuple[Source, ...]:
    if not isinstance(value, list):
        raise ValueError("Config field 'sources' must be an array of tables.")
    sources: list[Source] = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"Config field 'sources[{index}]' must be a table.")
        root = item.get("root")
        alias = item.get("alias", "")
        if not isinstance(root, str) or not root.strip():
            raise ValueError(f"Config field 'sources[{index}].root' must be a non-empty string.")
        if not isinstance(alias, str):
            raise ValueError(f"Config field 'sources[{index}].alias' must be a string.")
        sources.append(Source(root=_resolve_root(root, workspace), alias=alias))
    return tuple(sources)


def _resolve_root(root: str, workspace: Path) -> str:
    # Symlinks are kept; the resolver matches unresolved paths.
    path = os.path.expanduser(root)
    if not os.path.isabs(path):
        path = os.path.join(workspace, path)
    return os.path.abspath(path)


def merge_config(base: Settings, payload: dict[str, object], overrides: CliOverrides) -> Settings:
    """Merge defaults, config file, then CLI/startup overrides."""
    index_payload = _get_table(payload, "index")
    search_payload = _get_table(payload, "search")
    display_payload = _get_table(payload, "display")

    sources = base.sources
    if "sources" in payload:
        sources = _parse_sources(payload["sources"], base.workspace)

    extensions = base.index.extensions
    if "extensions" in index_payload:
        extensions = _tuple_of_strings(index_payload["extensions"], "index", "extensions")
    scanner_args = base.index.scanner_args
    if "scanner_args" in index_payload:
        scanner_args = _tuple_of_strings(index_payload["scanner_args"], "index", "scanner_args")
    scanner_command = base.index.scanner_command
    if "scanner_command" in index_payload:
        raw_command = index_payload["scanner_command"]
        if not isinstance(raw_command, str) or not raw_command.strip():
            raise ValueError("Config field 'index.scanner_command' must be a non-empty string.")
        scanner_command = raw_command
    use_external_scanner = _optional_bool(
        index_payload.get("use_external_scanner"),
        "index.use_external_scanner",
        base.index.use_external_scanner,
    )

    search_in_path = _optional_bool(
        search_payload.get("search_in_path"),
        "search.search_in_path",
        base.search.search_in_path,
    )
    width = _optional_width(display_payload.get("width"), "display.width", base.display.width)

    merged = Settings(
        workspace=base.workspace,
        data_dir=base.data_dir,
        sources=sources,
        index=IndexConfig(
            extensions=extensions,
            use_external_scanner=use_external_scanner,
            scanner_command=scanner_command,
            scanner_args=scanner_args,
        ),
        search=SearchConfig(search_in_path=search_in_path),
        display=DisplayConfig(width=width),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: Settings, overrides: CliOverrides) -> Settings:
    """Apply startup overrides at highest precedence."""
    index = config.index
    if overrides.use_external_scanner is not None:
        index = IndexConfig(
            extensions=index.extensions,
            use_external_scanner=overrides.use_external_scanner,
            scanner_command=index.scanner_command,
            scanner_args=index.scanner_args,
        )
    search = config.search
    if overrides.search_in_path is not None:
        search = SearchConfig(search_in_path=overrides.search_in_path)
    display = DisplayConfig(
        width=_optional_width(
            overrides.display_width,
            "overrides.display_width",
            config.display.width,
        )
    )
    data_dir = overrides.data_dir or config.data_dir
    return Settings(
        workspace=config.workspace,
        data_dir=data_dir.resolve(),
        sources=config.sources,
        index=index,
        search=search,
        display=display,
    )


def load_effective_config(workspace: Path, overrides: CliOverrides | None = None) -> Settings:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved = workspace.resolve()
    base = default_config(resolved)
    payload = load_config_file(resolved)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_width(value: object, name: str, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Config field '{name}' must be an integer.")
    if value < MIN_DISPLAY_WIDTH or value > MAX_DISPLAY_WIDTH:
        raise ValueError(
            f"Config field '{name}' must be between {MIN_DISPLAY_WIDTH} and {MAX_DISPLAY_WIDTH}."
        )
    return value

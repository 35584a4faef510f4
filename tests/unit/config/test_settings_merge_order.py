from __future__ import annotations

import os
from pathlib import Path

from rootdex.config import CliOverrides, load_effective_config
from rootdex.server import create_server


def _write_config(workspace: Path, *lines: str) -> None:
    (workspace / "rootdex.toml").write_text("\n".join(lines), encoding="utf-8")


def test_defaults_without_config_file(tmp_path: Path) -> None:
    settings = load_effective_config(tmp_path)

    assert settings.sources == ()
    assert settings.index.extensions == ()
    assert settings.index.use_external_scanner is True
    assert settings.index.scanner_command == "fd"
    assert settings.search.search_in_path is False
    assert settings.display.width is None
    assert settings.data_dir == (tmp_path / ".rootdex").resolve()


def test_config_file_sources_and_sections(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "[[sources]]",
        'root = "notes"',
        'alias = "Notes"',
        "",
        "[[sources]]",
        'root = "~/work"',
        'alias = "Work"',
        "",
        "[index]",
        'extensions = ["md", "org"]',
        "use_external_scanner = false",
        'scanner_args = ["--no-ignore"]',
        "",
        "[search]",
        "search_in_path = true",
        "",
        "[display]",
        "width = 120",
    )

    settings = load_effective_config(tmp_path)

    assert [source.alias for source in settings.sources] == ["Notes", "Work"]
    assert settings.sources[0].root == os.path.abspath(tmp_path / "notes")
    assert settings.sources[1].root == os.path.abspath(os.path.expanduser("~/work"))
    assert settings.index.extensions == ("md", "org")
    assert settings.index.use_external_scanner is False
    assert settings.index.scanner_args == ("--no-ignore",)
    assert settings.search.search_in_path is True
    assert settings.display.width == 120


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "[index]",
        "use_external_scanner = false",
        "",
        "[search]",
        "search_in_path = true",
        "",
        "[display]",
        "width = 100",
    )
    overrides = CliOverrides(use_external_scanner=True, display_width=150)
    server = create_server(workspace=str(tmp_path), cli_overrides=overrides)

    response = server.handle_payload({"id": "req-merge", "method": "index.status", "params": {}})
    effective = response["result"]["effective_config"]

    assert effective["index"]["use_external_scanner"] is True
    assert effective["search"]["search_in_path"] is True
    assert effective["display"]["width"] == 150


def test_data_dir_override_has_highest_precedence(tmp_path: Path) -> None:
    custom_data_dir = tmp_path / ".custom_data"
    server = create_server(
        workspace=str(tmp_path),
        cli_overrides=CliOverrides(data_dir=custom_data_dir),
    )

    response = server.handle_payload({"id": "req-data-dir", "method": "index.status", "params": {}})
    effective = response["result"]["effective_config"]
    assert effective["data_dir"] == str(custom_data_dir.resolve())


def test_symlinked_root_is_kept_as_configured(tmp_path: Path) -> None:
    (tmp_path / "real").mkdir()
    (tmp_path / "notes").symlink_to(tmp_path / "real", target_is_directory=True)
    _write_config(tmp_path, "[[sources]]", 'root = "notes/"', 'alias = "N"')

    settings = load_effective_config(tmp_path)

    assert settings.sources[0].root == str(tmp_path.resolve() / "notes")

from __future__ import annotations

from pathlib import Path

from rootdex.commands import Commands
from rootdex.config import load_effective_config


def _symlinked_workspace(tmp_path: Path) -> Path:
    real = tmp_path / "real"
    (real / "sub").mkdir(parents=True)
    (real / "sub" / "x.md").write_text("linked\n", encoding="utf-8")
    (real / "top.md").write_text("top\n", encoding="utf-8")
    (tmp_path / "notes").symlink_to(real, target_is_directory=True)
    (tmp_path / "rootdex.toml").write_text(
        "\n".join(
            [
                "[[sources]]",
                'root = "notes"',
                'alias = "N"',
                "",
                "[index]",
                "use_external_scanner = false",
            ]
        ),
        encoding="utf-8",
    )
    return tmp_path / "notes"


def test_info_through_symlinked_root_keeps_alias(tmp_path: Path) -> None:
    notes = _symlinked_workspace(tmp_path)
    commands = Commands(load_effective_config(tmp_path), width_provider=lambda: 100)

    entry = commands.info(str(notes / "sub" / "x.md"))

    assert entry is not None
    assert entry.alias == "N"
    assert entry.relative_dir == "/sub/"
    assert entry.name == "x.md"


def test_listing_symlinked_root_resolves_every_row(tmp_path: Path) -> None:
    notes = _symlinked_workspace(tmp_path)
    commands = Commands(load_effective_config(tmp_path), width_provider=lambda: 100)

    rows = {Path(row.path).name: row for row in commands.list_rows()}

    assert set(rows) == {"x.md", "top.md"}
    assert all(row.path.startswith(str(notes)) for row in rows.values())
    assert rows["x.md"].alias.rstrip() == "N"
    assert rows["x.md"].relative_path == "/sub/"
    assert rows["top.md"].relative_path == "/"

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from pathlib import Path

from rootdex.config import CliOverrides, IndexConfig, Source
from rootdex.index import ScanResult, scan_sources
from rootdex.server import create_server


def _workspace(tmp_path: Path) -> Path:
    (tmp_path / "vault" / "daily").mkdir(parents=True)
    (tmp_path / "vault" / "readme.md").write_text("# Vault\n", encoding="utf-8")
    (tmp_path / "vault" / "daily" / "today.md").write_text("today\n", encoding="utf-8")
    (tmp_path / "vault" / "daily" / "photo.png").write_bytes(b"\x89PNG")
    (tmp_path / "rootdex.toml").write_text(
        "\n".join(
            [
                "[[sources]]",
                'root = "vault"',
                'alias = "Vault"',
                "[index]",
                'extensions = ["md"]',
                "use_external_scanner = false",
            ]
        ),
        encoding="utf-8",
    )
    return tmp_path


def test_refresh_list_find_prune_roundtrip(tmp_path: Path) -> None:
    server = create_server(workspace=str(_workspace(tmp_path)))

    refresh = server.handle_payload({"id": "r1", "method": "index.refresh", "params": {}})
    assert refresh["ok"] is True
    assert refresh["result"]["file_count"] == 2
    assert refresh["result"]["strategy"] == "walk"
    assert refresh["result"]["message"] == "Indexed 2 files using walk"
    assert refresh["warnings"] == []

    status = server.handle_payload({"id": "r2", "method": "index.status", "params": {}})
    assert status["result"]["index_status"] == "ready"
    assert status["result"]["indexed_file_count"] == 2
    assert status["result"]["source_count"] == 1

    listing = server.handle_payload({"id": "r3", "method": "index.list", "params": {"width": 100}})
    assert listing["result"]["columns"] == {"name": 50, "alias": 8, "size": 6, "date": 16}
    rows = listing["result"]["rows"]
    assert [row["relative_path"] for row in rows] == ["/", "/daily/"]
    assert all(len(row["name"]) == 50 for row in rows)

    found = server.handle_payload(
        {"id": "r4", "method": "index.find", "params": {"choice": "today.md"}}
    )
    today = tmp_path / "vault" / "daily" / "today.md"
    assert found["result"] == {"path": str(today)}

    info = server.handle_payload(
        {"id": "r5", "method": "index.info", "params": {"path": str(today)}}
    )
    assert info["result"]["entry"]["alias"] == "Vault"
    assert info["result"]["entry"]["relative_dir"] == "/daily/"

    today.unlink()
    pruned = server.handle_payload({"id": "r6", "method": "index.prune", "params": {}})
    assert pruned["result"] == {"removed": 1, "file_count": 1}

    gone = server.handle_payload(
        {"id": "r7", "method": "index.info", "params": {"path": str(today)}}
    )
    assert gone["result"] == {"entry": None}


def test_scanner_fallback_is_reported_as_warning(tmp_path: Path) -> None:
    def runner(argv: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(argv, 1, stdout="", stderr="fd: error")

    def scanner(sources: Iterable[Source], config: IndexConfig) -> ScanResult:
        return scan_sources(sources, config, which=lambda _: "/usr/bin/fd", runner=runner)

    server = create_server(
        workspace=str(_workspace(tmp_path)),
        cli_overrides=CliOverrides(use_external_scanner=True),
        scanner=scanner,
    )

    response = server.handle_payload({"id": "f1", "method": "index.refresh", "params": {}})

    assert response["ok"] is True
    assert response["result"]["strategy"] == "walk"
    assert response["result"]["fallback_reason"] == "exit_status:1"
    assert response["result"]["file_count"] == 2
    assert response["warnings"] == ["External scanner unavailable (exit_status:1); used walk."]


def test_candidates_lazily_build_index(tmp_path: Path) -> None:
    server = create_server(workspace=str(_workspace(tmp_path)))

    response = server.handle_payload(
        {"id": "c1", "method": "index.candidates", "params": {"width": 80}}
    )

    assert response["ok"] is True
    assert response["result"]["count"] == 2
    labels = [candidate["display_label"].rstrip() for candidate in response["result"]["candidates"]]
    assert labels == ["readme.md", "today.md"]
    assert server.commands.status().index_status == "ready"

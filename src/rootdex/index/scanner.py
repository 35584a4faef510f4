"""File enumeration with an external fast scanner and an in-process fallback."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from rootdex.config import IndexConfig, Source
from rootdex.index.filters import extension_predicate, scanner_extension_args
from rootdex.index.models import ScanResult
from rootdex.index.resolver import expand_path

FAST_SCANNER_FLAGS = ("--hidden", "--type", "f", "--color", "never", "--absolute-path")
MATCH_ALL_PATTERN = "."

STRATEGY_FAST = "fd"
STRATEGY_WALK = "walk"

Runner = Callable[..., subprocess.CompletedProcess[str]]
Which = Callable[[str], str | None]


@dataclass(slots=True, frozen=True)
class FastScanFailure:
    """Reason the external scanner produced no usable result."""

    reason: str


def build_scanner_command(
    executable: str,
    roots: Sequence[str],
    extensions: Iterable[str] | None,
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Assemble the scanner argv: fixed flags, extra flags, extensions, pattern, roots."""
    return [
        executable,
        *FAST_SCANNER_FLAGS,
        *extra_args,
        *scanner_extension_args(extensions),
        MATCH_ALL_PATTERN,
        *roots,
    ]


def fast_scan(
    executable: str,
    roots: Sequence[str],
    extensions: Iterable[str] | None,
    extra_args: Sequence[str] = (),
    runner: Runner = subprocess.run,
) -> tuple[str, ...] | FastScanFailure:
    """Run the external scanner once over every root.

    Failures are returned as FastScanFailure values; nothing is raised.
    """
    if not roots:
        return ()
    argv = build_scanner_command(executable, roots, extensions, extra_args)
    try:
        completed = runner(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
        )
    except OSError:
        return FastScanFailure(reason="os_error")
    if completed.returncode != 0:
        return FastScanFailure(reason=f"exit_status:{completed.returncode}")
    paths: list[str] = []
    for line in completed.stdout.splitlines():
        if not line.strip():
            continue
        paths.append(os.path.abspath(line))
    return tuple(paths)


def walk_sources(roots: Iterable[str], extensions: Iterable[str] | None) -> tuple[str, ...]:
    """Enumerate matching regular files root by root, depth first in name order."""
    matches = extension_predicate(extensions)
    output: list[str] = []
    for root in roots:
        if not os.path.isdir(root):
            continue
        output.extend(_walk_root(root, matches))
    return tuple(output)


def _walk_root(root: str, matches: Callable[[str], bool]) -> list[str]:
    found: list[str] = []
    stack: list[str] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        files: list[str] = []
        subdirs: list[str] = []
        for entry in ordered_entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                continue
            if matches(entry.name):
                files.append(entry.path)
        found.extend(files)
        stack.extend(reversed(subdirs))
    return found


def scan_roots(sources: Iterable[Source]) -> list[str]:
    """Return unique absolute roots that currently exist as directories."""
    roots: list[str] = []
    for source in sources:
        root = expand_path(source.root)
        if root in roots or not os.path.isdir(root):
            continue
        roots.append(root)
    return roots


def scan_sources(
    sources: Iterable[Source],
    config: IndexConfig,
    which: Which = shutil.which,
    runner: Runner = subprocess.run,
) -> ScanResult:
    """Enumerate files with the fast scanner when usable, else the fallback walker."""
    roots = scan_roots(sources)
    fallback_reason: str | None
    if not config.use_external_scanner:
        fallback_reason = "disabled"
    else:
        executable = which(config.scanner_command)
        if executable is None:
            fallback_reason = "not_found"
        else:
            outcome = fast_scan(
                executable,
                roots,
                config.extensions,
                extra_args=config.scanner_args,
                runner=runner,
            )
            if not isinstance(outcome, FastScanFailure):
                return ScanResult(paths=_dedupe(outcome), strategy=STRATEGY_FAST)
            fallback_reason = outcome.reason
    paths = walk_sources(roots, config.extensions)
    return ScanResult(
        paths=_dedupe(paths),
        strategy=STRATEGY_WALK,
        fallback_reason=fallback_reason,
    )


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(paths))

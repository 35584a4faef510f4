"""Owning-root resolution with longest-prefix-wins semantics."""

from __future__ import annotations

import os
from collections.abc import Iterable

from rootdex.config import Source


def expand_path(path: str) -> str:
    """Expand ``~`` and return a normalized absolute path."""
    return os.path.abspath(os.path.expanduser(path))


def as_directory(path: str) -> str:
    """Return the absolute form of ``path`` terminated by a separator."""
    expanded = expand_path(path)
    if expanded.endswith(os.sep):
        return expanded
    return expanded + os.sep


def abbreviate_directory(path: str) -> str:
    """Abbreviate a directory for display, using ``~`` for the home directory."""
    directory = as_directory(path)
    home = as_directory("~")
    if directory.startswith(home):
        directory = "~" + os.sep + directory[len(home) :]
    return _display_separators(directory)


def rank_sources(sources: Iterable[Source]) -> list[tuple[str, Source]]:
    """Pair each source with its normalized root, most specific root first."""
    ranked = [(as_directory(source.root), source) for source in sources]
    ranked.sort(key=lambda item: len(item[0]), reverse=True)
    return ranked


def resolve(absolute_path: str, sources: Iterable[Source]) -> tuple[str, str]:
    """Return ``(alias, relative_dir)`` for a file path.

    Nested roots shadow their ancestors. Paths outside every root get an empty
    alias and their abbreviated containing directory.
    """
    path = expand_path(absolute_path)
    for root, source in rank_sources(sources):
        if not path.startswith(root):
            continue
        relative = path[len(root) :]
        parent = os.path.dirname(relative)
        if not parent:
            return source.alias, "/"
        return source.alias, "/" + _display_separators(parent) + "/"
    return "", abbreviate_directory(os.path.dirname(path))


def _display_separators(path: str) -> str:
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")

"""Extension filtering shared by the walker and the external scanner."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable


def normalize_extensions(extensions: Iterable[str] | None) -> tuple[str, ...]:
    """Lowercase, strip leading dots, and dedupe while keeping order."""
    if not extensions:
        return ()
    output: list[str] = []
    for raw in extensions:
        value = raw.strip().lstrip(".").lower()
        if not value or value in output:
            continue
        output.append(value)
    return tuple(output)


def extension_pattern(extensions: Iterable[str] | None) -> re.Pattern[str] | None:
    """Compile a case-insensitive pattern anchored at the end of the name.

    Returns None when no extensions are configured, meaning every file matches.
    """
    normalized = normalize_extensions(extensions)
    if not normalized:
        return None
    alternatives = "|".join(re.escape(ext) for ext in normalized)
    return re.compile(rf"\.(?:{alternatives})\Z", re.IGNORECASE)


def extension_predicate(extensions: Iterable[str] | None) -> Callable[[str], bool]:
    """Return a filename predicate for the configured extensions."""
    pattern = extension_pattern(extensions)
    if pattern is None:
        return lambda _name: True

    def matches(filename: str) -> bool:
        return pattern.search(filename) is not None

    return matches


def scanner_extension_args(extensions: Iterable[str] | None) -> list[str]:
    """Translate extensions into external scanner flags, one pair per extension."""
    args: list[str] = []
    for ext in normalize_extensions(extensions):
        args.extend(["--extension", ext])
    return args

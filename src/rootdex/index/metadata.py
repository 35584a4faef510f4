"""Per-file metadata extraction for display and search."""

from __future__ import annotations

import os
from collections.abc import Iterable
from datetime import datetime

from rootdex.config import Source
from rootdex.index.models import IndexEntry
from rootdex.index.resolver import resolve

KIB = 1024
MIB = 1024 * 1024
MTIME_FORMAT = "%Y-%m-%dT%H:%M"


def format_size(size: int) -> str:
    """Bucket a byte count into ``123``, ``1.5k`` or ``2.0M``."""
    if size < KIB:
        return str(size)
    if size < MIB:
        return f"{size / KIB:.1f}k"
    return f"{size / MIB:.1f}M"


def format_mtime(timestamp: float) -> str:
    """Format a POSIX timestamp as local ISO time to the minute."""
    return datetime.fromtimestamp(timestamp).strftime(MTIME_FORMAT)


def file_info(path: str, sources: Iterable[Source]) -> IndexEntry | None:
    """Stat ``path`` and build its entry, or None when it cannot be stat'ed."""
    try:
        stat = os.stat(path)
    except OSError:
        return None
    alias, relative_dir = resolve(path, sources)
    return IndexEntry(
        absolute_path=path,
        name=os.path.basename(path),
        alias=alias,
        relative_dir=relative_dir,
        size_bytes=stat.st_size,
        size_display=format_size(stat.st_size),
        mtime_display=format_mtime(stat.st_mtime),
    )

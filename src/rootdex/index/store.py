"""In-memory index store with wholesale rebuilds and stale-entry pruning."""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from rootdex.config import IndexConfig, Source
from rootdex.index.models import ScanResult
from rootdex.index.scanner import scan_sources

Scanner = Callable[[Iterable[Source], IndexConfig], ScanResult]


@dataclass(slots=True, frozen=True)
class IndexStatus:
    """Current index status snapshot."""

    index_status: str
    last_refresh_timestamp: str | None
    indexed_file_count: int
    last_strategy: str | None


class IndexStore:
    """Holds the indexed absolute paths and the time they were enumerated.

    The store starts empty and is only ever replaced wholesale by ``refresh``;
    ``prune`` can drop entries but never adds any.
    """

    def __init__(
        self,
        sources: Iterable[Source],
        index_config: IndexConfig,
        scanner: Scanner = scan_sources,
    ) -> None:
        self._sources = tuple(sources)
        self._index_config = index_config
        self._scanner = scanner
        self._entries: tuple[str, ...] = ()
        self._built_at: datetime | None = None
        self._last_strategy: str | None = None

    @property
    def sources(self) -> tuple[Source, ...]:
        """Return configured sources."""
        return self._sources

    @property
    def entries(self) -> tuple[str, ...]:
        """Return indexed absolute paths in scan order."""
        return self._entries

    @property
    def built_at(self) -> datetime | None:
        """Return the time of the last refresh, if any."""
        return self._built_at

    @property
    def is_built(self) -> bool:
        return self._built_at is not None

    def status(self) -> IndexStatus:
        """Return a status snapshot."""
        if self._built_at is None:
            return IndexStatus(
                index_status="not_indexed",
                last_refresh_timestamp=None,
                indexed_file_count=0,
                last_strategy=None,
            )
        return IndexStatus(
            index_status="ready",
            last_refresh_timestamp=_iso(self._built_at),
            indexed_file_count=len(self._entries),
            last_strategy=self._last_strategy,
        )

    def refresh(self) -> dict[str, object]:
        """Rescan every source and replace the entry set."""
        start = time.perf_counter()
        scan_started = time.perf_counter()
        result = self._scanner(self._sources, self._index_config)
        scan_seconds = time.perf_counter() - scan_started
        entries = tuple(dict.fromkeys(os.path.abspath(path) for path in result.paths))
        self._entries = entries
        self._built_at = datetime.now(tz=UTC)
        self._last_strategy = result.strategy
        return {
            "file_count": len(entries),
            "strategy": result.strategy,
            "fallback_reason": result.fallback_reason,
            "timestamp": _iso(self._built_at),
            "duration_ms": int((time.perf_counter() - start) * 1000),
            "refresh_profile": {"scan_seconds": scan_seconds},
        }

    def ensure(self) -> bool:
        """Build the index on first use. Returns True when a refresh ran."""
        if self._built_at is not None:
            return False
        self.refresh()
        return True

    def prune(self) -> dict[str, object]:
        """Drop entries that no longer stat; does not rescan or touch built_at."""
        kept: list[str] = []
        for path in self._entries:
            try:
                os.stat(path)
            except OSError:
                continue
            kept.append(path)
        removed = len(self._entries) - len(kept)
        self._entries = tuple(kept)
        return {"removed": removed, "file_count": len(kept)}


def _iso(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

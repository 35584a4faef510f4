"""In-process command surface: refresh, find, list, prune."""

from __future__ import annotations

from collections.abc import Callable

from rootdex.config import Settings
from rootdex.display import (
    ColumnWidths,
    build_candidates,
    build_rows,
    compute_widths,
    select_candidate,
    terminal_width,
)
from rootdex.index import (
    IndexEntry,
    IndexStatus,
    IndexStore,
    SearchCandidate,
    TableRow,
    file_info,
)
from rootdex.index.resolver import expand_path

Selector = Callable[[list[SearchCandidate]], SearchCandidate | str | None]


class Commands:
    """Owns one index store and renders it for selection and table consumers."""

    def __init__(
        self,
        settings: Settings,
        store: IndexStore | None = None,
        width_provider: Callable[[], int] = terminal_width,
    ) -> None:
        self._settings = settings
        self._store = store or IndexStore(settings.sources, settings.index)
        self._width_provider = width_provider

    @property
    def store(self) -> IndexStore:
        return self._store

    def status(self) -> IndexStatus:
        return self._store.status()

    def refresh(self, silent: bool = False) -> dict[str, object]:
        """Rebuild the index; unless silent, include a one-line summary message."""
        result = self._store.refresh()
        if not silent:
            result["message"] = refresh_message(result)
        return result

    def prune(self) -> dict[str, object]:
        return self._store.prune()

    def info(self, path: str) -> IndexEntry | None:
        return file_info(expand_path(path), self._settings.sources)

    def widths(self, width: int | None = None) -> ColumnWidths:
        """Column widths for an explicit, configured, or terminal viewport width."""
        available = width or self._settings.display.width or self._width_provider()
        aliases = [source.alias for source in self._settings.sources]
        return compute_widths(aliases, available)

    def candidates(self, width: int | None = None) -> list[SearchCandidate]:
        """Ensure the index and build search candidates for it."""
        self._store.ensure()
        return build_candidates(
            self._store.entries,
            self._settings.sources,
            self.widths(width),
            search_in_path=self._settings.search.search_in_path,
        )

    def find(self, select: Selector, width: int | None = None) -> str | None:
        """Present candidates to ``select`` and resolve its choice to a path."""
        candidates = self.candidates(width)
        chosen = select(candidates)
        if chosen is None:
            return None
        if isinstance(chosen, SearchCandidate):
            return chosen.source_path
        return select_candidate(candidates, chosen)

    def list_rows(self, width: int | None = None) -> list[TableRow]:
        """Ensure the index and build table rows for it."""
        self._store.ensure()
        return build_rows(self._store.entries, self._settings.sources, self.widths(width))


def refresh_message(result: dict[str, object]) -> str:
    """Summarize a refresh result for the user."""
    message = f"Indexed {result['file_count']} files using {result['strategy']}"
    reason = result.get("fallback_reason")
    if reason is not None and reason != "disabled":
        message += f" (external scanner unavailable: {reason})"
    return message

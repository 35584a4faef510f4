"""Search candidates and table rows built from indexed paths."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from rootdex.config import Source
from rootdex.display.layout import COLUMN_SEPARATOR, ColumnWidths, fit
from rootdex.index.metadata import file_info
from rootdex.index.models import IndexEntry, SearchCandidate, TableRow


def iter_entries(paths: Iterable[str], sources: Sequence[Source]) -> Iterator[IndexEntry]:
    """Yield entries for paths that still stat, skipping the rest."""
    for path in paths:
        entry = file_info(path, sources)
        if entry is None:
            continue
        yield entry


def search_key(entry: IndexEntry, search_in_path: bool) -> str:
    """Return the string the fuzzy matcher should search."""
    if search_in_path:
        return f"{entry.alias}{entry.relative_dir}{entry.name}"
    return entry.name


def annotation(entry: IndexEntry, widths: ColumnWidths) -> str:
    """Join padded alias, size, date and the relative directory."""
    return COLUMN_SEPARATOR.join(
        [
            fit(entry.alias, widths.alias),
            fit(entry.size_display, widths.size, align="right"),
            fit(entry.mtime_display, widths.date),
            entry.relative_dir,
        ]
    )


def build_candidates(
    paths: Iterable[str],
    sources: Sequence[Source],
    widths: ColumnWidths,
    search_in_path: bool = False,
) -> list[SearchCandidate]:
    """Build one candidate per indexed path that still exists."""
    return [
        SearchCandidate(
            display_label=fit(entry.name, widths.name),
            search_key=search_key(entry, search_in_path),
            annotation=annotation(entry, widths),
            source_path=entry.absolute_path,
        )
        for entry in iter_entries(paths, sources)
    ]


def build_rows(
    paths: Iterable[str],
    sources: Sequence[Source],
    widths: ColumnWidths,
) -> list[TableRow]:
    """Build fixed-width table rows keyed by absolute path."""
    return [
        TableRow(
            path=entry.absolute_path,
            name=fit(entry.name, widths.name),
            alias=fit(entry.alias, widths.alias),
            size=fit(entry.size_display, widths.size, align="right"),
            date=fit(entry.mtime_display, widths.date),
            relative_path=entry.relative_dir,
        )
        for entry in iter_entries(paths, sources)
    ]


def select_candidate(candidates: Iterable[SearchCandidate], choice: str) -> str | None:
    """Map a consumer's choice back to an absolute path.

    A choice may be the source path, the search key, or the display label with
    its padding dropped. Names and aliases are not unique, so the first
    candidate in order wins.
    """
    wanted = choice.rstrip()
    if not wanted:
        return None
    ordered = list(candidates)
    for candidate in ordered:
        if candidate.source_path == wanted:
            return candidate.source_path
    for candidate in ordered:
        if candidate.search_key == wanted or candidate.display_label.rstrip() == wanted:
            return candidate.source_path
    return None

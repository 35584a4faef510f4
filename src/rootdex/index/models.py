"""Typed models for indexing state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class IndexEntry:
    """Materialized view of one indexed file at lookup time."""

    absolute_path: str
    name: str
    alias: str
    relative_dir: str
    size_bytes: int
    size_display: str
    mtime_display: str


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Enumerated paths plus the strategy that produced them."""

    paths: tuple[str, ...]
    strategy: str
    fallback_reason: str | None = None


@dataclass(slots=True, frozen=True)
class SearchCandidate:
    """Searchable, annotated unit handed to a selection consumer."""

    display_label: str
    search_key: str
    annotation: str
    source_path: str


@dataclass(slots=True, frozen=True)
class TableRow:
    """Fixed-width row for a tabular display, keyed by absolute path."""

    path: str
    name: str
    alias: str
    size: str
    date: str
    relative_path: str

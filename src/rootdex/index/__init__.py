"""Indexing package: enumeration, resolution, metadata, and the index store."""

from rootdex.config import Source

from .filters import (
    extension_pattern,
    extension_predicate,
    normalize_extensions,
    scanner_extension_args,
)
from .metadata import file_info, format_mtime, format_size
from .models import IndexEntry, ScanResult, SearchCandidate, TableRow
from .resolver import resolve
from .scanner import FastScanFailure, fast_scan, scan_sources, walk_sources
from .store import IndexStatus, IndexStore

__all__ = [
    "FastScanFailure",
    "IndexEntry",
    "IndexStatus",
    "IndexStore",
    "ScanResult",
    "SearchCandidate",
    "Source",
    "TableRow",
    "extension_pattern",
    "extension_predicate",
    "fast_scan",
    "file_info",
    "format_mtime",
    "format_size",
    "normalize_extensions",
    "resolve",
    "scan_sources",
    "scanner_extension_args",
    "walk_sources",
]

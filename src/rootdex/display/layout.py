"""Column sizing and display-width-aware padding."""

from __future__ import annotations

import shutil
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass

COLUMN_SEPARATOR = "  "
GAP_ALLOWANCE = 4 * len(COLUMN_SEPARATOR)
NAME_RESERVE = 10
DATE_WIDTH = 16
SIZE_WIDTH = 6
MIN_ALIAS_WIDTH = 8
MAX_ALIAS_WIDTH = 18
MIN_NAME_WIDTH = 30
DEFAULT_TERMINAL_WIDTH = 80


@dataclass(slots=True, frozen=True)
class ColumnWidths:
    """Display widths of the name, alias, size and date columns."""

    name: int
    alias: int
    size: int = SIZE_WIDTH
    date: int = DATE_WIDTH


def char_width(char: str) -> int:
    """Terminal cell width of a single character."""
    if unicodedata.category(char) in {"Cc", "Cf", "Mn", "Me"}:
        return 0
    if unicodedata.east_asian_width(char) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Terminal cell width of ``text``."""
    return sum(char_width(char) for char in text)


def truncate(text: str, width: int) -> str:
    """Cut ``text`` so it occupies at most ``width`` cells."""
    if width <= 0:
        return ""
    used = 0
    output: list[str] = []
    for char in text:
        cells = char_width(char)
        if used + cells > width:
            break
        output.append(char)
        used += cells
    return "".join(output)


def fit(text: str, width: int, align: str = "left") -> str:
    """Truncate or space-pad ``text`` to exactly ``width`` cells."""
    clipped = truncate(text, width)
    padding = " " * (width - display_width(clipped))
    if align == "right":
        return padding + clipped
    return clipped + padding


def compute_widths(aliases: Iterable[str], available_width: int) -> ColumnWidths:
    """Size the columns for a viewport of ``available_width`` cells.

    The name column never exceeds half the viewport and, on viewports of at
    least twice ``MIN_NAME_WIDTH``, never drops below it.
    """
    longest = max((display_width(alias) for alias in aliases), default=0)
    alias = max(MIN_ALIAS_WIDTH, min(MAX_ALIAS_WIDTH, longest))
    fixed = alias + SIZE_WIDTH + DATE_WIDTH
    remaining = available_width - fixed - GAP_ALLOWANCE - NAME_RESERVE
    name = min(available_width // 2, max(MIN_NAME_WIDTH, remaining))
    return ColumnWidths(name=name, alias=alias)


def terminal_width(default: int = DEFAULT_TERMINAL_WIDTH) -> int:
    """Return the current terminal column count."""
    return shutil.get_terminal_size((default, 24)).columns

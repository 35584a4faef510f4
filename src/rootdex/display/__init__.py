"""Layout and candidate rendering for external display surfaces."""

from .candidates import build_candidates, build_rows, select_candidate
from .layout import ColumnWidths, compute_widths, display_width, fit, terminal_width

__all__ = [
    "ColumnWidths",
    "build_candidates",
    "build_rows",
    "compute_widths",
    "display_width",
    "fit",
    "select_candidate",
    "terminal_width",
]

from __future__ import annotations

from rootdex.display import compute_widths, display_width, fit
from rootdex.display.layout import truncate


def test_width_bounds_hold_for_wide_viewports() -> None:
    alias_sets = [[], ["A"], ["Notes", "Work"], ["a-very-long-alias-name-indeed"], ["漢字漢字漢字"]]
    for aliases in alias_sets:
        for width in range(80, 401):
            widths = compute_widths(aliases, width)
            assert widths.name <= width // 2
            assert widths.name >= 30
            assert 8 <= widths.alias <= 18
            assert widths.size == 6
            assert widths.date == 16


def test_alias_width_clamps_to_longest_alias() -> None:
    assert compute_widths([], 120).alias == 8
    assert compute_widths(["abc"], 120).alias == 8
    assert compute_widths(["twelve-chars"], 120).alias == 12
    assert compute_widths(["x" * 40], 120).alias == 18


def test_alias_width_counts_wide_characters() -> None:
    assert compute_widths(["漢字漢字漢字"], 120).alias == 12


def test_name_width_examples() -> None:
    assert compute_widths([], 80).name == 32
    assert compute_widths([], 120).name == 60
    assert compute_widths([], 200).name == 100
    assert compute_widths(["x" * 18], 100).name == 42


def test_display_width_counts_wide_and_combining_characters() -> None:
    assert display_width("abc") == 3
    assert display_width("漢字") == 4
    assert display_width("é") == 1
    assert display_width("") == 0


def test_fit_pads_left_aligned_by_default() -> None:
    assert fit("abc", 6) == "abc   "
    assert fit("", 3) == "   "


def test_fit_pads_right_aligned() -> None:
    assert fit("2.0k", 6, align="right") == "  2.0k"


def test_fit_truncates_to_display_width() -> None:
    assert fit("abcdefgh", 5) == "abcde"
    assert fit("漢字漢字", 5) == "漢字 "
    assert display_width(fit("漢字漢字", 5)) == 5


def test_truncate_handles_non_positive_width() -> None:
    assert truncate("abc", 0) == ""
    assert truncate("abc", -3) == ""

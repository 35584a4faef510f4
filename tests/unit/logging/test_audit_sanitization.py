from __future__ import annotations

from rootdex.logging import sanitize_arguments


def test_free_text_is_logged_by_length_only() -> None:
    sanitized = sanitize_arguments({"choice": "private/diary.md", "path": "/notes/a.md"})

    assert sanitized == {
        "choice_length": 16,
        "choice_present": True,
        "path": "/notes/a.md",
    }


def test_known_scalars_are_kept() -> None:
    sanitized = sanitize_arguments({"silent": False, "width": 120, "strategy": "fd"})

    assert sanitized == {"silent": False, "strategy": "fd", "width": 120}


def test_collections_are_summarized() -> None:
    sanitized = sanitize_arguments({"roots": ["/a", "/b"], "options": {"z": 1, "a": 2}})

    assert sanitized == {
        "options_keys": ["a", "z"],
        "options_type": "dict",
        "roots_length": 2,
        "roots_type": "list",
    }


def test_unknown_strings_are_not_logged_verbatim() -> None:
    sanitized = sanitize_arguments({"token": "secret-value"})

    assert sanitized == {"token_length": 12, "token_present": True}

"""Regex escaping for literal macro search strings."""

from __future__ import annotations

# Backslash must stay first: every later replacement inserts a backslash
# that must not itself be escaped again.
REGEX_META: tuple[str, ...] = (
    "\\",
    "|",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    "^",
    "$",
    "*",
    "+",
    "?",
    ".",
)


def escape_regex(text: str) -> str:
    """Return a pattern that matches *text* literally.

    Args:
        text: Literal search text from a macro table.

    Returns:
        *text* with every character in ``REGEX_META`` prefixed by a backslash.
    """
    for meta in REGEX_META:
        text = text.replace(meta, "\\" + meta)
    return text

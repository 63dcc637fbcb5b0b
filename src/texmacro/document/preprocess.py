"""Text normalisation before the markdown reader sees the document.

Two passes, in order:

1. ``strip_comments`` drops ``-- `` line comments and blanks
   whitespace-only lines.
2. ``add_pars`` makes every paragraph break explicit, so Pandoc cannot
   merge paragraphs that the author separated (e.g. around raw LaTeX).

This is a pre-processor that runs before Pandoc conversion.
"""

from __future__ import annotations

import re

# A line comment: optional indent, two dashes, then whitespace
_COMMENT_LINE = re.compile(r"^\s*--\s")
_BLANK_LINE = re.compile(r"^\s*$")

# Empty HTML comments fence the \par so the reader keeps it as its own block
PARAGRAPH_BREAK: tuple[str, ...] = ("\n<!-- -->", "\\par", "<!-- -->\n")


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only; a single trailing newline adds no empty line.

    Unlike ``str.splitlines`` this leaves form feeds, ``\\u2028`` and other
    Unicode line separators inside their line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def strip_comments(text: str) -> str:
    """Remove ``-- `` comment lines and blank out whitespace-only lines.

    A ``--`` anywhere but at the start of a line (after optional
    indentation) is ordinary text and is left alone.
    """
    kept = []
    for line in split_lines(text):
        if _COMMENT_LINE.match(line):
            continue
        kept.append("" if _BLANK_LINE.match(line) else line)
    return "\n".join(kept)


def _split_paragraphs(lines: list[str]) -> list[list[str]]:
    """Split on every empty line; consecutive empties yield empty groups."""
    groups: list[list[str]] = [[]]
    for line in lines:
        if line == "":
            groups.append([])
        else:
            groups[-1].append(line)
    return groups


def add_pars(text: str) -> str:
    """Insert an explicit ``\\par`` between every pair of paragraphs.

    Args:
        text: Comment-stripped document text.

    Returns:
        Text where each blank line has been replaced by the
        ``PARAGRAPH_BREAK`` marker lines.
    """
    out: list[str] = []
    for index, group in enumerate(_split_paragraphs(split_lines(text))):
        if index:
            out.extend(PARAGRAPH_BREAK)
        out.extend(group)
    return "\n".join(out)


def preprocess(text: str) -> str:
    """Run the full pre-processing chain: comments first, then paragraphs."""
    return add_pars(strip_comments(text))

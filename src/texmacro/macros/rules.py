"""Macro rule model: one (search, replace, mode) substitution.

Rules are immutable and compile their pattern once at construction, so a
macro list can be applied to any number of text fragments without
recompiling.
"""

from __future__ import annotations

import dataclasses
import re
from typing import TypeAlias
from enum import StrEnum

from texmacro.macros.escape import escape_regex

# Replacement text meaning "replace with the search text itself"
IDENTITY_REPLACEMENT = "_"

_WORD_CHAR = re.compile(r"\w")


class MatchMode(StrEnum):
    """Where a macro's search text may match."""

    WORD = "Word"  # "an" will not match in "Dan" or "an-made"
    ANYWHERE = "Anywhere"  # "+" will match in "a+b"


def is_word_search(search: str) -> bool:
    """True if *search* starts and ends with a word character.

    ``\\b`` only sits next to a word character, so a Word rule such as
    ``<=`` would match in ``a<=b`` and never in ``a <= b``.
    """
    return bool(_WORD_CHAR.match(search[:1]) and _WORD_CHAR.match(search[-1:]))


def compile_search(search: str, mode: MatchMode) -> re.Pattern[str]:
    r"""Compile the pattern for a macro search string.

    Word mode requires a standard word boundary on both sides, and the
    character on each side must not be a hyphen (start/end of line also
    counts).  The bounding characters are captured as groups 1 and 2 so they
    can be re-emitted around the replacement.

    Raises:
        ValueError: If a Word-mode search does not start and end with a
            word character.
    """
    escaped = escape_regex(search)
    if mode is MatchMode.WORD:
        if not is_word_search(search):
            msg = (
                "Word mode needs search text that starts and ends with a "
                f"letter, digit or underscore, got {search!r}"
            )
            raise ValueError(msg)
        return re.compile(rf"(^|[^\n-])\b{escaped}\b([^\n-]|$)", re.MULTILINE)
    return re.compile(escaped)


@dataclasses.dataclass(frozen=True)
class MacroRule:
    """A single macro substitution.

    Attributes:
        search: Literal text to look for.
        replace: Text inserted in its place (LaTeX, inserted verbatim).
        mode: Word or Anywhere matching.
        pattern: Compiled search pattern, derived from ``search`` and ``mode``.
    """

    search: str
    replace: str
    mode: MatchMode = MatchMode.ANYWHERE
    pattern: re.Pattern[str] = dataclasses.field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        mode = MatchMode(self.mode)
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "pattern", compile_search(self.search, mode))

    def substitute(self, text: str) -> str:
        """Replace every match of this rule in *text*.

        The replacement is padded with a single space on each side.  In
        Word mode the captured boundary characters sit between the padding
        and the replacement.  Replacement text is inserted literally: a
        callable is passed to ``re.sub`` so backslashes in LaTeX are never
        read as group references.
        """
        if self.mode is MatchMode.WORD:
            return self.pattern.sub(
                lambda m: f" {m.group(1)}{self.replace}{m.group(2)} ", text
            )
        return self.pattern.sub(lambda _m: f" {self.replace} ", text)


# Ordered, immutable for the duration of a run
MacroList: TypeAlias = tuple[MacroRule, ...]

"""LaTeX command builders: NoEscape, escape_latex, latex_cmd.

``latex_cmd("hspace", NoEscape("4em"))`` builds ``\\hspace{4em}`` without any
``{{`` brace juggling at the call site.  Arguments are escaped unless they are
marked ``NoEscape``, so macro replacements (which are author-written LaTeX)
must always be passed as ``NoEscape``.
"""

from __future__ import annotations

__all__ = ["NoEscape", "escape_latex", "latex_cmd"]

_LATEX_SPECIALS: dict[str, str] = {
    "\\": r"\textbackslash{}",
    "#": r"\#",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


class NoEscape(str):
    """Mark a string as trusted LaTeX that should not be escaped."""


def escape_latex(text: str) -> NoEscape:
    """Escape LaTeX special characters in *text*.

    ``NoEscape`` input is returned unchanged.  Replacement is done
    character by character so ``\\`` -> ``\\textbackslash{}`` does not
    then have its braces escaped.
    """
    if isinstance(text, NoEscape):
        return text
    return NoEscape("".join(_LATEX_SPECIALS.get(ch, ch) for ch in text))


def latex_cmd(name: str, *args: str | NoEscape) -> NoEscape:
    r"""Build a LaTeX command ``\name{arg1}{arg2}...``."""
    parts: list[str] = [f"\\{name}"]
    for arg in args:
        parts.append(f"{{{escape_latex(arg)}}}")
    return NoEscape("".join(parts))

"""Alignment environments from plain-text code blocks.

``align`` blocks are column layouts: cells separated by two or more spaces
become ``alignat*`` columns.  ``indent`` blocks keep their leading
indentation as ``\\hspace`` inside ``align*``.  Both are typeset in
``\\small``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from texmacro.document.preprocess import split_lines
from texmacro.document.tree import raw_block
from texmacro.latex_render import NoEscape, latex_cmd
from texmacro.macros.engine import apply_macros

if TYPE_CHECKING:
    from texmacro.document.tree import Node
    from texmacro.macros.rules import MacroList

# Cells are separated by runs of at least this many spaces
CELL_SEPARATOR = "  "
LINE_END = "\\\\"


def add_align_endings(lines: list[str]) -> list[str]:
    r"""Terminate every line except the last with ``\\``."""
    return [f"{line} {LINE_END}" for line in lines[:-1]] + lines[-1:]


def _join_cells(cells: list[str]) -> str:
    """Join cells: ``&`` after the first, ``&&`` between every later pair."""
    if not cells:
        return ""
    parts = [cells[0]]
    for index, cell in enumerate(cells[1:]):
        parts.append("&" if index == 0 else "&&")
        parts.append(cell)
    return " ".join(parts)


def align_line(line: str, macros: MacroList) -> tuple[int, str]:
    """Format one ``align`` line.

    Returns:
        ``(column_count, latex_line)`` for the line.
    """
    cells = [cell.strip() for cell in line.strip().split(CELL_SEPARATOR)]
    cells = [cell for cell in cells if cell]
    return len(cells), _join_cells([apply_macros(macros, cell) for cell in cells])


def align_lines(lines: list[str], macros: MacroList) -> tuple[int, list[str]]:
    """Format all lines of an ``align`` block.

    Returns:
        The widest line's column count, and the terminated LaTeX lines.
    """
    formatted = [align_line(line, macros) for line in lines]
    columns = max((count for count, _ in formatted), default=0)
    return columns, add_align_endings([text for _, text in formatted])


def align_block(text: str, macros: MacroList) -> Node:
    """Render an ``align`` code block as a ``alignat*`` raw LaTeX block."""
    columns, lines = align_lines(split_lines(text), macros)
    begin = latex_cmd("begin", "alignat*", str(columns))
    return raw_block(
        "\n".join(
            [
                f"\\small{begin}",
                "\n".join(lines),
                "\\end{alignat*}\\normalsize",
            ]
        )
    )


def indent_line(line: str, macros: MacroList) -> str:
    """Anchor a line at ``\\hspace{<n>em}`` for its ``n`` leading spaces."""
    body = line.lstrip(" ")
    indent = len(line) - len(body)
    anchor = latex_cmd("hspace", NoEscape(f"{indent}em"))
    return f"&{anchor} {apply_macros(macros, body)}"


def indent_block(text: str, macros: MacroList) -> Node:
    """Render an ``indent`` code block as an ``align*`` raw LaTeX block."""
    lines = [indent_line(line, macros) for line in split_lines(text)]
    return raw_block(
        "\n".join(
            [
                "\\small\\begin{align*}",
                "\n".join(add_align_endings(lines)),
                "\\end{align*}\\normalsize",
            ]
        )
    )

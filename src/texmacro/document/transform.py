"""Post-processing of the parsed document tree.

Code blocks and inline code carry a single class that selects how they are
typeset:

==============  ===========================================================
Block tag       Result
==============  ===========================================================
``verb*``       ``verbatim`` environment around the macro-substituted text
``rawmacro*``   macro-substituted text, as raw LaTeX
``raw*``        text unchanged, as raw LaTeX
``align*``      ``alignat*`` environment (see ``align.align_block``)
``indent*``     ``align*`` environment (see ``align.indent_block``)
==============  ===========================================================

Inline code tagged ``raw*`` passes through as raw LaTeX; all other inline
code becomes inline math.  The four passes run in a fixed order so that
anything already turned into raw LaTeX is never substituted or wrapped again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from texmacro.document.align import align_block, indent_block
from texmacro.document.tree import (
    code_class,
    code_text,
    raw_block,
    raw_inline,
    walk,
)
from texmacro.macros.engine import apply_macros

if TYPE_CHECKING:
    from texmacro.document.tree import Node
    from texmacro.macros.rules import MacroList

logger = logging.getLogger(__name__)


def walk_blocks_raw(doc: Any, macros: MacroList) -> Any:
    """Turn ``verb``, ``rawmacro`` and ``raw`` code blocks into raw LaTeX."""

    def rewrite(node: Node) -> Node:
        if node["t"] != "CodeBlock":
            return node
        tag = code_class(node)
        if tag is None:
            return node
        text = code_text(node)
        if tag.startswith("verb"):
            return raw_block(
                "\n".join(
                    [
                        "\\begin{verbatim}",
                        apply_macros(macros, text),
                        "\\end{verbatim}",
                    ]
                )
            )
        # rawmacro must be tested before its prefix raw
        if tag.startswith("rawmacro"):
            return raw_block(apply_macros(macros, text))
        if tag.startswith("raw"):
            return raw_block(text)
        return node

    return walk(doc, rewrite)


def walk_inline_raw(doc: Any) -> Any:
    """Pass ``raw`` inline code straight through as raw LaTeX."""

    def rewrite(node: Node) -> Node:
        if node["t"] != "Code":
            return node
        tag = code_class(node)
        if tag is not None and tag.startswith("raw"):
            return raw_inline(code_text(node))
        return node

    return walk(doc, rewrite)


def walk_blocks_math(doc: Any, macros: MacroList) -> Any:
    """Render ``align`` and ``indent`` code blocks."""

    def rewrite(node: Node) -> Node:
        if node["t"] != "CodeBlock":
            return node
        tag = code_class(node)
        if tag is None:
            return node
        if tag.startswith("align"):
            return align_block(code_text(node), macros)
        if tag.startswith("indent"):
            return indent_block(code_text(node), macros)
        return node

    return walk(doc, rewrite)


def walk_inline_math(doc: Any, macros: MacroList) -> Any:
    """Wrap every remaining inline code span as ``$...$`` math."""

    def rewrite(node: Node) -> Node:
        if node["t"] != "Code":
            return node
        return raw_inline(f"${apply_macros(macros, code_text(node))}$")

    return walk(doc, rewrite)


def postprocess(doc: Any, macros: MacroList) -> Any:
    """Apply all four passes to a Pandoc JSON document.

    Args:
        doc: Document tree as produced by ``pandoc -t json``.
        macros: The run's macro list.

    Returns:
        A new tree; *doc* is left untouched.
    """
    doc = walk_blocks_raw(doc, macros)
    doc = walk_inline_raw(doc)
    doc = walk_blocks_math(doc, macros)
    doc = walk_inline_math(doc, macros)
    logger.debug("Post-processed document with %d macros", len(macros))
    return doc

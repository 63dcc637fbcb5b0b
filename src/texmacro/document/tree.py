"""Helpers for Pandoc's JSON document tree.

Nodes are ``{"t": kind, "c": contents}`` dicts.  ``walk`` rebuilds the
tree bottom-up (children before their parent), calling a rewrite function
on every node, so block rewrites also reach code blocks nested in lists,
block quotes and divs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Callable

Node: TypeAlias = dict[str, Any]

LATEX_FORMAT = "latex"


def walk(tree: Any, rewrite: Callable[[Node], Node]) -> Any:
    """Return a copy of *tree* with *rewrite* applied to every node.

    The input tree is never mutated.
    """
    if isinstance(tree, list):
        return [walk(item, rewrite) for item in tree]
    if isinstance(tree, dict):
        rebuilt = {key: walk(value, rewrite) for key, value in tree.items()}
        if "t" in rebuilt:
            return rewrite(rebuilt)
        return rebuilt
    return tree


def code_class(node: Node) -> str | None:
    """Return the tag of a ``CodeBlock``/``Code`` node with exactly one class.

    Code with no class, or several, carries no recognised tag.
    """
    (_identifier, classes, _attributes), _text = node["c"]
    if len(classes) == 1:
        return classes[0]
    return None


def code_text(node: Node) -> str:
    """Return the literal text of a ``CodeBlock``/``Code`` node."""
    return node["c"][1]


def raw_block(text: str) -> Node:
    """Build a LaTeX ``RawBlock``."""
    return {"t": "RawBlock", "c": [LATEX_FORMAT, text]}


def raw_inline(text: str) -> Node:
    """Build a LaTeX ``RawInline``."""
    return {"t": "RawInline", "c": [LATEX_FORMAT, text]}

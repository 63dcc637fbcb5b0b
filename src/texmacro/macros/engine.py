"""Sequential macro application.

The macro list is a pipeline, not a simultaneous multi-pattern replace:
each rule runs over the output of every rule before it.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from texmacro.macros.rules import MacroList, MacroRule


def apply_macros(macros: Iterable[MacroRule], text: str) -> str:
    """Apply every rule in *macros*, in order, to *text*."""
    for rule in macros:
        text = rule.substitute(text)
    return text


def macro_text(macros: MacroList) -> Callable[[str], str]:
    """Bind *macros* into a single-argument text rewriter."""
    return functools.partial(apply_macros, macros)

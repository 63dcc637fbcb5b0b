"""Author-defined macro substitution: rules, tables and the engine."""

from texmacro.macros.escape import escape_regex
from texmacro.macros.rules import MacroList, MacroRule, MatchMode
from texmacro.macros.table import (
    MacroRow,
    MacroSource,
    MacroTableError,
    load_macro_list,
    read_macro_table,
    wrap_macro,
)
from texmacro.macros.engine import apply_macros, macro_text

__all__ = [
    "MacroList",
    "MacroRow",
    "MacroRule",
    "MacroSource",
    "MacroTableError",
    "MatchMode",
    "apply_macros",
    "escape_regex",
    "load_macro_list",
    "macro_text",
    "read_macro_table",
    "wrap_macro",
]

"""Macro table loading.

A macro table is a CSV file (tab-separated when the suffix is ``.tsv``)
with the columns ``Search For``, ``Replace With`` and ``Match Mode``.
Tables are loaded once, at startup, into an immutable ``MacroList``; any
malformed row aborts the whole load.
"""

from __future__ import annotations

import csv
import dataclasses
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from texmacro.latex_render import NoEscape, latex_cmd
from texmacro.macros.rules import (
    IDENTITY_REPLACEMENT,
    MacroRule,
    MatchMode,
    is_word_search,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from texmacro.macros.rules import MacroList

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("Search For", "Replace With", "Match Mode")
_COMMAND_NAME = re.compile(r"[A-Za-z]+")


class MacroTableError(Exception):
    """A macro table could not be loaded."""

    def __init__(self, message: str, path: Path, row: int | None = None) -> None:
        self.path = path
        self.row = row
        super().__init__(message)

    def __str__(self) -> str:
        where = str(self.path) if self.row is None else f"{self.path}:{self.row}"
        return f"{self.args[0]}\n  Table: {where}"


class MacroRow(BaseModel):
    """One validated row of a macro table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    search: str = Field(alias="Search For", min_length=1)
    replace: str = Field(alias="Replace With")
    mode: MatchMode = Field(alias="Match Mode")

    @field_validator("mode")
    @classmethod
    def word_mode_needs_word_edges(
        cls, value: MatchMode, info: ValidationInfo
    ) -> MatchMode:
        search = info.data.get("search")
        if value is MatchMode.WORD and search and not is_word_search(search):
            msg = (
                "Word mode needs search text starting and ending in a word "
                f"character, got {search!r}; use Anywhere"
            )
            raise ValueError(msg)
        return value

    def to_rule(self) -> MacroRule:
        replace = self.search if self.replace == IDENTITY_REPLACEMENT else self.replace
        return MacroRule(self.search, replace, self.mode)


class MacroSource(BaseModel):
    """A macro table path plus the optional command its entries are wrapped in."""

    path: Path
    wrap: str | None = None

    @field_validator("wrap")
    @classmethod
    def wrap_is_command_name(cls, value: str | None) -> str | None:
        if value is not None and not _COMMAND_NAME.fullmatch(value):
            msg = f"Wrap command must be a LaTeX command name, got {value!r}"
            raise ValueError(msg)
        return value


def _describe(error: ValidationError) -> str:
    """Flatten a pydantic error into ``column: message`` pairs."""
    parts = []
    for err in error.errors():
        column = ".".join(str(loc) for loc in err["loc"])
        parts.append(f"{column}: {err['msg']}")
    return "; ".join(parts)


def read_macro_table(path: Path) -> list[MacroRule]:
    """Read every rule from a single macro table, in file order.

    Args:
        path: CSV/TSV file with the ``REQUIRED_COLUMNS``.

    Returns:
        The table's rules. ``_`` replacements are resolved to the search text.

    Raises:
        FileNotFoundError: If the table doesn't exist.
        MacroTableError: If a column is missing or a row fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Macro table not found: {path}")

    delimiter = "\t" if path.suffix == ".tsv" else ","
    rules: list[MacroRule] = []
    # utf-8-sig drops the BOM spreadsheet exports put before the header
    with path.open(encoding="utf-8-sig", newline="") as table_file:
        reader = csv.DictReader(table_file, delimiter=delimiter)
        fieldnames = reader.fieldnames or []
        missing = [col for col in REQUIRED_COLUMNS if col not in fieldnames]
        if missing:
            msg = f"Missing required column(s): {', '.join(missing)}"
            raise MacroTableError(msg, path)

        for row in reader:
            # Surplus cells are collected under the None key by DictReader
            cells = {key: value for key, value in row.items() if key is not None}
            try:
                macro_row = MacroRow.model_validate(cells)
            except ValidationError as e:
                msg = f"Invalid macro row ({_describe(e)})"
                raise MacroTableError(msg, path, row=reader.line_num) from e
            rules.append(macro_row.to_rule())

    logger.debug("Read %d macros from %s", len(rules), path)
    return rules


def wrap_macro(rule: MacroRule, command: str) -> MacroRule:
    r"""Turn a rule's replacement into the argument of ``\command{...}``."""
    wrapped = latex_cmd(command, NoEscape(rule.replace))
    return dataclasses.replace(rule, replace=str(wrapped))


def load_macro_list(sources: Iterable[MacroSource]) -> MacroList:
    """Load and concatenate macro tables in priority order.

    Each source's rules are wrapped in its ``wrap`` command when one is set.
    Order is preserved exactly: later rules see the output of earlier ones.

    Raises:
        FileNotFoundError: If any table is missing.
        MacroTableError: If any table is malformed. Nothing is returned
            for a partial load.
    """
    rules: list[MacroRule] = []
    table_count = 0
    for source in sources:
        loaded = read_macro_table(source.path)
        if source.wrap:
            loaded = [wrap_macro(rule, source.wrap) for rule in loaded]
            logger.debug("Wrapped %d macros in \\%s", len(loaded), source.wrap)
        rules.extend(loaded)
        table_count += 1

    logger.info("Loaded %d macros from %d tables", len(rules), table_count)
    return tuple(rules)

"""Tests for macro table loading, wrapping and list assembly."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from texmacro.macros.rules import MacroRule, MatchMode
from texmacro.macros.table import (
    MacroSource,
    MacroTableError,
    load_macro_list,
    read_macro_table,
    wrap_macro,
)
from tests.conftest import write_macro_table


class TestReadMacroTable:
    """Tests for read_macro_table()."""

    def test_rows_in_file_order(self, tmp_path: Path) -> None:
        path = write_macro_table(
            tmp_path / "pre.csv",
            [("forall", r"\forall", "Word"), ("->", r"\to", "Anywhere")],
        )
        assert read_macro_table(path) == [
            MacroRule("forall", r"\forall", MatchMode.WORD),
            MacroRule("->", r"\to", MatchMode.ANYWHERE),
        ]

    def test_underscore_means_same_as_search(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "ops.csv", [("case", "_", "Word")])
        (rule,) = read_macro_table(path)
        assert rule.replace == "case"

    def test_empty_replacement_allowed(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "drop.csv", [("~", "", "Anywhere")])
        (rule,) = read_macro_table(path)
        assert rule.replace == ""

    def test_extra_columns_ignored(self, tmp_path: Path) -> None:
        path = write_macro_table(
            tmp_path / "notes.csv",
            [("fst", "_", "Word", "projection")],
            header=("Search For", "Replace With", "Match Mode", "Notes"),
        )
        assert read_macro_table(path) == [MacroRule("fst", "fst", MatchMode.WORD)]

    def test_tsv_is_tab_delimited(self, tmp_path: Path) -> None:
        path = write_macro_table(
            tmp_path / "pre.tsv", [("a,b", "c", "Anywhere")], delimiter="\t"
        )
        assert read_macro_table(path) == [MacroRule("a,b", "c", MatchMode.ANYWHERE)]

    def test_missing_column_is_fatal(self, tmp_path: Path) -> None:
        path = write_macro_table(
            tmp_path / "bad.csv",
            [("a", "b")],
            header=("Search For", "Replace With"),
        )
        with pytest.raises(MacroTableError, match="Match Mode") as excinfo:
            read_macro_table(path)
        assert excinfo.value.path == path
        assert excinfo.value.row is None

    def test_unknown_mode_is_fatal(self, tmp_path: Path) -> None:
        path = write_macro_table(
            tmp_path / "bad.csv",
            [("a", "b", "Word"), ("c", "d", "Sometimes")],
        )
        with pytest.raises(MacroTableError) as excinfo:
            read_macro_table(path)
        assert excinfo.value.row == 3
        assert f"{path}:3" in str(excinfo.value)

    def test_mode_is_case_sensitive(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "bad.csv", [("a", "b", "word")])
        with pytest.raises(MacroTableError):
            read_macro_table(path)

    def test_short_row_is_fatal(self, tmp_path: Path) -> None:
        """A row missing its mode cell fails instead of being skipped."""
        path = tmp_path / "short.csv"
        path.write_text("Search For,Replace With,Match Mode\na,b\n", encoding="utf-8")
        with pytest.raises(MacroTableError):
            read_macro_table(path)

    def test_empty_search_is_fatal(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "bad.csv", [("", "x", "Anywhere")])
        with pytest.raises(MacroTableError, match="Search For"):
            read_macro_table(path)

    def test_byte_order_mark_ignored(self, tmp_path: Path) -> None:
        """Spreadsheet CSV exports often start with a UTF-8 BOM."""
        path = tmp_path / "exported.csv"
        path.write_text(
            "Search For,Replace With,Match Mode\nforall,\\forall,Word\n",
            encoding="utf-8-sig",
        )
        assert read_macro_table(path) == [
            MacroRule("forall", r"\forall", MatchMode.WORD)
        ]

    def test_word_mode_symbol_search_is_fatal(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "bad.csv", [("<=", r"\leq", "Word")])
        with pytest.raises(MacroTableError, match="Word mode needs") as excinfo:
            read_macro_table(path)
        assert excinfo.value.row == 2

    def test_anywhere_mode_symbol_search_allowed(self, tmp_path: Path) -> None:
        path = write_macro_table(tmp_path / "ops.csv", [("<=", r"\leq", "Anywhere")])
        assert read_macro_table(path) == [
            MacroRule("<=", r"\leq", MatchMode.ANYWHERE)
        ]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_macro_table(tmp_path / "absent.csv")


class TestWrapMacro:
    """Tests for wrap_macro()."""

    def test_replacement_becomes_command_argument(self) -> None:
        rule = wrap_macro(MacroRule("case", "case", MatchMode.WORD), "ttbfop")
        assert rule.replace == r"\ttbfop{case}"
        assert rule.search == "case"
        assert rule.mode is MatchMode.WORD

    def test_latex_in_replacement_not_escaped(self) -> None:
        rule = wrap_macro(MacroRule("o", r"\circ", MatchMode.ANYWHERE), "itop")
        assert rule.replace == r"\itop{\circ}"

    def test_wrapped_rule_still_matches_search(self) -> None:
        rule = wrap_macro(MacroRule("fst", "fst", MatchMode.WORD), "itop")
        assert rule.substitute("fst p") == r" \itop{fst}  p"


class TestMacroSource:
    """Tests for MacroSource validation."""

    def test_wrap_optional(self) -> None:
        assert MacroSource(path=Path("pre.csv")).wrap is None

    def test_wrap_must_be_command_name(self) -> None:
        with pytest.raises(ValidationError):
            MacroSource(path=Path("ops.csv"), wrap="tt bf")


class TestLoadMacroList:
    """Tests for load_macro_list()."""

    def test_sources_concatenated_in_order(self, tmp_path: Path) -> None:
        pre = write_macro_table(tmp_path / "pre.csv", [("a", "b", "Anywhere")])
        ops = write_macro_table(tmp_path / "ops.csv", [("case", "_", "Word")])
        post = write_macro_table(tmp_path / "post.csv", [("b", "c", "Anywhere")])

        macros = load_macro_list(
            [
                MacroSource(path=pre),
                MacroSource(path=ops, wrap="ttbfop"),
                MacroSource(path=post),
            ]
        )

        assert isinstance(macros, tuple)
        assert [rule.replace for rule in macros] == ["b", r"\ttbfop{case}", "c"]

    def test_only_wrapped_sources_wrapped(self, tmp_path: Path) -> None:
        plain = write_macro_table(tmp_path / "plain.csv", [("x", "_", "Word")])
        wrapped = write_macro_table(tmp_path / "wrapped.csv", [("x", "_", "Word")])
        macros = load_macro_list(
            [MacroSource(path=plain), MacroSource(path=wrapped, wrap="itop")]
        )
        assert [rule.replace for rule in macros] == ["x", r"\itop{x}"]

    def test_any_bad_table_aborts_load(self, tmp_path: Path) -> None:
        good = write_macro_table(tmp_path / "good.csv", [("a", "b", "Word")])
        bad = write_macro_table(tmp_path / "bad.csv", [("a", "b", "Never")])
        with pytest.raises(MacroTableError):
            load_macro_list([MacroSource(path=good), MacroSource(path=bad)])

    def test_no_sources_gives_empty_list(self) -> None:
        assert load_macro_list([]) == ()

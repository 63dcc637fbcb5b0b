"""Shared pytest fixtures for texmacro tests."""

from __future__ import annotations

import csv
import shutil
from pathlib import Path

import pytest

from texmacro.config import LogConfig, MacroConfig, PathsConfig, Settings
from texmacro.macros.table import REQUIRED_COLUMNS

FIXTURES_DIR = Path(__file__).parent / "fixtures"
MACRO_FIXTURES_DIR = FIXTURES_DIR / "macros"


# =============================================================================
# Pandoc availability
# =============================================================================


def requires_pandoc(func_or_class):
    """Mark tests that shell out to pandoc; skip them when it isn't installed.

    To exclude them entirely: pytest -m "not pandoc"
    """
    marked = pytest.mark.pandoc(func_or_class)
    return pytest.mark.skipif(
        shutil.which("pandoc") is None, reason="Pandoc not installed"
    )(marked)


# =============================================================================
# Macro tables
# =============================================================================


def write_macro_table(
    path: Path,
    rows: list[tuple[str, ...]],
    header: tuple[str, ...] = REQUIRED_COLUMNS,
    delimiter: str = ",",
) -> Path:
    """Write a macro table with *header* and *rows* to *path*."""
    with path.open("w", encoding="utf-8", newline="") as table_file:
        writer = csv.writer(table_file, delimiter=delimiter)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def fixture_settings(tmp_path: Path) -> Settings:
    """Settings pointing at the fixture macro tables and a temp output dir."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        paths=PathsConfig(
            input=FIXTURES_DIR / "paper.markdown",
            output_dir=tmp_path / "autogen",
        ),
        macros=MacroConfig(directory=MACRO_FIXTURES_DIR),
        log=LogConfig(dir=tmp_path / "logs"),
    )

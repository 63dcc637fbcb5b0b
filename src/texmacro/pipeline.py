"""End-to-end conversion: markdown file -> pre-processed text -> LaTeX file.

This is the main entry point for a build.  It orchestrates:

1. Comment stripping and paragraph-break injection
2. Markdown parsing via Pandoc (JSON tree)
3. Tree post-processing with the macro list
4. LaTeX serialisation via Pandoc

The pre-processed text is written next to the LaTeX output for
diagnosing reader problems.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from texmacro.config import PandocConfig
from texmacro.document.pandoc import read_markdown, write_latex
from texmacro.document.preprocess import preprocess
from texmacro.document.transform import postprocess
from texmacro.macros.table import load_macro_list

if TYPE_CHECKING:
    from pathlib import Path

    from texmacro.config import Settings
    from texmacro.macros.rules import MacroList

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Text produced by one conversion.

    Attributes:
        preprocessed: Markdown after comment stripping and ``\\par`` injection.
        latex: LaTeX body produced by Pandoc from the post-processed tree.
    """

    preprocessed: str
    latex: str


@dataclass(frozen=True)
class BuildOutputs:
    """Files written by ``convert_document``."""

    pre_path: Path
    tex_path: Path
    macro_count: int


def convert_text(
    text: str,
    macros: MacroList,
    pandoc: PandocConfig | None = None,
) -> ConversionResult:
    """Convert markdown *text* to a LaTeX body in memory.

    Args:
        text: Raw document text.
        macros: The run's macro list.
        pandoc: Pandoc settings. Defaults to ``pandoc`` on ``PATH``.

    Raises:
        subprocess.CalledProcessError: If Pandoc fails.
    """
    pandoc = pandoc or PandocConfig()
    preprocessed = preprocess(text)
    doc = read_markdown(
        preprocessed,
        reader=pandoc.reader,
        executable=pandoc.executable,
        timeout=pandoc.timeout,
    )
    logger.debug("Parsed %d top-level blocks", len(doc.get("blocks", [])))
    doc = postprocess(doc, macros)
    latex = write_latex(
        doc,
        writer=pandoc.writer,
        executable=pandoc.executable,
        timeout=pandoc.timeout,
    )
    return ConversionResult(preprocessed=preprocessed, latex=latex)


def convert_document(
    settings: Settings,
    macros: MacroList | None = None,
) -> BuildOutputs:
    """Convert the configured input document and write the outputs.

    Macro tables are loaded before the input is touched, so a broken table
    aborts the build without producing any output.

    Args:
        settings: Paths, macro sources and Pandoc configuration.
        macros: Pre-loaded macro list. Loaded from ``settings`` when None.

    Returns:
        Paths of the written ``.pre`` and ``.tex`` files.

    Raises:
        FileNotFoundError: If the input document or a macro table is missing.
        MacroTableError: If a macro table is malformed.
        subprocess.CalledProcessError: If Pandoc fails.
    """
    if macros is None:
        macros = load_macro_list(settings.macros.resolved_sources())

    paths = settings.paths
    if not paths.input.exists():
        raise FileNotFoundError(f"Input document not found: {paths.input}")
    text = paths.input.read_text(encoding="utf-8")

    result = convert_text(text, macros, pandoc=settings.pandoc)

    paths.output_dir.mkdir(parents=True, exist_ok=True)
    paths.pre_path.write_text(result.preprocessed, encoding="utf-8")
    logger.info("Wrote pre-processed markdown to %s", paths.pre_path)
    paths.tex_path.write_text(result.latex, encoding="utf-8")
    logger.info("Wrote LaTeX to %s", paths.tex_path)

    return BuildOutputs(
        pre_path=paths.pre_path,
        tex_path=paths.tex_path,
        macro_count=len(macros),
    )

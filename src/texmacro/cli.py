"""Command-line entry point.

Usage:
    texmacro build [--input PATH] [--output-dir PATH]
    texmacro macros

``build`` converts the configured document; ``macros`` prints the
effective macro list in application order.  Paths default to the values in
``Settings`` (see ``texmacro.config``).
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from texmacro import __version__, setup_logging
from texmacro.config import get_settings
from texmacro.macros.table import MacroTableError, load_macro_list
from texmacro.pipeline import convert_document

if TYPE_CHECKING:
    from texmacro.config import Settings

console = Console()
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for the texmacro subcommands."""
    parser = argparse.ArgumentParser(
        prog="texmacro",
        description="Convert annotated markdown to LaTeX with macro tables.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build_p = sub.add_parser("build", help="Convert the input document to LaTeX")
    build_p.add_argument(
        "--input", type=Path, default=None, help="Markdown document to convert"
    )
    build_p.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the .pre and .tex outputs",
    )

    sub.add_parser("macros", help="List the effective macro list")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return *settings* with any path options from the command line."""
    update: dict[str, Path] = {}
    if getattr(args, "input", None) is not None:
        update["input"] = args.input
    if getattr(args, "output_dir", None) is not None:
        update["output_dir"] = args.output_dir
    if not update:
        return settings
    paths = settings.paths.model_copy(update=update)
    return settings.model_copy(update={"paths": paths})


def _run_build(settings: Settings) -> None:
    outputs = convert_document(settings)
    console.print(
        Panel(
            f"[bold]Macros:[/] {outputs.macro_count}\n"
            f"[bold]Pre-processed:[/] {outputs.pre_path}\n"
            f"[bold]LaTeX:[/] {outputs.tex_path}",
            title=f"texmacro {__version__}",
            border_style="blue",
        )
    )


def _run_macros(settings: Settings) -> None:
    macros = load_macro_list(settings.macros.resolved_sources())
    table = Table(title=f"Macro list ({len(macros)} rules)")
    table.add_column("#", justify="right")
    table.add_column("Search For")
    table.add_column("Replace With")
    table.add_column("Match Mode")
    # Text() so macro strings containing [brackets] aren't read as markup
    for index, rule in enumerate(macros, start=1):
        table.add_row(
            str(index), Text(rule.search), Text(rule.replace), str(rule.mode)
        )
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``texmacro`` command."""
    args = _build_parser().parse_args(argv)
    settings = _apply_overrides(get_settings(), args)
    setup_logging(settings.log.dir, settings.log.level)

    try:
        if args.command == "build":
            _run_build(settings)
        else:
            _run_macros(settings)
    except MacroTableError as e:
        console.print("[red]Macro table error:[/]", Text(str(e)))
        sys.exit(1)
    except FileNotFoundError as e:
        console.print("[red]Error:[/]", Text(str(e)))
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        logger.error("Pandoc failed (exit %d): %s", e.returncode, e.stderr)
        console.print(f"[red]Pandoc failed (exit {e.returncode}):[/]")
        console.print(Text(e.stderr or ""))
        sys.exit(1)
    except subprocess.TimeoutExpired as e:
        logger.error("Pandoc timed out after %s seconds", e.timeout)
        console.print(f"[red]Pandoc timed out after {e.timeout} seconds[/]")
        sys.exit(1)
    except UnicodeDecodeError as e:
        console.print("[red]Not valid UTF-8:[/]", Text(str(e)))
        sys.exit(1)


if __name__ == "__main__":
    main()

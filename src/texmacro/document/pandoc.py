"""Pandoc subprocess calls: markdown -> JSON tree, JSON tree -> LaTeX.

Pandoc is the external reader and writer; texmacro only rewrites the tree
in between.  Both directions exchange the document as Pandoc JSON over
stdin/stdout.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "pandoc"
DEFAULT_TIMEOUT = 60


def run_pandoc(
    args: list[str],
    stdin: str,
    executable: str = DEFAULT_EXECUTABLE,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Run Pandoc with *args*, feeding *stdin*, and return its stdout.

    Raises:
        subprocess.CalledProcessError: If Pandoc exits non-zero. The
            exception's ``stderr`` holds Pandoc's message.
        FileNotFoundError: If the Pandoc executable cannot be found.
    """
    cmd = [executable, *args]
    logger.debug("Running %s", " ".join(cmd))
    result = subprocess.run(  # nosec: B603
        cmd,
        input=stdin,
        capture_output=True,
        encoding="utf-8",
        timeout=timeout,
        check=False,  # We handle errors manually
    )
    if result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, cmd, result.stdout, result.stderr
        )
    return result.stdout


def read_markdown(
    text: str,
    reader: str = "markdown",
    executable: str = DEFAULT_EXECUTABLE,
    timeout: int = DEFAULT_TIMEOUT,
) -> dict[str, Any]:
    """Parse markdown into a Pandoc JSON document.

    Args:
        text: Pre-processed markdown.
        reader: Pandoc input format, including any ``+ext``/``-ext`` flags.

    Returns:
        The document as a dict with ``pandoc-api-version``, ``meta`` and
        ``blocks``.
    """
    output = run_pandoc(
        ["-f", reader, "-t", "json"], text, executable=executable, timeout=timeout
    )
    return json.loads(output)


def write_latex(
    doc: dict[str, Any],
    writer: str = "latex",
    executable: str = DEFAULT_EXECUTABLE,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Serialise a Pandoc JSON document to a LaTeX body (no preamble).

    Uses ``--no-highlight`` so untagged code blocks don't reference
    syntax highlighting macros the paper's preamble doesn't define.
    """
    return run_pandoc(
        ["-f", "json", "-t", writer, "--no-highlight"],
        json.dumps(doc),
        executable=executable,
        timeout=timeout,
    )

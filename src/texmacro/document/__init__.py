"""Document pre-processing, tree post-processing and Pandoc conversion."""

from texmacro.document.align import align_block, indent_block
from texmacro.document.pandoc import read_markdown, write_latex
from texmacro.document.preprocess import add_pars, preprocess, strip_comments
from texmacro.document.transform import postprocess

__all__ = [
    "add_pars",
    "align_block",
    "indent_block",
    "postprocess",
    "preprocess",
    "read_markdown",
    "strip_comments",
    "write_latex",
]

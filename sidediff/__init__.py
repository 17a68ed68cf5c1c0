"""sidediff - side-by-side rendering of diff output.

Parses normal, context, unified and combined diff output and renders it in
two (old/new) or three (parent/parent/merge) columns, folding long lines
without breaking wide glyphs or ANSI color sequences.
"""

from .colormap import ColorMap
from .config import SideDiffConfig, load_config
from .errors import (
    AuxiliaryFileError,
    ConfigValidationError,
    DiffProcessError,
    FoldWidthError,
    MergeError,
    SideDiffError,
)
from .fold import fold, iter_fold
from .parser import DiffParser
from .renderer import ColumnRenderer, FoldMode, MarkPosition, RenderOptions
from .session import DiffSession, LockstepFiles

__version__ = "0.1.0"

__all__ = [
    "AuxiliaryFileError",
    "ColorMap",
    "ColumnRenderer",
    "ConfigValidationError",
    "DiffParser",
    "DiffProcessError",
    "DiffSession",
    "FoldMode",
    "FoldWidthError",
    "LockstepFiles",
    "MarkPosition",
    "MergeError",
    "RenderOptions",
    "SideDiffConfig",
    "SideDiffError",
    "fold",
    "iter_fold",
    "load_config",
]

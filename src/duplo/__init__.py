"""
duplo - duplicate code block finder

Finds runs of identical lines shared between (or repeated within) the files
of a corpus by scanning the diagonals of a per-pair line-equality matrix.
"""

__version__ = "0.1.0"

from .config import DuploConfig, load_config
from .core import DuplicateFinder
from .models import Block, ProcessResult, RunResult, SourceFile, SourceLine

__all__ = [
    "DuplicateFinder",  # Main entry point
    "DuploConfig",
    "load_config",
    "Block",
    "ProcessResult",
    "RunResult",
    "SourceFile",
    "SourceLine",
]

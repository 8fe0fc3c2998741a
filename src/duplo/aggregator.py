"""Combining per-pair results into run totals.

``merge`` is pure, associative and commutative, so partial results can be
combined in any order (for example when pairs are split across workers).
"""

from functools import reduce
from typing import Iterable

from .models import ProcessResult, RunResult

ZERO = ProcessResult()


def merge(a: ProcessResult, b: ProcessResult) -> ProcessResult:
    return ProcessResult(a.blocks + b.blocks, a.duplicate_lines + b.duplicate_lines)


def total(results: Iterable[ProcessResult]) -> ProcessResult:
    """Merge any number of results; the empty total is ``ZERO``."""
    return reduce(merge, results, ZERO)


def build_run_result(files: int, total_lines: int, result: ProcessResult, duration: float = 0.0) -> RunResult:
    """Fold loader totals and scan totals into a :class:`RunResult`."""
    return RunResult(
        files=files,
        total_lines=total_lines,
        blocks=result.blocks,
        duplicate_lines=result.duplicate_lines,
        duration=duration,
    )

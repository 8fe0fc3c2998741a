"""Reusable line-equality matrix.

One flat boolean buffer of ``max_lines ** 2`` cells is allocated for the
whole run. Each file pair (m lines by n lines) uses the leading ``m * n``
cells viewed as an ``(m, n)`` array; cell ``(y, x)`` is true iff line ``y``
of the first file equals line ``x`` of the second.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .models import SourceFile, SourceLine

# Largest number of cells a numpy buffer can index on this platform.
MAX_ADDRESSABLE_CELLS = int(np.iinfo(np.intp).max)


def fits(max_lines: int, capacity: Optional[int] = None) -> bool:
    """Whether a ``max_lines`` square matrix can be addressed."""
    limit = MAX_ADDRESSABLE_CELLS if capacity is None else capacity
    return max_lines * max_lines <= limit


class MatchMatrix:
    """Scratch buffer shared by every pair of a scan.

    Not safe to share between concurrent scans; give each worker its own.

    Raises:
        MemoryError: If the buffer cannot be allocated
    """

    def __init__(self, max_lines: int):
        self.max_lines = max_lines
        self._buffer = np.zeros(max_lines * max_lines, dtype=np.bool_)

    @property
    def size(self) -> int:
        return int(self._buffer.size)

    def region(self, m: int, n: int) -> np.ndarray:
        """Cleared ``(m, n)`` view over the leading cells of the buffer."""
        if m > self.max_lines or n > self.max_lines:
            raise ValueError(f"{m}x{n} pair does not fit a {self.max_lines}-line matrix")
        view = self._buffer[: m * n].reshape(m, n)
        view.fill(False)
        return view

    def fill(self, source_a: SourceFile, source_b: SourceFile) -> np.ndarray:
        """Compute the match matrix of a file pair and return its view."""
        view = self.region(source_a.num_lines, source_b.num_lines)
        ids_a, ids_b = _line_ids(source_a, source_b)
        np.equal(ids_a[:, np.newaxis], ids_b[np.newaxis, :], out=view)
        return view


def _line_ids(source_a: SourceFile, source_b: SourceFile) -> tuple[np.ndarray, np.ndarray]:
    """Number the distinct lines of a pair so equal lines share an id.

    Lookups go through SourceLine's precomputed hash and fall back to a text
    comparison only when hashes collide.
    """
    ids: dict[SourceLine, int] = {}
    ids_a = np.fromiter(
        (ids.setdefault(line, len(ids)) for line in source_a.lines),
        dtype=np.intp,
        count=source_a.num_lines,
    )
    if source_b is source_a:
        return ids_a, ids_a
    ids_b = np.fromiter(
        (ids.setdefault(line, len(ids)) for line in source_b.lines),
        dtype=np.intp,
        count=source_b.num_lines,
    )
    return ids_a, ids_b

"""Corpus loading and match-matrix sizing.

The loader reads every input file, keeps the ones with qualifying lines and
checks, before any comparison starts, that a matrix big enough for the
longest file can be addressed and allocated.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .exceptions import AllocationError, CapacityError, FileAccessError
from .logging_config import get_logger
from .matrix import MAX_ADDRESSABLE_CELLS, MatchMatrix, fits
from .models import SourceFile
from .source import read_source_file

logger = get_logger(__name__)

LONGEST_FILES_REPORTED = 10


@dataclass
class Corpus:
    """Files that take part in a run, in input order."""

    files: list[SourceFile] = field(default_factory=list)
    max_lines: int = 0
    # (line count, filename) of the longest files, longest first
    longest_files: list[tuple[int, str]] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.num_lines for f in self.files)


def build_corpus(sources: Iterable[SourceFile]) -> Corpus:
    """Collect already-loaded files, dropping those without qualifying lines."""
    corpus = Corpus()
    heap: list[tuple[int, int, str]] = []
    for index, source in enumerate(sources):
        if source.num_lines == 0:
            logger.debug(f"No qualifying lines in {source.filename}, skipping")
            continue
        corpus.files.append(source)
        corpus.max_lines = max(corpus.max_lines, source.num_lines)
        # Earlier files win ties, so index breaks them in reverse.
        entry = (source.num_lines, -index, source.filename)
        if len(heap) < LONGEST_FILES_REPORTED:
            heapq.heappush(heap, entry)
        elif entry > heap[0]:
            heapq.heapreplace(heap, entry)
    corpus.longest_files = [(count, name) for count, _, name in sorted(heap, reverse=True)]
    return corpus


def load_corpus(
    filenames: Iterable[str],
    min_chars: int,
    ignore_preprocessor: bool = False,
) -> Corpus:
    """Read input files into a :class:`Corpus`.

    Unreadable files are logged and skipped.
    """
    return build_corpus(_read_all(filenames, min_chars, ignore_preprocessor))


def _read_all(filenames: Iterable[str], min_chars: int, ignore_preprocessor: bool):
    for filename in filenames:
        try:
            yield read_source_file(filename, min_chars, ignore_preprocessor)
        except FileAccessError as e:
            logger.warning(str(e))


def check_capacity(corpus: Corpus, capacity: Optional[int] = None) -> None:
    """Fail if the longest file's square exceeds the matrix capacity.

    Raises:
        CapacityError: Listing the longest files
    """
    if not fits(corpus.max_lines, capacity):
        raise CapacityError(
            corpus.longest_files,
            MAX_ADDRESSABLE_CELLS if capacity is None else capacity,
        )


def allocate_matrix(corpus: Corpus, capacity: Optional[int] = None) -> MatchMatrix:
    """Check capacity and allocate the run's shared matrix.

    Raises:
        CapacityError: If the matrix cannot be addressed
        AllocationError: If the buffer cannot be allocated
    """
    check_capacity(corpus, capacity)
    try:
        matrix = MatchMatrix(corpus.max_lines)
    except MemoryError as e:
        raise AllocationError(corpus.longest_files, str(e) or "Cannot allocate match matrix")
    logger.debug(f"Allocated {matrix.size} cell match matrix for {corpus.max_lines} lines")
    return matrix

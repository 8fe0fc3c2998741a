"""Duplicate-block detection by diagonal scanning.

A duplicated sequence shows up in a pair's match matrix as a run of true
cells along one diagonal: the offset between the two files' line indices is
fixed for the length of the copy. Every diagonal is scanned once for maximal
runs at least as long as the effective minimum block length.

Diagonals that start in column 0 (row ``y``, the "vertical" part) cover all
offsets where file A is ahead; those that start in row 0 at column ``x >= 1``
(the "horizontal" part) cover the rest. A file compared with itself has a
symmetric matrix, so its vertical part is enough; its main diagonal is the
file matching itself and is never reported.
"""

from __future__ import annotations

from os.path import basename
from typing import Callable, Generator, Iterator, Optional

import numpy as np

from .aggregator import ZERO, merge
from .config import DuploConfig
from .loader import Corpus
from .logging_config import get_logger
from .matrix import MatchMatrix
from .models import Block, ProcessResult, SourceFile

logger = get_logger(__name__)


def effective_min_block_size(
    min_block_size: int, block_percent_threshold: int, m: int, n: int
) -> int:
    """Minimum run length enforced for an ``m`` by ``n`` pair.

    The percentage term sits inside ``min`` and the result inside ``max`` with
    ``min_block_size``, so the percentage never moves the threshold.
    """
    return max(
        min_block_size,
        min(min_block_size, (max(m, n) * 100) // block_percent_threshold),
    )


def diagonal_runs(diagonal: np.ndarray, min_length: int) -> Iterator[tuple[int, int]]:
    """Yield ``(start, length)`` of maximal true runs of ``min_length`` or more."""
    padded = np.concatenate(([False], diagonal, [False]))
    edges = np.flatnonzero(padded[1:] != padded[:-1])
    for start, end in zip(edges[::2].tolist(), edges[1::2].tolist()):
        if end - start >= min_length:
            yield start, end - start


def process_pair(
    source_a: SourceFile,
    source_b: SourceFile,
    matrix: MatchMatrix,
    min_block_size: int,
    block_percent_threshold: int = 100,
) -> Generator[Block, None, ProcessResult]:
    """Yield the duplicate blocks of one file pair in detection order.

    Pass the same object twice to look for duplication inside one file.
    The generator's return value is the pair's :class:`ProcessResult`.
    It reads ``matrix`` while running, so exhaust it before the next pair
    fills the same matrix.
    """
    m = source_a.num_lines
    n = source_b.num_lines
    same = source_a is source_b
    cells = matrix.fill(source_a, source_b)
    min_length = effective_min_block_size(min_block_size, block_percent_threshold, m, n)

    blocks = 0
    duplicate_lines = 0

    # Only diagonals holding at least one match can produce a run.
    # np.unique sorts, so the scan order below is unchanged.
    rows, cols = np.nonzero(cells)
    offsets = np.unique(rows - cols)
    vertical = offsets[offsets >= 0].tolist()
    horizontal = (-offsets[offsets < 0])[::-1].tolist()

    # Vertical part: diagonals (y + k, k)
    for y in vertical:
        for start, length in diagonal_runs(cells.diagonal(-y), min_length):
            row, col = y + start, start
            if same and row == col:
                continue
            blocks += 1
            duplicate_lines += length
            yield Block(source_a, row, source_b, col, length)

    # Horizontal part: diagonals (k, x + k)
    if not same:
        for x in horizontal:
            for start, length in diagonal_runs(cells.diagonal(x), min_length):
                blocks += 1
                duplicate_lines += length
                yield Block(source_a, start, source_b, x + start, length)

    logger.debug(
        f"{source_a.filename} vs {source_b.filename}: {blocks} block(s), "
        f"{duplicate_lines} duplicate line(s)"
    )
    return ProcessResult(blocks, duplicate_lines)


def find_blocks(
    source_a: SourceFile,
    source_b: SourceFile,
    matrix: MatchMatrix,
    min_block_size: int,
    block_percent_threshold: int = 100,
) -> tuple[list[Block], ProcessResult]:
    """Collect :func:`process_pair` into a list along with its result."""
    found: list[Block] = []
    result = drain(
        process_pair(source_a, source_b, matrix, min_block_size, block_percent_threshold),
        found.append,
    )
    return found, result


def drain(gen: Generator[Block, None, ProcessResult], sink: Callable[[Block], None]) -> ProcessResult:
    """Feed every block of ``gen`` to ``sink`` and return the generator's result."""
    while True:
        try:
            block = next(gen)
        except StopIteration as stop:
            return stop.value
        sink(block)


def is_same_filename(filename_a: str, filename_b: str) -> bool:
    """Whether two paths share a base name."""
    return basename(filename_a) == basename(filename_b)


def iter_pairs(files: list[SourceFile], ignore_same_filename: bool = False) -> Iterator[tuple[int, int]]:
    """Index pairs ``(i, j)`` with ``i <= j``; ``(i, i)`` comes first for each ``i``."""
    for i, source in enumerate(files):
        yield i, i
        for j in range(i + 1, len(files)):
            if ignore_same_filename and is_same_filename(source.filename, files[j].filename):
                continue
            yield i, j


FileDone = Callable[[SourceFile, ProcessResult], None]


def scan_corpus(
    corpus: Corpus,
    matrix: MatchMatrix,
    config: DuploConfig,
    on_block: Callable[[Block], None],
    on_file_done: Optional[FileDone] = None,
) -> ProcessResult:
    """Scan every unordered pair of the corpus once.

    ``on_block`` receives blocks as soon as they are found. ``on_file_done``
    receives each file with the merged result of the pairs it led.
    """
    total = ZERO
    per_file = ZERO
    current: Optional[int] = None
    files = corpus.files

    for i, j in iter_pairs(files, config.ignore_same_filename):
        if i != current:
            if current is not None:
                total = merge(total, per_file)
                if on_file_done is not None:
                    on_file_done(files[current], per_file)
            current, per_file = i, ZERO
        result = drain(
            process_pair(
                files[i],
                files[j],
                matrix,
                config.min_block_size,
                config.block_percent_threshold,
            ),
            on_block,
        )
        per_file = merge(per_file, result)

    if current is not None:
        total = merge(total, per_file)
        if on_file_done is not None:
            on_file_done(files[current], per_file)

    return total

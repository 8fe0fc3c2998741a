"""Run orchestrator: load, size the matrix, scan every pair, report.

All failure modes (unwritable output, oversized files, allocation) surface
before the first pair is compared.
"""

from __future__ import annotations

import sys
import time
from contextlib import nullcontext
from typing import ContextManager, Iterable, Optional, TextIO, Union

from rich.console import Console
from rich.markup import escape

from .aggregator import build_run_result
from .config import DEFAULT_CONFIG, DuploConfig
from .exceptions import OutputDestinationError
from .formatters import get_reporter
from .loader import allocate_matrix, load_corpus
from .logging_config import get_logger
from .models import ProcessResult, RunResult, SourceFile
from .scanner import scan_corpus

logger = get_logger(__name__)
console = Console(stderr=True)

STDIO = "-"


def open_output(destination: Union[str, TextIO]) -> ContextManager[TextIO]:
    """Open the report destination; ``-`` is stdout, streams pass through.

    Raises:
        OutputDestinationError: If a path cannot be opened for writing
    """
    if not isinstance(destination, str):
        return nullcontext(destination)
    if destination == STDIO:
        return nullcontext(sys.stdout)
    try:
        return open(destination, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise OutputDestinationError(destination, str(e))


class DuplicateFinder:
    """Finds duplicate blocks across a list of files and writes a report."""

    def __init__(self, config: Optional[DuploConfig] = None, show_progress: bool = True):
        self.config = config or DEFAULT_CONFIG
        self.show_progress = show_progress
        logger.debug(
            f"Config: min_block_size={self.config.min_block_size}, "
            f"min_chars={self.config.min_chars}, "
            f"percent={self.config.block_percent_threshold}, xml={self.config.xml}"
        )

    def run(self, filenames: Iterable[str], output: Union[str, TextIO]) -> RunResult:
        """Compare every pair of files and write the report to ``output``.

        Raises:
            OutputDestinationError: If ``output`` cannot be opened
            CapacityError: If the longest file is too long for the matrix
            AllocationError: If the matrix cannot be allocated
        """
        config = self.config
        with open_output(output) as stream:
            start = time.perf_counter()

            self._progress("Loading and hashing files ... ", end="")
            corpus = load_corpus(filenames, config.min_chars, config.ignore_preprocessor)
            matrix = allocate_matrix(corpus, config.matrix_capacity)
            self._progress("done.\n")
            logger.info(
                f"Loaded {corpus.file_count} file(s), {corpus.total_lines} line(s), "
                f"longest {corpus.max_lines}"
            )

            reporter = get_reporter(config.xml, stream)
            reporter.begin(config)
            scanned = scan_corpus(
                corpus, matrix, config, reporter.block, on_file_done=self._file_done
            )

            duration = time.perf_counter() - start
            self._progress(f"Time: {duration:g} seconds")

            result = build_run_result(corpus.file_count, corpus.total_lines, scanned, duration)
            reporter.finish(result, config)
            stream.flush()

        logger.info(f"{result.blocks} duplicate block(s), {result.duplicate_lines} duplicate line(s)")
        return result

    def _file_done(self, source: SourceFile, result: ProcessResult) -> None:
        if result.blocks > 0:
            self._progress(f"{escape(source.filename)} found: {result.blocks} block(s)")
        else:
            self._progress(f"{escape(source.filename)} nothing found.")

    def _progress(self, message: str, end: str = "\n") -> None:
        if self.show_progress:
            console.print(message, end=end, highlight=False, soft_wrap=True)

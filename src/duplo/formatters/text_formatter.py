"""Plain-text reporter."""

from ..config import DuploConfig
from ..models import Block, RunResult
from .base import BaseReporter


class TextReporter(BaseReporter):
    """Both block locations as ``file(line)``, the lines, then a blank line."""

    def block(self, block: Block) -> None:
        self._write(f"{block.filename_a}({block.line_number_a})")
        self._write(f"{block.filename_b}({block.line_number_b})")
        for text in block.text_lines():
            self._write(text)
        self._write("")

    def finish(self, result: RunResult, config: DuploConfig) -> None:
        # Flags print as 0/1 and the headings keep their trailing space.
        self._write("Configuration: ")
        self._write(f"  Number of files: {result.files}")
        self._write(f"  Minimal block size: {config.min_block_size}")
        self._write(f"  Minimal characters in line: {config.min_chars}")
        self._write(f"  Ignore preprocessor directives: {int(config.ignore_preprocessor)}")
        self._write(f"  Ignore same filenames: {int(config.ignore_same_filename)}")
        self._write("")
        self._write("Results: ")
        self._write(f"  Lines of code: {result.total_lines}")
        self._write(f"  Duplicate lines of code: {result.duplicate_lines}")
        self._write(f"  Total {result.blocks} duplicate block(s) found.")
        self._write("")

"""Data models for duplicate-block detection.

    SourceLine   one qualifying line, hashed once at load time
    SourceFile   the ordered qualifying lines of one input path
    Block        a duplicated run found between two files
    ProcessResult / RunResult   counters produced by a scan
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Sequence


def line_hash(text: str) -> int:
    """Stable 64-bit digest of a line's text."""
    digest = hashlib.blake2b(text.encode("utf-8", "surrogatepass"), digest_size=8).digest()
    return int.from_bytes(digest, "little")


@dataclass(frozen=True)
class SourceLine:
    """A normalized line with its 1-based position in the original file."""

    text: str
    number: int
    hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", line_hash(self.text))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceLine):
            return NotImplemented
        # Hash mismatch short-circuits; text settles collisions.
        return self.hash == other.hash and self.text == other.text

    def __hash__(self) -> int:
        return self.hash


class SourceFile:
    """Qualifying lines of one input file.

    Two ``SourceFile`` objects are the same file only if they are the same
    object; equal content in different files is what the scanner looks for.
    """

    __slots__ = ("filename", "lines")

    def __init__(self, filename: str, lines: Sequence[SourceLine]):
        self.filename = filename
        self.lines = tuple(lines)

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"SourceFile({self.filename!r}, {self.num_lines} lines)"


@dataclass(frozen=True)
class Block:
    """A run of ``length`` equal lines at a fixed offset between two files.

    ``start_a`` and ``start_b`` are 0-based indices into the files' qualifying
    lines; use ``line_number_a``/``line_number_b`` for source positions.
    """

    source_a: SourceFile
    start_a: int
    source_b: SourceFile
    start_b: int
    length: int

    @property
    def filename_a(self) -> str:
        return self.source_a.filename

    @property
    def filename_b(self) -> str:
        return self.source_b.filename

    @property
    def line_number_a(self) -> int:
        return self.source_a.lines[self.start_a].number

    @property
    def line_number_b(self) -> int:
        return self.source_b.lines[self.start_b].number

    def text_lines(self) -> list[str]:
        """Literal text of the duplicated lines, taken from file A."""
        return [line.text for line in self.source_a.lines[self.start_a : self.start_a + self.length]]


@dataclass(frozen=True)
class ProcessResult:
    """Block and duplicate-line counts for one or more file pairs."""

    blocks: int = 0
    duplicate_lines: int = 0


@dataclass(frozen=True)
class RunResult:
    """Totals for a whole run, handed to the reporter's summary."""

    files: int
    total_lines: int
    blocks: int
    duplicate_lines: int
    duration: float = 0.0

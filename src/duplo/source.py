"""Reading input files into qualifying lines.

A line qualifies when, after surrounding whitespace is stripped, it is not
blank, has at least ``min_chars`` characters and (optionally) is not a
preprocessor directive.
"""

from pathlib import Path
from typing import Iterable, Iterator, TextIO

from .exceptions import FileAccessError
from .models import SourceFile, SourceLine

PREPROCESSOR_PREFIX = "#"


def normalize_line(raw: str) -> str:
    """Strip the line terminator and surrounding whitespace."""
    return raw.strip()


def is_preprocessor_line(text: str) -> bool:
    return text.startswith(PREPROCESSOR_PREFIX)


def qualifying_lines(
    raw_lines: Iterable[str], min_chars: int, ignore_preprocessor: bool = False
) -> Iterator[SourceLine]:
    """Yield the lines that survive filtering, keeping 1-based line numbers."""
    for number, raw in enumerate(raw_lines, start=1):
        text = normalize_line(raw)
        if not text or len(text) < min_chars:
            continue
        if ignore_preprocessor and is_preprocessor_line(text):
            continue
        yield SourceLine(text, number)


def read_source_file(
    filename: str, min_chars: int, ignore_preprocessor: bool = False, encoding: str = "utf-8"
) -> SourceFile:
    """Load one file as a :class:`SourceFile`.

    Raises:
        FileAccessError: If the file cannot be opened or read
    """
    try:
        with open(filename, encoding=encoding, errors="replace") as f:
            lines = list(qualifying_lines(f, min_chars, ignore_preprocessor))
    except OSError as e:
        raise FileAccessError(Path(filename), f"OS error: {e}")
    return SourceFile(filename, lines)


def read_file_list(stream: TextIO) -> list[str]:
    """Read one path per line, skipping blank lines."""
    return [line.strip() for line in stream if line.strip()]

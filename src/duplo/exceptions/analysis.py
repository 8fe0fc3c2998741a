"""Analysis-related exceptions: file access and matrix sizing."""

from math import isqrt
from pathlib import Path
from typing import List, Tuple

from .base import DuploError

# (qualifying line count, filename), longest first
LongestFiles = List[Tuple[int, str]]


def _format_longest(longest_files: LongestFiles) -> str:
    lines = ["Longest files:"]
    lines.extend(f"{count}: {filename}" for count, filename in longest_files)
    return "\n".join(lines)


class AnalysisError(DuploError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class CapacityError(AnalysisError):
    """Raised when the largest file cannot be addressed by the match matrix.

    The message lists the longest files so they can be excluded from the
    file list.
    """

    def __init__(self, longest_files: LongestFiles, capacity: int):
        max_lines = isqrt(capacity)
        super().__init__(
            "Some files have too many lines. You can have files with approximately "
            f"{max_lines} lines at most.\n{_format_longest(longest_files)}"
        )
        self.longest_files = list(longest_files)
        self.capacity = capacity
        self.max_lines = max_lines


class AllocationError(AnalysisError):
    """Raised when the match matrix buffer cannot be allocated."""

    def __init__(self, longest_files: LongestFiles, reason: str):
        super().__init__(f"{reason}\n{_format_longest(longest_files)}")
        self.longest_files = list(longest_files)
        self.reason = reason

"""Base reporter interface for duplo output rendering."""

from abc import ABC, abstractmethod
from typing import TextIO

from ..config import DuploConfig
from ..models import Block, RunResult


class BaseReporter(ABC):
    """Streams blocks to a text stream as the scanner finds them."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def begin(self, config: DuploConfig) -> None:
        """Write anything that must precede the first block."""

    @abstractmethod
    def block(self, block: Block) -> None:
        """Write one duplicate block."""

    @abstractmethod
    def finish(self, result: RunResult, config: DuploConfig) -> None:
        """Write the run summary."""

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.write("\n")

"""Configuration exceptions: settings and output destinations."""

from pathlib import Path
from typing import Any

from .base import DuploError


class ConfigurationError(DuploError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class OutputDestinationError(ConfigurationError):
    """Raised when the report destination cannot be opened for writing."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Can't open file: {path}", details={"reason": reason})
        self.path = path
        self.reason = reason

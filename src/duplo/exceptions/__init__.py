"""Exception hierarchy for duplo."""

from .analysis import (
    AllocationError,
    AnalysisError,
    CapacityError,
    FileAccessError,
)
from .base import DuploError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    OutputDestinationError,
)

__all__ = [
    "DuploError",
    "AnalysisError",
    "FileAccessError",
    "CapacityError",
    "AllocationError",
    "ConfigurationError",
    "InvalidConfigError",
    "OutputDestinationError",
]

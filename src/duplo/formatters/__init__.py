"""Report writers for duplo."""

from typing import TextIO

from .base import BaseReporter
from .text_formatter import TextReporter
from .xml_formatter import XmlReporter


def get_reporter(xml: bool, stream: TextIO) -> BaseReporter:
    """Get the reporter for the requested output shape.

    Args:
        xml: XML report when true, plain text otherwise
        stream: Text stream the report is written to
    """
    cls = XmlReporter if xml else TextReporter
    return cls(stream)


__all__ = [
    "BaseReporter",
    "TextReporter",
    "XmlReporter",
    "get_reporter",
]

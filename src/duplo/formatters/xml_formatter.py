"""XML reporter.

Line text goes through ``LINE_TEXT_SUBSTITUTIONS`` rather than XML escaping.
The table turns entities back into raw characters, which can produce
malformed XML; existing consumers of the format rely on it, so it is kept.
"""

from .. import __version__
from ..config import DuploConfig
from ..models import Block, RunResult
from .base import BaseReporter

# Applied in order to each line's text.
LINE_TEXT_SUBSTITUTIONS = (
    ("'", '"'),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def substitute_line_text(text: str) -> str:
    for old, new in LINE_TEXT_SUBSTITUTIONS:
        text = text.replace(old, new)
    return text


def _flag(value: bool) -> str:
    return "true" if value else "false"


class XmlReporter(BaseReporter):
    """``<set>`` elements inside a ``<duplo>``/``<check>`` document."""

    def begin(self, config: DuploConfig) -> None:
        self._write('<?xml version="1.0" encoding="UTF-8"?>')
        self._write('<?xml-stylesheet href="duplo.xsl" type="text/xsl"?>')
        self._write(f'<duplo version="{__version__}">')
        self._write(
            f'    <check Min_block_size="{config.min_block_size}"'
            f' Min_char_line="{config.min_chars}"'
            f' Ignore_prepro="{_flag(config.ignore_preprocessor)}"'
            f' Ignore_same_filename="{_flag(config.ignore_same_filename)}">'
        )

    def block(self, block: Block) -> None:
        self._write(f'    <set LineCount="{block.length}">')
        self._write(
            f'        <block SourceFile="{block.filename_a}" StartLineNumber="{block.line_number_a}"/>'
        )
        self._write(
            f'        <block SourceFile="{block.filename_b}" StartLineNumber="{block.line_number_b}"/>'
        )
        self._write('        <lines xml:space="preserve">')
        for text in block.text_lines():
            self._write(f'            <line Text="{substitute_line_text(text)}"/>')
        self._write("        </lines>")
        self._write("    </set>")

    def finish(self, result: RunResult, config: DuploConfig) -> None:
        self._write(
            f'        <summary Num_files="{result.files}"'
            f' Duplicate_blocks="{result.blocks}"'
            f' Total_lines_of_code="{result.total_lines}"'
            f' Duplicate_lines_of_code="{result.duplicate_lines}"'
            f' Time="{result.duration:g}"/>'
        )
        self._write("    </check>")
        self._write("</duplo>")

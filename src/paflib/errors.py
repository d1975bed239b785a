"""
Exceptions raised by the public parsers, and conversion of low-level grammar
failures into line/column anchored diagnostics.

A diagnostic shows the offending line with tabs expanded to spaces, then a caret
under the failing character followed by the labels collected while the failure
propagated out of the grammar (innermost first)::

    Error while parsing line:
    seqid    10    0    x
                        ^ expected an unsigned 64-bit integer in column: end
"""
import logging
from typing import Final, Optional, Union

_log = logging.getLogger(__name__)


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class PafError(Exception):
    """Base class for errors raised while decoding PAF records."""


class PaflibWarning(Warning): pass
class FormatWarning(PaflibWarning):
    """Issued when a record is rendered to text that would not parse back."""


class CharacterMismatch(PafError, ValueError):
    """Raised when a single character is not one of the expected characters."""
    def __init__(self, got: str, expected: str):
        self.got = got
        self.expected = expected
        super().__init__(f"Error while parsing character. Expected any of '{expected}' but got {got}.")


class LineParseFailure(PafError):
    """
    Raised when a single line fails to decode.

    Attributes:
        line: The raw text of the offending line.
        column: Character index of the failure within the line.
        details: Labels describing what was expected, innermost first.
    """
    def __init__(self, line: str, column: int, details: list[str]):
        self.line = line
        self.column = column
        self.details = list(details)
        super().__init__(self._render())

    @property
    def caret_column(self) -> int:
        """Column of the caret once tabs preceding the failure are expanded."""
        return display_column(self.line, self.column)

    def _header(self) -> str: return 'Error while parsing line:'

    def _render(self) -> str:
        return '\n'.join((self._header(), expand_tabs(self.line), ' ' * self.caret_column + '^ ' + ' '.join(self.details)))


class NumberedParseFailure(LineParseFailure):
    """Raised when a line fails to decode at a known 1-based line number."""
    def __init__(self, line_num: int, line: str, column: int, details: list[str]):
        self.line_num = line_num
        super().__init__(line, column, details)

    def _header(self) -> str: return f'Error while parsing line {self.line_num}:'


class EmptyInput(PafError):
    """Raised when the input is empty where a record or locus was expected."""
    def __init__(self, line_num: Optional[int] = None):
        self.line_num = line_num
        if line_num is None:
            super().__init__('Error while parsing line: expected paf line but got empty input.')
        else:
            super().__init__(f'Error while parsing line {line_num}: expected paf line but got empty input.')


# Functions ------------------------------------------------------------------------------------------------------------
def expand_tabs(line: str, width: int = None) -> str:
    """Replaces each tab with ``width`` spaces (not tab stops) and drops a trailing carriage return."""
    return line.rstrip('\r').replace('\t', ' ' * (TAB_WIDTH if width is None else width))


def display_column(line: str, column: int, width: int = None) -> int:
    """
    Converts a character column into the column it occupies after :func:`expand_tabs`.

    Examples:
        >>> display_column('a\\tb', 2)
        5
    """
    if width is None: width = TAB_WIDTH
    count = line.count('\t', 0, column)
    return (column - count) + (count * width)


def split_lines(text: str) -> list[str]:
    """Splits on newlines; a trailing newline does not start a new line."""
    if not text: return []
    lines = text.split('\n')
    if lines[-1] == '': lines.pop()
    return lines


def find_offset(offset: int, lines: list[str]) -> tuple[int, int]:
    """
    Finds the line index and the column within that line of an absolute offset.

    An offset just past a line terminator belongs to the start of the next line. Offsets
    beyond the last line are clamped to its end.
    """
    for line_no, line in enumerate(lines):
        if offset <= len(line): return line_no, offset
        offset -= len(line) + 1
    return len(lines) - 1, len(lines[-1])


def details_from_trace(trace) -> list[str]:
    """Keeps the human-readable labels of a failure trace, dropping uninterpreted error kinds."""
    details = [i for i in trace if isinstance(i, str)]
    return details or ['unexpected input']


def convert_error(data: Union[str, bytes], failure, line_num: Optional[int] = None) -> PafError:
    """
    Transforms a grammar failure into a diagnostic carrying line and column information.

    Args:
        data: The original input given to the parser.
        failure: The :class:`~paflib.core.grammar.ParseFailure` raised while parsing ``data``.
        line_num: Line number of the first line of ``data``, for callers tracking position
            across many records.

    Returns:
        EmptyInput if ``data`` has no lines, otherwise a LineParseFailure, or a
        NumberedParseFailure when ``line_num`` is given.
    """
    offset = failure.offset
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data)
        # Byte offsets are mapped onto the characters of the decoded text
        offset = len(data[:offset].decode('utf-8', errors='replace'))
        data = data.decode('utf-8', errors='replace')

    lines = split_lines(data)
    if not lines: return EmptyInput(line_num)

    line_no, column = find_offset(offset, lines)
    details = details_from_trace(failure.trace)
    _log.debug('Parse failure at offset %d (line %d, column %d): %s', failure.offset, line_no, column, details)
    if line_num is None: return LineParseFailure(lines[line_no], column, details)
    return NumberedParseFailure(line_num + line_no, lines[line_no], column, details)


# Constants ------------------------------------------------------------------------------------------------------------
TAB_WIDTH: Final = 4

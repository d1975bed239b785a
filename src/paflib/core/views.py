"""
Immutable input views over text and raw bytes, sharing one set of token classes.
"""
from re import compile as regex, escape
from typing import Final, Optional

import numpy as np

from paflib.lib.resources import jit


# Classes --------------------------------------------------------------------------------------------------------------
class TokenClass:
    """
    A set of ASCII symbols recognised by the grammar, usable from both input views.

    Args:
        name: Name shown in reprs.
        symbols: The member symbols as bytes.
        invert: If True, the class matches every token *except* the symbols.

    Examples:
        >>> DIGITS.span('123abc')
        3
    """
    __slots__ = ('name', 'symbols', 'invert', '_table', '_pattern')
    DTYPE: Final = np.uint8
    MAX_LEN: Final = np.iinfo(DTYPE).max + 1

    def __init__(self, name: str, symbols: bytes, invert: bool = False):
        if not symbols.isascii(): raise ValueError('Token class symbols must be ASCII')
        self.name = name
        self.symbols = symbols
        self.invert = invert
        # Byte lookup table, True where a byte belongs to the class
        table = np.zeros(self.MAX_LEN, dtype=np.bool_)
        table[np.frombuffer(symbols, dtype=self.DTYPE)] = True
        self._table = ~table if invert else table
        self._pattern = regex(('[^%s]*' if invert else '[%s]*') % escape(symbols.decode('ascii')))

    def __repr__(self): return f"TokenClass({self.name!r})"

    def __contains__(self, item) -> bool:
        if isinstance(item, (int, np.integer)): return bool(self._table[item])
        if isinstance(item, bytes): return len(item) == 1 and bool(self._table[item[0]])
        if isinstance(item, str):
            if len(item) != 1: return False
            # Symbols are ASCII, so other characters only belong to inverted classes
            return bool(self._table[ord(item)]) if item.isascii() else self.invert
        return False

    @property
    def table(self) -> np.ndarray: return self._table

    def span(self, text: str, pos: int = 0) -> int:
        """Length of the run of class members in ``text`` starting at ``pos``."""
        return self._pattern.match(text, pos).end() - pos


class TextView:
    """
    Immutable view over a ``str``; offsets are character indices.

    Examples:
        >>> view = TextView('seqid\\t10')
        >>> view.advance(6).rest
        '10'
    """
    __slots__ = ('_data', '_pos')

    def __init__(self, data: str, pos: int = 0):
        self._data = data
        self._pos = pos

    @property
    def data(self) -> str: return self._data
    @property
    def offset(self) -> int: return self._pos
    @property
    def rest(self) -> str: return self._data[self._pos:]
    def __len__(self): return len(self._data) - self._pos
    def __bool__(self): return self._pos < len(self._data)
    def __repr__(self): return f"TextView({self.rest!r}, offset={self._pos})"

    def __eq__(self, other):
        if not isinstance(other, TextView): return False
        return self._pos == other._pos and self._data == other._data

    def __hash__(self): return hash((self._data, self._pos))

    def first(self) -> Optional[str]:
        return self._data[self._pos] if self._pos < len(self._data) else None

    def advance(self, n: int) -> 'TextView':
        return TextView(self._data, min(self._pos + n, len(self._data)))

    def span(self, tokens: TokenClass) -> int:
        return tokens.span(self._data, self._pos)

    def decode(self, n: int) -> str:
        return self._data[self._pos:self._pos + n]


class BytesView:
    """
    Immutable view over ``bytes``; offsets are byte indices.

    Token-class spans are scanned through a numpy view of the buffer.

    Examples:
        >>> view = BytesView(b'seqid\\t10')
        >>> view.span(FIELD)
        5
    """
    __slots__ = ('_data', '_array', '_pos')

    def __init__(self, data: bytes, pos: int = 0, _array: np.ndarray = None):
        self._data = bytes(data)
        self._array = np.frombuffer(self._data, dtype=TokenClass.DTYPE) if _array is None else _array
        self._pos = pos

    @property
    def data(self) -> bytes: return self._data
    @property
    def offset(self) -> int: return self._pos
    @property
    def rest(self) -> bytes: return self._data[self._pos:]
    def __len__(self): return len(self._data) - self._pos
    def __bool__(self): return self._pos < len(self._data)
    def __repr__(self): return f"BytesView({self.rest!r}, offset={self._pos})"

    def __eq__(self, other):
        if not isinstance(other, BytesView): return False
        return self._pos == other._pos and self._data == other._data

    def __hash__(self): return hash((self._data, self._pos))

    def first(self) -> Optional[str]:
        # Bytes map to the code point of the same value, so non-ASCII bytes never match an ASCII token
        return chr(self._data[self._pos]) if self._pos < len(self._data) else None

    def advance(self, n: int) -> 'BytesView':
        return BytesView(self._data, min(self._pos + n, len(self._data)), self._array)

    def span(self, tokens: TokenClass) -> int:
        return int(_span_kernel(self._array, tokens.table, self._pos)) - self._pos

    def decode(self, n: int) -> str:
        """Decodes the next ``n`` bytes as UTF-8, raising UnicodeDecodeError if invalid."""
        return self._data[self._pos:self._pos + n].decode('utf-8')


# Functions ------------------------------------------------------------------------------------------------------------
def view(data) -> 'TextView | BytesView':
    """
    Wraps ``str`` or bytes-like input in the matching view.

    Raises:
        TypeError: If the input is neither text nor bytes.
    """
    if isinstance(data, (TextView, BytesView)): return data
    if isinstance(data, str): return TextView(data)
    if isinstance(data, (bytes, bytearray, memoryview)): return BytesView(bytes(data))
    raise TypeError(f"Cannot parse input of type {type(data)}")


@jit(nopython=True, cache=True, nogil=True)
def _span_kernel(data, table, start):
    """Returns the index of the first byte at or after ``start`` that is not in the table."""
    n = len(data)
    i = start
    while i < n and table[data[i]]:
        i += 1
    return i


# Constants ------------------------------------------------------------------------------------------------------------
SEPARATORS: Final = b'\t\r\n'
DIGITS = TokenClass('digits', b'0123456789')
FIELD = TokenClass('field', SEPARATORS, invert=True)

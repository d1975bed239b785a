"""
Value types decoded from PAF lines: the alignment strand, the aligned loci and the record itself.
"""
from enum import IntEnum
from typing import Any, ClassVar, Iterable, Optional, Union
from warnings import warn

from paflib.errors import CharacterMismatch, FormatWarning, convert_error
from paflib.lib.protocols import HasLocus


# Classes --------------------------------------------------------------------------------------------------------------
class Strand(IntEnum):
    """
    Orientation of the alignment between two loci.

    Examples:
        >>> Strand.from_symbol('-')
        <Strand.REVERSE: -1>
        >>> str(Strand.FORWARD)
        '+'
    """
    FORWARD = 1
    REVERSE = -1
    _STR_CACHE: ClassVar[dict]
    _BYTES_CACHE: ClassVar[dict]
    _FROM_SYMBOL_CACHE: ClassVar[dict]

    def __str__(self): return self._STR_CACHE[self]
    def __format__(self, format_spec): return format(str(self), format_spec)
    @property
    def bytes(self) -> bytes: return self._BYTES_CACHE[self]

    @classmethod
    def from_symbol(cls, s: Any) -> 'Strand':
        """
        Converts a symbol to a Strand.

        Args:
            s: ``'+'``/``'-'`` as str or bytes, their ordinals, the values ``1``/``-1``, or a Strand.

        Raises:
            CharacterMismatch: For anything else; there is no third strand.
        """
        if isinstance(s, cls): return s
        if isinstance(s, int):
            if s in cls._value2member_map_: return cls(s)
            s = chr(s) if 0 <= s < 0x110000 else repr(s)
        elif isinstance(s, (bytes, bytearray)): s = s.decode('latin-1')
        if (strand := cls._FROM_SYMBOL_CACHE.get(s)) is None: raise CharacterMismatch(str(s), '+-')
        return strand

    @classmethod
    def _init_caches(cls):
        cls._STR_CACHE = {cls.FORWARD: '+', cls.REVERSE: '-'}
        cls._BYTES_CACHE = {cls.FORWARD: b'+', cls.REVERSE: b'-'}
        cls._FROM_SYMBOL_CACHE = {'+': cls.FORWARD, '-': cls.REVERSE}


class Locus:
    """
    Immutable aligned region on one sequence. Safe for hashing and use in sets/dicts.

    Attributes:
        name: The sequence identifier.
        length: Total length of the sequence.
        start: Start of the aligned region.
        end: End of the aligned region.

    Examples:
        >>> locus = Locus.from_str('seqid\\t10\\t0\\t9')
        >>> locus.name, locus.end
        ('seqid', 9)
    """
    __slots__ = ('_name', '_length', '_start', '_end')

    def __init__(self, name: str, length: int, start: int, end: int):
        object.__setattr__(self, '_name', str(name))
        object.__setattr__(self, '_length', int(length))
        object.__setattr__(self, '_start', int(start))
        object.__setattr__(self, '_end', int(end))

    @property
    def name(self) -> str: return self._name
    @property
    def length(self) -> int: return self._length
    @property
    def start(self) -> int: return self._start
    @property
    def end(self) -> int: return self._end
    def __iter__(self): return iter((self._name, self._length, self._start, self._end))
    def __hash__(self): return hash(tuple(self))
    def __repr__(self): return f"Locus({self._name!r}, {self._length}, {self._start}, {self._end})"
    def __str__(self):
        _warn_unparseable(self, (self._name,))
        return '\t'.join(self._columns())

    def tobytes(self) -> bytes: return str(self).encode('utf-8')
    def _columns(self) -> tuple: return self._name, str(self._length), str(self._start), str(self._end)

    def __eq__(self, other):
        if not isinstance(other, Locus): return NotImplemented
        return tuple(self) == tuple(other)

    def __lt__(self, other):
        if not isinstance(other, Locus): return NotImplemented
        return tuple(self) < tuple(other)

    def __le__(self, other):
        if not isinstance(other, Locus): return NotImplemented
        return tuple(self) <= tuple(other)

    def __gt__(self, other):
        if not isinstance(other, Locus): return NotImplemented
        return tuple(self) > tuple(other)

    def __ge__(self, other):
        if not isinstance(other, Locus): return NotImplemented
        return tuple(self) >= tuple(other)

    def __setattr__(self, key, value): raise AttributeError(f"{self.__class__.__name__} is immutable")

    @classmethod
    def coerce(cls, item: Union['Locus', HasLocus]) -> 'Locus':
        if isinstance(item, cls): return item
        if isinstance(item, HasLocus): return cls(item.name, item.length, item.start, item.end)
        raise TypeError(f"Cannot coerce {type(item)} to Locus")

    @classmethod
    def from_str(cls, s: str, line_num: Optional[int] = None) -> 'Locus':
        """
        Parses a complete ``name<TAB>length<TAB>start<TAB>end`` fragment.

        Args:
            s: The fragment; nothing may follow the end column.
            line_num: Line number to report in diagnostics, if known.

        Raises:
            LineParseFailure: If the fragment is malformed (NumberedParseFailure with ``line_num``).
            EmptyInput: If ``s`` is empty.
        """
        return _parse_complete('locus', s, line_num)

    @classmethod
    def from_bytes(cls, b: bytes, line_num: Optional[int] = None) -> 'Locus':
        """As :meth:`from_str`, for raw bytes which must be valid UTF-8."""
        return _parse_complete('locus', b, line_num)


class Paf:
    """
    Immutable record of one alignment between a query and a target locus.

    Attributes:
        query: The aligned query region.
        strand: Relative orientation of query and target.
        target: The aligned target region.
        num_matches: Number of matching residues.
        alignment_length: Length of the alignment block.
        mapping_quality: Mapping quality, 0 to 255.
        optional_fields: Trailing SAM-like fields, verbatim and in order.

    Examples:
        >>> paf = Paf.from_str('q\\t10\\t0\\t10\\t+\\tt\\t10\\t0\\t10\\t10\\t10\\t60\\ttp:A:P')
        >>> paf.strand, paf.optional_fields
        (<Strand.FORWARD: 1>, ('tp:A:P',))
    """
    __slots__ = ('_query', '_strand', '_target', '_num_matches', '_alignment_length', '_mapping_quality',
                 '_optional_fields')

    def __init__(self, query: Union[Locus, HasLocus], strand: Any, target: Union[Locus, HasLocus],
                 num_matches: int, alignment_length: int, mapping_quality: int, optional_fields: Iterable[str] = ()):
        mapping_quality = int(mapping_quality)
        if not 0 <= mapping_quality <= 255:
            raise ValueError(f"Mapping quality must be between 0 and 255, not {mapping_quality}")
        object.__setattr__(self, '_query', Locus.coerce(query))
        object.__setattr__(self, '_strand', Strand.from_symbol(strand))
        object.__setattr__(self, '_target', Locus.coerce(target))
        object.__setattr__(self, '_num_matches', int(num_matches))
        object.__setattr__(self, '_alignment_length', int(alignment_length))
        object.__setattr__(self, '_mapping_quality', mapping_quality)
        object.__setattr__(self, '_optional_fields', tuple(str(i) for i in optional_fields))

    @property
    def query(self) -> Locus: return self._query
    @property
    def strand(self) -> Strand: return self._strand
    @property
    def target(self) -> Locus: return self._target
    @property
    def num_matches(self) -> int: return self._num_matches
    @property
    def alignment_length(self) -> int: return self._alignment_length
    @property
    def mapping_quality(self) -> int: return self._mapping_quality
    @property
    def optional_fields(self) -> tuple[str, ...]: return self._optional_fields

    def _key(self) -> tuple:
        return (self._query, self._strand, self._target, self._num_matches, self._alignment_length,
                self._mapping_quality, self._optional_fields)

    def __eq__(self, other):
        if not isinstance(other, Paf): return NotImplemented
        return self._key() == other._key()

    def __hash__(self): return hash(self._key())
    def __setattr__(self, key, value): raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __repr__(self):
        return (f"Paf({self._query!r}, {self._strand!s}, {self._target!r}, {self._num_matches}, "
                f"{self._alignment_length}, {self._mapping_quality}, {list(self._optional_fields)!r})")

    def __str__(self):
        columns = [*self._query._columns(), str(self._strand), *self._target._columns(), str(self._num_matches),
                   str(self._alignment_length), str(self._mapping_quality)]
        # All optional fields are kept, including a lone one
        columns.extend(self._optional_fields)
        _warn_unparseable(self, (self._query.name, self._target.name, *self._optional_fields))
        return '\t'.join(columns)

    def tobytes(self) -> bytes: return str(self).encode('utf-8')

    @classmethod
    def from_str(cls, s: str, line_num: Optional[int] = None) -> 'Paf':
        """
        Parses one complete PAF line; a single trailing newline is permitted.

        Args:
            s: The line.
            line_num: Line number to report in diagnostics, if known.

        Raises:
            LineParseFailure: If the line is malformed (NumberedParseFailure with ``line_num``).
            EmptyInput: If ``s`` is empty.
        """
        return _parse_complete('paf', s, line_num)

    @classmethod
    def from_bytes(cls, b: bytes, line_num: Optional[int] = None) -> 'Paf':
        """As :meth:`from_str`, for raw bytes whose text fields must be valid UTF-8."""
        return _parse_complete('paf', b, line_num)


# Functions ------------------------------------------------------------------------------------------------------------
def _warn_unparseable(record, texts: Iterable[str]):
    if any(c in text for text in texts for c in _SEPARATORS):
        warn(f"{record.__class__.__name__} has text fields containing tabs or line breaks; "
             f"the rendered line will not parse back to the same record", FormatWarning, stacklevel=3)


def _parse_complete(rule_name: str, data: Union[str, bytes], line_num: Optional[int]):
    from paflib.core import grammar
    rule = grammar.all_consuming(grammar.cut(getattr(grammar, rule_name)))
    try: _, value = rule(grammar.view(data))
    except grammar.ParseFailure as e: raise convert_error(data, e, line_num) from None
    return value


# Constants ------------------------------------------------------------------------------------------------------------
_SEPARATORS = '\t\r\n'
Strand._init_caches()

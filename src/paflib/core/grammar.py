"""
Composable grammar rules for PAF lines and loci.

A rule is a callable taking an input view (:class:`~paflib.core.views.TextView` or
:class:`~paflib.core.views.BytesView`) and returning ``(remaining view, value)``.
On failure a rule raises :class:`ParseFailure`, which records the offset of the
deepest failure and a trace that enclosing rules extend with their own labels.

Rules are built bottom-up: primitive token rules (:func:`char`, :data:`strand`,
:data:`string`, :func:`unsigned`) compose into the field and record rules
(:data:`locus`, :data:`optional_fields`, :data:`paf`).

Examples:
    >>> from paflib.core.views import TextView
    >>> rest, value = locus(TextView('seqid\\t10\\t0\\t9\\tmore'))
    >>> rest.rest
    '\\tmore'
"""
from enum import Enum, auto
from typing import Callable, Any, Union, Final

from paflib.core.views import TextView, BytesView, DIGITS, FIELD, view
from paflib.containers.paf import Strand, Locus, Paf

# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class ErrorKind(Enum):
    """Low-level token failures. These carry no human-readable text of their own."""
    CHAR = auto()
    ONE_OF = auto()
    DIGIT = auto()
    OVERFLOW = auto()
    UTF8 = auto()
    EOF = auto()


class ParseFailure(Exception):
    """
    Raised by a grammar rule that cannot match its input.

    Attributes:
        offset: Index into the original input of the deepest failure.
        kind: The innermost ErrorKind.
        trace: Ordered entries, innermost first. Each entry is an ErrorKind or a label string.
        fatal: True once the failure has crossed a ``cut``; optional rules do not recover from it.
    """
    def __init__(self, offset: int, kind: ErrorKind, *trace: Union[ErrorKind, str], fatal: bool = False):
        self.offset = offset
        self.kind = kind
        self.trace: list[Union[ErrorKind, str]] = [kind, *trace]
        self.fatal = fatal
        super().__init__(offset, kind)

    def __str__(self):
        return f"{self.kind.name} at offset {self.offset}: {' '.join(self.labels) or 'no details'}"

    @property
    def labels(self) -> list[str]:
        """Human-readable entries of the trace, in propagation order."""
        return [i for i in self.trace if isinstance(i, str)]

    def push(self, label: str) -> 'ParseFailure':
        self.trace.append(label)
        return self


Rule = Callable[[Any], tuple[Any, Any]]
Input = Union[TextView, BytesView]


# Combinators ----------------------------------------------------------------------------------------------------------
def context(label: str, rule: Rule) -> Rule:
    """Appends ``label`` to the trace of any failure raised by ``rule``."""
    def parse(i: Input):
        try: return rule(i)
        except ParseFailure as e: raise e.push(label)
    return parse


def cut(rule: Rule) -> Rule:
    """Makes failures of ``rule`` fatal, so enclosing optional rules cannot backtrack past them."""
    def parse(i: Input):
        try: return rule(i)
        except ParseFailure as e:
            e.fatal = True
            raise
    return parse


def opt(rule: Rule) -> Rule:
    """Returns ``None`` without consuming input if ``rule`` fails recoverably."""
    def parse(i: Input):
        try: return rule(i)
        except ParseFailure as e:
            if e.fatal: raise
            return i, None
    return parse


def sequence(*rules: Rule) -> Rule:
    """Applies rules in order, yielding a tuple of their values."""
    def parse(i: Input):
        values = []
        for rule in rules:
            i, value = rule(i)
            values.append(value)
        return i, tuple(values)
    return parse


def terminated(rule: Rule, after: Rule) -> Rule:
    def parse(i: Input):
        i, value = rule(i)
        i, _ = after(i)
        return i, value
    return parse


def preceded(before: Rule, rule: Rule) -> Rule:
    def parse(i: Input):
        i, _ = before(i)
        return rule(i)
    return parse


def mapped(rule: Rule, func: Callable) -> Rule:
    def parse(i: Input):
        i, value = rule(i)
        return i, func(value)
    return parse


def separated_list(separator: Rule, rule: Rule) -> Rule:
    """
    Zero or more ``rule`` matches separated by ``separator``.

    Empty input, or a single element that consumes nothing, yields an empty list. Once a
    separator has been consumed, the following element is mandatory and its failure is fatal.
    """
    element = cut(rule)

    def parse(i: Input):
        if not i: return i, []
        try: rest, value = rule(i)
        except ParseFailure as e:
            if e.fatal: raise
            return i, []
        values = [value]
        while True:
            try: after_sep, _ = separator(rest)
            except ParseFailure as e:
                if e.fatal: raise
                break
            rest, value = element(after_sep)
            values.append(value)
        if rest.offset == i.offset: return i, []
        return rest, values
    return parse


def all_consuming(rule: Rule) -> Rule:
    """Fails with ErrorKind.EOF if ``rule`` leaves any input unconsumed."""
    def parse(i: Input):
        i, value = rule(i)
        if i: raise ParseFailure(i.offset, ErrorKind.EOF, 'expected end of line')
        return i, value
    return parse


# Primitive rules ------------------------------------------------------------------------------------------------------
def _show(c: str) -> str:
    return c.encode('unicode_escape').decode('ascii') if not c.isprintable() else c


def char(c: str) -> Rule:
    """Matches exactly the character ``c``."""
    label = f"expected character '{_show(c)}'"

    def parse(i: Input):
        if i.first() != c: raise ParseFailure(i.offset, ErrorKind.CHAR, label)
        return i.advance(1), c
    return parse


def one_of(symbols: str) -> Rule:
    """Matches any single character of ``symbols``."""
    def parse(i: Input):
        c = i.first()
        if c is None or c not in symbols: raise ParseFailure(i.offset, ErrorKind.ONE_OF)
        return i.advance(1), c
    return parse


def _string(i: Input):
    n = i.span(FIELD)
    try: value = i.decode(n)
    except UnicodeDecodeError: raise ParseFailure(i.offset, ErrorKind.UTF8) from None
    return i.advance(n), value


def unsigned(bits: int) -> Rule:
    """
    Matches a run of ASCII digits as an unsigned integer of the given bit width.

    A run that overflows the width fails at the start of the run, never wraps.
    """
    limit = (1 << bits) - 1
    max_digits = len(str(limit))
    label = f"expected an unsigned {bits}-bit integer"

    def parse(i: Input):
        n = i.span(DIGITS)
        if not n: raise ParseFailure(i.offset, ErrorKind.DIGIT)
        # Leading zeros are allowed; any longer run of significant digits cannot fit
        digits = i.decode(n).lstrip('0') or '0'
        if len(digits) > max_digits: raise ParseFailure(i.offset, ErrorKind.OVERFLOW)
        value = int(digits)
        if value > limit: raise ParseFailure(i.offset, ErrorKind.OVERFLOW)
        return i.advance(n), value
    return context(label, parse)


tab = char('\t')
newline = char('\n')
strand = context("expected either '+' or '-'", mapped(one_of('+-'), Strand.from_symbol))
string = context('expected a utf-8 string', _string)
uint64 = unsigned(64)
uint8 = unsigned(8)


# Record rules ---------------------------------------------------------------------------------------------------------
locus = mapped(
    sequence(
        context('in column: seqid', terminated(string, tab)),
        context('in column: length', terminated(uint64, tab)),
        context('in column: start', terminated(uint64, tab)),
        context('in column: end', uint64),
    ),
    lambda t: Locus(*t)
)

optional_fields = separated_list(tab, cut(string))

_PAF_COLUMNS: Final = (
    ('query seqid', string), ('query length', uint64), ('query start', uint64), ('query end', uint64),
    ('strand', strand),
    ('target seqid', string), ('target length', uint64), ('target start', uint64), ('target end', uint64),
    ('number matches', uint64), ('alignment length', uint64),
)

paf = mapped(
    sequence(
        *(context(f'in column: {name}', terminated(rule, tab)) for name, rule in _PAF_COLUMNS),
        context('in column: mapping quality', uint8),
        context('in column: optional sam fields', opt(preceded(tab, optional_fields))),
        opt(newline)
    ),
    lambda t: Paf(Locus(*t[0:4]), t[4], Locus(*t[5:9]), t[9], t[10], t[11], t[12] or ())
)


# Functions ------------------------------------------------------------------------------------------------------------
def parse_locus(data) -> tuple[Input, Locus]:
    """
    Parses a locus from the start of ``data`` (``str``, bytes or a view).

    Returns:
        The remaining input view and the Locus.

    Raises:
        ParseFailure: If the input does not start with a locus.
    """
    return locus(view(data))


def parse_paf(data) -> tuple[Input, Paf]:
    """
    Parses a PAF line from the start of ``data`` (``str``, bytes or a view).

    Returns:
        The remaining input view and the Paf record.

    Raises:
        ParseFailure: If the input does not start with a PAF line.
    """
    return paf(view(data))

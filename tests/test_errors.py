import logging

import pytest

from paflib.core.grammar import ErrorKind, ParseFailure
from paflib.errors import (EmptyInput, LineParseFailure, NumberedParseFailure, CharacterMismatch, PafError,
                           convert_error, display_column, expand_tabs, find_offset, split_lines, TAB_WIDTH)
from paflib.containers.paf import Locus


class TestOffsets:
    def test_split_lines(self):
        assert split_lines('') == []
        assert split_lines('abc') == ['abc']
        assert split_lines('abc\n') == ['abc']
        assert split_lines('abc\nde') == ['abc', 'de']
        assert split_lines('\n') == ['']

    @pytest.mark.parametrize('offset, expected', [
        (0, (0, 0)), (3, (0, 3)), (4, (1, 0)), (6, (1, 2)), (99, (1, 2))
    ])
    def test_find_offset(self, offset, expected):
        assert find_offset(offset, ['abc', 'de']) == expected

    def test_display_column_without_tabs(self):
        assert display_column('abcdef', 4) == 4

    def test_display_column_with_tabs(self):
        # offset - N + 4N
        assert display_column('a\tb', 2) == 2 - 1 + 4
        assert display_column('\t\t\tx', 3) == 3 - 3 + 12
        # Tabs after the column do not count
        assert display_column('ab\tc', 1) == 1

    def test_expand_tabs(self):
        assert TAB_WIDTH == 4
        assert expand_tabs('a\tb') == 'a    b'
        assert expand_tabs('a\tb\r') == 'a    b'


class TestConvertError:
    def test_empty_input(self):
        err = convert_error('', ParseFailure(0, ErrorKind.CHAR, "expected character '\\t'"))
        assert isinstance(err, EmptyInput)
        assert err.line_num is None
        assert str(err) == 'Error while parsing line: expected paf line but got empty input.'

    def test_empty_input_with_line_number(self):
        err = convert_error(b'', ParseFailure(0, ErrorKind.CHAR), line_num=7)
        assert isinstance(err, EmptyInput)
        assert str(err) == 'Error while parsing line 7: expected paf line but got empty input.'

    def test_line_failure_without_tabs(self):
        err = convert_error('abc', ParseFailure(2, ErrorKind.DIGIT, 'expected an unsigned 64-bit integer'))
        assert isinstance(err, LineParseFailure) and not isinstance(err, NumberedParseFailure)
        assert (err.line, err.column, err.caret_column) == ('abc', 2, 2)
        assert str(err) == 'Error while parsing line:\nabc\n  ^ expected an unsigned 64-bit integer'

    def test_line_failure_with_tabs(self):
        line = 'seqid\t10\t0\tx'
        err = convert_error(line, ParseFailure(11, ErrorKind.DIGIT, 'expected an unsigned 64-bit integer',
                                               'in column: end'))
        assert err.column == 11
        assert err.caret_column == 11 - 3 + 3 * 4
        rendered_line, caret_line = str(err).split('\n')[1:]
        assert rendered_line == 'seqid    10    0    x'
        assert caret_line == ' ' * 20 + '^ expected an unsigned 64-bit integer in column: end'
        assert rendered_line[caret_line.index('^')] == 'x'

    def test_details_keep_order_and_drop_kinds(self):
        failure = ParseFailure(0, ErrorKind.DIGIT, 'a', ErrorKind.EOF, 'b', 'a')
        err = convert_error('x', failure)
        assert err.details == ['a', 'b', 'a']

    def test_details_never_empty(self):
        err = convert_error('x', ParseFailure(0, ErrorKind.EOF))
        assert err.details == ['unexpected input']

    def test_numbered_failure(self):
        text = 'line one\nbad\tx'
        err = convert_error(text, ParseFailure(13, ErrorKind.DIGIT, 'expected'), line_num=1)
        assert isinstance(err, NumberedParseFailure)
        assert (err.line_num, err.line, err.column, err.caret_column) == (2, 'bad\tx', 4, 7)
        assert str(err).startswith('Error while parsing line 2:\nbad    x\n       ^ expected')

    def test_offset_at_line_boundary_starts_next_line(self):
        err = convert_error('abc\nde', ParseFailure(4, ErrorKind.CHAR, 'expected'))
        assert (err.line, err.column) == ('de', 0)
        err = convert_error('abc\nde', ParseFailure(3, ErrorKind.CHAR, 'expected'))
        assert (err.line, err.column) == ('abc', 3)

    def test_byte_offsets_map_to_characters(self):
        text = 'séq\t10\t0\tx'
        from_text = convert_error(text, ParseFailure(9, ErrorKind.DIGIT, 'expected'))
        from_bytes = convert_error(text.encode('utf-8'), ParseFailure(10, ErrorKind.DIGIT, 'expected'))
        assert from_bytes.column == from_text.column == 9
        assert str(from_bytes) == str(from_text)

    def test_logs_conversion(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='paflib.errors'):
            convert_error('abc', ParseFailure(1, ErrorKind.CHAR, 'expected'))
        assert 'offset 1' in caplog.text


class TestExceptions:
    def test_hierarchy(self):
        for cls in (EmptyInput, LineParseFailure, NumberedParseFailure, CharacterMismatch):
            assert issubclass(cls, PafError)
        assert issubclass(NumberedParseFailure, LineParseFailure)

    def test_character_mismatch(self):
        err = CharacterMismatch('?', '+-')
        assert (err.got, err.expected) == ('?', '+-')
        assert str(err) == "Error while parsing character. Expected any of '+-' but got ?."

    def test_failures_from_parsing_are_raised(self):
        with pytest.raises(LineParseFailure, match='in column: end'):
            Locus.from_str('seqid\t10\t0\tx')

import numpy as np
import pytest

from paflib.core.views import TokenClass, TextView, BytesView, DIGITS, FIELD, view
from paflib.lib.protocols import ParserInput
from paflib.lib.resources import RESOURCES, Resources, jit


class TestTokenClass:
    def test_digits(self):
        assert '7' in DIGITS and b'7' in DIGITS and ord('7') in DIGITS
        assert 'a' not in DIGITS and '٢' not in DIGITS and '' not in DIGITS

    def test_field(self):
        assert 'a' in FIELD and 'é' in FIELD and 0xff in FIELD
        for sep in '\t\r\n': assert sep not in FIELD

    def test_table(self):
        assert DIGITS.table.dtype == np.bool_
        assert len(DIGITS.table) == 256
        assert DIGITS.table.sum() == 10
        assert FIELD.table.sum() == 253

    def test_span(self):
        assert DIGITS.span('123abc') == 3
        assert DIGITS.span('abc') == 0
        assert FIELD.span('ab\tcd', 3) == 2

    def test_invalid(self):
        with pytest.raises(ValueError):
            TokenClass('bad', 'é'.encode('utf-8'))


@pytest.mark.parametrize('cls, data', [(TextView, 'ab\t12'), (BytesView, b'ab\t12')])
class TestViews:
    def test_protocol(self, cls, data):
        assert isinstance(cls(data), ParserInput)

    def test_advance_is_immutable(self, cls, data):
        v = cls(data)
        w = v.advance(3)
        assert v.offset == 0 and w.offset == 3
        assert w.rest == data[3:]
        assert len(v) == 5 and len(w) == 2

    def test_first(self, cls, data):
        v = cls(data)
        assert v.first() == 'a'
        assert v.advance(2).first() == '\t'
        assert v.advance(5).first() is None
        assert not v.advance(5) and v

    def test_advance_past_end(self, cls, data):
        assert cls(data).advance(99).offset == 5

    def test_span(self, cls, data):
        v = cls(data)
        assert v.span(FIELD) == 2
        assert v.span(DIGITS) == 0
        assert v.advance(3).span(DIGITS) == 2

    def test_decode(self, cls, data):
        assert cls(data).advance(3).decode(2) == '12'

    def test_equality(self, cls, data):
        assert cls(data).advance(1) == cls(data).advance(1)
        assert cls(data) != cls(data).advance(1)


class TestBytesView:
    def test_non_ascii_first(self):
        assert BytesView('é'.encode('utf-8')).first() == '\xc3'

    def test_decode_invalid(self):
        with pytest.raises(UnicodeDecodeError):
            BytesView(b'\xff').decode(1)

    def test_empty(self):
        v = BytesView(b'')
        assert v.span(FIELD) == 0 and v.first() is None


class TestViewFactory:
    def test_view(self):
        assert isinstance(view('a'), TextView)
        assert isinstance(view(b'a'), BytesView)
        assert isinstance(view(bytearray(b'a')), BytesView)
        v = TextView('a')
        assert view(v) is v

    def test_invalid(self):
        with pytest.raises(TypeError):
            view(1)


class TestResources:
    def test_has_module(self):
        assert RESOURCES.has_module('numpy')
        assert not Resources.has_module('not_a_real_module_name')
        assert RESOURCES.package == 'paflib'

    def test_jit(self):
        @jit(nopython=True, cache=False)
        def add(a, b): return a + b
        assert add(1, 2) == 3

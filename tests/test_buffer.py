import pytest
from hypothesis import given, strategies as st

from widgetcore.buffer import NEWLINE, LayoutRow, StringBuffer, TextBuffer


def _rows(buf):
    start = 0
    rows = []
    while start < len(buf):
        row = buf.layout_row(start)
        rows.append((start, row))
        start += row.num_chars
    return rows


def test_text_buffer_is_abstract():
    with pytest.raises(TypeError):
        TextBuffer()


def test_len_and_str():
    buf = StringBuffer("hello")
    assert len(buf) == len("hello")
    assert str(buf) == "hello"


def test_char_at_and_bounds():
    buf = StringBuffer("abc")
    assert buf.char_at(1) == "b"
    with pytest.raises(IndexError):
        buf.char_at(3)
    with pytest.raises(IndexError):
        buf.char_at(-1)


def test_layout_row_includes_newline():
    buf = StringBuffer("ab\ncd", char_width=2.0, line_height=10.0)
    row = buf.layout_row(0)
    assert row.num_chars == len("ab\n")
    assert row.x0 == 0.0
    assert row.x1 == 2.0 * len("ab")
    assert row.ymax == 10.0
    assert row.baseline_y_delta == 10.0
    last = buf.layout_row(3)
    assert last.num_chars == len("cd")


def test_layout_row_at_end_is_empty():
    buf = StringBuffer("ab")
    assert buf.layout_row(2) == LayoutRow(0.0, 0.0, 1.0, 0.0, 1.0, 0)


def test_layout_row_out_of_range():
    with pytest.raises(IndexError):
        StringBuffer("ab").layout_row(5)


def test_char_width_newline_is_zero():
    buf = StringBuffer("a\nb", char_width=3.0)
    assert buf.char_width(0, 0) == 3.0
    assert buf.char_width(0, 1) == 0.0
    assert buf.char_width(2, 0) == 3.0


def test_insert_and_delete():
    buf = StringBuffer("hello")
    assert buf.insert_chars(5, " world") is True
    assert str(buf) == "hello world"
    buf.delete_chars(0, 6)
    assert str(buf) == "world"


def test_insert_iterable_of_chars():
    buf = StringBuffer("ad")
    assert buf.insert_chars(1, ["b", "c"])
    assert str(buf) == "abcd"


def test_max_length_refuses_insert():
    buf = StringBuffer("ab", max_length=3)
    assert buf.insert_chars(2, "c")
    assert buf.insert_chars(0, "x") is False
    assert str(buf) == "abc"


def test_delete_past_end_raises():
    buf = StringBuffer("abc")
    with pytest.raises(IndexError):
        buf.delete_chars(2, 5)
    with pytest.raises(ValueError):
        buf.delete_chars(0, -1)
    assert str(buf) == "abc"


def test_invalid_construction():
    with pytest.raises(ValueError):
        StringBuffer("abc", max_length=2)
    with pytest.raises(ValueError):
        StringBuffer("", line_height=0)


text_st = st.text(alphabet="ab \n", max_size=30)


@given(text_st)
def test_rows_cover_whole_text(text):
    buf = StringBuffer(text)
    rows = _rows(buf)
    assert sum(row.num_chars for _, row in rows) == len(text)
    for start, row in rows[:-1]:
        assert buf.char_at(start + row.num_chars - 1) == NEWLINE


@given(text_st)
def test_row_width_matches_char_widths(text):
    buf = StringBuffer(text, char_width=1.5)
    for start, row in _rows(buf):
        total = sum(buf.char_width(start, i) for i in range(row.num_chars))
        assert total == pytest.approx(row.x1 - row.x0)


@given(text_st, text_st, st.data())
def test_insert_delete_round_trip(text, extra, data):
    buf = StringBuffer(text)
    pos = data.draw(st.integers(0, len(text)))
    assert buf.insert_chars(pos, extra)
    assert str(buf) == text[:pos] + extra + text[pos:]
    buf.delete_chars(pos, len(extra))
    assert str(buf) == text
"""Tests for grapheme-aware rows."""

import pytest

from hecto.row import Row, grapheme_width


COMBINING_E = "e\u0301"  # e + combining acute accent
STACKED = "o\u0308\u0301"  # o + two combining marks


def test_length_counts_graphemes():
    assert len(Row("")) == 0
    assert len(Row("abc")) == 3
    assert len(Row(COMBINING_E + "x")) == 2
    assert len(Row(STACKED)) == 1


@pytest.mark.parametrize("text,start,end,expected", [
    ("hello", 0, 5, "hello"),
    ("hello", 1, 3, "el"),
    ("hello", 3, 100, "lo"),
    ("hello", 4, 2, ""),
    ("hello", 10, 20, ""),
    ("", 0, 10, ""),
])
def test_render_clamps(text, start, end, expected):
    assert Row(text).render(start, end) == expected


def test_render_slices_whole_graphemes():
    row = Row("a" + COMBINING_E + "b")
    assert row.render(1, 2) == COMBINING_E


def test_insert_then_delete_restores_text():
    for text in ["", "abc", "h" + COMBINING_E + "llo", "漢字"]:
        for index in range(len(Row(text)) + 1):
            row = Row(text)
            row.insert_at(index, "z")
            assert len(row) == len(Row(text)) + 1
            row.delete_at(index)
            assert row.to_text() == text


def test_insert_past_end_appends():
    row = Row("ab")
    row.insert_at(10, "c")
    assert row.to_text() == "abc"


def test_combining_mark_joins_previous_grapheme():
    row = Row("e")
    row.insert_at(1, "\u0301")
    assert len(row) == 1
    assert row.to_text() == COMBINING_E


def test_delete_out_of_range_is_noop():
    row = Row("ab")
    row.delete_at(2)
    row.delete_at(-1)
    assert row.to_text() == "ab"


def test_delete_removes_whole_cluster():
    row = Row("a" + STACKED + "b")
    row.delete_at(1)
    assert row.to_text() == "ab"


def test_split_then_append_restores_row():
    text = "h" + COMBINING_E + "llo"
    for index in range(len(Row(text)) + 1):
        left, right = Row(text).split_at(index)
        assert len(left) == index
        left.append(right)
        assert left.to_text() == text


def test_find():
    row = Row("cat dog cats")
    assert row.find("cat") == 0
    assert row.find("cat", 1) == 8
    assert row.find("cow") is None
    assert row.find("") is None


def test_find_uses_grapheme_indices():
    row = Row(COMBINING_E + "x" + COMBINING_E + "y")
    assert row.find(COMBINING_E + "y") == 2


def test_display_offsets_account_for_wide_graphemes():
    row = Row("a漢b")
    assert grapheme_width("漢") == 2
    assert row.to_display_offset(0) == 0
    assert row.to_display_offset(1) == 1
    assert row.to_display_offset(2) == 3
    assert row.to_display_offset(3) == 4
    assert row.to_grapheme_index(0) == 0
    assert row.to_grapheme_index(2) == 1
    assert row.to_grapheme_index(3) == 2
    assert row.to_grapheme_index(100) == 3


def test_control_characters_take_one_column():
    assert grapheme_width("\x01") == 1


def test_equality_compares_text():
    assert Row("abc") == Row("abc")
    assert Row("abc") != Row("abd")

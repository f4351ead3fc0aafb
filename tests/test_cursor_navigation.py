"""Tests for cursor movement and clamping."""

import pytest

from conftest import press
from hecto.position import Position


@pytest.fixture
def editor(make_editor):
    return make_editor(["short", "a much longer line", "", "end"])


def test_right_wraps_to_next_row(editor):
    press(editor, *(['<RIGHT>'] * 6))
    assert editor.cursor_position == Position.at(0, 1)


def test_left_wraps_to_previous_row_end(editor):
    press(editor, '<DOWN>', '<LEFT>')
    assert editor.cursor_position == Position.at(5, 0)


def test_left_at_origin_stays(editor):
    press(editor, '<LEFT>', '<UP>')
    assert editor.cursor_position == Position.zero()


def test_right_at_document_end_stays(editor):
    editor.cursor_position = Position.at(3, 3)
    press(editor, '<RIGHT>')
    assert editor.cursor_position == Position.at(3, 3)


def test_vertical_move_clamps_column(editor):
    press(editor, '<DOWN>', '<END>')
    assert editor.cursor_position == Position.at(18, 1)
    press(editor, '<UP>')
    assert editor.cursor_position == Position.at(5, 0)
    press(editor, '<DOWN>', '<DOWN>', '<DOWN>')
    assert editor.cursor_position == Position.at(0, 3)


def test_down_past_last_row_clamps(editor):
    press(editor, *(['<DOWN>'] * 10))
    assert editor.cursor_position.y == 3


def test_home_and_end(editor):
    press(editor, '<DOWN>', '<END>')
    assert editor.cursor_position.x == 18
    press(editor, '<HOME>')
    assert editor.cursor_position.x == 0
    press(editor, '<Ctrl-e>')
    assert editor.cursor_position.x == 18
    press(editor, '<Ctrl-a>')
    assert editor.cursor_position.x == 0


def test_page_down_and_up(make_editor, terminal):
    editor = make_editor([str(i) for i in range(50)])
    press(editor, '<PAGEDOWN>')
    assert editor.cursor_position.y == terminal.height
    press(editor, '<PAGEDOWN>', '<PAGEDOWN>', '<PAGEDOWN>', '<PAGEDOWN>', '<PAGEDOWN>')
    assert editor.cursor_position.y == 49
    press(editor, '<PAGEUP>')
    assert editor.cursor_position.y == 49 - terminal.height
    press(editor, *(['<PAGEUP>'] * 10))
    assert editor.cursor_position.y == 0


def test_sanitize_is_idempotent(make_editor):
    editor = make_editor(["abc", "de"])
    for position in [Position.at(10, 0), Position.at(10, 9), Position.at(1, 1), Position.zero()]:
        editor.cursor_position = position
        editor.sanitize_position()
        once = editor.cursor_position
        editor.sanitize_position()
        assert editor.cursor_position == once
        assert once.y < editor.document.height()
        assert once.x <= editor.document.width_at(once)


def test_sanitize_on_empty_document(make_editor):
    editor = make_editor()
    editor.cursor_position = Position.at(4, 4)
    editor.sanitize_position()
    assert editor.cursor_position == Position.zero()

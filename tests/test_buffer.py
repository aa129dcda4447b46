"""Tests for pi.lineedit.buffer.LineBuffer."""

from __future__ import annotations

import pytest

from pi.lineedit.buffer import LineBuffer


def make_buffer(text: str, cursor: int) -> LineBuffer:
    buf = LineBuffer(text)
    while buf.cursor_index > cursor:
        buf.move_left()
    return buf


class TestInitialState:
    def test_empty(self) -> None:
        buf = LineBuffer()
        assert buf.text == ""
        assert buf.cursor_index == 0
        assert len(buf) == 0
        assert buf.at_end

    def test_initial_text_puts_cursor_at_end(self) -> None:
        buf = LineBuffer("abc")
        assert buf.cursor_index == 3


class TestInsert:
    """insert / insert_sequence add text at the cursor and advance it."""

    def test_insert_appends_at_end(self) -> None:
        buf = LineBuffer()
        for ch in "abc":
            buf.insert(ch)
        assert buf.text == "abc"
        assert buf.cursor_index == 3

    def test_insert_in_middle(self) -> None:
        buf = make_buffer("ac", 1)
        buf.insert("b")
        assert buf.text == "abc"
        assert buf.cursor_index == 2

    def test_insert_at_start(self) -> None:
        buf = make_buffer("bc", 0)
        buf.insert("a")
        assert buf.text == "abc"
        assert buf.cursor_index == 1

    def test_insert_counts_characters_not_bytes(self) -> None:
        buf = LineBuffer()
        buf.insert("é")
        buf.insert("世")
        assert len(buf) == 2
        assert buf.cursor_index == 2

    def test_insert_rejects_multiple_characters(self) -> None:
        buf = LineBuffer()
        with pytest.raises(ValueError):
            buf.insert("ab")

    def test_insert_sequence_advances_past_sequence(self) -> None:
        buf = make_buffer("ad", 1)
        buf.insert_sequence("bc")
        assert buf.text == "abcd"
        assert buf.cursor_index == 3

    def test_insert_empty_sequence_is_noop(self) -> None:
        buf = make_buffer("ab", 1)
        buf.insert_sequence("")
        assert buf.text == "ab"
        assert buf.cursor_index == 1

    def test_length_tracks_inserts_minus_removals(self) -> None:
        buf = LineBuffer()
        for ch in "hello world":
            buf.insert(ch)
        buf.backspace()
        buf.backspace()
        buf.move_left()
        buf.move_left()
        buf.delete()
        assert len(buf) == len("hello world") - 3
        assert 0 <= buf.cursor_index <= len(buf)


class TestCursorMovement:
    """move_left / move_right saturate at the ends."""

    def test_left_then_right_is_identity(self) -> None:
        for position in range(1, 4):
            buf = make_buffer("abcd", position)
            buf.move_left()
            buf.move_right()
            assert buf.cursor_index == position

    def test_move_left_at_start_is_idempotent(self) -> None:
        buf = make_buffer("abc", 0)
        buf.move_left()
        buf.move_left()
        assert buf.cursor_index == 0

    def test_move_right_at_end_is_idempotent(self) -> None:
        buf = LineBuffer("abc")
        buf.move_right()
        buf.move_right()
        assert buf.cursor_index == 3

    def test_moves_on_empty_buffer(self) -> None:
        buf = LineBuffer()
        buf.move_left()
        buf.move_right()
        assert buf.cursor_index == 0

    def test_moves_do_not_change_text(self) -> None:
        buf = LineBuffer("abc")
        buf.move_left()
        buf.move_right()
        assert buf.text == "abc"


class TestBackspace:
    def test_backspace_at_start_is_noop(self) -> None:
        buf = make_buffer("abc", 0)
        buf.backspace()
        assert buf.text == "abc"
        assert buf.cursor_index == 0

    def test_backspace_on_empty_is_noop(self) -> None:
        buf = LineBuffer()
        buf.backspace()
        assert buf.text == ""
        assert buf.cursor_index == 0

    def test_backspace_removes_char_before_cursor(self) -> None:
        buf = make_buffer("abc", 2)
        buf.backspace()
        assert buf.text == "ac"
        assert buf.cursor_index == 1

    def test_insert_then_backspace_restores_state(self) -> None:
        buf = make_buffer("xyz", 1)
        buf.insert("a")
        buf.backspace()
        assert buf.text == "xyz"
        assert buf.cursor_index == 1


class TestDelete:
    def test_delete_removes_char_after_cursor(self) -> None:
        buf = make_buffer("abc", 1)
        buf.delete()
        assert buf.text == "ac"
        assert buf.cursor_index == 1

    def test_delete_at_start(self) -> None:
        buf = make_buffer("abc", 0)
        buf.delete()
        assert buf.text == "bc"
        assert buf.cursor_index == 0

    def test_delete_at_end_violates_precondition(self) -> None:
        buf = LineBuffer("abc")
        with pytest.raises(IndexError):
            buf.delete()
        assert buf.text == "abc"

    def test_delete_on_empty_violates_precondition(self) -> None:
        with pytest.raises(IndexError):
            LineBuffer().delete()

    def test_type_abc_left_left_delete(self) -> None:
        buf = LineBuffer()
        for ch in "abc":
            buf.insert(ch)
        buf.move_left()
        buf.move_left()
        buf.delete()
        assert buf.text == "ac"
        assert buf.cursor_index == 1

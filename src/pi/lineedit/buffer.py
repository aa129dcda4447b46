"""LineBuffer - the text being edited and its logical cursor."""

from __future__ import annotations


class LineBuffer:
    """Editable single line of text with an insertion point.

    The cursor is a character offset into the text and always satisfies
    ``0 <= cursor_index <= len(text)``.  Moves saturate at either end.
    """

    def __init__(self, text: str = "") -> None:
        self._value: str = text
        self._cursor: int = len(text)

    @property
    def text(self) -> str:
        return self._value

    @property
    def cursor_index(self) -> int:
        return self._cursor

    @property
    def at_end(self) -> bool:
        return self._cursor == len(self._value)

    def __len__(self) -> int:
        return len(self._value)

    def __repr__(self) -> str:
        return f"LineBuffer({self._value!r}, cursor_index={self._cursor})"

    def insert(self, char: str) -> None:
        """Insert a single character at the cursor and step past it."""
        if len(char) != 1:
            raise ValueError(f"insert() takes one character, got {char!r}")
        self.insert_sequence(char)

    def insert_sequence(self, text: str) -> None:
        """Insert *text* at the cursor and leave the cursor after it."""
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._cursor += len(text)

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self) -> None:
        if self._cursor < len(self._value):
            self._cursor += 1

    def backspace(self) -> None:
        """Delete the character before the cursor; no-op at the start."""
        if self._cursor == 0:
            return
        self.move_left()
        self.delete()

    def delete(self) -> None:
        """Delete the character under (after) the cursor.

        Raises ``IndexError`` when the cursor is at the end of the text;
        callers check :attr:`at_end` first.
        """
        if self._cursor >= len(self._value):
            raise IndexError("delete at end of buffer")
        self._value = self._value[: self._cursor] + self._value[self._cursor + 1 :]

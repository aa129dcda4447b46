"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

``VirtualTerminal`` keeps a character grid, a cursor with deferred
auto-wrap (like xterm), a saved-cursor slot and a queue of scripted input
events, so tests can assert on what the screen would actually show.
"""

from __future__ import annotations

import contextlib
from collections import deque
from dataclasses import dataclass
from typing import Iterator

from pi.lineedit.keys import InputEvent, Key, KeyEvent, ResizeEvent


@dataclass
class _PendingResize:
    rows: int | None
    columns: int | None


class VirtualTerminal:
    """In-memory terminal that records writes and models the screen.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self._rows = rows
        self._columns = columns
        self._grid: list[list[str]] = [[" "] * columns for _ in range(rows)]
        self.cursor: tuple[int, int] = (0, 0)
        self._pending_wrap = False
        self._saved: tuple[int, int] | None = None
        self._events: deque[InputEvent | _PendingResize] = deque()
        self._buffer: list[str] = []

        self.is_raw = False
        self.raw_mode_entries = 0
        self.calls: list[str] = []

    # -- Terminal protocol: properties --------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # -- Terminal protocol: lifecycle ---------------------------------------

    def start(self) -> None:
        self.is_raw = True
        self.raw_mode_entries += 1

    def stop(self) -> None:
        self.is_raw = False

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[VirtualTerminal]:
        self.start()
        try:
            yield self
        finally:
            self.stop()

    # -- Terminal protocol: input -------------------------------------------

    def read_event(self) -> InputEvent:
        if not self._events:
            raise RuntimeError("no scripted input left")
        event = self._events.popleft()
        if isinstance(event, _PendingResize):
            self.set_size(event.rows, event.columns)
            return ResizeEvent(columns=self._columns, rows=self._rows)
        return event

    def cursor_position(self) -> tuple[int, int]:
        self.calls.append("cursor_position")
        return self.cursor

    # -- Terminal protocol: output ------------------------------------------

    def write(self, data: str) -> None:
        self._buffer.append(data)
        for ch in data:
            self._put(ch)

    def move_to(self, row: int, column: int) -> None:
        self.calls.append(f"move_to({row}, {column})")
        row = min(max(row, 0), self._rows - 1)
        column = min(max(column, 0), self._columns - 1)
        self.cursor = (row, column)
        self._pending_wrap = False

    def clear_from_cursor(self) -> None:
        self.calls.append("clear_from_cursor")
        row, column = self.cursor
        for c in range(column, self._columns):
            self._grid[row][c] = " "
        for r in range(row + 1, self._rows):
            self._grid[r] = [" "] * self._columns

    def save_cursor(self) -> None:
        self.calls.append("save_cursor")
        self._saved = self.cursor

    def restore_cursor(self) -> None:
        self.calls.append("restore_cursor")
        if self._saved is not None:
            self.cursor = self._saved
            self._pending_wrap = False

    def scroll_up(self, lines: int) -> None:
        self.calls.append(f"scroll_up({lines})")
        for _ in range(lines):
            self._scroll()

    # -- Test helpers -------------------------------------------------------

    @property
    def output(self) -> str:
        """Everything passed to ``write`` as a single string."""
        return "".join(self._buffer)

    def line(self, row: int) -> str:
        """Screen contents of *row* without trailing blanks."""
        return "".join(self._grid[row]).rstrip()

    @property
    def screen(self) -> list[str]:
        return [self.line(r) for r in range(self._rows)]

    def feed(self, *events: InputEvent) -> None:
        self._events.extend(events)

    def type_text(self, text: str) -> None:
        for ch in text:
            self.feed(KeyEvent(Key.space) if ch == " " else KeyEvent(ch, shift=ch.isupper()))

    def press(self, key: str, **modifiers: bool) -> None:
        self.feed(KeyEvent(key, **modifiers))

    def resize(self, rows: int | None = None, columns: int | None = None) -> None:
        """Queue a resize that takes effect when the event is read."""
        self._events.append(_PendingResize(rows, columns))

    def set_size(self, rows: int | None = None, columns: int | None = None) -> None:
        """Change dimensions immediately, without reflowing the grid."""
        if columns is not None and columns != self._columns:
            for r in range(self._rows):
                self._grid[r] = (self._grid[r] + [" "] * columns)[:columns]
            self._columns = columns
        if rows is not None and rows != self._rows:
            self._grid = (self._grid + [[" "] * self._columns for _ in range(rows)])[:rows]
            self._rows = rows
        row, column = self.cursor
        self.cursor = (min(row, self._rows - 1), min(column, self._columns - 1))

    # -- internals ------------------------------------------------------------

    def _scroll(self) -> None:
        self._grid.pop(0)
        self._grid.append([" "] * self._columns)

    def _line_feed(self) -> None:
        row, column = self.cursor
        if row == self._rows - 1:
            self._scroll()
        else:
            row += 1
        self.cursor = (row, column)

    def _put(self, ch: str) -> None:
        if ch == "\r":
            self.cursor = (self.cursor[0], 0)
            self._pending_wrap = False
            return
        if ch == "\n":
            self._line_feed()
            self._pending_wrap = False
            return

        if self._pending_wrap:
            self._line_feed()
            self.cursor = (self.cursor[0], 0)
            self._pending_wrap = False

        row, column = self.cursor
        self._grid[row][column] = ch
        if column == self._columns - 1:
            self._pending_wrap = True
        else:
            self.cursor = (row, column + 1)

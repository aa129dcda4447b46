"""Render engine: map the logical cursor to the screen and repaint the line.

The prompt and the edited text are laid out as one continuous run of cells
that starts at ``(origin_row, 0)`` and wraps every ``W`` columns, where ``W``
is the terminal width at the time of the render::

    true_position = prompt_width + cursor_index
    column        = true_position % W
    row           = origin_row + true_position // W
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pi.lineedit.buffer import LineBuffer
from pi.lineedit.terminal import Terminal

logger = logging.getLogger(__name__)


@dataclass
class RenderContext:
    """Where the prompt lives on screen.

    ``origin_row`` only changes when the renderer scrolls the screen to make
    room for wrapped text, or when it re-anchors after a resize.
    """

    origin_row: int
    prompt_width: int


def text_start(context: RenderContext, width: int) -> tuple[int, int]:
    """Screen cell of the first editable character.

    A prompt wider than the terminal wraps onto rows of its own; those rows
    are added to ``origin_row`` here so cursor arithmetic never assumes the
    prompt fits on one line.
    """
    width = max(width, 1)
    return (
        context.origin_row + context.prompt_width // width,
        context.prompt_width % width,
    )


def screen_position(context: RenderContext, cursor_index: int, width: int) -> tuple[int, int]:
    """Return the ``(row, column)`` at which *cursor_index* is displayed."""
    width = max(width, 1)
    start_row, start_column = text_start(context, width)
    offset = start_column + cursor_index
    return start_row + offset // width, offset % width


class Renderer:
    """Keeps the terminal in sync with a :class:`LineBuffer`."""

    def __init__(
        self,
        terminal: Terminal,
        buffer: LineBuffer,
        context: RenderContext,
        prompt: str = "",
    ) -> None:
        self.terminal = terminal
        self.buffer = buffer
        self.context = context
        self.prompt = prompt

    def position(self, cursor_index: int | None = None) -> tuple[int, int]:
        if cursor_index is None:
            cursor_index = self.buffer.cursor_index
        return screen_position(self.context, cursor_index, self.terminal.columns)

    def start(self) -> None:
        """Paint the prompt at the origin row, then the buffer."""
        self._reserve_rows(0)
        self.terminal.move_to(self.context.origin_row, 0)
        self.terminal.clear_from_cursor()
        self.terminal.write(self.prompt)
        self.full_redraw()

    def reposition_cursor(self) -> None:
        """Move the visible cursor to the logical cursor; text is unchanged."""
        row, column = self.position()
        self.terminal.move_to(row, column)

    def full_redraw(self) -> None:
        """Repaint the whole buffer and leave the cursor at the edit point.

        Painting leaves the terminal cursor after the last character, so the
        target cell is saved first and restored once the text is written.
        """
        self._reserve_rows(len(self.buffer))
        width = self.terminal.columns

        row, column = self.position()
        self.terminal.move_to(row, column)
        self.terminal.save_cursor()

        start_row, start_column = text_start(self.context, width)
        self.terminal.move_to(start_row, start_column)
        self.terminal.clear_from_cursor()
        self.terminal.write(self.buffer.text)

        self.terminal.restore_cursor()

    def resize(self) -> None:
        """Re-anchor the prompt after the terminal changed size.

        The terminal keeps the cursor on the row it reflowed it to; the new
        origin is that row minus the rows the prompt and the text before the
        cursor take at the new width.
        """
        width = max(self.terminal.columns, 1)
        row, _ = self.terminal.cursor_position()
        wrapped = (self.context.prompt_width + self.buffer.cursor_index) // width
        self.context.origin_row = max(0, row - wrapped)
        logger.debug(
            "re-anchored at row %d for width %d", self.context.origin_row, width
        )
        self.start()

    def finish(self) -> None:
        """Leave the cursor on a fresh line below the accepted text."""
        self._reserve_rows(len(self.buffer))
        row, column = self.position(len(self.buffer))
        self.terminal.move_to(row, column)
        if column != 0 or row == self.context.origin_row:
            self.terminal.write("\r\n")

    def _reserve_rows(self, cursor_index: int) -> None:
        """Scroll the screen so the row holding *cursor_index* exists."""
        last_row, _ = self.position(cursor_index)
        overflow = last_row - (self.terminal.rows - 1)
        if overflow > 0:
            self.terminal.scroll_up(overflow)
            self.context.origin_row -= overflow
            logger.debug("scrolled %d row(s), origin row now %d", overflow, self.context.origin_row)

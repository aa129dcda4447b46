"""Terminal abstraction for raw-mode, blocking, single-line editing.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` backed by
a tty file descriptor.  ``ProcessTerminal`` manages raw mode via :mod:`tty`
and :mod:`termios`, turns off mouse reporting and bracketed paste, answers
cursor position queries (DSR) and reports SIGWINCH as a resize event.
"""

from __future__ import annotations

import codecs
import contextlib
import logging
import os
import re
import select
import signal
import sys
import termios
import time
import tty
from collections import deque
from typing import IO, Iterator, Protocol

from pi.lineedit.errors import TerminalError
from pi.lineedit.keys import InputEvent, PasteEvent, ResizeEvent, parse_event
from pi.lineedit.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"
_MOUSE_DISABLE = "\x1b[?1000l\x1b[?1002l\x1b[?1003l\x1b[?1006l"

_QUERY_CURSOR_POSITION = "\x1b[6n"
_CURSOR_POSITION_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")

_MOVE_TO_FMT = "\x1b[{};{}H"
_CLEAR_FROM_CURSOR = "\x1b[0J"
_SAVE_CURSOR = "\x1b7"
_RESTORE_CURSOR = "\x1b8"
_SCROLL_UP_FMT = "\x1b[{}S"

_CURSOR_QUERY_TIMEOUT = 1.0


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Capabilities the prompt session needs from its terminal.

    Rows and columns are 0-based everywhere.
    """

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def raw_mode(self) -> contextlib.AbstractContextManager[Terminal]: ...

    def read_event(self) -> InputEvent: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def cursor_position(self) -> tuple[int, int]: ...

    def move_to(self, row: int, column: int) -> None: ...

    def clear_from_cursor(self) -> None: ...

    def save_cursor(self) -> None: ...

    def restore_cursor(self) -> None: ...

    def scroll_up(self, lines: int) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by ``sys.stdin`` and an output stream.

    Rendering goes to *output* (``sys.stdout`` by default); the CLI passes
    ``sys.stderr`` so the accepted line alone ends up on stdout.
    """

    def __init__(
        self,
        *,
        output: IO[str] | None = None,
        input_fd: int | None = None,
        read_timeout: float = 0.01,
    ) -> None:
        self._output = output if output is not None else sys.stdout
        self._input_fd_override = input_fd
        self._read_timeout = read_timeout

        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._resize_pending: bool = False

        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._events: deque[InputEvent] = deque()
        self._awaiting_position: bool = False
        self._position_reply: tuple[int, int] | None = None

        self._stdin_buffer = StdinBuffer()
        self._stdin_buffer.on_data(self._on_buffer_data)
        self._stdin_buffer.on_paste(lambda text: self._events.append(PasteEvent(text)))

        self._write_log_path: str = os.environ.get("PI_LINEEDIT_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    @property
    def is_raw(self) -> bool:
        return self._original_termios is not None

    @property
    def _input_fd(self) -> int:
        if self._input_fd_override is not None:
            return self._input_fd_override
        try:
            return sys.stdin.fileno()
        except (AttributeError, ValueError, OSError) as exc:
            raise TerminalError(f"input has no file descriptor: {exc}") from exc

    def _size(self) -> os.terminal_size:
        for get_fd in (self._output.fileno, lambda: self._input_fd):
            try:
                return os.get_terminal_size(get_fd())
            except (AttributeError, ValueError, OSError, TerminalError):
                continue
        return os.terminal_size((80, 24))

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter raw mode and install the SIGWINCH handler."""
        if self._original_termios is not None:
            return

        fd = self._input_fd
        try:
            self._original_termios = termios.tcgetattr(fd)
        except termios.error as exc:
            raise TerminalError(f"input is not a terminal: {exc}") from exc

        try:
            tty.setraw(fd)

            self._wake_r, self._wake_w = os.pipe()
            os.set_blocking(self._wake_w, False)
            previous = signal.getsignal(signal.SIGWINCH)
            signal.signal(signal.SIGWINCH, self._on_sigwinch)
            self._prev_sigwinch_handler = previous

            # The editor never decodes pointer or paste input
            self._raw_write(_MOUSE_DISABLE + _BRACKETED_PASTE_DISABLE)
        except BaseException:
            self.stop()
            raise
        logger.debug("raw mode enabled on fd %d", fd)

    def stop(self) -> None:
        """Restore the saved terminal attributes and signal handler."""
        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        for wake_fd in (self._wake_r, self._wake_w):
            if wake_fd is not None:
                os.close(wake_fd)
        self._wake_r = self._wake_w = None

        if self._original_termios is not None:
            termios.tcsetattr(self._input_fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
            logger.debug("raw mode disabled on fd %d", self._input_fd)

        self._stdin_buffer.clear()
        self._events.clear()

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[ProcessTerminal]:
        """Scope raw mode to a ``with`` block; restored on every exit path."""
        self.start()
        try:
            yield self
        finally:
            self.stop()

    # -- input --------------------------------------------------------------

    def read_event(self) -> InputEvent:
        """Block until the next input event is available and return it."""
        while True:
            if self._events:
                return self._events.popleft()
            if self._resize_pending:
                self._resize_pending = False
                size = self._size()
                return ResizeEvent(columns=size.columns, rows=size.lines)
            self._fill(None)

    def cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where its cursor is (Device Status Report).

        Keys typed while waiting for the reply are queued, not lost.
        """
        self._awaiting_position = True
        self._position_reply = None
        try:
            self._raw_write(_QUERY_CURSOR_POSITION)
            deadline = time.monotonic() + _CURSOR_QUERY_TIMEOUT
            while self._position_reply is None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TerminalError("terminal did not report the cursor position")
                self._fill(remaining)
            return self._position_reply
        finally:
            self._awaiting_position = False

    def _fill(self, timeout: float | None) -> None:
        """Wait for stdin (or a resize wake-up) and feed the stdin buffer.

        A partially received escape sequence is given ``read_timeout`` to
        complete before it is flushed as-is.
        """
        if self._stdin_buffer.has_pending:
            timeout = self._read_timeout if timeout is None else min(timeout, self._read_timeout)

        watched = [self._input_fd]
        if self._wake_r is not None:
            watched.append(self._wake_r)

        ready, _, _ = select.select(watched, [], [], timeout)

        if self._wake_r is not None and self._wake_r in ready:
            os.read(self._wake_r, 512)

        if self._input_fd in ready:
            raw = os.read(self._input_fd, 4096)
            if not raw:
                raise TerminalError("end of input")
            self._stdin_buffer.process(self._decoder.decode(raw))
        elif not ready and self._stdin_buffer.has_pending:
            self._stdin_buffer.flush()

    def _on_buffer_data(self, data: str) -> None:
        if self._awaiting_position:
            match = _CURSOR_POSITION_RE.match(data)
            if match:
                self._position_reply = (int(match.group(1)) - 1, int(match.group(2)) - 1)
                return
        self._events.append(parse_event(data))

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the output stream and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                logger.debug("cannot append to write log %s", self._write_log_path)

    def move_to(self, row: int, column: int) -> None:
        self._raw_write(_MOVE_TO_FMT.format(max(row, 0) + 1, max(column, 0) + 1))

    def clear_from_cursor(self) -> None:
        self._raw_write(_CLEAR_FROM_CURSOR)

    def save_cursor(self) -> None:
        self._raw_write(_SAVE_CURSOR)

    def restore_cursor(self) -> None:
        self._raw_write(_RESTORE_CURSOR)

    def scroll_up(self, lines: int) -> None:
        if lines > 0:
            self._raw_write(_SCROLL_UP_FMT.format(lines))

    # -- private ------------------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self._resize_pending = True
        if self._wake_w is not None:
            with contextlib.suppress(BlockingIOError):
                os.write(self._wake_w, b"\0")

    def _raw_write(self, data: str) -> None:
        self._output.write(data)
        self._output.flush()

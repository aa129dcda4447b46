"""StdinBuffer splits raw stdin chunks into complete input sequences.

A single ``read()`` can return several keys at once, or only the first half
of an escape sequence.  The buffer keeps an incomplete tail until more data
arrives or the reader decides to give up waiting and :meth:`flush` it.
"""

from __future__ import annotations

import re
from typing import Callable

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Classify *data* as ``"complete"``, ``"incomplete"`` or ``"not-escape"``."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    if after_esc.startswith("["):
        # X10 mouse report: ESC [ M <b> <x> <y>
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # ESC followed by one character is an alt/meta key
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]

    if not 0x40 <= ord(last_char) <= 0x7E:
        return "incomplete"

    # SGR mouse reports use M/m as final byte but also start with '<'
    if payload.startswith("<") and not _SGR_MOUSE_RE.match(payload):
        return "incomplete"
    return "complete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            status = _is_complete_sequence(remaining[:seq_end])
            if status == "incomplete":
                seq_end += 1
                continue
            sequences.append(remaining[:seq_end])
            pos += seq_end
            break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences through callbacks."""

    def __init__(self) -> None:
        self._buffer: str = ""
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set callback for bracketed paste content."""
        self._on_paste = callback

    @property
    def has_pending(self) -> bool:
        """True while an incomplete sequence is waiting for more bytes."""
        return bool(self._buffer) or self._paste_mode

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def process(self, data: str) -> None:
        """Feed a chunk of input into the buffer."""
        self._buffer += data

        if self._paste_mode:
            self._paste_buffer += self._buffer
            self._buffer = ""
            self._finish_paste()
            return

        start_index = self._buffer.find(BRACKETED_PASTE_START)
        if start_index != -1:
            sequences, _ = _extract_complete_sequences(self._buffer[:start_index])
            for sequence in sequences:
                self._emit_data(sequence)

            self._paste_mode = True
            self._paste_buffer = self._buffer[start_index + len(BRACKETED_PASTE_START) :]
            self._buffer = ""
            self._finish_paste()
            return

        sequences, self._buffer = _extract_complete_sequences(self._buffer)
        for sequence in sequences:
            self._emit_data(sequence)

    def _finish_paste(self) -> None:
        end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end_index == -1:
            return

        pasted = self._paste_buffer[:end_index]
        remaining = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
        self._paste_mode = False
        self._paste_buffer = ""

        self._emit_paste(pasted)
        if remaining:
            self.process(remaining)

    def flush(self) -> list[str]:
        """Emit whatever is buffered as-is and return it.

        Called when no more bytes arrived within the read timeout, so a lone
        ``ESC`` is delivered as the escape key rather than held forever.
        """
        if not self._buffer:
            return []

        sequences = [self._buffer]
        self._buffer = ""
        for sequence in sequences:
            self._emit_data(sequence)
        return sequences

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def get_buffer(self) -> str:
        return self._buffer

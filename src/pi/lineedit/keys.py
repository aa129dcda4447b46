"""Input events and the decoder that builds them from raw terminal input.

Only the legacy/xterm encodings are understood: plain bytes, ``ESC``-prefixed
alt keys, CSI/SS3 cursor and editing keys, and the ``CSI 1;<mod>X`` /
``CSI <n>;<mod>~`` forms terminals use to report modifiers.  Key identifiers
follow the ``"ctrl+shift+alt+<key>"`` convention, e.g. ``"shift+right"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

import wcwidth as _wcwidth

# Key identifier such as "a", "enter" or "shift+right"
KeyId = str

# ---------------------------------------------------------------------------
# Key names
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"


MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock / num lock bits some terminals fold into the modifier parameter
LOCK_MASK = 64 + 128

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[15~": "f5",
    "\x1b[17~": "f6",
    "\x1b[18~": "f7",
    "\x1b[19~": "f8",
    "\x1b[20~": "f9",
    "\x1b[21~": "f10",
    "\x1b[23~": "f11",
    "\x1b[24~": "f12",
    "\x1b[E": "clear",
}

_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([A-DHFPQRS])$")
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<\d+;\d+;\d+[Mm]$")

FOCUS_IN = "\x1b[I"
FOCUS_OUT = "\x1b[O"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A key press: a printable character or a named key plus modifiers."""

    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def key_id(self) -> str:
        prefix = ""
        if self.ctrl:
            prefix += "ctrl+"
        if self.shift:
            prefix += "shift+"
        if self.alt:
            prefix += "alt+"
        return prefix + self.key

    @property
    def char(self) -> str | None:
        """The character this key types, or ``None`` for non-text keys.

        The line is laid out one cell per character, so only characters that
        wcwidth measures as exactly one column count as text.
        """
        if self.key == Key.space:
            return " "
        if len(self.key) == 1 and _wcwidth.wcwidth(self.key) == 1:
            return self.key
        return None


@dataclass(frozen=True)
class PasteEvent:
    text: str


@dataclass(frozen=True)
class MouseEvent:
    sequence: str


@dataclass(frozen=True)
class FocusEvent:
    gained: bool


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    rows: int


@dataclass(frozen=True)
class UnknownEvent:
    """Input that does not decode to any known key."""

    sequence: str


InputEvent = Union[KeyEvent, PasteEvent, MouseEvent, FocusEvent, ResizeEvent, UnknownEvent]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode_modifier(param: int) -> tuple[bool, bool, bool]:
    """Return ``(shift, ctrl, alt)`` from an xterm modifier parameter."""
    mod = (param - 1) & ~LOCK_MASK
    return (
        bool(mod & MODIFIERS["shift"]),
        bool(mod & MODIFIERS["ctrl"]),
        bool(mod & MODIFIERS["alt"]),
    )


def _is_mouse_sequence(data: str) -> bool:
    if data.startswith("\x1b[M") and len(data) == 6:
        return True
    return bool(_SGR_MOUSE_RE.match(data))


def _decode_single(ch: str, *, alt: bool = False) -> KeyEvent | None:
    if ch == "\x1b":
        return KeyEvent(Key.escape, alt=alt)
    if ch in ("\r", "\n"):
        return KeyEvent(Key.enter, alt=alt)
    if ch == "\t":
        return KeyEvent(Key.tab, alt=alt)
    if ch == " ":
        return KeyEvent(Key.space, alt=alt)
    if ch in ("\x7f", "\x08"):
        return KeyEvent(Key.backspace, alt=alt)
    if ch == "\x00":
        return KeyEvent(Key.space, ctrl=True, alt=alt)
    if 1 <= ord(ch) <= 26:
        return KeyEvent(chr(ord(ch) + ord("a") - 1), ctrl=True, alt=alt)
    if ch.isprintable():
        return KeyEvent(ch, shift=ch.isupper(), alt=alt)
    return None


def parse_event(data: str) -> InputEvent:  # noqa: C901
    """Decode one complete input sequence into an event.

    *data* must be a single key's worth of input as produced by
    :class:`~pi.lineedit.stdin_buffer.StdinBuffer`.
    """
    if not data:
        return UnknownEvent(data)

    if data == FOCUS_IN:
        return FocusEvent(gained=True)
    if data == FOCUS_OUT:
        return FocusEvent(gained=False)

    if _is_mouse_sequence(data):
        return MouseEvent(data)

    name = LEGACY_KEY_SEQUENCES.get(data)
    if name is not None:
        return KeyEvent(name)

    if data == "\x1b[Z":
        return KeyEvent(Key.tab, shift=True)

    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        shift, ctrl, alt = _decode_modifier(int(m.group(1)))
        return KeyEvent(_CSI_LETTER_KEYS[m.group(2)], shift=shift, ctrl=ctrl, alt=alt)

    m = _MODIFIED_TILDE_RE.match(data)
    if m:
        name = _CSI_TILDE_KEYS.get(int(m.group(1)))
        if name is not None:
            shift, ctrl, alt = _decode_modifier(int(m.group(2)))
            return KeyEvent(name, shift=shift, ctrl=ctrl, alt=alt)
        return UnknownEvent(data)

    if len(data) == 1:
        event = _decode_single(data)
        return event if event is not None else UnknownEvent(data)

    # ESC-prefixed single character: alt+<key>
    if len(data) == 2 and data[0] == "\x1b":
        event = _decode_single(data[1], alt=True)
        return event if event is not None else UnknownEvent(data)

    return UnknownEvent(data)

"""Input dispatcher: one input event in, one edit/render/submit out."""

from __future__ import annotations

import logging
from typing import Literal

from pi.lineedit.buffer import LineBuffer
from pi.lineedit.errors import (
    ResizeNotSupportedError,
    UnexpectedEventError,
    UnsupportedKeyError,
)
from pi.lineedit.keys import (
    FocusEvent,
    InputEvent,
    Key,
    KeyEvent,
    KeyId,
    MouseEvent,
    PasteEvent,
    ResizeEvent,
    UnknownEvent,
)
from pi.lineedit.render import Renderer

logger = logging.getLogger(__name__)

EditorAction = Literal[
    "cursorLeft",
    "cursorRight",
    "deleteCharBackward",
    "deleteCharForward",
    "submit",
    "insertDebugToken",
]

DEFAULT_KEYBINDINGS: dict[KeyId, EditorAction] = {
    Key.left: "cursorLeft",
    Key.right: "cursorRight",
    Key.backspace: "deleteCharBackward",
    Key.delete: "deleteCharForward",
    Key.enter: "submit",
    Key.shift(Key.right): "insertDebugToken",
}

ResizePolicy = Literal["redraw", "abort"]

DEFAULT_DEBUG_TOKEN = "<debug>"


class InputDispatcher:
    """Applies input events to a buffer and keeps the screen in sync.

    :meth:`dispatch` returns ``True`` once the line is accepted.  Input the
    editor does not support raises a :class:`~pi.lineedit.errors.LineEditError`
    subclass; nothing is silently dropped apart from focus changes.
    """

    def __init__(
        self,
        buffer: LineBuffer,
        renderer: Renderer,
        *,
        debug_token: str = DEFAULT_DEBUG_TOKEN,
        resize_policy: ResizePolicy = "redraw",
    ) -> None:
        self.buffer = buffer
        self.renderer = renderer
        self.debug_token = debug_token
        self.resize_policy = resize_policy

    def dispatch(self, event: InputEvent) -> bool:
        logger.debug("dispatch %r", event)

        if isinstance(event, KeyEvent):
            return self._handle_key(event)

        if isinstance(event, FocusEvent):
            return False

        if isinstance(event, ResizeEvent):
            if self.resize_policy == "abort":
                raise ResizeNotSupportedError()
            self.renderer.resize()
            return False

        if isinstance(event, MouseEvent):
            raise UnexpectedEventError(event, "mouse capture should be disabled")

        if isinstance(event, PasteEvent):
            raise UnexpectedEventError(event, "bracketed paste should be disabled")

        if isinstance(event, UnknownEvent):
            raise UnsupportedKeyError(event.sequence)

        raise UnexpectedEventError(event, f"unknown event type {type(event).__name__}")

    def _handle_key(self, event: KeyEvent) -> bool:
        action = DEFAULT_KEYBINDINGS.get(event.key_id)
        if action is not None:
            return self._run(action)

        # One-column characters, including shifted ones
        char = event.char
        if char is not None and not event.ctrl and not event.alt:
            self.buffer.insert(char)
            self.renderer.full_redraw()
            return False

        raise UnsupportedKeyError(event.key_id)

    def _run(self, action: EditorAction) -> bool:
        if action == "submit":
            return True

        if action == "cursorLeft":
            self.buffer.move_left()
            self.renderer.reposition_cursor()
        elif action == "cursorRight":
            self.buffer.move_right()
            self.renderer.reposition_cursor()
        elif action == "deleteCharBackward":
            self.buffer.backspace()
            self.renderer.full_redraw()
        elif action == "deleteCharForward":
            if self.buffer.at_end:
                return False
            self.buffer.delete()
            self.renderer.full_redraw()
        elif action == "insertDebugToken":
            self.insert_debug_token()
        return False

    def insert_debug_token(self) -> None:
        """Insert the literal debug token at the cursor (shift+right)."""
        self.buffer.insert_sequence(self.debug_token)
        self.renderer.full_redraw()

"""pi-lineedit: interactive single-line editing for terminal prompts."""

from pi.lineedit.buffer import LineBuffer
from pi.lineedit.dispatcher import DEFAULT_KEYBINDINGS, EditorAction, InputDispatcher
from pi.lineedit.errors import (
    LineEditError,
    ResizeNotSupportedError,
    TerminalError,
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
    parse_event,
)
from pi.lineedit.render import RenderContext, Renderer, screen_position, text_start
from pi.lineedit.session import prompt
from pi.lineedit.settings import LineEditSettings, load_settings
from pi.lineedit.stdin_buffer import StdinBuffer
from pi.lineedit.terminal import ProcessTerminal, Terminal
from pi.lineedit.utils import visible_width

__all__ = [
    # Buffer
    "LineBuffer",
    # Dispatcher
    "DEFAULT_KEYBINDINGS",
    "EditorAction",
    "InputDispatcher",
    # Errors
    "LineEditError",
    "ResizeNotSupportedError",
    "TerminalError",
    "UnexpectedEventError",
    "UnsupportedKeyError",
    # Keys
    "FocusEvent",
    "InputEvent",
    "Key",
    "KeyEvent",
    "KeyId",
    "MouseEvent",
    "PasteEvent",
    "ResizeEvent",
    "UnknownEvent",
    "parse_event",
    # Render
    "RenderContext",
    "Renderer",
    "screen_position",
    "text_start",
    # Session
    "prompt",
    # Settings
    "LineEditSettings",
    "load_settings",
    # Terminal
    "ProcessTerminal",
    "StdinBuffer",
    "Terminal",
    # Utilities
    "visible_width",
]

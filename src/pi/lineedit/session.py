"""The prompt control loop: read an event, dispatch it, repeat until Enter."""

from __future__ import annotations

import logging

from pi.lineedit.buffer import LineBuffer
from pi.lineedit.dispatcher import InputDispatcher
from pi.lineedit.render import RenderContext, Renderer
from pi.lineedit.settings import LineEditSettings
from pi.lineedit.terminal import ProcessTerminal, Terminal
from pi.lineedit.utils import visible_width

logger = logging.getLogger(__name__)


def prompt(
    prefix: str | None = None,
    *,
    terminal: Terminal | None = None,
    settings: LineEditSettings | None = None,
) -> str:
    """Show *prefix*, let the user edit one line, and return it.

    The terminal is in raw mode only for the duration of the call and is
    restored on every exit path, including when an unsupported key raises a
    :class:`~pi.lineedit.errors.LineEditError`.
    """
    if settings is None:
        settings = LineEditSettings()
    if prefix is None:
        prefix = settings.prompt
    if terminal is None:
        terminal = ProcessTerminal(read_timeout=settings.read_timeout)

    with terminal.raw_mode():
        row, column = terminal.cursor_position()
        if column != 0:
            # Start on a line of our own
            terminal.write("\r\n")
            row, column = terminal.cursor_position()

        buffer = LineBuffer()
        context = RenderContext(origin_row=row, prompt_width=visible_width(prefix))
        renderer = Renderer(terminal, buffer, context, prompt=prefix)
        dispatcher = InputDispatcher(
            buffer,
            renderer,
            debug_token=settings.debug_token,
            resize_policy=settings.resize_policy,  # type: ignore[arg-type]
        )
        logger.debug("prompt started at row %d, prompt width %d", row, context.prompt_width)

        renderer.start()
        while not dispatcher.dispatch(terminal.read_event()):
            pass

        renderer.finish()
        logger.debug("accepted %d character(s)", len(buffer))
        return buffer.text

"""Entry point for the pi-lineedit CLI.

Edits one line on the controlling terminal and prints it to stdout.  The
editor itself draws on stderr so the result can be captured, e.g.
``name=$(pi-lineedit --prompt "name: ")``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pi.lineedit.errors import LineEditError
from pi.lineedit.session import prompt
from pi.lineedit.settings import RESIZE_POLICIES, load_settings
from pi.lineedit.terminal import ProcessTerminal

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pi-lineedit",
        description="Read one line from the terminal with in-place editing",
    )
    parser.add_argument("-p", "--prompt", help="Prompt prefix (default: '$ ')")
    parser.add_argument("--debug-token", help="Text inserted by shift+right")
    parser.add_argument("--resize", dest="resize_policy", choices=RESIZE_POLICIES, help="What to do when the terminal is resized")
    parser.add_argument("--config", help="Settings file (default: ~/.pi/lineedit.json)")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--log-file", help="Write logs to this file")
    return parser.parse_args(argv)


def _setup_logging(level: str, log_file: str | None) -> None:
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=getattr(logging, level.upper()),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    else:
        # Nothing may be printed to the screen while it is in raw mode
        logging.getLogger().setLevel(getattr(logging, level.upper()))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.log_level, args.log_file)

    try:
        settings = load_settings(
            args.config,
            overrides={
                "prompt": args.prompt,
                "debug_token": args.debug_token,
                "resize_policy": args.resize_policy,
            },
        )
    except (TypeError, ValueError) as exc:
        print(f"Error: invalid settings: {exc}", file=sys.stderr)
        return 2

    terminal = ProcessTerminal(output=sys.stderr, read_timeout=settings.read_timeout)
    try:
        line = prompt(settings.prompt, terminal=terminal, settings=settings)
    except LineEditError as exc:
        logger.info("prompt aborted: %s", exc)
        print(f"\r\nError: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

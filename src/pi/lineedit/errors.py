"""Exceptions raised while editing a prompt line.

Every fatal condition of a prompt session derives from :class:`LineEditError`.
They are raised where the condition is detected and propagate through the
control loop; only the CLI driver turns them into an exit status.
"""

from __future__ import annotations


class LineEditError(Exception):
    """Base class for fatal prompt-session errors."""


class UnsupportedKeyError(LineEditError):
    """A key or modifier combination with no binding was pressed."""

    def __init__(self, key_id: str) -> None:
        super().__init__(f"unsupported key: {key_id!r}")
        self.key_id = key_id


class UnexpectedEventError(LineEditError):
    """An event arrived that terminal setup should have made impossible."""

    def __init__(self, event: object, reason: str) -> None:
        super().__init__(reason)
        self.event = event
        self.reason = reason


class ResizeNotSupportedError(LineEditError):
    """The terminal was resized while the resize policy is ``abort``."""

    def __init__(self) -> None:
        super().__init__("terminal resize is not implemented")


class TerminalError(LineEditError):
    """The terminal did not answer a query the way it should have."""

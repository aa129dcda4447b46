"""Prompt settings with JSON file, environment and CLI precedence.

Sources are merged in increasing priority: built-in defaults, the settings
file (``~/.pi/lineedit.json`` unless another path is given), ``PI_LINEEDIT_*``
environment variables, and explicit overrides (CLI flags).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pi.lineedit.dispatcher import DEFAULT_DEBUG_TOKEN

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "lineedit.json"

RESIZE_POLICIES = ("redraw", "abort")

# settings file key -> dataclass field
_FILE_KEYS: dict[str, str] = {
    "prompt": "prompt",
    "debugToken": "debug_token",
    "resizePolicy": "resize_policy",
    "readTimeout": "read_timeout",
}

_ENV_KEYS: dict[str, str] = {
    "PI_LINEEDIT_PROMPT": "prompt",
    "PI_LINEEDIT_DEBUG_TOKEN": "debug_token",
    "PI_LINEEDIT_RESIZE": "resize_policy",
}


@dataclass
class LineEditSettings:
    """Options for one prompt session."""

    prompt: str = "$ "
    debug_token: str = DEFAULT_DEBUG_TOKEN
    resize_policy: str = "redraw"
    # Seconds to wait for the rest of a split escape sequence
    read_timeout: float = 0.01

    def __post_init__(self) -> None:
        if self.resize_policy not in RESIZE_POLICIES:
            raise ValueError(
                f"resize policy must be one of {', '.join(RESIZE_POLICIES)}, "
                f"got {self.resize_policy!r}"
            )
        self.read_timeout = float(self.read_timeout)


def default_settings_path() -> Path:
    return Path.home() / CONFIG_DIR_NAME / SETTINGS_FILE_NAME


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("ignoring settings file %s: %s", path, exc)
        return {}

    if not isinstance(raw, dict):
        logger.warning("ignoring settings file %s: expected a JSON object", path)
        return {}

    values: dict[str, Any] = {}
    for key, value in raw.items():
        field_name = _FILE_KEYS.get(key)
        if field_name is None:
            logger.debug("unknown settings key %r in %s", key, path)
            continue
        values[field_name] = value
    return values


def _read_environment(environ: Mapping[str, str]) -> dict[str, Any]:
    return {field_name: environ[var] for var, field_name in _ENV_KEYS.items() if var in environ}


def load_settings(
    path: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> LineEditSettings:
    """Build settings from file, environment and *overrides*.

    ``None`` values in *overrides* are skipped so unset CLI flags do not
    mask lower-priority sources.
    """
    settings_path = Path(path) if path is not None else default_settings_path()
    merged: dict[str, Any] = {}
    merged.update(_read_settings_file(settings_path))
    merged.update(_read_environment(os.environ if environ is None else environ))
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    return LineEditSettings(**merged)

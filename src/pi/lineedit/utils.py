"""Display-width measurement for prompt prefixes.

A prompt may carry SGR colour codes and wide characters; the column at which
editable text starts is its *visible* width, not its length.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences (SGR, cursor, erase) and OSC 8 hyperlinks
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"
    r"|\x1b\]8;;[^\x07]*\x07"
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 256


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    """Terminal columns occupied by one grapheme cluster.

    Control characters and lone combining marks take no columns, emoji
    sequences (VS16, ZWJ, skin tones, flags) take two, everything else is
    whatever wcwidth says about its first codepoint.
    """
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first) in ("Mn", "Me", "Mc", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies once printed."""
    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    width = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = width
    return width

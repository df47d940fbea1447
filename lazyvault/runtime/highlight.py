"""Pygments colorizing for the secret pane."""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

FALLBACK_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_LEXER = JsonLexer()


def sanitize_terminal_text(source: str) -> str:
    """Escape C0, DEL and C1 control characters so store text cannot drive the terminal.

    Newlines and tabs are escaped too: every caller draws a single row.
    """
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the fallback style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return FALLBACK_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=normalize_style(style))
        _FORMATTERS[style] = formatter
    return formatter


def colorize_json(source: str, style: str = FALLBACK_STYLE, no_color: bool = False) -> list[str]:
    """Return ``source`` split into lines, ANSI-colored unless ``no_color``."""
    if no_color:
        return source.splitlines()
    return highlight(source, _LEXER, _formatter_for_style(style)).splitlines()


__all__ = ["FALLBACK_STYLE", "colorize_json", "normalize_style", "sanitize_terminal_text"]

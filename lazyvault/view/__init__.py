"""Interactive view state machine."""

from __future__ import annotations

from .model import CHROME_ROWS, DEFAULT_SCROLL_OFF, Phase, ViewModel, ViewState, viewport_for_rows

__all__ = [
    "CHROME_ROWS",
    "DEFAULT_SCROLL_OFF",
    "Phase",
    "ViewModel",
    "ViewState",
    "viewport_for_rows",
]

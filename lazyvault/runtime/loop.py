"""Main interactive event loop for the terminal UI.

Each key is fully processed (state transition, re-rank, secret lookup,
repaint) before the next one is read. Resizes are picked up by polling the
terminal size between reads.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..store.types import Secret
from ..view.model import ViewModel, viewport_for_rows
from .highlight import FALLBACK_STYLE
from .keys import read_key
from .render import build_frame_rows, compose_frame
from .terminal import TerminalController

DEFAULT_TERMINAL_SIZE = (80, 24)
KEY_POLL_MS = 120

CANCEL_KEYS = frozenset({"ESC", "CTRL_C"})
MOVE_UP_KEYS = frozenset({"CTRL_K", "CTRL_P", "UP"})
MOVE_DOWN_KEYS = frozenset({"CTRL_J", "CTRL_N", "DOWN"})
IGNORED_KEYS = frozenset({"PASTE_START", "PASTE_END"})


@dataclass(frozen=True)
class LoopOptions:
    style: str = FALLBACK_STYLE
    no_color: bool = False
    key_poll_ms: int = KEY_POLL_MS


def dispatch_key(model: ViewModel, key: str) -> bool:
    """Apply one decoded key to ``model``.

    Returns whether the screen needs a repaint.
    """
    if key in IGNORED_KEYS:
        return False
    if key in CANCEL_KEYS:
        model.cancel()
        return False
    if key == "ENTER":
        model.confirm()
        return False
    if key == "BACKSPACE":
        return model.delete_char()
    if key == "CTRL_U":
        model.clear_prompt()
        return True
    if key in MOVE_UP_KEYS:
        return model.move_up()
    if key in MOVE_DOWN_KEYS:
        return model.move_down()
    if key == "TAB":
        return model.next_mount()
    if key == "SHIFT_TAB":
        return model.previous_mount()
    if len(key) == 1 and key.isprintable():
        model.append_text(key)
        return True
    return False


def run_main_loop(
    model: ViewModel,
    terminal: TerminalController,
    stdin_fd: int,
    options: LoopOptions = LoopOptions(),
    *,
    read: Callable[..., str] = read_key,
    terminal_size: Callable[..., os.terminal_size] = shutil.get_terminal_size,
) -> Secret | None:
    """Discover the current mount and run the picker until confirm or cancel.

    Returns the confirmed secret, or ``None`` on cancel or when nothing was
    selected. The terminal is restored on every exit path.
    """
    last_size: tuple[int, int] | None = None

    def current_size() -> tuple[int, int]:
        size = terminal_size(DEFAULT_TERMINAL_SIZE)
        return size.columns, size.lines

    def paint() -> None:
        columns, lines = last_size or current_size()
        frame_rows = build_frame_rows(model, columns, lines, style=options.style, no_color=options.no_color)
        terminal.write(compose_frame(frame_rows))

    with terminal.raw_mode():
        last_size = current_size()
        model.resize(viewport_for_rows(last_size[1]))
        model.on_loading = paint
        model.load()
        dirty = True
        while not model.halted:
            size = current_size()
            if size != last_size:
                last_size = size
                model.resize(viewport_for_rows(size[1]))
                dirty = True
            if dirty:
                paint()
                dirty = False

            try:
                key = read(stdin_fd, timeout_ms=options.key_poll_ms)
            except KeyboardInterrupt:
                model.cancel()
                break
            if key == "":
                continue
            if dispatch_key(model, key):
                dirty = True
    return model.result


__all__ = ["LoopOptions", "dispatch_key", "run_main_loop"]

"""Frame composition for the split key-list / secret-pane view.

``build_frame_rows`` is pure: it turns view state into one string per screen
row. ``compose_frame`` turns those rows into a single terminal write.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..view.model import Phase, ViewModel, viewport_for_rows
from .ansi import fit_ansi_line
from .highlight import FALLBACK_STYLE, colorize_json, sanitize_terminal_text

LOADING_TEXT = "Loading..."
TRUNCATION_MARK = ".."
SCROLLBAR_CHAR = "│"


@dataclass(frozen=True)
class Palette:
    """Semantic ANSI palette used by the renderer."""

    reset: str = "\033[0m"
    cursor_marker: str = "\033[41m"
    cursor_row: str = "\033[40m"
    scrollbar: str = "\033[90m"
    stats: str = "\033[33m"
    prompt: str = "\033[1m"
    error: str = "\033[31m"


PLAIN_PALETTE = Palette(
    reset="",
    cursor_marker="",
    cursor_row="",
    scrollbar="",
    stats="",
    prompt="",
    error="",
)


def truncate_key(key: str, max_length: int) -> str:
    """Shorten ``key`` to ``max_length`` characters, marking the cut with ``..``."""
    if max_length <= len(TRUNCATION_MARK):
        return key[: max(0, max_length)]
    if len(key) <= max_length:
        return key
    return key[: max_length - len(TRUNCATION_MARK)] + TRUNCATION_MARK


def scrollbar_rows(total: int, view_start: int, viewport: int) -> set[int]:
    """Return list-area rows (0 = top) covered by the scrollbar thumb.

    Empty when every entry fits in the viewport.
    """
    if total <= viewport:
        return set()
    full_height = viewport - 1
    start_y = int(view_start / total * full_height)
    end_y = int((view_start / total + full_height / total) * full_height) + 1
    return {
        full_height - y
        for y in range(start_y, end_y + 1)
        if 0 <= full_height - y < viewport
    }


def _list_rows(model: ViewModel, viewport: int, key_width: int, palette: Palette) -> list[str]:
    rows = [""] * viewport
    state = model.state
    for i, key in enumerate(state.visible_paths()):
        y = viewport - 1 - i
        if y < 0:
            break
        text = truncate_key(sanitize_terminal_text(key), key_width)
        if i == state.cursor:
            rows[y] = (
                f"{palette.cursor_marker} {palette.reset}"
                f"{palette.cursor_row} {text}{palette.reset}"
            )
        else:
            rows[y] = f"  {text}"
    return rows


def _secret_lines(model: ViewModel, style: str, no_color: bool, palette: Palette) -> list[str]:
    if model.selection_error is not None:
        return [f"{palette.error}{sanitize_terminal_text(model.selection_error)}{palette.reset}"]
    if model.secret is None:
        return []
    return colorize_json(model.secret.pane_json(), style=style, no_color=no_color)


def _stats_text(model: ViewModel) -> str:
    if model.phase is Phase.LOADING:
        return LOADING_TEXT
    state = model.state
    return f"{len(state.filtered)}/{len(state.all_paths)}  {sanitize_terminal_text(model.mount)}"


def build_frame_rows(
    model: ViewModel,
    columns: int,
    rows: int,
    *,
    style: str = FALLBACK_STYLE,
    no_color: bool = False,
) -> list[str]:
    """Compose every screen row for the current view state."""
    palette = PLAIN_PALETTE if no_color else Palette()
    columns = max(1, columns)
    rows = max(1, rows)
    viewport = viewport_for_rows(rows)
    half = columns // 2
    key_width = max(0, half - 2)
    right_x = half + 2
    right_width = max(0, columns - right_x)

    left: list[str] = _list_rows(model, viewport, key_width, palette) if model.phase is not Phase.LOADING else [""] * viewport
    if rows >= 2:
        left.append(f"  {palette.stats}{_stats_text(model)}{palette.reset}")
    left.append(f"{palette.prompt}>{palette.reset} {model.state.prompt}")
    left = left[-rows:]

    thumb = scrollbar_rows(len(model.state.filtered), model.state.view_start, viewport)
    secret_lines = _secret_lines(model, style, no_color, palette)

    out: list[str] = []
    for y in range(rows):
        line = fit_ansi_line(left[y], half) + palette.reset
        if half < columns:
            if y in thumb:
                line += f"{palette.scrollbar}{SCROLLBAR_CHAR}{palette.reset}"
            else:
                line += " "
        if right_width > 0 and y < len(secret_lines):
            line += " " + fit_ansi_line(secret_lines[y], right_width) + palette.reset
        out.append(line)
    return out


def compose_frame(frame_rows: list[str]) -> str:
    """Join rows into one full-screen repaint for a raw-mode terminal."""
    return "\033[H" + "\r\n".join(f"{row}\033[K" for row in frame_rows) + "\033[0m"


__all__ = [
    "LOADING_TEXT",
    "PLAIN_PALETTE",
    "Palette",
    "build_frame_rows",
    "compose_frame",
    "scrollbar_rows",
    "truncate_key",
]

"""Selection and scrolling state for the interactive secret picker.

The list is drawn bottom-up: index 0 of ``filtered`` sits just above the
prompt, so "up" moves toward higher indices. A window of ``viewport_size``
rows starting at ``view_start`` is visible, and ``cursor`` is the row offset
of the selection inside that window.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ..errors import StoreError
from ..search.matching import rank_paths
from ..store.types import Secret

logger = logging.getLogger(__name__)

DEFAULT_SCROLL_OFF = 4
CHROME_ROWS = 2


def viewport_for_rows(rows: int) -> int:
    """Return how many result rows fit above the stats and prompt rows."""
    return max(1, rows - CHROME_ROWS)


class Phase(enum.Enum):
    LOADING = "loading"
    BROWSING = "browsing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class ViewState:
    prompt: str = ""
    all_paths: list[str] = field(default_factory=list)
    filtered: list[str] = field(default_factory=list)
    view_start: int = 0
    cursor: int = 0
    viewport_size: int = 1
    scroll_margin: int = DEFAULT_SCROLL_OFF

    @property
    def view_end(self) -> int:
        return min(self.view_start + self.viewport_size, len(self.filtered))

    @property
    def selected_index(self) -> int:
        return self.view_start + self.cursor

    @property
    def selected_path(self) -> str | None:
        if not self.filtered:
            return None
        return self.filtered[self.selected_index]

    @property
    def effective_margin(self) -> int:
        """Scroll margin shrunk so small viewports can still scroll both ways."""
        return max(0, min(self.scroll_margin, (self.viewport_size - 1) // 2))

    def visible_paths(self) -> list[str]:
        return self.filtered[self.view_start : self.view_end]


class ViewModel:
    """Drive ``ViewState`` through prompt edits, navigation, and mount switches.

    ``discover`` maps a mount name to its leaf paths; ``fetch`` maps
    ``(mount, path)`` to a secret and is expected to be cache-backed.
    """

    def __init__(
        self,
        *,
        mount: str,
        discover: Callable[[str], Iterable[str]],
        fetch: Callable[[str, str], Secret],
        viewport_size: int,
        scroll_margin: int = DEFAULT_SCROLL_OFF,
        mounts: list[str] | None = None,
    ) -> None:
        self.mount = mount
        self.mounts = list(mounts) if mounts else [mount]
        if mount not in self.mounts:
            self.mounts.append(mount)
        self._discover = discover
        self._fetch = fetch
        self.state = ViewState(viewport_size=max(1, viewport_size), scroll_margin=max(0, scroll_margin))
        self.phase = Phase.LOADING
        self.secret: Secret | None = None
        self.selection_error: str | None = None
        self.result: Secret | None = None
        self._resolved_key: tuple[str, str] | None = None
        self.on_loading: Callable[[], None] | None = None

    @property
    def halted(self) -> bool:
        return self.phase in {Phase.CONFIRMED, Phase.CANCELLED}

    # discovery
    def load(self) -> None:
        """Walk the current mount and enter the browsing phase."""
        self.phase = Phase.LOADING
        if self.on_loading is not None:
            self.on_loading()
        self.state.all_paths = sorted(self._discover(self.mount))
        self.phase = Phase.BROWSING
        self._refilter()

    def switch_mount(self, mount: str) -> None:
        """Discard the prompt and re-walk ``mount``."""
        if mount not in self.mounts:
            self.mounts.append(mount)
        self.mount = mount
        self.state.prompt = ""
        self.state.cursor = 0
        self.load()

    def next_mount(self) -> bool:
        return self._cycle_mount(1)

    def previous_mount(self) -> bool:
        return self._cycle_mount(-1)

    def _cycle_mount(self, step: int) -> bool:
        if len(self.mounts) < 2:
            return False
        idx = self.mounts.index(self.mount)
        self.switch_mount(self.mounts[(idx + step) % len(self.mounts)])
        return True

    # prompt edits
    def append_text(self, text: str) -> None:
        if not text:
            return
        self.state.prompt += text
        self._refilter()

    def delete_char(self) -> bool:
        if not self.state.prompt:
            return False
        self.state.prompt = self.state.prompt[:-1]
        self._refilter()
        return True

    def clear_prompt(self) -> None:
        self.state.prompt = ""
        self._refilter()

    def _refilter(self) -> None:
        state = self.state
        state.filtered = rank_paths(state.prompt, state.all_paths)
        state.view_start = 0
        if state.filtered:
            state.cursor = min(state.cursor, len(state.filtered) - 1, state.viewport_size - 1)
        else:
            state.cursor = 0
        self._resolve_selection()

    # navigation
    def move_up(self) -> bool:
        """Move the selection toward the top of the screen (higher indices)."""
        state = self.state
        if state.selected_index + 1 >= len(state.filtered):
            return False
        if state.cursor + 1 >= state.viewport_size - state.effective_margin and state.view_end < len(state.filtered):
            state.view_start += 1
        else:
            state.cursor += 1
        self._resolve_selection()
        return True

    def move_down(self) -> bool:
        """Move the selection toward the prompt (lower indices)."""
        state = self.state
        if state.cursor == 0:
            if state.view_start == 0:
                return False
            state.view_start -= 1
        elif state.cursor - 1 < state.effective_margin and state.view_start > 0:
            state.view_start -= 1
        else:
            state.cursor -= 1
        self._resolve_selection()
        return True

    def resize(self, viewport_size: int) -> None:
        """Apply a new viewport height, resetting the window if the selection falls outside it."""
        state = self.state
        state.viewport_size = max(1, viewport_size)
        if state.view_start + state.cursor >= state.view_end:
            state.view_start = 0
            state.cursor = 0
        self._resolve_selection()

    # terminal transitions
    def confirm(self) -> Secret | None:
        self.result = self.secret
        self.phase = Phase.CONFIRMED
        return self.result

    def cancel(self) -> None:
        self.result = None
        self.phase = Phase.CANCELLED

    def _resolve_selection(self) -> None:
        """Fetch the secret under the cursor when the selection changed."""
        path = self.state.selected_path
        if path is None:
            self.state.cursor = 0
            self.secret = None
            self.selection_error = None
            self._resolved_key = None
            return
        key = (self.mount, path)
        if key == self._resolved_key and self.selection_error is None:
            return
        self._resolved_key = key
        try:
            self.secret = self._fetch(self.mount, path)
            self.selection_error = None
        except StoreError as exc:
            logger.error("Failed to fetch secret %s on mount %s: %s", path, self.mount, exc)
            self.secret = None
            self.selection_error = str(exc)


__all__ = [
    "CHROME_ROWS",
    "DEFAULT_SCROLL_OFF",
    "Phase",
    "ViewModel",
    "ViewState",
    "viewport_for_rows",
]

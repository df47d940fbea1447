"""Interactive session bootstrap.

Builds the store client, secret cache, and view model from settings, then
hands control to the event loop on the controlling terminal.
"""

from __future__ import annotations

import logging
import os

from ..cache import SecretCache
from ..discovery.walker import TreeWalker
from ..errors import ConfigurationError, StoreError
from ..store.client import VaultClient
from ..store.types import Secret
from ..view.model import ViewModel, viewport_for_rows
from .config import Settings
from .loop import LoopOptions, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"


def build_client(settings: Settings) -> VaultClient:
    return VaultClient(settings.addr, settings.token, timeout=settings.request_timeout)


def load_mounts(client: VaultClient, default_mount: str) -> list[str]:
    """Return switchable mounts, always including ``default_mount``.

    Tokens without access to the mount listing still browse their default mount.
    """
    try:
        mounts = client.list_mounts()
    except StoreError as exc:
        logger.info("Mount listing unavailable, staying on %s: %s", default_mount, exc)
        return [default_mount]
    if default_mount not in mounts:
        mounts = sorted([*mounts, default_mount])
    return mounts


def build_view_model(settings: Settings, client: VaultClient, cache: SecretCache, rows: int) -> ViewModel:
    def discover(mount: str) -> set[str]:
        return TreeWalker(client, mount, max_workers=settings.walk_workers).discover()

    return ViewModel(
        mount=settings.mount,
        discover=discover,
        fetch=cache.get_or_fetch,
        viewport_size=viewport_for_rows(rows),
        scroll_margin=settings.scroll_off,
        mounts=load_mounts(client, settings.mount),
    )


def run_interactive(settings: Settings, *, no_color: bool = False, tty_path: str = TTY_PATH) -> Secret | None:
    """Run the picker on the controlling terminal and return the confirmed secret.

    The UI is drawn on ``tty_path`` so standard output stays free for the
    confirmed secret even when it is piped.
    """
    client = build_client(settings)
    cache = SecretCache(client)
    try:
        tty_fd = os.open(tty_path, os.O_RDWR)
    except OSError as exc:
        raise ConfigurationError(f"Interactive mode needs a terminal: {exc}") from exc
    try:
        terminal = TerminalController(tty_fd, tty_fd)
        rows = os.get_terminal_size(tty_fd).lines
        model = build_view_model(settings, client, cache, rows)

        def terminal_size(fallback: tuple[int, int]) -> os.terminal_size:
            try:
                return os.get_terminal_size(tty_fd)
            except OSError:
                return os.terminal_size(fallback)

        return run_main_loop(
            model,
            terminal,
            tty_fd,
            LoopOptions(style=settings.style, no_color=no_color),
            terminal_size=terminal_size,
        )
    finally:
        os.close(tty_fd)


__all__ = ["build_client", "build_view_model", "load_mounts", "run_interactive"]

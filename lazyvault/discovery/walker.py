"""Concurrent discovery of every leaf path below a container.

A fixed pool of worker threads drains one shared queue of container paths.
Listing a container enqueues its child containers and emits its leaves into
a result queue, so the walk finishes when the container queue's join barrier
releases.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import Protocol

from ..errors import AccessDenied, StoreError
from ..store.types import ROOT_PATH, Entry, is_container

logger = logging.getLogger(__name__)

DEFAULT_WALK_WORKERS = 16


class DirectoryLister(Protocol):
    def list_dir(self, mount: str, path: str) -> list[Entry]: ...


class TreeWalker:
    """Enumerate leaf paths of one mount with a bounded number of in-flight listings."""

    def __init__(self, store: DirectoryLister, mount: str, *, max_workers: int = DEFAULT_WALK_WORKERS) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.store = store
        self.mount = mount
        self.max_workers = max_workers

    def discover(self, root: str = ROOT_PATH) -> set[str]:
        """Return every leaf path under ``root``.

        Blocks until each branch has been listed, denied, or has failed.
        Failing branches contribute nothing; they never stop their siblings.
        """
        if not is_container(root):
            return {root}

        pending: Queue[str | None] = Queue()
        leaves: Queue[str] = Queue()
        pending.put(root)

        workers = [
            threading.Thread(
                target=self._worker,
                args=(pending, leaves),
                name=f"lazyvault-walk-{index}",
                daemon=True,
            )
            for index in range(self.max_workers)
        ]
        for worker in workers:
            worker.start()

        pending.join()
        for _ in workers:
            pending.put(None)
        for worker in workers:
            worker.join()

        found: set[str] = set()
        while True:
            try:
                found.add(leaves.get_nowait())
            except Empty:
                break
        logger.debug("Discovered %d leaves under %s on mount %s", len(found), root, self.mount)
        return found

    def _worker(self, pending: Queue[str | None], leaves: Queue[str]) -> None:
        while True:
            path = pending.get()
            try:
                if path is None:
                    return
                for child in self._list_children(path):
                    if is_container(child):
                        pending.put(child)
                    else:
                        leaves.put(child)
            finally:
                pending.task_done()

    def _list_children(self, path: str) -> list[str]:
        """List ``path`` and return absolute child paths; failed branches yield nothing."""
        try:
            entries = self.store.list_dir(self.mount, path)
        except AccessDenied:
            logger.info("Forbidden to list dir %s on mount %s", path, self.mount)
            return []
        except StoreError as exc:
            logger.error("Failed to list directory %s on mount %s: %s", path, self.mount, exc)
            return []
        except Exception:
            logger.exception("Unexpected failure listing directory %s on mount %s", path, self.mount)
            return []
        return [entry.absolute(path) for entry in entries]


def discover_paths(store: DirectoryLister, mount: str, root: str = ROOT_PATH, *, max_workers: int = DEFAULT_WALK_WORKERS) -> set[str]:
    """Convenience wrapper around ``TreeWalker.discover``."""
    return TreeWalker(store, mount, max_workers=max_workers).discover(root)


__all__ = ["DEFAULT_WALK_WORKERS", "DirectoryLister", "TreeWalker", "discover_paths"]

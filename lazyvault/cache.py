"""Process-lifetime memo of fetched secrets.

Entries are never evicted or invalidated. Failed fetches are not stored, so
the next selection of the same path retries the store.
"""

from __future__ import annotations

import threading
from typing import Protocol

from .store.types import Secret


class SecretReader(Protocol):
    def get_secret(self, mount: str, path: str) -> Secret: ...


class SecretCache:
    """Lock-guarded ``(mount, path) -> Secret`` mapping backed by a store."""

    def __init__(self, store: SecretReader) -> None:
        self.store = store
        self._lock = threading.Lock()
        self._secrets: dict[tuple[str, str], Secret] = {}

    def get_or_fetch(self, mount: str, path: str) -> Secret:
        """Return the cached secret, fetching it from the store on a miss.

        Store errors propagate to the caller unchanged.
        """
        key = (mount, path)
        with self._lock:
            cached = self._secrets.get(key)
        if cached is not None:
            return cached

        secret = self.store.get_secret(mount, path)
        with self._lock:
            # Another thread may have raced us; keep the first stored value.
            return self._secrets.setdefault(key, secret)

    def peek(self, mount: str, path: str) -> Secret | None:
        with self._lock:
            return self._secrets.get((mount, path))

    def __len__(self) -> int:
        with self._lock:
            return len(self._secrets)


__all__ = ["SecretCache", "SecretReader"]

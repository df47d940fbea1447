"""Shared store and terminal doubles for unit and integration tests."""

from __future__ import annotations

import threading
from collections import Counter
from contextlib import contextmanager

from lazyvault.errors import AccessDenied, RequestFailed
from lazyvault.store.types import Entry, Secret


class FakeStore:
    """Serve list/get/mount calls from a ``{mount: {path: data}}`` mapping.

    Every call is counted so tests can assert on cache hits and walk fan-out.
    """

    def __init__(
        self,
        mounts: dict[str, dict[str, dict[str, object]]],
        *,
        denied: set[str] | None = None,
        failing: set[str] | None = None,
        fetch_failures: set[str] | None = None,
    ) -> None:
        self.mounts = mounts
        self.denied = denied or set()
        self.failing = failing or set()
        self.fetch_failures = fetch_failures or set()
        self.list_calls: Counter[tuple[str, str]] = Counter()
        self.get_calls: Counter[tuple[str, str]] = Counter()
        self._lock = threading.Lock()

    def list_dir(self, mount: str, path: str) -> list[Entry]:
        with self._lock:
            self.list_calls[(mount, path)] += 1
        if path in self.denied:
            raise AccessDenied(f"Forbidden to list {path}")
        if path in self.failing:
            raise RequestFailed(f"Got 500 Internal Server Error on {path}")
        names: set[str] = set()
        for leaf in self.mounts.get(mount, {}):
            if not leaf.startswith(path):
                continue
            remainder = leaf[len(path):]
            head, sep, _ = remainder.partition("/")
            names.add(head + sep)
        return [Entry.from_key(name) for name in sorted(names)]

    def get_secret(self, mount: str, path: str) -> Secret:
        with self._lock:
            self.get_calls[(mount, path)] += 1
        if path in self.fetch_failures:
            raise RequestFailed(f"Got 500 Internal Server Error on {path}")
        data = self.mounts[mount][path]
        return Secret(data=dict(data), metadata={"version": 1}, url=f"http://vault/ui/vault/secrets/{mount}/show{path}")

    def list_mounts(self) -> list[str]:
        return sorted(self.mounts)


E2E_SECRETS: dict[str, dict[str, object]] = {
    "/foo": {"a": "b"},
    "/bar/baz": {"c": "d"},
    "/enterprise/organization/department/unit/team/user/actual-user": {"free": "palestine"},
}


class FakeTerminal:
    """Record frames and raw-mode enter/exit counts instead of touching a tty."""

    def __init__(self) -> None:
        self.frames: list[str] = []
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1

    def write(self, frame: str) -> None:
        self.frames.append(frame)


def scripted_reader(keys: list):
    """Return a ``read_key`` stand-in yielding ``keys`` in order; exceptions are raised."""
    pending = list(keys)

    def read(_fd: int, timeout_ms: int | None = None) -> str:
        if not pending:
            raise AssertionError("read past end of scripted keys")
        key = pending.pop(0)
        if isinstance(key, BaseException):
            raise key
        return key

    return read

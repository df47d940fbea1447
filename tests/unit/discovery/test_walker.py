"""Tests for concurrent leaf discovery."""

from __future__ import annotations

import threading
import time
import unittest

from lazyvault.discovery import TreeWalker, discover_paths
from lazyvault.errors import DecodeFailed
from lazyvault.store.types import Entry
from tests.support import E2E_SECRETS, FakeStore


class TreeWalkerTests(unittest.TestCase):
    def test_discovers_every_leaf(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})

        found = TreeWalker(store, "secret").discover()

        self.assertSetEqual(found, set(E2E_SECRETS))
        self.assertTrue(all(not path.endswith("/") for path in found))

    def test_rerun_is_idempotent(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})
        walker = TreeWalker(store, "secret", max_workers=3)

        self.assertSetEqual(walker.discover(), walker.discover())

    def test_forbidden_branch_contributes_nothing(self) -> None:
        secrets = {**E2E_SECRETS, "/secret-ops/db": {"pw": "x"}, "/secret-ops/nested/api": {"k": "v"}}
        store = FakeStore({"secret": secrets}, denied={"/secret-ops/"})

        found = TreeWalker(store, "secret").discover()

        self.assertSetEqual(found, set(E2E_SECRETS))
        self.assertEqual(store.list_calls[("secret", "/secret-ops/nested/")], 0)

    def test_failing_branch_does_not_stop_siblings(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS}, failing={"/enterprise/"})

        found = TreeWalker(store, "secret").discover()

        self.assertSetEqual(found, {"/foo", "/bar/baz"})

    def test_unexpected_exception_is_isolated_to_branch(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})
        original = store.list_dir

        def list_dir(mount: str, path: str) -> list[Entry]:
            if path == "/bar/":
                raise KeyError("boom")
            return original(mount, path)

        store.list_dir = list_dir  # type: ignore[method-assign]

        found = TreeWalker(store, "secret").discover()

        self.assertNotIn("/bar/baz", found)
        self.assertIn("/foo", found)

    def test_decode_failure_is_isolated_to_branch(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})
        original = store.list_dir

        def list_dir(mount: str, path: str) -> list[Entry]:
            if path == "/bar/":
                raise DecodeFailed("bad body")
            return original(mount, path)

        store.list_dir = list_dir  # type: ignore[method-assign]

        self.assertNotIn("/bar/baz", TreeWalker(store, "secret").discover())

    def test_leaf_root_is_returned_without_listing(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})

        self.assertSetEqual(TreeWalker(store, "secret").discover("/foo"), {"/foo"})
        self.assertEqual(sum(store.list_calls.values()), 0)

    def test_subtree_root_limits_walk(self) -> None:
        store = FakeStore({"secret": E2E_SECRETS})

        self.assertSetEqual(discover_paths(store, "secret", "/bar/"), {"/bar/baz"})

    def test_in_flight_listings_never_exceed_worker_count(self) -> None:
        secrets = {f"/d{i}/e{j}/leaf": {"v": "x"} for i in range(6) for j in range(4)}
        store = FakeStore({"secret": secrets})
        original = store.list_dir
        lock = threading.Lock()
        in_flight = 0
        peak = 0

        def list_dir(mount: str, path: str) -> list[Entry]:
            nonlocal in_flight, peak
            with lock:
                in_flight += 1
                peak = max(peak, in_flight)
            try:
                time.sleep(0.005)
                return original(mount, path)
            finally:
                with lock:
                    in_flight -= 1

        store.list_dir = list_dir  # type: ignore[method-assign]

        found = TreeWalker(store, "secret", max_workers=3).discover()

        self.assertEqual(len(found), 24)
        self.assertLessEqual(peak, 3)

    def test_rejects_non_positive_worker_count(self) -> None:
        with self.assertRaises(ValueError):
            TreeWalker(FakeStore({}), "secret", max_workers=0)


if __name__ == "__main__":
    unittest.main()

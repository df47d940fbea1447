"""Value types exchanged with the secret store.

Paths always start with ``/``; a trailing ``/`` marks a container node.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

ROOT_PATH = "/"


def is_container(path: str) -> bool:
    """Return whether ``path`` names a directory-like node."""
    return path.endswith("/")


def normalize_root(path: str | None) -> str:
    """Coerce user input into an absolute path, defaulting to the mount root."""
    if not path:
        return ROOT_PATH
    if not path.startswith("/"):
        path = "/" + path
    return path


def normalize_container(path: str | None) -> str:
    """Like ``normalize_root`` but always returns a container path."""
    path = normalize_root(path)
    return path if path.endswith("/") else path + "/"


@dataclass(frozen=True)
class Entry:
    """One row returned by a single ``list_dir`` call, relative to its parent."""

    name: str
    is_container: bool

    @classmethod
    def from_key(cls, key: str) -> Entry:
        return cls(name=key, is_container=key.endswith("/"))

    def absolute(self, parent: str) -> str:
        """Join this entry onto an absolute container path."""
        return parent + self.name


@dataclass(frozen=True)
class Secret:
    """A fetched secret version.

    ``data`` and ``metadata`` are ``None`` when the store omitted them, which
    happens for deleted versions that are still listed.
    """

    data: dict[str, Any] | None
    metadata: dict[str, Any] | None
    url: str = ""

    def is_empty(self) -> bool:
        return self.data is None and self.metadata is None

    def as_document(self) -> dict[str, Any]:
        """Return the JSON document printed by ``get`` and on confirm."""
        return {
            "url": self.url,
            "data": {
                "data": self.data,
                "metadata": self.metadata,
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.as_document(), indent=2)

    def pane_json(self) -> str:
        """Return the body shown in the interactive secret pane."""
        return json.dumps({"data": self.data, "metadata": self.metadata}, indent=2, sort_keys=True)


__all__ = ["Entry", "ROOT_PATH", "Secret", "is_container", "normalize_container", "normalize_root"]

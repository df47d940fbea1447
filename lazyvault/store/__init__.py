"""Secret store collaborator: HTTP client and value types."""

from __future__ import annotations

from .client import VaultClient
from .types import ROOT_PATH, Entry, Secret, is_container, normalize_container, normalize_root

__all__ = [
    "Entry",
    "ROOT_PATH",
    "Secret",
    "VaultClient",
    "is_container",
    "normalize_container",
    "normalize_root",
]

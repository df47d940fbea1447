"""Leaf discovery over a list-only hierarchical namespace."""

from __future__ import annotations

from .walker import DEFAULT_WALK_WORKERS, DirectoryLister, TreeWalker, discover_paths

__all__ = ["DEFAULT_WALK_WORKERS", "DirectoryLister", "TreeWalker", "discover_paths"]

"""Public runtime orchestration entry points.

This package groups the interactive bootstrap (`run_interactive`) and the
lower-level event loop used by tests and composition code.
"""

from __future__ import annotations


def run_interactive(*args, **kwargs):
    """Lazily import the session bootstrap to keep package imports lightweight."""
    from .app import run_interactive as _run_interactive

    return _run_interactive(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = ["run_interactive", "run_main_loop"]

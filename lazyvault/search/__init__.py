"""Prompt matching exports."""

from __future__ import annotations

from .matching import Match, match_paths, matches_prompt, rank_paths

__all__ = ["Match", "match_paths", "matches_prompt", "rank_paths"]

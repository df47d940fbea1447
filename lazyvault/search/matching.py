"""Subsequence prompt matching and ranking for discovered paths.

Everything here is pure and synchronous; ranking runs on every prompt edit.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Match:
    path: str
    score: int


def matches_prompt(prompt: str, candidate: str) -> tuple[bool, int]:
    """Return ``(matched, score)`` for a case-insensitive subsequence match.

    ``score`` counts matched characters whose immediately preceding candidate
    character was matched too, so ``"set"`` scores 1 against ``"secret"`` and
    a full-word prompt scores ``len(prompt) - 1`` against itself.
    """
    if not prompt:
        return True, 0
    prompt_folded = prompt.casefold()
    candidate_folded = candidate.casefold()

    index = 0
    consecutive = 0
    previous_matched = False
    for ch in candidate_folded:
        if ch == prompt_folded[index]:
            if previous_matched:
                consecutive += 1
            previous_matched = True
            if index == len(prompt_folded) - 1:
                return True, consecutive
            index += 1
        else:
            previous_matched = False
    return False, 0


def match_paths(prompt: str, candidates: Iterable[str]) -> list[Match]:
    """Return matching candidates ordered by descending score.

    The sort is stable, so equal scores keep their input order.
    """
    matches: list[Match] = []
    for candidate in candidates:
        matched, score = matches_prompt(prompt, candidate)
        if matched:
            matches.append(Match(path=candidate, score=score))
    matches.sort(key=lambda match: -match.score)
    return matches


def rank_paths(prompt: str, candidates: Iterable[str]) -> list[str]:
    return [match.path for match in match_paths(prompt, candidates)]


__all__ = ["Match", "match_paths", "matches_prompt", "rank_paths"]

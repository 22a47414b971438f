# SPDX-License-Identifier: MIT
"""String helpers for "did you mean" suggestions."""

from __future__ import annotations

from collections.abc import Iterable


def levenshtein(a: str, b: str) -> int:
    """Return the edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def closest_matches(name: str, candidates: Iterable[str]) -> list[str]:
    """Return every candidate tied at the minimum edit distance to ``name``.

    Candidates keep their input order, duplicates are dropped.
    """
    best: list[str] = []
    best_distance: int | None = None
    for candidate in dict.fromkeys(candidates):
        distance = levenshtein(name, candidate)
        if best_distance is None or distance < best_distance:
            best = [candidate]
            best_distance = distance
        elif distance == best_distance:
            best.append(candidate)
    return best


def format_suggestions(name: str, candidates: Iterable[str]) -> str:
    """Return ``"a" or "b"`` for the closest candidates, or an empty string."""
    return " or ".join(f'"{m}"' for m in closest_matches(name, candidates))


def did_you_mean(message: str, name: str, candidates: Iterable[str]) -> str:
    """Append a ``did you mean`` hint to ``message`` when one exists."""
    suggestions = format_suggestions(name, candidates)
    if suggestions:
        return f"{message}, did you mean {suggestions}?"
    return message

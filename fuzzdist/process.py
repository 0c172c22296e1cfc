"""
fuzzdist.process — lookup of the best matches in a list of choices.

Scores are similarities as returned by :func:`fuzzdist.distance.compare`:
``1.0`` for identical inputs, ``0.0`` for completely different ones.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from .distance._initialize import StringDistance
from .distance.normalized import normalize


def _score(dist: StringDistance, query: Any, choice: Any, min_score: float) -> float | None:
    """Similarity of *choice*, or ``None`` when it scores below *min_score*.

    The decision is taken on the normalized distance itself, since
    ``compare`` clamps misses to *min_score*.
    """
    max_dist = 1.0 - min_score
    out = dist(query, choice, max_dist=max_dist)
    if out is None or out > max_dist:
        return None
    return 1.0 - out


def extractOne(
    query: Any,
    choices: Iterable[Any],
    dist: StringDistance,
    *,
    min_score: float = 0.0,
    processor: Callable[..., Any] | None = None,
) -> tuple[Any, float, int] | None:
    """Return ``(choice, score, index)`` of the most similar choice.

    ``None`` when no choice scores above zero and at least *min_score*.
    The threshold passed to the distance tightens to the best score seen so
    far, so later choices may stop early.  Ties keep the first choice.
    """
    dist = normalize(dist)
    if processor is not None:
        query = processor(query)
    best: tuple[Any, float, int] | None = None
    threshold = min_score
    for index, choice in enumerate(choices):
        if choice is None:
            continue
        candidate = processor(choice) if processor is not None else choice
        score = _score(dist, query, candidate, threshold)
        if score is None or score <= 0.0:
            continue
        if best is None or score > best[1]:
            best = (choice, score, index)
            threshold = score
    return best


def extract(
    query: Any,
    choices: Iterable[Any],
    dist: StringDistance,
    *,
    min_score: float = 0.8,
    limit: int | None = None,
    processor: Callable[..., Any] | None = None,
) -> list[tuple[Any, float, int]]:
    """Return every ``(choice, score, index)`` with ``score >= min_score``.

    Sorted by score descending, then by index.  *limit* truncates the list.
    """
    dist = normalize(dist)
    if processor is not None:
        query = processor(query)
    results: list[tuple[Any, float, int]] = []
    for index, choice in enumerate(choices):
        if choice is None:
            continue
        candidate = processor(choice) if processor is not None else choice
        score = _score(dist, query, candidate, min_score)
        if score is not None:
            results.append((choice, score, index))
    results.sort(key=lambda r: -r[1])
    return results if limit is None else results[:limit]


__all__ = ["extract", "extractOne"]

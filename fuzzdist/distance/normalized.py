"""
fuzzdist.distance.normalized — unit-interval normalization and similarity.

:class:`Normalized` turns any distance into one with values in ``[0, 1]``
that returns exactly ``1.0`` once the value exceeds ``max_dist``.
:func:`compare` converts it into a similarity score.
"""

from __future__ import annotations

import math
from typing import Any

from ._initialize import StringDistance
from .edit import DamerauLevenshtein, Hamming, Levenshtein, OptimalStringAlignment
from .qgram import QGram

_EDIT_DISTANCES = (Hamming, Levenshtein, OptimalStringAlignment, DamerauLevenshtein)


class Normalized(StringDistance):
    """
    Normalized version of *dist*.

    - Edit distances are divided by the length of the longer input and
      receive ``ceil(len * max_dist)`` as their integer budget.
    - :class:`~fuzzdist.distance.QGram` is divided by
      ``len1 + len2 - 2q + 2``; inputs shorter than ``q`` are compared for
      equality.
    - Other distances are already in ``[0, 1]`` and pass through.

    Wrapping a ``Normalized`` distance again returns the same wrapper, and
    wrapping a modifier (``TokenSort``, ``TokenMax``, ...) returns
    ``normalize(dist)``.
    """

    normalized = True

    def __new__(cls, dist: StringDistance) -> Any:
        if cls is Normalized and getattr(dist, "with_base", None) is not None:
            return normalize(dist)
        return super().__new__(cls)

    def __init__(self, dist: StringDistance) -> None:
        if isinstance(dist, Normalized):
            dist = dist.dist
        self.dist = dist
        if isinstance(dist, _EDIT_DISTANCES):
            self._kind = "edit"
        elif isinstance(dist, QGram):
            self._kind = "qgram"
        else:
            self._kind = "unit"

    @property
    def commutative(self) -> bool:  # type: ignore[override]
        return self.dist.commutative

    @property
    def uses_matching_blocks(self) -> bool:  # type: ignore[override]
        return self.dist.uses_matching_blocks

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = 1.0) -> float | None:
        if s1 is None or s2 is None:
            return None
        if max_dist is None:
            max_dist = 1.0
        len1, len2 = sorted((len(s1), len(s2)))
        if self._kind == "edit":
            if len2 == 0:
                return 0.0
            out = self.dist(s1, s2, max_dist=math.ceil(len2 * max_dist)) / len2
        elif self._kind == "qgram":
            q = self.dist.q
            if len1 < q:
                return 0.0 if s1 == s2 else 1.0
            out = self.dist(s1, s2) / (len1 + len2 - 2 * q + 2)
        else:
            out = self.dist(s1, s2, max_dist=max_dist)
        return 1.0 if out > max_dist else out

    def __repr__(self) -> str:
        return f"Normalized({self.dist!r})"


def normalize(dist: StringDistance) -> StringDistance:
    """Return *dist* if it is already normalized, else its normalized version.

    Modifiers such as :class:`~fuzzdist.fuzz.TokenSort` are rebuilt around
    the normalized base, so ``normalize(TokenSort(Levenshtein()))`` is
    ``TokenSort(Normalized(Levenshtein()))``.
    """
    if dist.normalized:
        return dist
    with_base = getattr(dist, "with_base", None)
    if with_base is not None:
        return with_base(normalize(dist.dist))
    return Normalized(dist)


def compare(s1: Any, s2: Any, dist: StringDistance, *, min_score: float = 0.0) -> float | None:
    """
    Similarity score in ``[0, 1]`` between *s1* and *s2* under *dist*.

    Scores are clamped to ``[min_score, 1]``: a pair scoring below
    *min_score* is reported as *min_score*.  ``None`` inputs give ``None``.

    Examples
    --------
    >>> compare("martha", "marhta", Levenshtein())
    0.6666666666666667
    """
    out = normalize(dist)(s1, s2, max_dist=1.0 - min_score)
    if out is None:
        return None
    return max(1.0 - out, min_score)


__all__ = ["Normalized", "normalize", "compare"]

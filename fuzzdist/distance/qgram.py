"""
fuzzdist.distance.qgram — q-gram frequency and set distances.

Every distance in this module accepts either plain sequences or
:class:`QGramSortedVector` values.  The batch engine converts each element
of a collection once into a ``QGramSortedVector`` so the q-gram counts are
not rebuilt for every row and column of the distance matrix.

Counts are combined by merging two sorted ``(qgram, count)`` vectors, which
is linear in the number of distinct q-grams.
"""

from __future__ import annotations

import math
from abc import abstractmethod
from collections import Counter
from collections.abc import Iterator, Sequence
from typing import Any

from ..utils import unwrap
from ._initialize import StringDistance


def _qgrams(s: Sequence[Any], q: int) -> Iterator[Any]:
    for i in range(len(s) - q + 1):
        gram = s[i : i + q]
        # slices of lists are unhashable; tuples sort the same way
        yield gram if isinstance(gram, (str, bytes)) else tuple(gram)


class QGramSortedVector:
    """
    Sorted multiset of the q-grams of a sequence.

    Parameters
    ----------
    s : Sequence
        The sequence to decompose.
    q : int
        Length of each q-gram.
    """

    __slots__ = ("s", "q", "length", "grams")

    def __init__(self, s: Sequence[Any], q: int) -> None:
        s = unwrap(s)
        self.s = s
        self.q = q
        self.length = len(s)
        self.grams: list[tuple[Any, int]] = sorted(Counter(_qgrams(s, q)).items())

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QGramSortedVector):
            return self.q == other.q and self.s == other.s
        return self.s == unwrap(other)

    def __hash__(self) -> int:
        return hash((self.s, self.q))

    def __repr__(self) -> str:
        return f"QGramSortedVector({self.s!r}, q={self.q})"


def _count_pairs(v1: QGramSortedVector, v2: QGramSortedVector) -> Iterator[tuple[int, int]]:
    """Yield ``(count_in_v1, count_in_v2)`` for every distinct q-gram of either vector."""
    g1, g2 = v1.grams, v2.grams
    i1 = i2 = 0
    n1, n2 = len(g1), len(g2)
    while i1 < n1 and i2 < n2:
        gram1, c1 = g1[i1]
        gram2, c2 = g2[i2]
        if gram1 < gram2:
            yield c1, 0
            i1 += 1
        elif gram2 < gram1:
            yield 0, c2
            i2 += 1
        else:
            yield c1, c2
            i1 += 1
            i2 += 1
    for _, c1 in g1[i1:]:
        yield c1, 0
    for _, c2 in g2[i2:]:
        yield 0, c2


def _raw(s: Any) -> Any:
    return s.s if isinstance(s, QGramSortedVector) else unwrap(s)


class QGramDistance(StringDistance):
    """Base class of the q-gram family; *q* is the q-gram length."""

    def __init__(self, q: int = 2) -> None:
        if q < 1:
            raise ValueError(f"q must be a positive integer, got {q!r}")
        self.q = q

    def preprocess(self, s: Any) -> Any:
        """Convert *s* into a reusable :class:`QGramSortedVector` (``None`` passes through)."""
        if s is None or (isinstance(s, QGramSortedVector) and s.q == self.q):
            return s
        return QGramSortedVector(_raw(s), self.q)

    def _vectors(self, s1: Any, s2: Any) -> tuple[QGramSortedVector, QGramSortedVector]:
        return self.preprocess(s1), self.preprocess(s2)

    def _too_short(self, s1: Any, s2: Any) -> bool:
        return min(len(s1), len(s2)) < self.q

    def __repr__(self) -> str:
        return f"{type(self).__name__}(q={self.q})"


class QGram(QGramDistance):
    """
    Sum over all q-grams of the absolute difference of their counts.

    >>> QGram(2)("abc", "abd")
    2
    """

    dtype = int

    def __call__(self, s1: Any, s2: Any, max_dist: int | None = None) -> int | None:
        if s1 is None or s2 is None:
            return None
        v1, v2 = self._vectors(s1, s2)
        return sum(abs(n1 - n2) for n1, n2 in _count_pairs(v1, v2))


def _distinct_counts(pairs: Iterator[tuple[int, int]]) -> tuple[int, int, int]:
    """Number of distinct q-grams in each vector and in their intersection."""
    ndistinct1 = ndistinct2 = nintersect = 0
    for n1, n2 in pairs:
        if n1:
            ndistinct1 += 1
        if n2:
            ndistinct2 += 1
        if n1 and n2:
            nintersect += 1
    return ndistinct1, ndistinct2, nintersect


class _NormalizedQGramDistance(QGramDistance):
    """Shared fallback: inputs shorter than ``q`` are compared for equality."""

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = None) -> float | None:
        if s1 is None or s2 is None:
            return None
        if self._too_short(s1, s2):
            return 0.0 if _raw(s1) == _raw(s2) else 1.0
        v1, v2 = self._vectors(s1, s2)
        return self._from_counts(_count_pairs(v1, v2))

    @abstractmethod
    def _from_counts(self, pairs: Iterator[tuple[int, int]]) -> float: ...


class Cosine(_NormalizedQGramDistance):
    """``1 - cos`` of the angle between the two q-gram count vectors."""

    def _from_counts(self, pairs: Iterator[tuple[int, int]]) -> float:
        norm1 = norm2 = prod = 0
        for n1, n2 in pairs:
            norm1 += n1 * n1
            norm2 += n2 * n2
            prod += n1 * n2
        return 1.0 - prod / math.sqrt(norm1 * norm2)


class Jaccard(_NormalizedQGramDistance):
    """``1 - |Q(s1) ∩ Q(s2)| / |Q(s1) ∪ Q(s2)|`` over distinct q-grams."""

    def _from_counts(self, pairs: Iterator[tuple[int, int]]) -> float:
        ndistinct1, ndistinct2, nintersect = _distinct_counts(pairs)
        return 1.0 - nintersect / (ndistinct1 + ndistinct2 - nintersect)


class SorensenDice(_NormalizedQGramDistance):
    """``1 - 2 |Q(s1) ∩ Q(s2)| / (|Q(s1)| + |Q(s2)|)`` over distinct q-grams."""

    def _from_counts(self, pairs: Iterator[tuple[int, int]]) -> float:
        ndistinct1, ndistinct2, nintersect = _distinct_counts(pairs)
        return 1.0 - 2.0 * nintersect / (ndistinct1 + ndistinct2)


class Overlap(_NormalizedQGramDistance):
    """``1 - |Q(s1) ∩ Q(s2)| / min(|Q(s1)|, |Q(s2)|)`` over distinct q-grams."""

    def _from_counts(self, pairs: Iterator[tuple[int, int]]) -> float:
        ndistinct1, ndistinct2, nintersect = _distinct_counts(pairs)
        return 1.0 - nintersect / min(ndistinct1, ndistinct2)


__all__ = [
    "QGramSortedVector",
    "QGramDistance",
    "QGram",
    "Cosine",
    "Jaccard",
    "SorensenDice",
    "Overlap",
]

"""
fuzzdist.distance.edit — raw edit distances (integer counts).

All distances accept any sequences (``str``, lists of tokens, ...) whose
elements support ``==``; :class:`DamerauLevenshtein` also needs hashable
elements.  With ``max_dist`` set, the result is exact when it is
``<= max_dist`` and some integer ``> max_dist`` otherwise.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from ..utils import reorder
from ._initialize import StringDistance


def _over_budget(max_dist: float) -> int:
    """Smallest integer strictly above *max_dist*."""
    return math.floor(max_dist) + 1


def _strip_common_affix(s1: Sequence[Any], s2: Sequence[Any]) -> tuple[Sequence[Any], Sequence[Any]]:
    """Drop the common prefix and suffix, which never contribute edits."""
    len1, len2 = len(s1), len(s2)
    start = 0
    while start < len1 and s1[start] == s2[start]:
        start += 1
    end1, end2 = len1, len2
    while end1 > start and end2 > start and s1[end1 - 1] == s2[end2 - 1]:
        end1 -= 1
        end2 -= 1
    return s1[start:end1], s2[start:end2]


class Hamming(StringDistance):
    """
    Number of positions with differing symbols, plus the length difference.

    >>> Hamming()("martha", "marhta")
    2
    """

    dtype = int

    def __call__(self, s1: Any, s2: Any, max_dist: int | None = None) -> int | None:
        if s1 is None or s2 is None:
            return None
        out = abs(len(s2) - len(s1))
        if max_dist is not None and out > max_dist:
            return _over_budget(max_dist)
        for ch1, ch2 in zip(s1, s2):
            if ch1 != ch2:
                out += 1
                if max_dist is not None and out > max_dist:
                    return _over_budget(max_dist)
        return out


class Levenshtein(StringDistance):
    """
    Minimum number of insertions, deletions and substitutions.

    >>> Levenshtein()("kitten", "sitting")
    3
    """

    dtype = int

    def __call__(self, s1: Any, s2: Any, max_dist: int | None = None) -> int | None:
        if s1 is None or s2 is None:
            return None
        s1, s2 = reorder(s1, s2)
        if max_dist is not None and len(s2) - len(s1) > max_dist:
            return _over_budget(max_dist)
        s1, s2 = _strip_common_affix(s1, s2)
        len1, len2 = len(s1), len(s2)
        if len1 == 0:
            return len2 if max_dist is None or len2 <= max_dist else _over_budget(max_dist)

        # one DP row over the longer sequence
        row = list(range(len2 + 1))
        for i1, ch1 in enumerate(s1, start=1):
            diag, row[0] = row[0], i1
            row_min = i1
            for i2, ch2 in enumerate(s2, start=1):
                above = row[i2]
                if ch1 == ch2:
                    current = diag
                else:
                    current = min(diag, above, row[i2 - 1]) + 1
                diag, row[i2] = above, current
                if current < row_min:
                    row_min = current
            if max_dist is not None and row_min > max_dist:
                return _over_budget(max_dist)

        out = row[len2]
        if max_dist is not None and out > max_dist:
            return _over_budget(max_dist)
        return out


class OptimalStringAlignment(StringDistance):
    """
    Levenshtein plus transposition of adjacent symbols, where no substring
    is edited more than once (restricted Damerau-Levenshtein).

    >>> OptimalStringAlignment()("ca", "abc")
    3
    """

    dtype = int

    def __call__(self, s1: Any, s2: Any, max_dist: int | None = None) -> int | None:
        if s1 is None or s2 is None:
            return None
        s1, s2 = reorder(s1, s2)
        if max_dist is not None and len(s2) - len(s1) > max_dist:
            return _over_budget(max_dist)
        s1, s2 = _strip_common_affix(s1, s2)
        len1, len2 = len(s1), len(s2)
        if len1 == 0:
            return len2 if max_dist is None or len2 <= max_dist else _over_budget(max_dist)

        prev2: list[int] = []
        prev = list(range(len2 + 1))
        for i1 in range(1, len1 + 1):
            ch1 = s1[i1 - 1]
            row = [i1] + [0] * len2
            for i2 in range(1, len2 + 1):
                ch2 = s2[i2 - 1]
                cost = 0 if ch1 == ch2 else 1
                current = min(prev[i2] + 1, row[i2 - 1] + 1, prev[i2 - 1] + cost)
                if i1 > 1 and i2 > 1 and ch1 == s2[i2 - 2] and s1[i1 - 2] == ch2:
                    current = min(current, prev2[i2 - 2] + 1)
                row[i2] = current
            # a cell is reachable from the two previous rows only
            if max_dist is not None and min(min(row), min(prev)) > max_dist:
                return _over_budget(max_dist)
            prev2, prev = prev, row

        out = prev[len2]
        if max_dist is not None and out > max_dist:
            return _over_budget(max_dist)
        return out


class DamerauLevenshtein(StringDistance):
    """
    Unrestricted Damerau-Levenshtein distance (Lowrance-Wagner).

    Unlike :class:`OptimalStringAlignment`, a transposed pair may be edited
    again, so ``"ca"`` → ``"abc"`` costs 2.

    >>> DamerauLevenshtein()("ca", "abc")
    2
    """

    dtype = int

    def __call__(self, s1: Any, s2: Any, max_dist: int | None = None) -> int | None:
        if s1 is None or s2 is None:
            return None
        s1, s2 = reorder(s1, s2)
        if max_dist is not None and len(s2) - len(s1) > max_dist:
            return _over_budget(max_dist)
        s1, s2 = _strip_common_affix(s1, s2)
        len1, len2 = len(s1), len(s2)

        inf = len1 + len2
        # d[i + 1][j + 1] is the distance between s1[:i] and s2[:j]
        d = [[0] * (len2 + 2) for _ in range(len1 + 2)]
        d[0][0] = inf
        for i in range(len1 + 1):
            d[i + 1][0] = inf
            d[i + 1][1] = i
        for j in range(len2 + 1):
            d[0][j + 1] = inf
            d[1][j + 1] = j

        last_row: dict[Any, int] = {}
        for i in range(1, len1 + 1):
            ch1 = s1[i - 1]
            last_col = 0
            for j in range(1, len2 + 1):
                ch2 = s2[j - 1]
                k = last_row.get(ch2, 0)
                l = last_col
                if ch1 == ch2:
                    cost = 0
                    last_col = j
                else:
                    cost = 1
                d[i + 1][j + 1] = min(
                    d[i][j] + cost,
                    d[i + 1][j] + 1,
                    d[i][j + 1] + 1,
                    d[k][l] + (i - k - 1) + 1 + (j - l - 1),
                )
            last_row[ch1] = i

        out = d[len1 + 1][len2 + 1]
        if max_dist is not None and out > max_dist:
            return _over_budget(max_dist)
        return out


__all__ = ["Hamming", "Levenshtein", "OptimalStringAlignment", "DamerauLevenshtein"]

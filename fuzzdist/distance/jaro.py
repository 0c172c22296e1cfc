"""fuzzdist.distance.jaro — Jaro and Jaro-Winkler distances (already in ``[0, 1]``)."""

from __future__ import annotations

from typing import Any

from ..utils import reorder
from ._initialize import StringDistance


def _jaro_distance(s1: Any, s2: Any) -> float:
    s1, s2 = reorder(s1, s2)
    len1, len2 = len(s1), len(s2)
    if len2 == 0:
        return 0.0
    window = max(0, len2 // 2 - 1)
    flags = [False] * len2
    matched: list[Any] = []
    for i1, ch1 in enumerate(s1):
        lo = max(0, i1 - window)
        hi = min(len2, i1 + window + 1)
        for i2 in range(lo, hi):
            if not flags[i2] and s2[i2] == ch1:
                flags[i2] = True
                matched.append(ch1)
                break
    m = len(matched)
    if m == 0:
        return 1.0
    transpositions = 0
    k = 0
    for i2, ch2 in enumerate(s2):
        if flags[i2]:
            if ch2 != matched[k]:
                transpositions += 1
            k += 1
    return 1.0 - (m / len1 + m / len2 + (m - transpositions / 2) / m) / 3.0


class Jaro(StringDistance):
    """
    Jaro distance, ``1 - jaro_similarity``.

    Two empty inputs are identical (distance 0).
    """

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = None) -> float | None:
        if s1 is None or s2 is None:
            return None
        return _jaro_distance(s1, s2)


class JaroWinkler(StringDistance):
    """
    Jaro distance reduced for strings sharing a common prefix.

    When the Jaro distance is at most *threshold* it is multiplied by
    ``1 - min(prefix, maxlength) * p``.

    Parameters
    ----------
    p : float, default 0.1
        Prefix scaling factor, must satisfy ``0 <= p * maxlength <= 1``.
    threshold : float, default 0.3
        Only distances at or below this value are boosted.
    maxlength : int, default 4
        Longest prefix taken into account.
    """

    def __init__(self, p: float = 0.1, threshold: float = 0.3, maxlength: int = 4) -> None:
        if not 0.0 <= p * maxlength <= 1.0:
            raise ValueError(
                f"p * maxlength must lie in [0, 1], got p={p!r}, maxlength={maxlength!r}"
            )
        self.p = p
        self.threshold = threshold
        self.maxlength = maxlength

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = None) -> float | None:
        if s1 is None or s2 is None:
            return None
        out = _jaro_distance(s1, s2)
        if out <= self.threshold:
            prefix = 0
            for ch1, ch2 in zip(s1, s2):
                if ch1 != ch2 or prefix == self.maxlength:
                    break
                prefix += 1
            out = (1.0 - prefix * self.p) * out
        return out

    def __repr__(self) -> str:
        return f"JaroWinkler(p={self.p!r}, threshold={self.threshold!r}, maxlength={self.maxlength!r})"


__all__ = ["Jaro", "JaroWinkler"]

"""fuzzdist.distance.ratcliff — Ratcliff-Obershelp (gestalt pattern matching) distance."""

from __future__ import annotations

from typing import Any

from ..matching import length_matching_blocks
from ..utils import reorder
from ._initialize import StringDistance


class RatcliffObershelp(StringDistance):
    """
    ``1 - 2 * matched / (len1 + len2)`` where *matched* is the total size of
    the matching blocks of the two sequences.

    >>> RatcliffObershelp()("ab", "ac")
    0.5
    """

    uses_matching_blocks = True

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = None) -> float | None:
        if s1 is None or s2 is None:
            return None
        s1, s2 = reorder(s1, s2)
        len1, len2 = len(s1), len(s2)
        if len1 + len2 == 0:
            return 0.0
        n_matched = length_matching_blocks(s1, s2, 0, 0, len1, len2)
        return 1.0 - 2.0 * n_matched / (len1 + len2)


__all__ = ["RatcliffObershelp"]

"""
fuzzdist.fuzz — distance modifiers for multi-word text.

Each modifier wraps a base distance and is itself a distance, so they nest
freely::

    from fuzzdist.distance import Levenshtein, RatcliffObershelp
    from fuzzdist.fuzz import Partial, TokenMax, TokenSort

    TokenSort(Partial(RatcliffObershelp()))("mets new york", "new york mets vs braves")
    TokenMax(Levenshtein())("New York Mets vs Atlanta", "Atlanta Braves vs New York Mets")

See http://chairnerd.seatgeek.com/fuzzywuzzy-fuzzy-string-matching-in-python/
"""

from __future__ import annotations

from typing import Any

from .distance._initialize import StringDistance
from .distance.normalized import normalize
from .matching import length_matching_blocks, matching_blocks
from .utils import reorder, unwrap

# TokenMax weighting
UNBASE_SCALE = 0.95
PARTIAL_SCALE = 0.9
PARTIAL_LENGTH_RATIO = 1.5


def _text(s: Any) -> str:
    s = unwrap(s)
    if not isinstance(s, str):
        raise TypeError(f"token modifiers are only defined on str, got {type(s).__name__}")
    return s


def _rescale_budget(max_dist: float, scale: float) -> float:
    """Budget for a modifier whose output is folded as ``1 - scale * (1 - out)``."""
    return 1.0 - (1.0 - max_dist) / scale


class _Modifier(StringDistance):
    """Common plumbing: holds the wrapped distance and forwards its symmetry."""

    def __init__(self, dist: StringDistance) -> None:
        self.dist = dist

    @property
    def commutative(self) -> bool:  # type: ignore[override]
        return self.dist.commutative

    @property
    def dtype(self) -> type:  # type: ignore[override]
        return self.dist.dtype

    @property
    def normalized(self) -> bool:  # type: ignore[override]
        return self.dist.normalized

    def with_base(self, dist: StringDistance) -> StringDistance:
        """Same modifier around another base distance."""
        return type(self)(dist)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.dist!r})"


class Partial(_Modifier):
    """
    Minimum distance between the shorter input and every substring of the
    longer input having the same length.

    Ratcliff-Obershelp bases only examine the windows aligned on a matching
    block, which always contain the best alignment.

    Examples
    --------
    >>> s1 = "New York Mets vs Atlanta Braves"
    >>> s2 = "Atlanta Braves vs New York Mets"
    >>> Partial(RatcliffObershelp())(s1, s2)
    0.5483870967741935
    """

    def __init__(self, dist: StringDistance) -> None:
        super().__init__(dist)
        self._use_blocks = dist.uses_matching_blocks

    def __call__(self, s1: Any, s2: Any, max_dist: Any = None) -> Any:
        if s1 is None or s2 is None:
            return None
        s1, s2 = reorder(s1, s2)
        len1, len2 = len(s1), len(s2)
        if len1 == len2 or len1 == 0:
            return self.dist(s1, s2, max_dist=max_dist)
        if self._use_blocks:
            out = self._from_matching_blocks(s1, s2, len1, len2)
            return 1.0 if max_dist is not None and out > max_dist else out

        out = None
        budget = max_dist
        for start in range(len2 - len1 + 1):
            curr = self.dist(s1, s2[start : start + len1], max_dist=budget)
            if out is None or curr < out:
                out = curr
            if budget is None or curr < budget:
                budget = curr
        return out

    def _from_matching_blocks(self, s1: Any, s2: Any, len1: int, len2: int) -> float:
        out = 1.0
        for block in matching_blocks(s1, s2, 0, 0, len1, len2):
            # window of s2 of length len1 containing the block, kept inside s2
            start = min(max(block.b - block.a, 0), len2 - len1)
            n_matched = length_matching_blocks(s1, s2, 0, start, len1, start + len1)
            out = min(out, 1.0 - 2.0 * n_matched / (2 * len1))
        return out


class TokenSort(_Modifier):
    """
    Distance between the inputs after sorting their whitespace-separated
    words alphabetically.

    Only defined on ``str``.

    Examples
    --------
    >>> TokenSort(Levenshtein())("New York Mets vs Atlanta Braves", "Atlanta Braves vs New York Mets")
    0
    """

    def __call__(self, s1: Any, s2: Any, max_dist: Any = None) -> Any:
        if s1 is None or s2 is None:
            return None
        s1 = " ".join(sorted(_text(s1).split()))
        s2 = " ".join(sorted(_text(s2).split()))
        return self.dist(s1, s2, max_dist=max_dist)


class TokenSet(_Modifier):
    """
    Minimum of the distances between ``[SORTED_INTERSECTION]``,
    ``[SORTED_INTERSECTION] + [SORTED_REST_OF_STRING1]`` and
    ``[SORTED_INTERSECTION] + [SORTED_REST_OF_STRING2]``, where words are
    deduplicated.

    Only defined on ``str``.

    Examples
    --------
    >>> TokenSet(RatcliffObershelp())("New York Mets vs Atlanta", "Atlanta Braves vs New York Mets")
    0.0
    """

    def __call__(self, s1: Any, s2: Any, max_dist: Any = None) -> Any:
        if s1 is None or s2 is None:
            return None
        v1 = sorted(set(_text(s1).split()))
        v2 = sorted(set(_text(s2).split()))
        common = set(v2)
        s0 = " ".join(token for token in v1 if token in common)
        s1 = " ".join(v1)
        s2 = " ".join(v2)
        if not s0:
            return self.dist(s1, s2, max_dist=max_dist)
        return min(
            self.dist(s0, s1, max_dist=max_dist),
            self.dist(s0, s2, max_dist=max_dist),
            self.dist(s1, s2, max_dist=max_dist),
        )


class TokenMax(_Modifier):
    """
    Best of the normalized base distance and its :class:`Partial`,
    :class:`TokenSort` and :class:`TokenSet` modifiers, each damped toward
    the base score.

    The token modifiers are weighted by ``0.95``.  When the longer input is
    at least 1.5 times the shorter one, the base is replaced by its
    ``Partial`` version weighted by ``0.9`` (so the token modifiers weigh
    ``0.95 * 0.9``).  Results above ``max_dist`` are reported as ``1.0``.

    Examples
    --------
    >>> TokenMax(RatcliffObershelp())("New York Mets vs Atlanta", "Atlanta Braves vs New York Mets")
    0.050000000000000044
    """

    normalized = True
    dtype = float

    def __init__(self, dist: StringDistance) -> None:
        super().__init__(normalize(dist))

    def __call__(self, s1: Any, s2: Any, max_dist: float | None = 1.0) -> float | None:
        if s1 is None or s2 is None:
            return None
        if max_dist is None:
            max_dist = 1.0
        s1, s2 = reorder(s1, s2)
        len1, len2 = len(s1), len(s2)
        dist0: StringDistance = self.dist
        out = dist0(s1, s2, max_dist=max_dist)
        max_dist = min(max_dist, out)
        scale = UNBASE_SCALE
        # one input much shorter than the other: compare against its best window
        if len2 >= PARTIAL_LENGTH_RATIO * len1:
            dist0 = Partial(dist0)
            pscale = PARTIAL_SCALE
            pout = 1.0 - pscale * (1.0 - dist0(s1, s2, max_dist=_rescale_budget(max_dist, pscale)))
            out = min(out, pout)
            max_dist = min(max_dist, pout)
            scale *= pscale
        out_sort = 1.0 - scale * (1.0 - TokenSort(dist0)(s1, s2, max_dist=_rescale_budget(max_dist, scale)))
        max_dist = min(max_dist, out_sort)
        out_set = 1.0 - scale * (1.0 - TokenSet(dist0)(s1, s2, max_dist=_rescale_budget(max_dist, scale)))
        out = min(out, out_sort, out_set)
        return 1.0 if out > max_dist else out


__all__ = ["Partial", "TokenSort", "TokenSet", "TokenMax"]

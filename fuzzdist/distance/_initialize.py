"""
fuzzdist.distance._initialize — base class shared by every distance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StringDistance(ABC):
    """
    Base class for every distance capability.

    A distance is called as ``dist(s1, s2, max_dist=None)``.  When
    *max_dist* is given the implementation may stop early once the result
    is certain to exceed it, and then returns some value ``> max_dist``;
    otherwise the exact distance is returned.  ``None`` inputs propagate
    to a ``None`` result.

    Class attributes
    ----------------
    commutative : bool
        ``d(a, b) == d(b, a)`` for all inputs.  Unlocks the symmetric path
        of :func:`fuzzdist.pairwise.pairwise`.
    dtype : type
        Value type of the result (``int`` for raw edit counts).
    uses_matching_blocks : bool
        Ratcliff-Obershelp style metrics; :class:`fuzzdist.fuzz.Partial`
        uses the matching-block algorithm for them.
    normalized : bool
        Results lie in ``[0, 1]`` and are exactly ``1.0`` whenever they
        exceed ``max_dist``.
    """

    commutative: bool = True
    dtype: type = float
    uses_matching_blocks: bool = False
    normalized: bool = False

    @abstractmethod
    def __call__(self, s1: Any, s2: Any, max_dist: Any = None) -> Any: ...

    def evaluate(self, s1: Any, s2: Any, max_dist: Any = None) -> Any:
        """Alias of calling the distance."""
        return self(s1, s2, max_dist=max_dist)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items()))))


__all__ = ["StringDistance"]

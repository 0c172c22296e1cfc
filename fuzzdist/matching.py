"""
fuzzdist.matching — longest-common-substring matching blocks.

The matcher finds the longest common run of two windows, records it and
then repeats on the regions strictly before and strictly after that run.
Ranges are processed from an explicit work stack, so pathological inputs
never hit the recursion limit, and a single scan buffer is reused for
every step.

Usage::

    from fuzzdist.matching import matching_blocks

    matching_blocks("New York Mets", "Mets of New York")
    # [MatchingBlock(a=0, b=8, size=8)]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple


class MatchingBlock(NamedTuple):
    """A maximal run where ``s1[a:a + size] == s2[b:b + size]``."""

    a: int
    b: int
    size: int


def _longest_common_pattern(
    p: list[int],
    s1: Sequence[Any],
    s2: Sequence[Any],
    start1: int,
    start2: int,
    end1: int,
    end2: int,
) -> tuple[int, int, int]:
    """Longest common run of ``s1[start1:end1]`` and ``s2[start2:end2]``.

    Returns ``(j1, j2, size)`` with ``size == 0`` when the windows share no
    symbol.  The *s1* window drives the outer loop, so ties keep the run
    starting earliest in *s1*, then earliest in *s2*.
    """
    j1 = j2 = size = 0
    window2 = s2[start2:end2]
    width = end2 - start2
    # p[k] holds the length of the run ending at s2[start2 + k] for the previous row
    for k in range(width):
        p[k] = 0
    for i1 in range(start1, end1):
        ch1 = s1[i1]
        oldp = 0
        for k, ch2 in enumerate(window2):
            if ch1 != ch2:
                newp = 0
            else:
                newp = oldp + 1
                if newp > size:
                    size = newp
                    j1 = i1 - newp + 1
                    j2 = start2 + k - newp + 1
            oldp, p[k] = p[k], newp
    return j1, j2, size


def matching_blocks(
    s1: Sequence[Any],
    s2: Sequence[Any],
    start1: int = 0,
    start2: int = 0,
    end1: int | None = None,
    end2: int | None = None,
) -> list[MatchingBlock]:
    """
    Return the matching blocks of ``s1[start1:end1]`` and ``s2[start2:end2]``.

    Parameters
    ----------
    s1, s2 : Sequence
        Any sequences supporting ``len``, indexing, slicing and ``==`` on
        their elements.
    start1, start2, end1, end2 : int
        Half-open windows; *end1* / *end2* default to the sequence lengths.

    Returns
    -------
    list[MatchingBlock]
        Blocks sorted by position.  They never overlap in either sequence
        and their sizes sum to the matched length.
    """
    if end1 is None:
        end1 = len(s1)
    if end2 is None:
        end2 = len(s2)

    blocks: list[MatchingBlock] = []
    p = [0] * (max(end1 - start1, end2 - start2, 0) + 1)
    stack = [(start1, start2, end1, end2)]
    while stack:
        lo1, lo2, hi1, hi2 = stack.pop()
        if lo1 >= hi1 or lo2 >= hi2:
            continue
        j1, j2, size = _longest_common_pattern(p, s1, s2, lo1, lo2, hi1, hi2)
        if size == 0:
            continue
        blocks.append(MatchingBlock(j1, j2, size))
        stack.append((j1 + size, j2 + size, hi1, hi2))
        stack.append((lo1, lo2, j1, j2))
    blocks.sort()
    return blocks


def length_matching_blocks(
    s1: Sequence[Any],
    s2: Sequence[Any],
    start1: int = 0,
    start2: int = 0,
    end1: int | None = None,
    end2: int | None = None,
) -> int:
    """Total number of symbols covered by :func:`matching_blocks`."""
    return sum(block.size for block in matching_blocks(s1, s2, start1, start2, end1, end2))


__all__ = ["MatchingBlock", "matching_blocks", "length_matching_blocks"]

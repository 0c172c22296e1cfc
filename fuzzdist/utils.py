"""
fuzzdist.utils — sequence helpers shared by the metrics and modifiers.

:class:`SequenceWithLength` caches ``len()`` of a sequence so that nested
modifiers (``TokenMax`` → ``Partial`` → base) do not recompute it, which
matters for sequences whose length is not O(1) (grapheme views, lazy
token streams).
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from typing import Any

_NON_ALNUM = re.compile(r"[^\w]|_", re.UNICODE)


class SequenceWithLength(Sequence):
    """Immutable view pairing a sequence with its precomputed length."""

    __slots__ = ("seq", "length")

    def __init__(self, seq: Sequence[Any]) -> None:
        self.seq = seq
        self.length = len(seq)

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Any]:
        return iter(self.seq)

    def __getitem__(self, index: Any) -> Any:
        return self.seq[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceWithLength):
            other = other.seq
        return self.seq == other

    def __hash__(self) -> int:
        return hash(self.seq)

    def __str__(self) -> str:
        return str(self.seq)

    def __repr__(self) -> str:
        return f"SequenceWithLength({self.seq!r})"


def with_length(s: Any) -> Any:
    """Wrap *s* in a :class:`SequenceWithLength` (no-op if already wrapped or ``None``)."""
    if s is None or isinstance(s, SequenceWithLength):
        return s
    return SequenceWithLength(s)


def unwrap(s: Any) -> Any:
    """Return the sequence underneath a :class:`SequenceWithLength`."""
    return s.seq if isinstance(s, SequenceWithLength) else s


def reorder(s1: Any, s2: Any) -> tuple[Any, Any]:
    """Return ``(s1, s2)`` wrapped with cached lengths, shorter sequence first."""
    s1 = with_length(s1)
    s2 = with_length(s2)
    if len(s1) > len(s2):
        return s2, s1
    return s1, s2


def default_process(s: str | None) -> str:
    """Lowercase, replace non-alphanumeric characters with spaces, trim.

    ``None`` becomes the empty string.
    """
    if s is None:
        return ""
    return _NON_ALNUM.sub(" ", s).lower().strip()


__all__ = [
    "SequenceWithLength",
    "with_length",
    "unwrap",
    "reorder",
    "default_process",
]

"""
fuzzdist.distance — base string metrics and normalization.
"""

from __future__ import annotations

from ..matching import MatchingBlock
from ._initialize import StringDistance
from .edit import DamerauLevenshtein, Hamming, Levenshtein, OptimalStringAlignment
from .jaro import Jaro, JaroWinkler
from .normalized import Normalized, compare, normalize
from .qgram import (
    Cosine,
    Jaccard,
    Overlap,
    QGram,
    QGramDistance,
    QGramSortedVector,
    SorensenDice,
)
from .ratcliff import RatcliffObershelp

__all__ = [
    "MatchingBlock",
    "StringDistance",
    "Hamming",
    "Levenshtein",
    "OptimalStringAlignment",
    "DamerauLevenshtein",
    "Jaro",
    "JaroWinkler",
    "RatcliffObershelp",
    "QGramDistance",
    "QGramSortedVector",
    "QGram",
    "Cosine",
    "Jaccard",
    "SorensenDice",
    "Overlap",
    "Normalized",
    "normalize",
    "compare",
]

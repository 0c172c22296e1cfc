"""
fuzzdist — string distances, fuzzy modifiers and pairwise distance matrices.
"""

from __future__ import annotations

import logging

from . import (
    compat,
    distance,
    fuzz,
    matching,
    pairwise,
    process,
    utils,
)
from .distance import (
    Cosine,
    DamerauLevenshtein,
    Hamming,
    Jaccard,
    Jaro,
    JaroWinkler,
    Levenshtein,
    MatchingBlock,
    Normalized,
    OptimalStringAlignment,
    Overlap,
    QGram,
    RatcliffObershelp,
    SorensenDice,
    StringDistance,
    compare,
)
from .fuzz import Partial, TokenMax, TokenSet, TokenSort

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"

__all__ = [
    "compat",
    "distance",
    "fuzz",
    "matching",
    "pairwise",
    "process",
    "utils",
    "StringDistance",
    "MatchingBlock",
    "Hamming",
    "Levenshtein",
    "OptimalStringAlignment",
    "DamerauLevenshtein",
    "Jaro",
    "JaroWinkler",
    "RatcliffObershelp",
    "QGram",
    "Cosine",
    "Jaccard",
    "SorensenDice",
    "Overlap",
    "Normalized",
    "compare",
    "Partial",
    "TokenSort",
    "TokenSet",
    "TokenMax",
    "__version__",
]

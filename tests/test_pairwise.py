"""Tests for fuzzdist.pairwise — distance matrices on a thread pool."""

from __future__ import annotations

import dataclasses
import threading
from collections import Counter
from typing import Any

import numpy as np
import pytest

from fuzzdist.distance import (
    Jaccard,
    Jaro,
    Levenshtein,
    Normalized,
    QGramSortedVector,
    RatcliffObershelp,
    StringDistance,
)
from fuzzdist.fuzz import Partial, TokenMax, TokenSort
from fuzzdist.pairwise import DimensionMismatchError, PairwiseConfig, pairwise, pairwise_into

CITIES = ["New York", "Princeton", "San Francisco", "Newark", "Boston", "Brooklyn"]
TEAMS = ["New York Mets", "Atlanta Braves", "Mets of New York"]


class RecordingMatrix:
    """Matrix stand-in that counts how often every cell is written."""

    def __init__(self, n: int, m: int) -> None:
        self.shape = (n, m)
        self.values: dict[tuple[int, int], Any] = {}
        self.writes: Counter[tuple[int, int]] = Counter()
        self._lock = threading.Lock()

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        with self._lock:
            self.values[key] = value
            self.writes[key] += 1


class LengthDifference(StringDistance):
    """Signed length difference; deliberately not commutative."""

    commutative = False
    dtype = int

    def __call__(self, s1, s2, max_dist=None):
        if s1 is None or s2 is None:
            return None
        return len(s1) - len(s2)


class SpyJaccard(Jaccard):
    """Jaccard that records what it preprocesses and what it is called on."""

    def __init__(self, q: int = 2) -> None:
        super().__init__(q)
        self.preprocessed: list[Any] = []
        self.vector_inputs = 0

    def preprocess(self, s):
        self.preprocessed.append(s)
        return super().preprocess(s)

    def _vectors(self, s1, s2):
        # conversions made while scoring are not recorded
        return Jaccard.preprocess(self, s1), Jaccard.preprocess(self, s2)

    def __call__(self, s1, s2, max_dist=None):
        if isinstance(s1, QGramSortedVector) and isinstance(s2, QGramSortedVector):
            self.vector_inputs += 1
        return super().__call__(s1, s2, max_dist=max_dist)


class Exploding(StringDistance):
    def __call__(self, s1, s2, max_dist=None):
        if "Boston" in (s1, s2):
            raise RuntimeError("boom")
        return 0.5


def _expected(dist: StringDistance, xs: list[Any], ys: list[Any]) -> list[list[Any]]:
    return [[dist(x, y) for y in ys] for x in xs]


def _expected_symmetric(dist: StringDistance, xs: list[Any]) -> list[list[Any]]:
    n = len(xs)
    return [[dist(xs[min(i, j)], xs[max(i, j)]) for j in range(n)] for i in range(n)]


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------
class TestValues:
    @pytest.mark.parametrize(
        "dist",
        [Levenshtein(), Jaro(), Jaccard(2), Normalized(Levenshtein()), Partial(RatcliffObershelp()), TokenMax(Levenshtein())],
        ids=repr,
    )
    def test_symmetric_matches_cell_by_cell(self, dist: StringDistance) -> None:
        R = pairwise(dist, CITIES, workers=4)
        assert R.shape == (len(CITIES), len(CITIES))
        np.testing.assert_allclose(R, np.array(_expected_symmetric(dist, CITIES), dtype=float))
        np.testing.assert_array_equal(R, R.T)

    def test_asymmetric_shape_and_values(self) -> None:
        R = pairwise(Levenshtein(), CITIES, TEAMS, workers=2)
        assert R.shape == (len(CITIES), len(TEAMS))
        assert R.tolist() == _expected(Levenshtein(), CITIES, TEAMS)

    def test_docstring_example(self) -> None:
        R = pairwise(Levenshtein(), ["New York", "Princeton"], ["San Francisco"])
        assert R.tolist() == [[12], [10]]

    def test_empty_inputs(self) -> None:
        assert pairwise(Levenshtein(), []).shape == (0, 0)
        assert pairwise(Levenshtein(), CITIES, []).shape == (len(CITIES), 0)

    def test_single_worker_matches_pool(self) -> None:
        dist = TokenSort(Partial(Levenshtein()))
        serial = pairwise(dist, CITIES + TEAMS, workers=1)
        threaded = pairwise(dist, CITIES + TEAMS, workers=4, config=PairwiseConfig(chunk_size=1))
        np.testing.assert_array_equal(serial, threaded)

    def test_ys_same_object_is_symmetric(self) -> None:
        R = pairwise(Jaro(), CITIES, CITIES, workers=1)
        np.testing.assert_array_equal(R, R.T)
        assert np.all(np.diag(R) == 0.0)


# ---------------------------------------------------------------------------
# Output types
# ---------------------------------------------------------------------------
class TestDtype:
    def test_integer_distances(self) -> None:
        assert pairwise(Levenshtein(), CITIES).dtype == np.int64
        assert pairwise(TokenSort(Levenshtein()), CITIES).dtype == np.int64

    def test_float_distances(self) -> None:
        assert pairwise(Jaro(), CITIES).dtype == np.float64
        assert pairwise(TokenMax(Levenshtein()), CITIES).dtype == np.float64

    def test_none_gives_object_matrix(self) -> None:
        xs = ["New York", None, "Newark"]
        R = pairwise(Levenshtein(), xs, workers=2)
        assert R.dtype == object
        assert R[1, 1] is None
        assert R[0, 1] is None and R[1, 0] is None
        assert R[1, 2] is None and R[2, 1] is None
        assert R[0, 0] == 0
        assert R[0, 2] == Levenshtein()("New York", "Newark")

    def test_none_in_ys(self) -> None:
        R = pairwise(Jaro(), ["abc"], [None, "abd"])
        assert R.dtype == object
        assert R[0, 0] is None
        assert R[0, 1] == pytest.approx(Jaro()("abc", "abd"))


# ---------------------------------------------------------------------------
# pairwise_into
# ---------------------------------------------------------------------------
class TestPairwiseInto:
    def test_returns_same_matrix(self) -> None:
        R = np.zeros((len(CITIES), len(TEAMS)), dtype=np.int64)
        out = pairwise_into(R, Levenshtein(), CITIES, TEAMS)
        assert out is R
        assert R.tolist() == _expected(Levenshtein(), CITIES, TEAMS)

    def test_dimension_mismatch_leaves_output_untouched(self) -> None:
        R = np.full((2, 2), -1, dtype=np.int64)
        with pytest.raises(DimensionMismatchError, match="inconsistent length"):
            pairwise_into(R, Levenshtein(), CITIES)
        assert np.all(R == -1)

    def test_dimension_mismatch_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            pairwise_into(np.zeros((3,)), Levenshtein(), ["a", "b", "c"])

    @pytest.mark.parametrize("ys", [None, TEAMS], ids=["symmetric", "asymmetric"])
    def test_every_cell_written_once(self, ys: list[str] | None) -> None:
        n, m = len(CITIES), len(ys if ys is not None else CITIES)
        R = RecordingMatrix(n, m)
        pairwise_into(R, Levenshtein(), CITIES, ys, workers=4, config=PairwiseConfig(chunk_size=1))
        assert set(R.writes) == {(i, j) for i in range(n) for j in range(m)}
        assert set(R.writes.values()) == {1}

    def test_diagonal_not_evaluated(self) -> None:
        class CountingLevenshtein(Levenshtein):
            def __init__(self) -> None:
                self.pairs: list[tuple[str, str]] = []

            def __call__(self, s1, s2, max_dist=None):
                self.pairs.append((s1, s2))
                return super().__call__(s1, s2, max_dist=max_dist)

        dist = CountingLevenshtein()
        pairwise(dist, CITIES, workers=1)
        n = len(CITIES)
        assert len(dist.pairs) == n * (n - 1) // 2
        assert all(s1 != s2 for s1, s2 in dist.pairs)

    def test_non_commutative_takes_full_path(self) -> None:
        R = pairwise(LengthDifference(), CITIES, workers=2)
        assert R.tolist() == _expected(LengthDifference(), CITIES, CITIES)
        assert R[0, 2] == -R[2, 0] != 0

    def test_generator_and_tuple_inputs(self) -> None:
        R = pairwise(Levenshtein(), (c for c in CITIES), tuple(TEAMS))
        assert R.tolist() == _expected(Levenshtein(), CITIES, TEAMS)
        R = pairwise(Levenshtein(), (c for c in CITIES))
        assert R.shape == (len(CITIES), len(CITIES))

    def test_bare_string_rejected(self) -> None:
        with pytest.raises(TypeError):
            pairwise(Levenshtein(), "New York")


# ---------------------------------------------------------------------------
# q-gram preprocessing
# ---------------------------------------------------------------------------
class TestPreprocess:
    def test_explicit_preprocess(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES[:2], preprocess=True, workers=1)
        assert dist.preprocessed == CITIES[:2]
        assert dist.vector_inputs == 1

    def test_large_collection_preprocessed_by_default(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES[:5], workers=1)
        assert dist.preprocessed == CITIES[:5]

    def test_small_collection_left_alone(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES[:4], workers=1)
        assert dist.preprocessed == []
        assert dist.vector_inputs == 0

    def test_preprocess_disabled(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES, preprocess=False, workers=1)
        assert dist.preprocessed == []

    def test_threshold_from_config(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES[:2], config=PairwiseConfig(preprocess_min_size=2, workers=1))
        assert dist.preprocessed == CITIES[:2]

    def test_asymmetric_preprocesses_both_sides(self) -> None:
        dist = SpyJaccard()
        pairwise(dist, CITIES, TEAMS, preprocess=True, workers=1)
        assert dist.preprocessed == CITIES + TEAMS
        assert dist.vector_inputs == len(CITIES) * len(TEAMS)

    def test_preprocessed_values_match_plain(self) -> None:
        dist = Normalized(Jaccard(2))
        np.testing.assert_array_equal(
            pairwise(dist, CITIES, preprocess=True, workers=2),
            pairwise(dist, CITIES, preprocess=False, workers=2),
        )

    def test_none_survives_preprocessing(self) -> None:
        R = pairwise(Jaccard(2), CITIES + [None], preprocess=True, workers=2)
        assert R[-1, -1] is None
        assert R[0, -1] is None


# ---------------------------------------------------------------------------
# Config and failures
# ---------------------------------------------------------------------------
class TestConfig:
    def test_frozen(self) -> None:
        cfg = PairwiseConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.workers = 2  # type: ignore[misc]

    def test_defaults(self) -> None:
        cfg = PairwiseConfig()
        assert cfg.preprocess is None
        assert cfg.preprocess_min_size == 5
        assert cfg.workers is None
        assert cfg.chunk_size is None

    @pytest.mark.parametrize("kwargs", [{"workers": 0}, {"config": PairwiseConfig(chunk_size=0)}])
    def test_invalid_values(self, kwargs: dict[str, Any]) -> None:
        with pytest.raises(ValueError, match="must be >= 1"):
            pairwise(Levenshtein(), CITIES, **kwargs)

    @pytest.mark.parametrize("workers", [1, 4])
    def test_errors_propagate(self, workers: int) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            pairwise(Exploding(), CITIES, workers=workers)

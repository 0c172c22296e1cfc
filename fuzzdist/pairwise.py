"""
fuzzdist.pairwise — distance matrices between two collections.

``pairwise(dist, xs, ys)`` returns a matrix ``R`` with
``R[i, j] == dist(xs[i], ys[j])``.

- When *ys* is omitted (or is *xs* itself) and the distance is commutative,
  only the upper triangle is computed and mirrored; the diagonal is set
  without calling the distance.
- Rows are processed in order and the cells of a row are split into chunks
  run on a thread pool.  Every cell is written by exactly one task, so no
  locking is needed.
- The pure-Python distances hold the GIL, so throughput does not scale with
  ``workers``; the pool only pays off for distances that release it.
- q-gram distances convert each element once into a
  :class:`~fuzzdist.distance.QGramSortedVector` before the sweep.

Usage::

    from fuzzdist.distance import Levenshtein
    from fuzzdist.pairwise import pairwise

    pairwise(Levenshtein(), ["New York", "Princeton"])
    # array([[0, 9],
    #        [9, 0]])
"""

from __future__ import annotations

import contextlib
import dataclasses
import logging
import math
import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Any

import numpy as np

from .compat import _coerce_to_list
from .distance._initialize import StringDistance
from .distance.normalized import Normalized
from .distance.qgram import QGramDistance

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """The output matrix shape does not match ``(len(xs), len(ys))``."""


# ── Config dataclass ─────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class PairwiseConfig:
    """
    Configuration for :func:`pairwise` / :func:`pairwise_into`.

    Parameters
    ----------
    preprocess : bool | None
        Convert elements for q-gram distances before the sweep.  ``None``
        converts a collection once it has at least *preprocess_min_size*
        elements; ``False`` never converts.
    preprocess_min_size : int
        Collection size from which ``preprocess=None`` converts.
    workers : int | None
        Thread pool size.  ``None`` uses ``os.cpu_count()``; ``1`` runs
        everything in the calling thread.
    chunk_size : int | None
        Cells per task within a row.  ``None`` splits each row into one
        chunk per worker.

    Examples
    --------
    >>> cfg = PairwiseConfig(workers=4, preprocess=False)
    >>> R = pairwise(Jaccard(3), names, config=cfg)
    """

    preprocess: bool | None = None
    preprocess_min_size: int = 5
    workers: int | None = None
    chunk_size: int | None = None


def _resolve_config(config: PairwiseConfig | None, **overrides: Any) -> PairwiseConfig:
    cfg = config if config is not None else PairwiseConfig()
    changes = {k: v for k, v in overrides.items() if v is not None}
    cfg = dataclasses.replace(cfg, **changes) if changes else cfg
    if cfg.workers is not None and cfg.workers < 1:
        raise ValueError(f"workers must be >= 1, got {cfg.workers!r}")
    if cfg.chunk_size is not None and cfg.chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {cfg.chunk_size!r}")
    return cfg


# ── Internal helpers ─────────────────────────────────────────────────


def _preprocessor(dist: StringDistance) -> Callable[[Any], Any] | None:
    if isinstance(dist, Normalized):
        dist = dist.dist
    if isinstance(dist, QGramDistance):
        return dist.preprocess
    return None


def _preprocess(
    xs: list[Any],
    dist: StringDistance,
    cfg: PairwiseConfig,
    executor: Executor | None,
) -> list[Any]:
    convert = _preprocessor(dist)
    if convert is None:
        return xs
    preprocess = cfg.preprocess
    if preprocess is None:
        preprocess = len(xs) >= cfg.preprocess_min_size
    if not preprocess:
        return xs
    logger.debug("Preprocessing %d elements for %r", len(xs), dist)
    if executor is None:
        return [convert(x) for x in xs]
    return list(executor.map(convert, xs))


def _split(indices: range, n_chunks: int, chunk_size: int | None) -> list[range]:
    if not indices:
        return []
    step = chunk_size or math.ceil(len(indices) / n_chunks)
    return [indices[k : k + step] for k in range(0, len(indices), step)]


def _run(executor: Executor | None, tasks: Iterable[Callable[[], None]]) -> None:
    """Run *tasks* and wait for all of them; the first failure is re-raised."""
    if executor is None:
        for task in tasks:
            task()
        return
    futures = [executor.submit(task) for task in tasks]
    try:
        for future in futures:
            future.result()
    except BaseException:
        for future in futures:
            future.cancel()
        raise


def _fill_symmetric_cells(R: Any, dist: StringDistance, objs: Sequence[Any], i: int, js: range) -> None:
    x = objs[i]
    for j in js:
        R[i, j] = R[j, i] = dist.evaluate(x, objs[j])


def _fill_cells(R: Any, dist: StringDistance, x: Any, objs: Sequence[Any], i: int, js: range) -> None:
    for j in js:
        R[i, j] = dist.evaluate(x, objs[j])


def _symmetric_pairwise(
    R: Any,
    dist: StringDistance,
    xs: list[Any],
    cfg: PairwiseConfig,
    executor: Executor | None,
    n_workers: int,
) -> Any:
    objs = _preprocess(xs, dist, cfg, executor)
    n = len(objs)
    for i in range(n):
        R[i, i] = None if objs[i] is None else dist.dtype(0)
        chunks = _split(range(i + 1, n), n_workers, cfg.chunk_size)
        _run(executor, [partial(_fill_symmetric_cells, R, dist, objs, i, js) for js in chunks])
    return R


def _asymmetric_pairwise(
    R: Any,
    dist: StringDistance,
    xs: list[Any],
    ys: list[Any],
    cfg: PairwiseConfig,
    executor: Executor | None,
    n_workers: int,
) -> Any:
    objs_xs = _preprocess(xs, dist, cfg, executor)
    objs_ys = objs_xs if ys is xs else _preprocess(ys, dist, cfg, executor)
    for i, x in enumerate(objs_xs):
        chunks = _split(range(len(objs_ys)), n_workers, cfg.chunk_size)
        _run(executor, [partial(_fill_cells, R, dist, x, objs_ys, i, js) for js in chunks])
    return R


def _numpy_dtype(dist: StringDistance, xs: list[Any], ys: list[Any]) -> Any:
    if any(x is None for x in xs) or any(y is None for y in ys):
        return object
    return np.int64 if dist.dtype is int else np.float64


# ── Public API ───────────────────────────────────────────────────────


def pairwise_into(
    R: Any,
    dist: StringDistance,
    xs: Iterable[Any],
    ys: Iterable[Any] | None = None,
    *,
    preprocess: bool | None = None,
    workers: int | None = None,
    config: PairwiseConfig | None = None,
) -> Any:
    """
    Write the distances between all pairs of *xs* and *ys* into *R*.

    Parameters
    ----------
    R : array-like
        Output matrix with ``R.shape == (len(xs), len(ys))`` supporting
        ``R[i, j] = value`` (a ``numpy.ndarray`` in practice).
    dist : StringDistance
        Any distance, modifiers included.
    xs, ys : Iterable
        Lists, tuples, generators or Polars / Pandas / PyArrow columns.
        *ys* defaults to *xs*.
    preprocess, workers :
        Override the matching :class:`PairwiseConfig` fields.
    config : PairwiseConfig | None
        Engine configuration.

    Returns
    -------
    The same *R*.

    Raises
    ------
    DimensionMismatchError
        If the shape of *R* does not match, before anything is written.
    """
    same_input = ys is None or ys is xs
    xs = _coerce_to_list(xs)
    ys = xs if same_input else _coerce_to_list(ys)

    shape = tuple(R.shape)
    if len(shape) != 2 or shape != (len(xs), len(ys)):
        raise DimensionMismatchError(
            f"inconsistent length: output has shape {shape}, "
            f"expected ({len(xs)}, {len(ys)})"
        )

    cfg = _resolve_config(config, preprocess=preprocess, workers=workers)
    n_workers = cfg.workers if cfg.workers is not None else (os.cpu_count() or 1)
    symmetric = same_input and dist.commutative
    logger.debug(
        "Computing %s pairwise %dx%d matrix for %r with %d worker(s)",
        "symmetric" if symmetric else "asymmetric",
        len(xs),
        len(ys),
        dist,
        n_workers,
    )

    pool = ThreadPoolExecutor(max_workers=n_workers) if n_workers > 1 else contextlib.nullcontext()
    with pool as executor:
        if symmetric:
            return _symmetric_pairwise(R, dist, xs, cfg, executor, n_workers)
        return _asymmetric_pairwise(R, dist, xs, ys, cfg, executor, n_workers)


def pairwise(
    dist: StringDistance,
    xs: Iterable[Any],
    ys: Iterable[Any] | None = None,
    *,
    preprocess: bool | None = None,
    workers: int | None = None,
    config: PairwiseConfig | None = None,
) -> np.ndarray:
    """
    Distance matrix between all pairs of *xs* and *ys*.

    Returns a ``numpy.ndarray`` with ``R[i, j] == dist(xs[i], ys[j])``.  The
    dtype is ``int64`` for raw edit counts, ``float64`` otherwise, and
    ``object`` when either collection contains ``None`` (those cells hold
    ``None``).

    Examples
    --------
    >>> pairwise(Levenshtein(), ["New York", "Princeton"], ["San Francisco"])
    array([[12],
           [10]])
    """
    same_input = ys is None or ys is xs
    xs = _coerce_to_list(xs)
    ys = xs if same_input else _coerce_to_list(ys)
    R = np.empty((len(xs), len(ys)), dtype=_numpy_dtype(dist, xs, ys))
    return pairwise_into(R, dist, xs, ys, preprocess=preprocess, workers=workers, config=config)


__all__ = ["DimensionMismatchError", "PairwiseConfig", "pairwise", "pairwise_into"]

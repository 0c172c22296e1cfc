"""
fuzzdist.compat — Data-framework compatibility helpers.

Converts column-oriented data from Polars, Pandas and PyArrow into a plain
``list`` so the batch engine can index it.  Nulls become ``None`` so that
absent values propagate through every distance instead of being compared
as empty strings.  All imports are lazy so no new hard dependencies are
introduced.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def _is_polars_series(data: Any) -> bool:
    try:
        import polars as pl

        return isinstance(data, pl.Series)
    except ImportError:
        return False


def _is_pandas_series(data: Any) -> bool:
    try:
        import pandas as pd

        return isinstance(data, pd.Series)
    except ImportError:
        return False


def _is_pyarrow_array(data: Any) -> bool:
    try:
        import pyarrow as pa

        return isinstance(data, (pa.Array, pa.ChunkedArray))
    except ImportError:
        return False


def _null_to_none(values: list[Any]) -> list[Any]:
    import pandas as pd

    # pandas stores missing strings as None, NaN or pd.NA; list-valued cells are kept
    return [None if pd.api.types.is_scalar(v) and pd.isna(v) else v for v in values]


def _coerce_to_list(data: Any) -> list[Any]:
    """
    Convert *data* to a ``list`` using the fastest path available.

    Supported input types
    ---------------------
    * ``list`` — returned as-is (no copy).
    * ``polars.Series`` — ``.to_list()``.
    * ``pandas.Series`` — ``.tolist()`` with NaN / NA mapped to ``None``.
    * ``pyarrow.Array`` / ``pyarrow.ChunkedArray`` — ``.to_pylist()``.
    * Any other ``Iterable`` (tuples, generators, ...) — ``list(data)``.

    Raises
    ------
    TypeError
        If *data* is a bare string or not iterable.
    """
    if isinstance(data, list):
        return data

    if isinstance(data, (str, bytes)):
        raise TypeError(
            f"Expected a collection of sequences, got a single {type(data).__name__}. "
            "Wrap it in a list."
        )

    if _is_polars_series(data):
        return data.to_list()  # type: ignore[union-attr]

    if _is_pandas_series(data):
        return _null_to_none(data.tolist())  # type: ignore[union-attr]

    if _is_pyarrow_array(data):
        return data.to_pylist()  # type: ignore[union-attr]

    if isinstance(data, Iterable):
        return list(data)

    raise TypeError(
        f"Cannot coerce {type(data).__name__} to a list. "
        "Pass a list, tuple, Polars Series, Pandas Series or PyArrow Array."
    )


__all__ = ["_coerce_to_list"]

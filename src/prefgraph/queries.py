"""Predecessor and successor queries on a bound preference.

Better rows are predecessors, worse rows are successors:

- all_pred: every row better than the query rows (better-than graph)
- all_succ: every row worse than the query rows (better-than graph)
- hasse_pred: the next-better rows (direct edges of the Hasse diagram)
- hasse_succ: the next-worse rows (direct edges of the Hasse diagram)

Each query takes one or more row indices ``v``. Per-row result sets are
combined by union (default) or, with ``intersect=True``, by intersection.
Results are always ascending and duplicate-free, independent of the order of
``v``. For rows x and y and any query f:

    f(b, [x, y]) == union1d(f(b, x), f(b, y))
    f(b, [x, y], intersect=True) == intersect1d(f(b, x), f(b, y))

Example:
    >>> from prefgraph import Dataset, bind, low
    >>> ds = Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
    >>> b = bind(low("x") * low("y"), ds)
    >>> all_pred(b, 2)
    array([0, 1])
    >>> hasse_pred(b, [0, 1])
    array([], dtype=int64)
"""

from collections.abc import Iterable

import numpy as np

from prefgraph.binding import Binding
from prefgraph.exceptions import IndexOutOfRangeError, UnboundDatasetError


def _query_rows(binding: Binding | None, v: int | Iterable[int]) -> np.ndarray:
    """Validate the binding and query indices, returning v as a 1D index array."""
    if binding is None:
        raise UnboundDatasetError("No binding available; call bind() before querying")
    if not isinstance(binding, Binding):
        raise TypeError(f"binding must be a Binding, got {type(binding).__name__}")

    if isinstance(v, (set, frozenset)):
        v = sorted(v)
    rows = np.atleast_1d(np.asarray(v))
    if rows.ndim != 1:
        raise ValueError(f"v must be a scalar or 1D sequence of indices, got shape {rows.shape}")
    if rows.shape[0] == 0:
        raise ValueError("v must contain at least one row index")
    if not np.issubdtype(rows.dtype, np.integer):
        raise TypeError(f"v must contain integer row indices, got dtype {rows.dtype}")

    n = binding.n_rows
    bad = rows[(rows < 0) | (rows >= n)]
    if len(bad) > 0:
        raise IndexOutOfRangeError(f"row indices {bad.tolist()} are out of range for dataset with {n} rows")
    return rows.astype(np.intp)


def _combine(masks: np.ndarray, intersect: bool) -> np.ndarray:
    """Combine per-row boolean masks of shape (len(v), n) into sorted indices."""
    combined = masks.all(axis=0) if intersect else masks.any(axis=0)
    return np.flatnonzero(combined).astype(np.intp)


def hasse_pred(binding: Binding, v: int | Iterable[int], intersect: bool = False) -> np.ndarray:
    """Return the direct predecessors (next-better rows) of v in the Hasse diagram.

    Args:
        binding: Binding produced by bind().
        v: Row index or indices to query.
        intersect: If True, intersect the per-row results instead of joining them.

    Returns:
        Ascending array of row indices.

    Raises:
        UnboundDatasetError: If binding is None.
        IndexOutOfRangeError: If an index in v is outside the dataset.
        ValueError: If v is empty.
    """
    rows = _query_rows(binding, v)
    return _combine(binding.hasse[:, rows].T, intersect)


def hasse_succ(binding: Binding, v: int | Iterable[int], intersect: bool = False) -> np.ndarray:
    """Return the direct successors (next-worse rows) of v in the Hasse diagram.

    See hasse_pred for arguments and errors.
    """
    rows = _query_rows(binding, v)
    return _combine(binding.hasse[rows, :], intersect)


def all_pred(binding: Binding, v: int | Iterable[int], intersect: bool = False) -> np.ndarray:
    """Return all predecessors (better rows) of v in the better-than graph.

    A row is a predecessor of x if there is a directed path from it to x, so
    the result is the same whether or not the relation is transitive.

    See hasse_pred for arguments and errors.
    """
    rows = _query_rows(binding, v)
    return _combine(binding.closure[:, rows].T, intersect)


def all_succ(binding: Binding, v: int | Iterable[int], intersect: bool = False) -> np.ndarray:
    """Return all successors (worse rows) of v in the better-than graph.

    See hasse_pred for arguments and errors.
    """
    rows = _query_rows(binding, v)
    return _combine(binding.closure[rows, :], intersect)

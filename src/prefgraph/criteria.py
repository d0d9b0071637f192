"""Atomic criteria: the leaf preferences terms are composed from.

Each constructor returns a Base term whose predicates read one column (or a
derived expression) of the dataset:

- low: smaller values are better
- high: larger values are better
- true: True is better than False
- empty: the neutral preference, nothing is better than anything

Missing values (NaN) are worse than every number and equivalent to each other.

Example:
    >>> ds = Dataset({"x": np.array([1.0, np.nan, 3.0])})
    >>> p = low("x")
    >>> p.better(ds, np.array([0, 2]), np.array([1, 1]))
    array([ True,  True])
"""

from collections.abc import Callable

import numpy as np

from prefgraph.dataset import Dataset
from prefgraph.registry import CriterionRegistry
from prefgraph.terms import Base

Column = str | Callable[[Dataset], np.ndarray]


def _resolve(column: Column) -> tuple[Callable[[Dataset], np.ndarray], str]:
    if isinstance(column, str):

        def values(data: Dataset) -> np.ndarray:
            return data.column(column)

        return values, column
    if callable(column):

        def values(data: Dataset) -> np.ndarray:
            result = np.asarray(column(data))
            if result.shape != (len(data),):
                raise ValueError(f"expression must return shape ({len(data)},), got {result.shape}")
            return result

        return values, getattr(column, "__name__", "expr")
    raise TypeError(f"column must be a name or a callable, got {type(column).__name__}")


def _missing(values: np.ndarray) -> np.ndarray:
    if values.dtype.kind in "fc":
        return np.isnan(values)
    return np.zeros(values.shape, dtype=bool)


def low(column: Column) -> Base:
    """Create a preference for small values of a column.

    Args:
        column: Column name, or a callable mapping the dataset to a 1D array
            with one value per row.

    Returns:
        A Base term labelled ``low(<name>)``.

    Examples:
        >>> ds = Dataset({"x": np.array([1, 2])})
        >>> low("x").better(ds, np.array([0, 1]), np.array([1, 0]))
        array([ True, False])
    """
    values, name = _resolve(column)

    def better(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        return (~na[i] & na[j]) | (~na[i] & ~na[j] & (v[i] < v[j]))

    def equal(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        return (na[i] & na[j]) | (v[i] == v[j])

    return Base(better, equal, label=f"low({name})")


def high(column: Column) -> Base:
    """Create a preference for large values of a column.

    Args:
        column: Column name, or a callable mapping the dataset to a 1D array.

    Returns:
        A Base term labelled ``high(<name>)``.
    """
    values, name = _resolve(column)

    def better(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        return (~na[i] & na[j]) | (~na[i] & ~na[j] & (v[i] > v[j]))

    def equal(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        return (na[i] & na[j]) | (v[i] == v[j])

    return Base(better, equal, label=f"high({name})")


def true(column: Column) -> Base:
    """Create a preference for rows where a boolean column is True.

    Numeric columns count as True when non-zero. NaN is worse than both True
    and False.
    """
    values, name = _resolve(column)

    def better(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        ok = ~na & v.astype(bool)
        return (~na[i] & na[j]) | (ok[i] & ~ok[j] & ~na[j])

    def equal(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        v = values(data)
        na = _missing(v)
        ok = ~na & v.astype(bool)
        return (na[i] & na[j]) | (~na[i] & ~na[j] & (ok[i] == ok[j]))

    return Base(better, equal, label=f"true({name})")


def empty() -> Base:
    """Create the neutral preference: no row is better, all rows are equivalent.

    ``empty()`` is an identity for Pareto and prioritization composition.
    """

    def better(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        return np.zeros(np.broadcast_shapes(np.shape(i), np.shape(j)), dtype=bool)

    def equal(data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
        return np.ones(np.broadcast_shapes(np.shape(i), np.shape(j)), dtype=bool)

    return Base(better, equal, label="empty()")


# Register built-in criteria
CriterionRegistry.register("low", low)
CriterionRegistry.register("high", high)
CriterionRegistry.register("true", true)
CriterionRegistry.register("empty", empty)

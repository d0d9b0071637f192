"""Shared test fixtures for prefgraph tests.

This module provides common fixtures used across test modules:
- three_rows: the small two-column dataset with an incomparable pair
- chain_rows / grid_rows: datasets with longer dominance chains
- skyline_term: Pareto composition of low(x) and low(y)
- cyclic_union: a union whose operand domains overlap
"""

import numpy as np
import pytest

from prefgraph import Dataset, bind, high, low


@pytest.fixture
def three_rows() -> Dataset:
    """Rows (x=1, y=2), (x=2, y=1), (x=3, y=3).

    Under low(x) * low(y): rows 0 and 1 are incomparable, both beat row 2.
    """
    return Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})


@pytest.fixture
def chain_rows() -> Dataset:
    """Four rows forming a total order under low(x): 0 > 1 > 2 > 3."""
    return Dataset({"x": np.array([1.0, 2.0, 3.0, 4.0]), "y": np.array([1.0, 2.0, 3.0, 4.0])})


@pytest.fixture
def grid_rows() -> Dataset:
    """Nine rows on a 3x3 grid of (x, y) values.

    Row index is 3 * x + y for x, y in 0..2. Under low(x) * low(y) row 0 is the
    only skyline row and row 8 is the only bottom row.
    """
    xs, ys = np.divmod(np.arange(9), 3)
    return Dataset({"x": xs, "y": ys})


@pytest.fixture
def skyline_term():
    """Pareto composition minimising x and y."""
    return low("x") * low("y")


@pytest.fixture
def three_binding(skyline_term, three_rows):
    """Binding of low(x) * low(y) to the three-row dataset."""
    return bind(skyline_term, three_rows)


@pytest.fixture
def grid_binding(skyline_term, grid_rows):
    """Binding of low(x) * low(y) to the 3x3 grid."""
    return bind(skyline_term, grid_rows)


@pytest.fixture
def cyclic_union():
    """low(x) + high(x): every pair with distinct x is better in both directions."""
    return low("x") + high("x")

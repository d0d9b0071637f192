"""Better-than-graph primitives: reachability, levels and the Hasse diagram.

This module provides the pure functions that turn a better-than relation
(an (n, n) boolean adjacency matrix) into the structures the query engine
reads:

- reachability: transitive closure of the relation
- level_sort: layered topological peel (level 0 = skyline), detects cycles
- transitive_reduction: the Hasse diagram (covering relation)
- edge_list: stable (better, worse) edge listing of any adjacency matrix
"""

import numpy as np

from prefgraph.exceptions import CyclicRelationError
from prefgraph.relation import boolean_product


def _check_square(matrix: np.ndarray, name: str) -> None:
    if not isinstance(matrix, np.ndarray):
        raise TypeError(f"{name} must be a numpy array, got {type(matrix).__name__}")
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"{name} must be a square 2D array, got shape {matrix.shape}")
    if matrix.dtype != np.bool_:
        raise ValueError(f"{name} must have bool dtype, got {matrix.dtype}")


def reachability(btr: np.ndarray) -> np.ndarray:
    """Compute the transitive closure of a better-than relation.

    Uses Warshall's algorithm, vectorised over rows: after step k, entry
    [i, j] is True iff j is reachable from i through intermediates < k.
    Time complexity: O(N^3) boolean operations in O(N) numpy passes.

    Args:
        btr: Boolean adjacency matrix of shape (n, n).

    Returns:
        Boolean array of shape (n, n) where result[i, j] = True iff there is a
        directed path of length >= 1 from i to j. A True diagonal entry means
        the row lies on a cycle.

    Examples:
        >>> chain = np.array([[False, True, False], [False, False, True], [False, False, False]])
        >>> bool(reachability(chain)[0, 2])
        True
    """
    _check_square(btr, "btr")
    closure = btr.copy()
    for k in range(closure.shape[0]):
        # Rows that reach k now also reach everything k reaches
        closure |= closure[:, k : k + 1] & closure[k : k + 1, :]
    return closure


def level_sort(btr: np.ndarray) -> np.ndarray:
    """Assign each row to a preference level by repeatedly peeling maximal rows.

    Level 0 holds the rows no other row is better than (the skyline); level 1
    the skyline of the remaining rows, and so on. Time complexity: O(N^2) per
    level.

    Args:
        btr: Boolean adjacency matrix of shape (n, n).

    Returns:
        Integer array of shape (n,) where level[i] is the level of row i.

    Raises:
        CyclicRelationError: If a set of rows remains in which every row has a
            better row, i.e. the relation contains a cycle.

    Examples:
        >>> btr = np.array([[False, False, True], [False, False, True], [False, False, False]])
        >>> level_sort(btr)
        array([0, 0, 1])
    """
    _check_square(btr, "btr")
    n = btr.shape[0]

    # better_count[j] = number of remaining rows better than j
    better_count = btr.sum(axis=0).astype(np.int64)
    levels = np.full(n, -1, dtype=np.int64)

    current_level = 0
    remaining = np.arange(n)

    while len(remaining) > 0:
        front_mask = better_count[remaining] == 0
        front = remaining[front_mask]

        if len(front) == 0:
            raise CyclicRelationError(remaining)

        levels[front] = current_level
        remaining = remaining[~front_mask]

        # Rows beaten only by the peeled front lose those dominators
        better_count[remaining] -= btr[np.ix_(front, remaining)].sum(axis=0)

        current_level += 1

    return levels


def transitive_reduction(btr: np.ndarray, closure: np.ndarray | None = None) -> np.ndarray:
    """Compute the Hasse diagram (transitive reduction) of an acyclic relation.

    Edge i -> j is kept iff it is in the relation and no k exists with
    i -> k in the relation and j reachable from k. For a transitive relation
    this is the covering relation: no k with better(i, k) and better(k, j).

    Args:
        btr: Boolean adjacency matrix of shape (n, n).
        closure: Precomputed reachability(btr), if available.

    Returns:
        Boolean array of shape (n, n) holding the retained edges, a subset of btr.

    Raises:
        CyclicRelationError: If the relation contains a cycle, since the
            reduction is not unique then.

    Examples:
        >>> chain = reachability(np.array([[False, True, False], [False, False, True], [False, False, False]]))
        >>> transitive_reduction(chain).astype(int)
        array([[0, 1, 0],
               [0, 0, 1],
               [0, 0, 0]])
    """
    _check_square(btr, "btr")
    if closure is None:
        closure = reachability(btr)
    else:
        _check_square(closure, "closure")
        if closure.shape != btr.shape:
            raise ValueError(f"closure has shape {closure.shape}, expected {btr.shape} to match btr")

    on_cycle = np.flatnonzero(np.diagonal(closure))
    if len(on_cycle) > 0:
        raise CyclicRelationError(on_cycle)

    redundant = boolean_product(btr, closure)
    return btr & ~redundant


def edge_list(matrix: np.ndarray) -> np.ndarray:
    """List the edges of an adjacency matrix as (better, worse) row pairs.

    Returns:
        Integer array of shape (m, 2), sorted lexicographically.

    Examples:
        >>> edge_list(np.array([[False, True], [False, False]]))
        array([[0, 1]])
    """
    _check_square(matrix, "matrix")
    return np.argwhere(matrix).astype(np.intp)

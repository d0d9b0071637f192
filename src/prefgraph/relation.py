"""Better-than relation (BTR) evaluation.

This module materialises the strict better-than relation of a preference term
over every ordered pair of rows in a dataset:

- better_than_matrix: dense (n, n) boolean relation, optionally evaluated
  across parallel workers
- is_irreflexive / is_transitive: checks of the strict partial order axioms
"""

import logging

import numpy as np

from prefgraph.dataset import Dataset
from prefgraph.terms import Term, describe, evaluate_better

logger = logging.getLogger(__name__)


def _evaluate_rows(term: Term, data: Dataset, rows: np.ndarray) -> np.ndarray:
    """Evaluate better(i, j) for i in rows and every j, shape (len(rows), n)."""
    n = len(data)
    i = rows[:, np.newaxis]  # (chunk, 1)
    j = np.arange(n)[np.newaxis, :]  # (1, n)
    block = evaluate_better(term, data, i, j)
    try:
        block = np.broadcast_to(block, (rows.shape[0], n))
    except ValueError as e:
        raise ValueError(
            f"predicates of '{describe(term)}' returned shape {np.shape(block)}, "
            f"expected a result broadcastable to {(rows.shape[0], n)}"
        ) from e
    # Irreflexive by construction: a row is never better than itself
    block = block.copy()
    block[np.arange(rows.shape[0]), rows] = False
    return block


def better_than_matrix(
    term: Term,
    data: Dataset,
    n_workers: int = 1,
    chunk_size: int | None = None,
) -> np.ndarray:
    """Compute the better-than relation for all ordered pairs of rows.

    Rows are evaluated in blocks: each block evaluates the term once on index
    arrays of shape (chunk, 1) and (1, n), so leaf predicates run vectorised.
    Blocks are independent, which lets them run on parallel workers.

    Args:
        term: Preference term defining the relation.
        data: Dataset to evaluate on.
        n_workers: Number of parallel workers. Use 1 for sequential evaluation
            (default), -1 for all CPU cores, or any positive integer.
        chunk_size: Rows per block. Defaults to all rows when sequential and to
            an even split over the workers otherwise.

    Returns:
        Boolean array of shape (n, n) where result[i, j] = True iff row i is
        strictly better than row j. The diagonal is always False.

    Raises:
        ValueError: If n_workers or chunk_size is invalid, or if the term's
            predicates return an array of the wrong shape.

    Examples:
        >>> from prefgraph.criteria import low
        >>> ds = Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
        >>> better_than_matrix(low("x") * low("y"), ds)
        array([[False, False,  True],
               [False, False,  True],
               [False, False, False]])
    """
    if n_workers == 0 or n_workers < -1:
        raise ValueError(f"n_workers must be positive or -1, got {n_workers}")
    if chunk_size is not None and chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    n = len(data)
    if n == 0:
        return np.zeros((0, 0), dtype=bool)

    if chunk_size is None:
        if n_workers == 1:
            chunk_size = n
        else:
            from joblib import cpu_count

            workers = cpu_count() if n_workers == -1 else n_workers
            chunk_size = max(1, -(-n // workers))

    chunks = [np.arange(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]
    logger.debug("evaluating %d x %d relation in %d chunk(s) with n_workers=%d", n, n, len(chunks), n_workers)

    if n_workers == 1 or len(chunks) == 1:
        blocks = [_evaluate_rows(term, data, rows) for rows in chunks]
    else:
        from joblib import Parallel, delayed

        blocks = Parallel(n_jobs=n_workers)(  # type: ignore[assignment]
            delayed(_evaluate_rows)(term, data, rows) for rows in chunks
        )

    return np.concatenate(blocks, axis=0)


def is_irreflexive(btr: np.ndarray) -> bool:
    """Check that no row is better than itself."""
    return not bool(np.any(np.diagonal(btr)))


def is_transitive(btr: np.ndarray) -> bool:
    """Check that better(i, k) and better(k, j) imply better(i, j).

    Examples:
        >>> is_transitive(np.array([[False, True], [False, False]]))
        True
        >>> is_transitive(np.array([[False, True, False], [False, False, True], [False, False, False]]))
        False
    """
    two_hop = boolean_product(btr, btr)
    return not bool(np.any(two_hop & ~btr))


def boolean_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Boolean matrix product: result[i, j] = any_k a[i, k] and b[k, j].

    Computed as a float matrix product so it runs on BLAS; entries are counts
    of witnesses k, which are exact non-negative integers.
    """
    return (a.astype(np.float64) @ b.astype(np.float64)) > 0

"""Evaluation bindings: a preference term evaluated on a concrete dataset.

bind() associates a term with a dataset and eagerly materialises everything
the query engine needs:

- btr: the better-than relation (edges of the better-than graph)
- closure: its reachability (all predecessors / successors)
- hasse: its transitive reduction (direct predecessors / successors)
- level: preference levels, level 0 being the skyline

A Binding is immutable. Rebinding returns a new Binding and never touches the
old one, so queries already holding a binding keep a consistent view.
BindingSlot is the mutable "current binding" holder for callers that want
one, with new bindings swapped in under a lock.

Example:
    >>> from prefgraph import Dataset, bind, low
    >>> ds = Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
    >>> binding = bind(low("x") * low("y"), ds)
    >>> binding.hasse_edges()
    array([[0, 2],
           [1, 2]])
"""

import logging
import threading
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from prefgraph.dataset import Dataset, as_dataset
from prefgraph.exceptions import CompositionError, LegacyArgumentOrderWarning, UnboundDatasetError
from prefgraph.hasse import edge_list, level_sort, reachability, transitive_reduction
from prefgraph.relation import better_than_matrix
from prefgraph.terms import Term, describe, is_term

logger = logging.getLogger(__name__)


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = arr.copy()
    out.flags.writeable = False
    return out


@dataclass(frozen=True, eq=False)
class Binding:
    """A preference term bound to a dataset, with its materialised relations.

    All arrays are copied on construction and marked read-only.

    Attributes:
        term: The bound preference term.
        dataset: The dataset the relations were computed on.
        btr: Better-than relation, shape (n, n). btr[i, j] iff row i is better than row j.
        closure: Reachability of btr, shape (n, n).
        hasse: Transitive reduction of btr, shape (n, n).
        level: Preference level per row, shape (n,). Level 0 is the skyline.
    """

    term: Term
    dataset: Dataset
    btr: np.ndarray
    closure: np.ndarray
    hasse: np.ndarray
    level: np.ndarray

    def __post_init__(self) -> None:
        """Validate shapes and freeze arrays.

        Raises:
            ValueError: If array shapes do not match the dataset size.
        """
        n = len(self.dataset)
        for name in ("btr", "closure", "hasse"):
            arr = getattr(self, name)
            if arr.shape != (n, n):
                raise ValueError(f"{name} has shape {arr.shape}, expected {(n, n)} to match dataset size")
            object.__setattr__(self, name, _frozen(arr))
        if self.level.shape != (n,):
            raise ValueError(f"level has shape {self.level.shape}, expected {(n,)} to match dataset size")
        object.__setattr__(self, "level", _frozen(self.level))

    @property
    def n_rows(self) -> int:
        """Return the number of rows in the bound dataset."""
        return len(self.dataset)

    def btg_edges(self) -> np.ndarray:
        """Return the better-than graph as an (m, 2) array of (better, worse) pairs."""
        return edge_list(self.btr)

    def hasse_edges(self) -> np.ndarray:
        """Return the Hasse diagram as an (m, 2) array of (better, worse) pairs."""
        return edge_list(self.hasse)

    def rebind(
        self,
        term: Term | None = None,
        dataset: "Dataset | Mapping[str, Any] | None" = None,
        *,
        n_workers: int = 1,
        chunk_size: int | None = None,
    ) -> "Binding":
        """Bind a new term and/or dataset, keeping whichever is not replaced.

        Returns:
            A freshly computed Binding; nothing is shared with this one except
            the term or dataset that was not replaced.
        """
        return bind(
            self.term if term is None else term,
            dataset,
            previous=self,
            n_workers=n_workers,
            chunk_size=chunk_size,
        )


def _is_dataset_like(obj: object) -> bool:
    return isinstance(obj, (Dataset, Mapping))


def bind(
    term: Term,
    dataset: "Dataset | Mapping[str, Any] | None" = None,
    *,
    previous: Binding | None = None,
    n_workers: int = 1,
    chunk_size: int | None = None,
) -> Binding:
    """Evaluate a preference term on a dataset and build its better-than graph.

    Computes the better-than relation for every ordered pair of distinct rows,
    its reachability, its Hasse diagram and the preference levels.

    Args:
        term: Preference term to evaluate.
        dataset: Dataset (or mapping of column arrays) to evaluate on. If None,
            the dataset of ``previous`` is reused.
        previous: An earlier binding whose dataset is reused when no dataset is given.
        n_workers: Parallel workers for relation evaluation (1 = sequential,
            -1 = all cores).
        chunk_size: Rows per evaluation block, see better_than_matrix.

    Returns:
        A new immutable Binding.

    Raises:
        CompositionError: If term is not a preference term.
        UnboundDatasetError: If no dataset is given and there is no previous
            binding, or if the dataset has no rows.
        CyclicRelationError: If the relation has a cycle (possible only with
            union compositions over overlapping domains).

    Example:
        >>> from prefgraph.criteria import high
        >>> b1 = bind(high("x"), {"x": np.array([1, 2])})
        >>> b2 = bind(-high("x"), previous=b1)
        >>> b2.btg_edges()
        array([[0, 1]])
    """
    # Dataset-first calls predate the current signature
    if _is_dataset_like(term) and is_term(dataset):
        warnings.warn(
            'Wrong order of arguments in "bind(term, dataset)": the term comes first',
            LegacyArgumentOrderWarning,
            stacklevel=2,
        )
        term, dataset = dataset, term

    if not is_term(term):
        raise CompositionError(f"bind requires a preference term, got {type(term).__name__}")

    if dataset is None:
        if previous is None:
            raise UnboundDatasetError("No dataset given and no previously bound dataset available")
        data = previous.dataset
    else:
        data = as_dataset(dataset)

    n = len(data)
    if n == 0:
        raise UnboundDatasetError("Cannot bind to an empty dataset")

    btr = better_than_matrix(term, data, n_workers=n_workers, chunk_size=chunk_size)
    level = level_sort(btr)
    closure = reachability(btr)
    hasse = transitive_reduction(btr, closure)

    logger.debug(
        "bound '%s' to %d rows: %d better-than edges, %d Hasse edges, %d levels",
        describe(term),
        n,
        int(btr.sum()),
        int(hasse.sum()),
        int(level.max()) + 1,
    )

    return Binding(term=term, dataset=data, btr=btr, closure=closure, hasse=hasse, level=level)


class BindingSlot:
    """Thread-safe holder for the current binding.

    Rebinds compute the new binding without the lock and only swap it in
    under the lock. Readers take the binding reference and query it without
    any locking, since bindings are immutable.

    Example:
        >>> from prefgraph.criteria import low
        >>> slot = BindingSlot()
        >>> slot.rebind(low("x"), {"x": np.array([2, 1])}).btg_edges()
        array([[1, 0]])
        >>> slot.rebind(-low("x")).btg_edges()  # reuses the bound dataset
        array([[0, 1]])
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._binding: Binding | None = None

    @property
    def current(self) -> Binding:
        """Return the live binding.

        Raises:
            UnboundDatasetError: If nothing has been bound yet.
        """
        binding = self._binding
        if binding is None:
            raise UnboundDatasetError("No binding available; call rebind() first")
        return binding

    @property
    def is_bound(self) -> bool:
        return self._binding is not None

    def rebind(
        self,
        term: Term,
        dataset: "Dataset | Mapping[str, Any] | None" = None,
        *,
        n_workers: int = 1,
        chunk_size: int | None = None,
    ) -> Binding:
        """Bind term to dataset (or the currently bound dataset) and make it current.

        The binding is computed outside the lock, so concurrent rebinds run in
        parallel; the slot holds the result of the last rebind to finish. Each
        rebind resolves the dataset against the binding that was current when
        it started.

        Raises:
            CompositionError, UnboundDatasetError, CyclicRelationError: As for bind();
                the current binding is left unchanged on failure.
        """
        previous = self._binding
        binding = bind(term, dataset, previous=previous, n_workers=n_workers, chunk_size=chunk_size)
        with self._lock:
            self._binding = binding
        return binding

    def clear(self) -> None:
        """Drop the current binding."""
        with self._lock:
            self._binding = None

"""prefgraph: Preference queries over better-than graphs.

A pure numpy implementation of preference (skyline) queries: compose atomic
criteria into a strict partial order, evaluate its better-than relation on a
dataset, and navigate the resulting better-than graph and its Hasse diagram.

Example (skyline with Pareto composition):
    >>> from prefgraph import Dataset, bind, low, skyline, all_pred, hasse_succ
    >>> import numpy as np
    >>> ds = Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
    >>> b = bind(low("x") * low("y"), ds)
    >>> skyline(b)
    array([0, 1])
    >>> all_pred(b, 2)
    array([0, 1])
    >>> hasse_succ(b, [0, 1], intersect=True)
    array([2])

Example (prioritization and reverse):
    >>> from prefgraph import high, true
    >>> p = true("in_stock") & -high("price")
    >>> str(p)
    'true(in_stock) & -high(price)'
"""

from prefgraph.binding import Binding, BindingSlot, bind
from prefgraph.criteria import empty, high, low, true
from prefgraph.dataset import Dataset, RowView
from prefgraph.exceptions import (
    CompositionError,
    CyclicRelationError,
    IndexOutOfRangeError,
    LegacyArgumentOrderWarning,
    PreferenceError,
    UnboundDatasetError,
)
from prefgraph.hasse import edge_list, level_sort, reachability, transitive_reduction
from prefgraph.queries import all_pred, all_succ, hasse_pred, hasse_succ
from prefgraph.registry import CriterionRegistry, build_pareto, list_criteria
from prefgraph.relation import better_than_matrix, is_irreflexive, is_transitive
from prefgraph.selection import psel, skyline
from prefgraph.terms import (
    Base,
    Intersected,
    Pareto,
    Prioritized,
    Reversed,
    Term,
    Unioned,
    describe,
    evaluate_better,
    evaluate_equal,
    intersect,
    is_term,
    leaves,
    pareto,
    prioritize,
    reverse,
    union,
)

__all__ = [
    # Binding
    "bind",
    "Binding",
    "BindingSlot",
    # Queries
    "all_pred",
    "all_succ",
    "hasse_pred",
    "hasse_succ",
    # Selection
    "skyline",
    "psel",
    # Preference algebra
    "Term",
    "Base",
    "Pareto",
    "Prioritized",
    "Intersected",
    "Unioned",
    "Reversed",
    "pareto",
    "prioritize",
    "intersect",
    "union",
    "reverse",
    "describe",
    "leaves",
    "is_term",
    "evaluate_better",
    "evaluate_equal",
    # Criteria
    "low",
    "high",
    "true",
    "empty",
    # Registry system
    "CriterionRegistry",
    "list_criteria",
    "build_pareto",
    # Relation and graph primitives
    "better_than_matrix",
    "is_irreflexive",
    "is_transitive",
    "reachability",
    "level_sort",
    "transitive_reduction",
    "edge_list",
    # Data structures
    "Dataset",
    "RowView",
    # Errors
    "PreferenceError",
    "CompositionError",
    "UnboundDatasetError",
    "IndexOutOfRangeError",
    "CyclicRelationError",
    "LegacyArgumentOrderWarning",
]

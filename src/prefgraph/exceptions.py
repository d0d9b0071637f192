"""Error taxonomy for preference composition, binding and queries.

Every error derives from PreferenceError and from the builtin exception it
most resembles, so callers can catch either the domain error or the builtin.
"""


class PreferenceError(Exception):
    """Base class for all prefgraph errors."""


class CompositionError(PreferenceError, TypeError):
    """An operator received a non-term operand or was used with the wrong arity."""


class UnboundDatasetError(PreferenceError, LookupError):
    """No dataset could be resolved for a bind, or a query ran without a binding."""


class IndexOutOfRangeError(PreferenceError, IndexError):
    """A query index lies outside the rows of the bound dataset."""


class CyclicRelationError(PreferenceError, ValueError):
    """The better-than relation contains a cycle, so its Hasse diagram is undefined.

    Attributes:
        nodes: Ascending row indices that lie on a cycle or are only reachable
            through one (the rows a layered topological peel could not remove).
    """

    def __init__(self, nodes) -> None:
        self.nodes = tuple(int(i) for i in nodes)
        shown = ", ".join(str(i) for i in self.nodes[:10])
        if len(self.nodes) > 10:
            shown += ", ..."
        super().__init__(
            f"better-than relation is cyclic ({len(self.nodes)} rows involved: {shown}); "
            "this usually comes from a union of preferences with overlapping domains"
        )


class LegacyArgumentOrderWarning(UserWarning):
    """bind() was called with the dataset before the term."""

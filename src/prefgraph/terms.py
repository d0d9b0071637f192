"""Preference terms and the preference algebra.

A preference term is an immutable tree describing a strict partial order over
the rows of a dataset. Leaves (Base) carry a pair of vectorised predicates;
inner nodes combine their children with one of five operators:

- Pareto (``p1 * p2``): better or equal in both, strictly better in one
- Prioritized (``p1 & p2``): lexicographic, ``p1`` decides unless it ties
- Intersected (``p1 | p2``): strictly better in both
- Unioned (``p1 + p2``): strictly better in either. This can break the strict
  partial order when the operands' domains overlap; bind() detects the
  resulting cycles
- Reversed (``-p1``): the converse relation

Evaluation recurses over the tree with a structural match on the node type.
Predicates receive broadcastable integer index arrays ``i`` and ``j`` and
return boolean arrays of the broadcast shape, so one call evaluates a whole
block of row pairs.

Example:
    >>> from prefgraph.criteria import low
    >>> p = low("x") * low("y")
    >>> str(p)
    'low(x) * low(y)'
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import numpy as np

from prefgraph.dataset import Dataset
from prefgraph.exceptions import CompositionError

Predicate = Callable[[Dataset, np.ndarray, np.ndarray], np.ndarray]

_OPERAND_MESSAGE = "This operator requires preference terms as input"


class _Composable:
    """Operator sugar shared by all term types; each delegates to a composition function."""

    __slots__ = ()

    def __mul__(self, other):
        return pareto(self, other)

    def __rmul__(self, other):
        return pareto(other, self)

    def __and__(self, other):
        return prioritize(self, other)

    def __rand__(self, other):
        return prioritize(other, self)

    def __or__(self, other):
        return intersect(self, other)

    def __ror__(self, other):
        return intersect(other, self)

    def __add__(self, other):
        return union(self, other)

    def __radd__(self, other):
        return union(other, self)

    def __neg__(self):
        return reverse(self)

    def __sub__(self, other):
        raise CompositionError("Operation not defined")

    def __rsub__(self, other):
        raise CompositionError("Operation not defined")

    def __str__(self) -> str:
        return describe(self)


@dataclass(frozen=True)
class Base(_Composable):
    """Leaf term holding a (better, equal) predicate pair.

    Attributes:
        better: ``(data, i, j) -> bool array``; True where row i is strictly better than row j.
        equal: ``(data, i, j) -> bool array``; True where rows i and j are equivalent.
        label: Text used when the term is described, e.g. ``"low(x)"``.
    """

    better: Predicate = field(repr=False)
    equal: Predicate = field(repr=False)
    label: str = "pref"


@dataclass(frozen=True)
class Pareto(_Composable):
    left: "Term"
    right: "Term"


@dataclass(frozen=True)
class Prioritized(_Composable):
    left: "Term"
    right: "Term"


@dataclass(frozen=True)
class Intersected(_Composable):
    left: "Term"
    right: "Term"


@dataclass(frozen=True)
class Unioned(_Composable):
    left: "Term"
    right: "Term"


@dataclass(frozen=True)
class Reversed(_Composable):
    inner: "Term"


Term = Base | Pareto | Prioritized | Intersected | Unioned | Reversed

TERM_TYPES = (Base, Pareto, Prioritized, Intersected, Unioned, Reversed)

_SYMBOLS = {Pareto: "*", Prioritized: "&", Intersected: "|", Unioned: "+"}


def is_term(obj: object) -> bool:
    """Return True if obj is a preference term."""
    return isinstance(obj, TERM_TYPES)


def _check_terms(p1: object, p2: object) -> None:
    if not (is_term(p1) and is_term(p2)):
        raise CompositionError(_OPERAND_MESSAGE)


def pareto(p1: Term, p2: Term) -> Pareto:
    """Compose two terms with the Pareto operator (skyline composition).

    Row a is better than b if it is strictly better in one operand and better
    or equal in the other.

    Raises:
        CompositionError: If either operand is not a preference term.
    """
    _check_terms(p1, p2)
    return Pareto(p1, p2)


def prioritize(p1: Term, p2: Term) -> Prioritized:
    """Compose two terms lexicographically: p1 first, ties broken by p2.

    Raises:
        CompositionError: If either operand is not a preference term.
    """
    _check_terms(p1, p2)
    return Prioritized(p1, p2)


def intersect(p1: Term, p2: Term) -> Intersected:
    """Compose two terms so that a row must be strictly better in both.

    Raises:
        CompositionError: If either operand is not a preference term.
    """
    _check_terms(p1, p2)
    return Intersected(p1, p2)


def union(p1: Term, p2: Term) -> Unioned:
    """Compose two terms so that a row wins if it is strictly better in either.

    The result is only a strict partial order if the domains of p1 and p2
    (the pairs on which they define better-than relationships) are disjoint.

    Raises:
        CompositionError: If either operand is not a preference term.
    """
    _check_terms(p1, p2)
    return Unioned(p1, p2)


def reverse(p1: Term, *others: Term) -> Reversed:
    """Return the converse of a term: a is better than b iff b was better than a.

    Reversal is unary; passing further operands is the same error as p1 - p2.

    Raises:
        CompositionError: If more than one operand is given or the operand is
            not a preference term.
    """
    if others:
        raise CompositionError("Operation not defined")
    if not is_term(p1):
        raise CompositionError(_OPERAND_MESSAGE)
    return Reversed(p1)


def evaluate_better(term: Term, data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
    """Evaluate the strict better-than predicate of a term on row pairs.

    Args:
        term: Preference term to evaluate.
        data: Dataset the leaf predicates read from.
        i: Integer indices of the left rows. Broadcastable with j.
        j: Integer indices of the right rows. Broadcastable with i.

    Returns:
        Boolean array where entry k is True iff row i[k] is better than row j[k].

    Raises:
        CompositionError: If term (or one of its children) is not a preference term.

    Examples:
        >>> from prefgraph.criteria import low
        >>> ds = Dataset({"x": np.array([1, 2])})
        >>> evaluate_better(low("x"), ds, np.array([0, 1]), np.array([1, 0]))
        array([ True, False])
    """
    match term:
        case Base(better=better):
            return np.asarray(better(data, i, j), dtype=bool)
        case Pareto(left, right):
            lb = evaluate_better(left, data, i, j)
            le = evaluate_equal(left, data, i, j)
            rb = evaluate_better(right, data, i, j)
            re = evaluate_equal(right, data, i, j)
            return ((lb | le) & rb) | ((rb | re) & lb)
        case Prioritized(left, right):
            lb = evaluate_better(left, data, i, j)
            le = evaluate_equal(left, data, i, j)
            return lb | (le & evaluate_better(right, data, i, j))
        case Intersected(left, right):
            return evaluate_better(left, data, i, j) & evaluate_better(right, data, i, j)
        case Unioned(left, right):
            return evaluate_better(left, data, i, j) | evaluate_better(right, data, i, j)
        case Reversed(inner):
            return evaluate_better(inner, data, j, i)
        case _:
            raise CompositionError(f"{_OPERAND_MESSAGE}, got {type(term).__name__}")


def evaluate_equal(term: Term, data: Dataset, i: np.ndarray, j: np.ndarray) -> np.ndarray:
    """Evaluate the equivalence predicate of a term on row pairs.

    For every composite operator two rows are equivalent iff they are
    equivalent under both operands; Reversed swaps the rows.

    Raises:
        CompositionError: If term (or one of its children) is not a preference term.
    """
    match term:
        case Base(equal=equal):
            return np.asarray(equal(data, i, j), dtype=bool)
        case Pareto(left, right) | Prioritized(left, right) | Intersected(left, right) | Unioned(left, right):
            return evaluate_equal(left, data, i, j) & evaluate_equal(right, data, i, j)
        case Reversed(inner):
            return evaluate_equal(inner, data, j, i)
        case _:
            raise CompositionError(f"{_OPERAND_MESSAGE}, got {type(term).__name__}")


def describe(term: Term) -> str:
    """Render a term as an infix expression, parenthesising composite operands.

    Examples:
        >>> from prefgraph.criteria import high, low
        >>> describe(-(high("a") & low("b")) * low("c"))
        '-(high(a) & low(b)) * low(c)'
    """
    match term:
        case Base(label=label):
            return label
        case Pareto(left, right) | Prioritized(left, right) | Intersected(left, right) | Unioned(left, right):
            return f"{_operand(left)} {_SYMBOLS[type(term)]} {_operand(right)}"
        case Reversed(inner):
            return f"-{_operand(inner)}"
        case _:
            raise CompositionError(f"{_OPERAND_MESSAGE}, got {type(term).__name__}")


def _operand(term: Term) -> str:
    text = describe(term)
    if isinstance(term, (Base, Reversed)):
        return text
    return f"({text})"


def leaves(term: Term) -> Iterator[Base]:
    """Yield the Base leaves of a term from left to right."""
    match term:
        case Base():
            yield term
        case Pareto(left, right) | Prioritized(left, right) | Intersected(left, right) | Unioned(left, right):
            yield from leaves(left)
            yield from leaves(right)
        case Reversed(inner):
            yield from leaves(inner)
        case _:
            raise CompositionError(f"{_OPERAND_MESSAGE}, got {type(term).__name__}")

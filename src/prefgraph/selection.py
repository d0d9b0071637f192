"""Preference selection: pick the best rows of a bound preference.

Rows are taken level by level, the way a skyline query is widened:

- skyline: the maximal rows (level 0)
- psel: the skyline, or the best rows up to a limit (``top``, ``at_least``
  or ``top_level``)
"""

import numpy as np

from prefgraph.binding import Binding
from prefgraph.exceptions import UnboundDatasetError


def _check_binding(binding: Binding | None) -> Binding:
    if binding is None:
        raise UnboundDatasetError("No binding available; call bind() before selecting")
    if not isinstance(binding, Binding):
        raise TypeError(f"binding must be a Binding, got {type(binding).__name__}")
    return binding


def skyline(binding: Binding) -> np.ndarray:
    """Return the rows no other row is better than, ascending.

    Raises:
        UnboundDatasetError: If binding is None.

    Example:
        >>> from prefgraph import bind, low
        >>> b = bind(low("x") * low("y"), {"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
        >>> skyline(b)
        array([0, 1])
    """
    binding = _check_binding(binding)
    return np.flatnonzero(binding.level == 0).astype(np.intp)


def psel(
    binding: Binding,
    top: int | None = None,
    at_least: int | None = None,
    top_level: int | None = None,
    show_level: bool = False,
) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
    """Select the best rows of a bound preference.

    Without a limit this is the skyline. With a limit the rows are filled
    level by level:

    - top=k: exactly min(k, n) rows; rows of the level that does not fit
      completely are taken in row order.
    - at_least=k: whole levels until at least k rows are selected (or all
      rows if there are fewer).
    - top_level=k: all rows of levels 0..k-1.

    Args:
        binding: Binding produced by bind().
        top: Number of rows to return.
        at_least: Minimum number of rows to return.
        top_level: Number of levels to return.
        show_level: If True, also return the level of every selected row.

    Returns:
        Row indices ordered by level, then by row index. With show_level, a
        tuple (indices, levels) of equal length.

    Raises:
        UnboundDatasetError: If binding is None.
        ValueError: If more than one limit is given or a limit is not positive.

    Example:
        >>> from prefgraph import bind, low
        >>> b = bind(low("x"), {"x": np.array([3, 1, 2, 1])})
        >>> psel(b, top=3)
        array([1, 3, 2])
        >>> psel(b, top_level=2, show_level=True)
        (array([1, 3, 2]), array([0, 0, 1]))
    """
    binding = _check_binding(binding)

    limits = {"top": top, "at_least": at_least, "top_level": top_level}
    given = {name: value for name, value in limits.items() if value is not None}
    if len(given) > 1:
        raise ValueError(f"at most one of top, at_least, top_level may be given, got {sorted(given)}")
    for name, value in given.items():
        if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
            raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    level = binding.level
    n = level.shape[0]
    # Stable sort keeps row order within a level
    order = np.argsort(level, kind="stable").astype(np.intp)

    if top is not None:
        selected = order[: min(top, n)]
    elif at_least is not None:
        if at_least >= n:
            selected = order
        else:
            cutoff = level[order[at_least - 1]]
            selected = order[level[order] <= cutoff]
    elif top_level is not None:
        selected = order[level[order] < top_level]
    else:
        selected = order[level[order] == 0]

    if show_level:
        return selected, level[selected].copy()
    return selected

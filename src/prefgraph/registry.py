"""Registry system for atomic criteria.

This module provides a registry pattern for the criterion constructors that
preference terms are built from. Instead of importing constructors directly,
callers can look them up by name, which lets skyline definitions come from
configuration (a list of ``(name, kwargs)`` pairs) rather than code.

Basic usage:
    ```python
    from prefgraph.registry import CriterionRegistry, build_pareto

    # Built-ins ("low", "high", "true", "empty") are registered on import
    p = CriterionRegistry.get("low", column="price")

    # Register a custom factory
    def around(column: str, target: float):
        return low(lambda data: abs(data[column] - target))

    CriterionRegistry.register("around", around)

    # Build a skyline term from configuration
    term = build_pareto([("low", {"column": "price"}), ("around", {"column": "age", "target": 3})])
    ```
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from prefgraph.terms import Term, is_term, pareto


class CriterionRegistry:
    """Registry for criterion factories.

    Factories are callables that accept keyword arguments and return a
    preference term.

    Class Attributes:
        _registry: Dictionary mapping criterion names to factory functions.
    """

    _registry: dict[str, Callable[..., Term]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., Term]) -> None:
        """Register a criterion factory.

        Args:
            name: Unique name for the criterion. Will overwrite if already exists.
            factory: Callable returning a preference term. Should accept
                keyword arguments for configuration.
        """
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> Term:
        """Build a configured criterion by name.

        Args:
            name: Name of the registered criterion.
            **kwargs: Configuration parameters passed to the factory function.

        Returns:
            The preference term produced by the factory.

        Raises:
            KeyError: If the criterion name is not registered. Error message
                includes list of available criteria.
            TypeError: If the factory does not return a preference term.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"Criterion '{name}' not found. Available criteria: {available}")
        term = cls._registry[name](**kwargs)
        if not is_term(term):
            raise TypeError(f"Criterion factory '{name}' returned {type(term).__name__}, expected a preference term")
        return term

    @classmethod
    def list(cls) -> list[str]:
        """Return sorted list of registered criterion names."""
        return sorted(cls._registry.keys())


def list_criteria() -> list[str]:
    """List all registered criteria.

    Convenience function that returns CriterionRegistry.list().
    """
    return CriterionRegistry.list()


def build_pareto(criteria: Iterable[tuple[str, Mapping[str, Any]]]) -> Term:
    """Compose registered criteria with the Pareto operator, left to right.

    Args:
        criteria: Sequence of ``(name, kwargs)`` pairs, e.g.
            ``[("low", {"column": "x"}), ("high", {"column": "y"})]``.

    Returns:
        The Pareto composition of all criteria (the single criterion if only one).

    Raises:
        ValueError: If criteria is empty.
        KeyError: If a criterion name is not registered.
    """
    terms = [CriterionRegistry.get(name, **dict(kwargs)) for name, kwargs in criteria]
    if not terms:
        raise ValueError("criteria must name at least one criterion")
    result = terms[0]
    for term in terms[1:]:
        result = pareto(result, term)
    return result

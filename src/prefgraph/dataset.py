"""Dataset structures for preference evaluation.

This module provides the tabular data the preference core evaluates against:

- Dataset: An immutable struct-of-arrays table of named 1D columns
- RowView: A read-only view of a single row

The core only ever touches rows through integer indices; column access is
left to the leaf predicates of a preference term.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(frozen=True)
class RowView:
    """Read-only view of a single row in a dataset.

    Attributes:
        index: Row index in the dataset (0-based).
        values: Mapping of column name to the scalar value in this row.

    Example:
        >>> ds = Dataset({"x": np.array([1, 2]), "y": np.array([2, 1])})
        >>> ds.row(1).values["x"]
        2
    """

    index: int
    values: dict[str, Any]

    def __getitem__(self, name: str) -> Any:
        return self.values[name]


@dataclass(frozen=True, eq=False)
class Dataset:
    """Immutable struct-of-arrays table with named columns.

    All columns must be 1D and share the same length. Columns are copied on
    construction and marked read-only, so predicates cannot mutate the data a
    binding was computed from.

    Attributes:
        columns: Mapping of column name to a 1D numpy array.

    Example:
        >>> ds = Dataset({"x": np.array([1, 2, 3]), "y": np.array([2, 1, 3])})
        >>> len(ds)
        3
        >>> ds["y"]
        array([2, 1, 3])
    """

    columns: Mapping[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate column shapes and copy arrays for immutability.

        Raises:
            TypeError: If columns is not a mapping or a column name is not a string.
            ValueError: If a column is not 1D or column lengths differ.
        """
        if not isinstance(self.columns, Mapping):
            raise TypeError(f"columns must be a mapping, got {type(self.columns).__name__}")

        copied: dict[str, np.ndarray] = {}
        n_rows: int | None = None
        for name, values in self.columns.items():
            if not isinstance(name, str):
                raise TypeError(f"column names must be strings, got {type(name).__name__}")
            arr = np.array(values)
            if arr.ndim != 1:
                raise ValueError(f"column '{name}' must be 1D, got shape {arr.shape}")
            if n_rows is None:
                n_rows = arr.shape[0]
            elif arr.shape[0] != n_rows:
                raise ValueError(f"column '{name}' has {arr.shape[0]} rows, expected {n_rows}")
            arr.flags.writeable = False
            copied[name] = arr

        object.__setattr__(self, "columns", copied)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Dataset":
        """Build a dataset from an iterable of row mappings.

        Every record must have the same keys.

        Args:
            records: Row mappings, e.g. ``[{"x": 1, "y": 2}, {"x": 2, "y": 1}]``.

        Returns:
            A new Dataset with one column per key.

        Raises:
            ValueError: If records do not all share the same keys.
        """
        records = list(records)
        if not records:
            return cls({})
        names = list(records[0].keys())
        for i, record in enumerate(records):
            if set(record.keys()) != set(names):
                raise ValueError(f"record {i} has keys {sorted(record.keys())}, expected {sorted(names)}")
        return cls({name: np.array([record[name] for record in records]) for name in names})

    def __len__(self) -> int:
        return self.n_rows

    def __getitem__(self, name: str) -> np.ndarray:
        return self.column(name)

    def __contains__(self, name: object) -> bool:
        return name in self.columns

    @property
    def n_rows(self) -> int:
        """Return the number of rows (0 for a dataset without columns)."""
        for values in self.columns.values():
            return values.shape[0]
        return 0

    @property
    def names(self) -> list[str]:
        """Return the column names in insertion order."""
        return list(self.columns.keys())

    def column(self, name: str) -> np.ndarray:
        """Return a column by name.

        Raises:
            KeyError: If the column does not exist. The message lists available columns.
        """
        if name not in self.columns:
            available = ", ".join(self.names) or "none"
            raise KeyError(f"Column '{name}' not found. Available columns: {available}")
        return self.columns[name]

    def row(self, idx: int) -> RowView:
        """Get a read-only view of a single row.

        Args:
            idx: Row index (supports negative indexing).

        Raises:
            TypeError: If idx is not an integer.
            IndexError: If idx is out of bounds.
        """
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")
        n = len(self)
        original_idx = idx
        if idx < 0:
            idx = n + idx
        if idx < 0 or idx >= n:
            raise IndexError(f"index {original_idx} is out of bounds for dataset with {n} rows")
        return RowView(index=int(idx), values={name: _scalar(values[idx]) for name, values in self.columns.items()})


def _scalar(value: Any) -> Any:
    # numpy scalars become Python scalars; object columns pass through untouched
    return value.item() if isinstance(value, np.generic) else value


def as_dataset(data: "Dataset | Mapping[str, Any]") -> Dataset:
    """Coerce a mapping of columns into a Dataset, passing Datasets through.

    Raises:
        TypeError: If data is neither a Dataset nor a mapping.
    """
    if isinstance(data, Dataset):
        return data
    if isinstance(data, Mapping):
        return Dataset(data)
    raise TypeError(f"dataset must be a Dataset or a mapping of columns, got {type(data).__name__}")

"""Tests for predecessor and successor queries.

Comprehensive test suite covering:
- TestThreeRowScenario: the incomparable-pair example end to end
- TestGridQueries: direct and transitive neighbours on a 3x3 grid
- TestCombination: union / intersection identities and ordering
- TestHasseVersusAll: relationship between direct and full queries
- TestQueryErrors: binding and index validation
"""

import numpy as np
import pytest

from prefgraph import (
    Base,
    IndexOutOfRangeError,
    UnboundDatasetError,
    all_pred,
    all_succ,
    bind,
    hasse_pred,
    hasse_succ,
    low,
)

QUERIES = [all_pred, all_succ, hasse_pred, hasse_succ]


class TestThreeRowScenario:
    """Rows (1, 2), (2, 1), (3, 3) under low(x) * low(y)."""

    def test_all_pred_of_worst_row(self, three_binding) -> None:
        """Both skyline rows are better than row 2."""
        np.testing.assert_array_equal(all_pred(three_binding, [2]), [0, 1])

    def test_hasse_pred_of_worst_row(self, three_binding) -> None:
        """Both skyline rows cover row 2 directly."""
        np.testing.assert_array_equal(hasse_pred(three_binding, [2]), [0, 1])

    def test_all_succ_of_first_row(self, three_binding) -> None:
        """Row 0 is only better than row 2."""
        np.testing.assert_array_equal(all_succ(three_binding, [0]), [2])

    def test_skyline_rows_have_no_predecessors(self, three_binding) -> None:
        """Neither incomparable row has a better row."""
        assert hasse_pred(three_binding, [0]).size == 0
        assert hasse_pred(three_binding, [1]).size == 0

    def test_scalar_query(self, three_binding) -> None:
        """A bare integer is accepted as a single query row."""
        np.testing.assert_array_equal(all_pred(three_binding, 2), [0, 1])

    def test_result_dtype(self, three_binding) -> None:
        """Results are integer index arrays, also when empty."""
        assert all_pred(three_binding, 2).dtype == np.intp
        assert all_pred(three_binding, 0).dtype == np.intp


class TestGridQueries:
    """Row 3x + y holds (x, y) for x, y in 0..2; centre row 4 = (1, 1)."""

    def test_hasse_pred_centre(self, grid_binding) -> None:
        """The centre is covered by (0, 1) and (1, 0)."""
        np.testing.assert_array_equal(hasse_pred(grid_binding, 4), [1, 3])

    def test_hasse_succ_centre(self, grid_binding) -> None:
        """The centre covers (1, 2) and (2, 1)."""
        np.testing.assert_array_equal(hasse_succ(grid_binding, 4), [5, 7])

    def test_all_pred_centre(self, grid_binding) -> None:
        """Everything in the lower-left quadrant is better than the centre."""
        np.testing.assert_array_equal(all_pred(grid_binding, 4), [0, 1, 3])

    def test_all_succ_centre(self, grid_binding) -> None:
        """Everything in the upper-right quadrant is worse than the centre."""
        np.testing.assert_array_equal(all_succ(grid_binding, 4), [5, 7, 8])

    def test_corners(self, grid_binding) -> None:
        """The best corner reaches everything, the worst corner is reached by everything."""
        np.testing.assert_array_equal(all_succ(grid_binding, 0), np.arange(1, 9))
        np.testing.assert_array_equal(all_pred(grid_binding, 8), np.arange(0, 8))
        assert all_succ(grid_binding, 8).size == 0

    def test_non_transitive_relation_uses_reachability(self) -> None:
        """all_pred follows paths even where the relation itself lacks the shortcut."""
        def step(data, i, j):
            return data["k"][j] - data["k"][i] == 1

        def same(data, i, j):
            return data["k"][i] == data["k"][j]

        b = bind(Base(step, same, label="step"), {"k": np.array([0, 1, 2, 3])})
        np.testing.assert_array_equal(all_pred(b, 3), [0, 1, 2])
        np.testing.assert_array_equal(hasse_pred(b, 3), [2])


class TestCombination:
    """Tests for union / intersection combination of query rows."""

    @pytest.mark.parametrize("query", QUERIES)
    @pytest.mark.parametrize("x, y", [(1, 3), (4, 0), (2, 6), (5, 7), (8, 4)])
    def test_union_identity(self, grid_binding, query, x, y) -> None:
        """f([x, y]) == union(f(x), f(y))."""
        np.testing.assert_array_equal(
            query(grid_binding, [x, y]),
            np.union1d(query(grid_binding, x), query(grid_binding, y)),
        )

    @pytest.mark.parametrize("query", QUERIES)
    @pytest.mark.parametrize("x, y", [(1, 3), (4, 0), (2, 6), (5, 7), (8, 4)])
    def test_intersection_identity(self, grid_binding, query, x, y) -> None:
        """f([x, y], intersect=True) == intersection(f(x), f(y))."""
        np.testing.assert_array_equal(
            query(grid_binding, [x, y], intersect=True),
            np.intersect1d(query(grid_binding, x), query(grid_binding, y)),
        )

    @pytest.mark.parametrize("query", QUERIES)
    def test_single_row_ignores_flag(self, grid_binding, query) -> None:
        """With one query row, intersect has no effect."""
        for v in range(9):
            np.testing.assert_array_equal(query(grid_binding, [v], intersect=True), query(grid_binding, [v]))

    @pytest.mark.parametrize("query", QUERIES)
    def test_order_and_duplicates_do_not_matter(self, grid_binding, query) -> None:
        """Results are ascending and duplicate-free for any input order."""
        expected = query(grid_binding, [2, 4, 6])
        for v in ([6, 4, 2], [4, 2, 6, 2], np.array([6, 2, 4, 4]), {2, 4, 6}):
            result = query(grid_binding, v)
            np.testing.assert_array_equal(result, expected)
            assert np.all(np.diff(result) > 0)

    def test_intersection_of_skyline_successors(self, three_binding) -> None:
        """Row 2 is the only row worse than both skyline rows."""
        np.testing.assert_array_equal(hasse_succ(three_binding, [1, 0], intersect=True), [2])


class TestHasseVersusAll:
    """Tests relating Hasse queries to full reachability queries."""

    @pytest.mark.parametrize("pred, full", [(hasse_pred, all_pred), (hasse_succ, all_succ)])
    def test_direct_is_subset_of_all(self, grid_binding, pred, full) -> None:
        """hasse_pred(v) is contained in all_pred(v), same for succ."""
        for v in range(9):
            assert set(pred(grid_binding, v)) <= set(full(grid_binding, v))

    @pytest.mark.parametrize("pred, full", [(hasse_pred, all_pred), (hasse_succ, all_succ)])
    def test_all_is_closure_of_direct(self, grid_binding, pred, full) -> None:
        """Repeatedly expanding direct neighbours yields all neighbours."""
        for v in range(9):
            reached: set[int] = set()
            frontier = {v}
            while frontier:
                step = set(pred(grid_binding, sorted(frontier)).tolist())
                frontier = step - reached
                reached |= step
            assert sorted(reached) == full(grid_binding, v).tolist()


class TestQueryErrors:
    """Tests for query validation."""

    @pytest.mark.parametrize("query", QUERIES)
    def test_out_of_range_index(self, three_binding, query) -> None:
        """Row 3 does not exist in a three-row dataset."""
        with pytest.raises(IndexOutOfRangeError, match=r"\[3\] are out of range for dataset with 3 rows"):
            query(three_binding, [3])

    @pytest.mark.parametrize("query", QUERIES)
    def test_negative_index(self, three_binding, query) -> None:
        """Negative indices are out of range."""
        with pytest.raises(IndexOutOfRangeError):
            query(three_binding, [0, -1])

    def test_out_of_range_is_index_error(self, three_binding) -> None:
        """IndexOutOfRangeError can be caught as IndexError."""
        with pytest.raises(IndexError):
            all_pred(three_binding, 10)

    @pytest.mark.parametrize("query", QUERIES)
    def test_unbound(self, query) -> None:
        """Querying without a binding fails."""
        with pytest.raises(UnboundDatasetError, match="call bind"):
            query(None, [0])

    def test_empty_query(self, three_binding) -> None:
        """At least one row must be queried."""
        with pytest.raises(ValueError, match="at least one row index"):
            all_pred(three_binding, [])

    def test_non_integer_indices(self, three_binding) -> None:
        """Float indices are rejected."""
        with pytest.raises(TypeError, match="integer row indices"):
            all_pred(three_binding, [0.5])

    def test_nested_indices(self, three_binding) -> None:
        """v must be flat."""
        with pytest.raises(ValueError, match="1D sequence"):
            all_pred(three_binding, [[0, 1]])

    def test_non_binding(self, three_binding) -> None:
        """The first argument must be a Binding."""
        with pytest.raises(TypeError, match="binding must be a Binding"):
            all_pred(low("x"), [0])  # type: ignore[arg-type]

"""Tests for DistanceMatrix validation and views."""

import numpy as np
import pandas as pd
import pytest

from graphpermtest.core.distance import DistanceMatrix, as_distance_matrix
from graphpermtest.errors import InvalidDistanceInputError, InvalidInputError


class TestFromArray:
    """Tests for DistanceMatrix.from_array()."""

    def test_valid_matrix(self):
        d = DistanceMatrix.from_array(
            [[0, 1, 2], [1, 0, 3], [2, 3, 0]], sample_ids=["a", "b", "c"]
        )
        assert d.n_samples == 3
        assert list(d.sample_ids) == ["a", "b", "c"]
        assert d.values.dtype == np.float64

    def test_default_ids_are_positions(self):
        d = DistanceMatrix.from_array(np.array([[0.0, 1.0], [1.0, 0.0]]))
        assert list(d.sample_ids) == [0, 1]

    def test_values_are_read_only(self):
        d = DistanceMatrix.from_array([[0, 1], [1, 0]])
        with pytest.raises(ValueError):
            d.values[0, 1] = 5.0

    def test_input_not_aliased(self):
        arr = np.array([[0.0, 1.0], [1.0, 0.0]])
        d = DistanceMatrix.from_array(arr)
        arr[0, 1] = 9.0
        assert d.values[0, 1] == 1.0

    def test_not_square(self):
        with pytest.raises(InvalidDistanceInputError, match="square"):
            DistanceMatrix.from_array(np.zeros((3, 2)))

    def test_asymmetric(self):
        with pytest.raises(InvalidInputError, match="symmetric"):
            DistanceMatrix.from_array([[0, 1], [2, 0]])

    def test_negative(self):
        with pytest.raises(InvalidDistanceInputError, match="negative"):
            DistanceMatrix.from_array([[0, -1], [-1, 0]])

    def test_nan(self):
        with pytest.raises(InvalidDistanceInputError, match="NaN"):
            DistanceMatrix.from_array([[0, np.nan], [np.nan, 0]])

    def test_too_small(self):
        with pytest.raises(InvalidDistanceInputError, match="at least 2"):
            DistanceMatrix.from_array([[0.0]])

    def test_id_count_mismatch(self):
        with pytest.raises(InvalidDistanceInputError, match="sample ids"):
            DistanceMatrix.from_array([[0, 1], [1, 0]], sample_ids=["a"])

    def test_duplicate_ids(self):
        with pytest.raises(InvalidDistanceInputError, match="Duplicate"):
            DistanceMatrix.from_array([[0, 1], [1, 0]], sample_ids=["a", "a"])

    def test_non_metric_accepted(self):
        """Triangle inequality violations are fine."""
        d = DistanceMatrix.from_array(
            [[0, 1, 10], [1, 0, 1], [10, 1, 0]]
        )
        assert d.values[0, 2] == 10


class TestFromFrame:
    """Tests for DistanceMatrix.from_frame()."""

    def test_columns_reordered_to_rows(self):
        df = pd.DataFrame(
            [[0, 1, 2], [1, 0, 3], [2, 3, 0]],
            index=["a", "b", "c"],
            columns=["a", "b", "c"],
        )
        shuffled = df[["c", "a", "b"]]
        d = DistanceMatrix.from_frame(shuffled)
        np.testing.assert_array_equal(d.values, df.to_numpy(dtype=float))

    def test_label_mismatch(self):
        df = pd.DataFrame([[0, 1], [1, 0]], index=["a", "b"], columns=["a", "x"])
        with pytest.raises(InvalidDistanceInputError, match="identical"):
            DistanceMatrix.from_frame(df)

    def test_as_distance_matrix_passthrough(self):
        d = DistanceMatrix.from_array([[0, 1], [1, 0]])
        assert as_distance_matrix(d) is d


class TestCondensedView:
    """Tests for condensed() and pairs()."""

    def test_each_pair_once(self):
        d = DistanceMatrix.from_array(
            [[0, 1, 2, 3], [1, 0, 4, 5], [2, 4, 0, 6], [3, 5, 6, 0]]
        )
        np.testing.assert_array_equal(d.condensed(), [1, 2, 3, 4, 5, 6])

    def test_pairs_match_condensed(self):
        rng = np.random.default_rng(0)
        x = rng.uniform(size=(6, 6))
        d = DistanceMatrix.from_array(x + x.T - 2 * np.diag(np.diag(x)))
        rows, cols = d.pairs()
        np.testing.assert_allclose(d.condensed(), d.values[rows, cols])
        assert np.all(rows < cols)

    def test_from_condensed_roundtrip_ids(self):
        d = DistanceMatrix.from_condensed([1.0, 2.0, 3.0], sample_ids=["a", "b", "c"])
        assert d.values[1, 2] == 3.0
        assert d.to_frame().loc["a", "c"] == 2.0

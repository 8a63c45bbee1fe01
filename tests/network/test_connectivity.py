"""
Tests for connectivity matrix construction.
"""

import numpy as np
import pytest

from ripM.common.exceptions import ComputationError, ConfigurationError, ValidationError
from ripM.network.connectivity import build_connectivity


class TestBuildConnectivity:
    """Test thresholding, binarization and derived statistics."""

    def setup_method(self):
        self.adjacency = np.array([
            [1.0, 0.8, -0.6, 0.1],
            [0.8, 1.0, 0.3, 0.0],
            [-0.6, 0.3, 1.0, 0.5],
            [0.1, 0.0, 0.5, 1.0],
        ])

    def test_without_threshold_keeps_weights(self):
        conn = build_connectivity(self.adjacency)

        expected = self.adjacency.copy()
        np.fill_diagonal(expected, 0.0)
        np.testing.assert_array_equal(conn.matrix, expected)

    def test_input_is_not_modified(self):
        original = self.adjacency.copy()

        build_connectivity(self.adjacency, threshold=0.2, use_threshold=True)

        np.testing.assert_array_equal(self.adjacency, original)

    def test_binary_threshold(self):
        conn = build_connectivity(self.adjacency, threshold=0.2, use_threshold=True)

        expected = np.array([
            [0, 1, 0, 0],
            [1, 0, 1, 0],
            [0, 1, 0, 1],
            [0, 0, 1, 0],
        ], dtype=float)
        np.testing.assert_array_equal(conn.matrix, expected)
        np.testing.assert_array_equal(conn.degrees, [1, 2, 2, 1])
        assert conn.num_edges == 3.0
        assert conn.num_nodes == 4

    def test_weighted_threshold(self):
        conn = build_connectivity(
            self.adjacency, threshold=0.2, use_threshold=True, use_binary=False
        )

        assert conn.matrix[0, 1] == 0.8
        assert conn.matrix[2, 3] == 0.5
        assert conn.matrix[0, 3] == 0.0
        assert conn.num_edges == pytest.approx(0.8 + 0.3 + 0.5)

    def test_absolute_threshold_keeps_negative_correlation(self):
        conn = build_connectivity(
            self.adjacency, threshold=0.2, use_threshold=True,
            use_absolute=True, use_binary=False
        )

        assert conn.matrix[0, 2] == -0.6
        assert conn.matrix[2, 0] == -0.6

    def test_threshold_is_inclusive(self):
        conn = build_connectivity(self.adjacency, threshold=0.5, use_threshold=True)

        assert conn.matrix[2, 3] == 0.0
        assert conn.matrix[0, 1] == 1.0

    def test_diagonal_stays_zero_with_negative_threshold(self):
        conn = build_connectivity(self.adjacency, threshold=-1.0, use_threshold=True)

        np.testing.assert_array_equal(np.diag(conn.matrix), np.zeros(4))
        assert conn.num_edges == 6.0

    def test_threshold_above_all_values(self):
        conn = build_connectivity(self.adjacency, threshold=5.0, use_threshold=True)

        assert conn.num_edges == 0.0
        assert not conn.matrix.any()

    def test_threshold_ignored_when_disabled(self):
        conn = build_connectivity(self.adjacency, threshold=5.0, use_threshold=False)

        assert conn.matrix[0, 1] == 0.8


class TestBuildConnectivityErrors:

    def test_non_square(self):
        with pytest.raises(ValidationError, match="square"):
            build_connectivity(np.zeros((2, 3)))

    def test_empty(self):
        with pytest.raises(ValidationError, match="empty"):
            build_connectivity(np.zeros((0, 0)))

    def test_nan_entry(self):
        adjacency = np.zeros((3, 3))
        adjacency[0, 1] = adjacency[1, 0] = np.nan

        with pytest.raises(ComputationError, match="Non-finite"):
            build_connectivity(adjacency)

    def test_non_finite_threshold(self):
        with pytest.raises(ConfigurationError, match="finite"):
            build_connectivity(np.eye(3), threshold=np.inf, use_threshold=True)

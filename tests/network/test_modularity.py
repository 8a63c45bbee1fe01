"""
Tests for modularity refinement and modularity of a partition.
"""

import numpy as np
import pytest

from conftest import as_sets, clique_pair, random_symmetric
from ripM.common.exceptions import DegenerateModuleError, ValidationError
from ripM.network.modularity import compute_modularity, modularity_matrix, refine_modules


class TestModularityMatrix:

    def test_rows_sum_to_zero(self):
        B = modularity_matrix(clique_pair())

        np.testing.assert_allclose(B.sum(axis=1), 0.0, atol=1e-12)

    def test_no_edges(self):
        with pytest.raises(DegenerateModuleError, match="no edges"):
            modularity_matrix(np.zeros((3, 3)))


class TestRefineModules:
    """Test repeated bisection of a single module."""

    def setup_method(self):
        self.adjacency = clique_pair()

    def test_finds_two_cliques(self):
        result = refine_modules(self.adjacency, range(8))

        assert as_sets(result.modules) == [frozenset(range(4)), frozenset(range(4, 8))]

    def test_accumulated_q_matches_partition_modularity(self):
        result = refine_modules(self.adjacency, range(8))

        assert result.q == pytest.approx(compute_modularity(self.adjacency, result.modules))
        assert result.q == pytest.approx(12 / 12.1 - 0.5)

    def test_indices_refer_to_parent_matrix(self):
        # embed the clique pair at odd positions of a larger matrix
        parent = np.zeros((16, 16))
        positions = np.arange(1, 16, 2)
        parent[np.ix_(positions, positions)] = self.adjacency

        result = refine_modules(parent, positions.tolist())

        assert as_sets(result.modules) == [
            frozenset(positions[:4].tolist()),
            frozenset(positions[4:].tolist()),
        ]

    def test_single_clique_is_terminal(self):
        clique = np.ones((5, 5)) - np.eye(5)

        result = refine_modules(clique, range(5))

        assert result.modules == [[0, 1, 2, 3, 4]]
        assert result.q == pytest.approx(0.0, abs=1e-12)

    def test_modules_partition_the_input(self):
        matrix = random_symmetric(25, seed=7)
        subset = list(range(3, 25))

        result = refine_modules(matrix, subset)

        flat = sorted(index for module in result.modules for index in module)
        assert flat == subset

    def test_module_of_one_node(self):
        with pytest.raises(DegenerateModuleError, match="size < 2"):
            refine_modules(self.adjacency, [3])

    def test_module_without_edges(self):
        with pytest.raises(DegenerateModuleError):
            refine_modules(np.zeros((4, 4)), range(4))

    def test_invalid_index(self):
        with pytest.raises(ValidationError, match="out of range"):
            refine_modules(self.adjacency, [0, 8])


class TestComputeModularity:

    def setup_method(self):
        self.adjacency = clique_pair()

    def test_two_cliques(self):
        q = compute_modularity(self.adjacency, [[0, 1, 2, 3], [4, 5, 6, 7]])

        assert q == pytest.approx(12 / 12.1 - 0.5)

    def test_single_module_is_zero(self):
        assert compute_modularity(self.adjacency, [list(range(8))]) == pytest.approx(0.0, abs=1e-12)

    def test_module_order_does_not_matter(self):
        q1 = compute_modularity(self.adjacency, [[0, 1, 2, 3], [4, 5, 6, 7]])
        q2 = compute_modularity(self.adjacency, [[7, 6, 5, 4], [3, 2, 1, 0]])

        assert q1 == pytest.approx(q2)

    def test_no_modules(self):
        with pytest.raises(DegenerateModuleError, match="no modules"):
            compute_modularity(self.adjacency, [])

    def test_incomplete_partition(self):
        with pytest.raises(ValidationError, match="does not cover"):
            compute_modularity(self.adjacency, [[0, 1, 2, 3]])

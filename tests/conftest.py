"""
Shared fixtures for the ripM test suite.
"""

import logging

import numpy as np
import pytest


def clique_pair(bridge_weight: float = 0.1) -> np.ndarray:
    """Two 4-node cliques (nodes 0-3 and 4-7) joined by one edge 3-4."""
    matrix = np.zeros((8, 8))
    for block in (range(0, 4), range(4, 8)):
        for i in block:
            for j in block:
                if i != j:
                    matrix[i, j] = 1.0
    matrix[3, 4] = matrix[4, 3] = bridge_weight
    return matrix


def two_hop_square(direct_weight: float = 0.01) -> np.ndarray:
    """
    Complete bipartite graph between {0, 1} and {2, 3}.

    Nodes 0-1 and 2-3 share only a weak direct edge but are joined by two
    strong 2-hop paths each.
    """
    matrix = np.array([
        [0.0, direct_weight, 1.0, 1.0],
        [direct_weight, 0.0, 1.0, 1.0],
        [1.0, 1.0, 0.0, direct_weight],
        [1.0, 1.0, direct_weight, 0.0],
    ])
    return matrix


def perfect_matching(n_pairs: int = 3) -> np.ndarray:
    """Pairs (0, 1), (2, 3), ... with unit edges and nothing else."""
    n = 2 * n_pairs
    matrix = np.zeros((n, n))
    for i in range(0, n, 2):
        matrix[i, i + 1] = matrix[i + 1, i] = 1.0
    return matrix


def random_symmetric(n: int, seed: int = 42, density: float = 0.3) -> np.ndarray:
    rng = np.random.default_rng(seed)
    weights = rng.random((n, n))
    mask = rng.random((n, n)) < density
    matrix = np.triu(weights * mask, k=1)
    return matrix + matrix.T


def as_sets(modules):
    return sorted((frozenset(module) for module in modules), key=min)


@pytest.fixture
def clique_matrix():
    return clique_pair()


@pytest.fixture
def reset_ripm_logger():
    """Restore the ripM root logger after tests that configure logging."""
    yield
    root = logging.getLogger("ripM")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True

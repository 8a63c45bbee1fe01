"""
Modularity refinement by repeated leading-eigenvector bisection.

``refine_modules`` partitions one module of a network without any size
policy: it keeps bisecting while a split increases modularity and reports the
terminal groups together with the accumulated modularity Q. The recursive
partitioner and the module merger both build on it.
"""

from typing import List, NamedTuple, Sequence

import numpy as np

from ..common.exceptions import DegenerateModuleError
from ..common.logging_config import get_logger
from ..common.validators import (
    validate_square_matrix,
    validate_module_indices,
    validate_partition,
    check_finite
)
from .spectral import bisect

logger = get_logger(__name__)

# A split must increase modularity by more than this to be kept
MODULARITY_THRESHOLD = 0.0


class ModularityResult(NamedTuple):
    """Accumulated modularity and the modules it was computed for."""

    q: float
    modules: List[List[int]]


def modularity_matrix(adjacency: np.ndarray) -> np.ndarray:
    """
    Newman modularity matrix ``B = A - k k^T / 2m``.

    Raises
    ------
    DegenerateModuleError
        If the matrix carries no edge weight
    """
    degrees = adjacency.sum(axis=0)
    two_m = float(degrees.sum())
    if not two_m > 0:
        raise DegenerateModuleError(
            "Module has no edges to compute modularity from",
            module_size=adjacency.shape[0]
        )
    return adjacency - np.outer(degrees, degrees) / two_m


def refine_modules(matrix: np.ndarray, module_indices: Sequence[int]) -> ModularityResult:
    """
    Split one module into communities by leading-eigenvector bisection.

    The submatrix of ``matrix`` selected by ``module_indices`` is treated as a
    network of its own. Groups wait on an explicit stack; each popped group is
    bisected with its generalized modularity matrix, in which every diagonal
    entry has the group's row sum subtracted. A group becomes a terminal module
    when the split leaves one side empty or does not raise modularity.

    Parameters
    ----------
    matrix : np.ndarray
        Square connectivity (or indirect path) matrix
    module_indices : sequence of int
        Indices into ``matrix`` of the nodes to partition

    Returns
    -------
    ModularityResult
        Total modularity Q and the terminal modules, expressed in the same
        indices as ``module_indices``

    Raises
    ------
    DegenerateModuleError
        If the module has fewer than two nodes or no edge weight
    ValidationError
        If ``matrix`` is not square or an index is invalid
    """
    matrix = validate_square_matrix(matrix)
    indices = validate_module_indices(module_indices, matrix.shape[0])
    n = indices.size
    if n < 2:
        raise DegenerateModuleError(
            f"Cannot split module of size < 2: {n}",
            module_size=n
        )

    adjacency = matrix[np.ix_(indices, indices)]
    check_finite(adjacency, "refine_modules")
    m = 0.5 * float(adjacency.sum())
    B = modularity_matrix(adjacency)

    stack = [np.arange(n)]
    terminal: List[np.ndarray] = []
    q = 0.0
    iteration = 0
    while stack:
        iteration += 1
        group = stack.pop()

        Bg = B[np.ix_(group, group)]
        Bg = Bg - np.diag(Bg.sum(axis=1))

        delta_q, s = bisect(Bg, m)
        s1 = group[s > 0]
        s2 = group[s < 0]

        if s1.size == 0 or s2.size == 0:
            terminal.append(group)
            if iteration == 1:
                q = delta_q
        elif delta_q <= MODULARITY_THRESHOLD:
            terminal.append(group)
        else:
            stack.append(s1)
            stack.append(s2)
            q += delta_q
        logger.debug("Iteration %d: group size %d, deltaQ=%.6f",
                     iteration, group.size, delta_q)

    modules = [indices[group].tolist() for group in terminal]
    return ModularityResult(q=q, modules=modules)


def compute_modularity(connectivity: np.ndarray, modules: Sequence[Sequence[int]]) -> float:
    """
    Modularity of a complete partition, computed from scratch.

    ``Q = (1 / 2m) * sum_ij (A_ij - k_i k_j / 2m) * delta(c_i, c_j)``

    Raises
    ------
    DegenerateModuleError
        If the partition is empty or the matrix has no edges
    ValidationError
        If the modules do not form a complete, disjoint partition
    """
    connectivity = validate_square_matrix(connectivity, field="connectivity")
    if len(modules) == 0:
        raise DegenerateModuleError("Cannot compute Q: no modules exist")
    partition = validate_partition(modules, connectivity.shape[0])

    labels = np.empty(connectivity.shape[0], dtype=np.int64)
    for module_number, module in enumerate(partition):
        labels[module] = module_number
    same_module = labels[:, None] == labels[None, :]

    B = modularity_matrix(connectivity)
    two_m = float(connectivity.sum())
    return float((B * same_module).sum() / two_m)

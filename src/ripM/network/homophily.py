"""
Homophily (assortativity) of a partition.

For each module the internal edge weight is compared with the weight of the
edges leaving it. A module whose internal or external weight is exactly zero
carries no homophily signal and scores 0.
"""

from typing import List, NamedTuple, Sequence

import numpy as np

from ..common.exceptions import ComputationError, DegenerateModuleError
from ..common.logging_config import get_logger
from ..common.validators import validate_square_matrix, validate_partition

logger = get_logger(__name__)


class HomophilyResult(NamedTuple):
    """Global homophily and the size-weighted contribution of each module."""

    global_homophily: float
    local: List[float]


def compute_homophily(
    connectivity: np.ndarray,
    modules: Sequence[Sequence[int]]
) -> HomophilyResult:
    """
    Score how strongly nodes connect within their own modules.

    Parameters
    ----------
    connectivity : np.ndarray
        Square connectivity matrix
    modules : sequence of modules
        Complete partition of the nodes

    Returns
    -------
    HomophilyResult
        ``local[i] = size_i / N * (int_i - ext_i) / (int_i + ext_i)`` where
        ``int_i`` sums the upper triangle of the module's own submatrix and
        ``ext_i`` sums its rows over all other nodes; ``global_homophily`` is
        the sum of the local values

    Raises
    ------
    DegenerateModuleError
        If no modules exist
    ValidationError
        If the modules are not a complete, disjoint partition
    ComputationError
        If a module's signed internal and external weights cancel to zero

    Examples
    --------
    >>> result = compute_homophily(conn, [[0, 1, 2], [3, 4, 5]])
    >>> result.global_homophily
    """
    connectivity = validate_square_matrix(connectivity, field="connectivity")
    if len(modules) == 0:
        raise DegenerateModuleError("Cannot compute homophily: no modules exist")
    partition = validate_partition(modules, connectivity.shape[0])

    total_nodes = connectivity.shape[0]
    all_nodes = np.arange(total_nodes)
    local: List[float] = []
    for module in partition:
        members = np.asarray(module, dtype=np.int64)
        others = np.setdiff1d(all_nodes, members, assume_unique=True)

        internal = float(np.triu(connectivity[np.ix_(members, members)]).sum())
        external = float(connectivity[np.ix_(members, others)].sum())

        module_homophily = 0.0
        if internal != 0 and external != 0:
            total = internal + external
            if total == 0:
                # signed weights can cancel exactly
                raise ComputationError(
                    "Internal and external module weights cancel to zero",
                    operation="compute_homophily",
                    error_type="numerical",
                    resource_info={"module_size": int(members.size),
                                   "internal": internal, "external": external}
                )
            module_homophily = (internal - external) / total
        local.append(members.size * module_homophily / total_nodes)

    global_homophily = float(sum(local))
    logger.debug("Homophily: global=%.6f over %d modules", global_homophily, len(local))
    return HomophilyResult(global_homophily=global_homophily, local=local)

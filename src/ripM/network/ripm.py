"""
Recursive indirect-paths modularity (rip-M).

The partitioner splits a network with ``refine_modules``, recurses into any
module larger than the maximum size, and hands everything else to the module
merger. The merger looks for a grouping of the small modules that satisfies
the size policy by partitioning sums of matrix powers (indirect paths of
increasing length) over the nodes they contain.

Every recursive call returns its modules; nothing is accumulated in shared
state.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..common.exceptions import (
    ConfigurationError,
    DegenerateModuleError,
    require_positive
)
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.validators import validate_square_matrix, check_finite
from .modularity import ModularityResult, refine_modules

logger = get_logger(__name__)

DEFAULT_START_MERGE_ORDER = 2
DEFAULT_MAX_MERGE_ORDER = 4
DEFAULT_MIN_MODULE_SIZE = 200
DEFAULT_MAX_MODULE_SIZE = 10


@dataclass(frozen=True)
class RipMSettings:
    """
    Size policy and merge orders for the recursive partitioner.

    The minimum and maximum module sizes are independent; nothing forces
    ``min_module_size <= max_module_size``.
    """

    start_merge_order: int = DEFAULT_START_MERGE_ORDER
    max_merge_order: int = DEFAULT_MAX_MERGE_ORDER
    min_module_size: int = DEFAULT_MIN_MODULE_SIZE
    max_module_size: int = DEFAULT_MAX_MODULE_SIZE

    def __post_init__(self) -> None:
        require_positive(self.start_merge_order, "start_merge_order")
        require_positive(self.max_merge_order, "max_merge_order")
        require_positive(self.min_module_size, "min_module_size")
        require_positive(self.max_module_size, "max_module_size")
        if self.start_merge_order > self.max_merge_order:
            raise ConfigurationError(
                f"start_merge_order ({self.start_merge_order}) must be "
                f"<= max_merge_order ({self.max_merge_order})",
                parameter="start_merge_order",
                value=self.start_merge_order
            )


def sum_matrix_power_series(A: np.ndarray, max_power: int) -> np.ndarray:
    """
    Indirect path matrix ``A + A^2 + ... + A^max_power``.

    Powers are built by repeated multiplication; ``max_power`` is a small
    merge order.

    Raises
    ------
    ConfigurationError
        If ``max_power`` is below one
    ComputationError
        If the sum overflows to non-finite values
    """
    if max_power < 1:
        raise ConfigurationError(
            f"Matrix power series order must be >= 1, got {max_power}",
            parameter="max_power",
            value=max_power
        )
    total = A.copy()
    current_power = A.copy()
    for _ in range(1, max_power):
        current_power = current_power @ A
        total = total + current_power
    check_finite(total, "sum_matrix_power_series")
    return total


def check_merge_results(
    modules: Sequence[Sequence[int]],
    min_module_size: int,
    max_module_size: int
) -> bool:
    """True when every module size lies in ``[min_module_size, max_module_size]``."""
    return all(min_module_size <= len(module) <= max_module_size for module in modules)


def merge_small_modules(
    matrix: np.ndarray,
    small_modules: Sequence[Sequence[int]],
    start_merge_order: int = DEFAULT_START_MERGE_ORDER,
    max_merge_order: int = DEFAULT_MAX_MERGE_ORDER,
    min_module_size: int = DEFAULT_MIN_MODULE_SIZE,
    max_module_size: int = DEFAULT_MAX_MODULE_SIZE
) -> Optional[List[List[int]]]:
    """
    Regroup small modules using indirect path matrices.

    The nodes of all small modules are pooled into one submatrix. For each
    merge order from ``start_merge_order`` to ``max_merge_order`` the pooled
    nodes are partitioned over the sum of powers of that submatrix; the first
    partition whose module sizes all fit the size policy is returned.

    Parameters
    ----------
    matrix : np.ndarray
        Square matrix the module indices refer to
    small_modules : sequence of modules
        Modules to merge
    start_merge_order, max_merge_order : int
        Range of path lengths to try
    min_module_size, max_module_size : int
        Size policy every merged module must satisfy

    Returns
    -------
    List[List[int]] or None
        Merged modules in the indices of ``matrix``, or None when no merge
        order produces an acceptable partition

    Examples
    --------
    >>> merged = merge_small_modules(conn, [[0], [1], [2], [3]],
    ...                              start_merge_order=1, max_merge_order=3,
    ...                              min_module_size=2, max_module_size=2)
    """
    log_function_entry(
        "merge_small_modules",
        num_modules=len(small_modules),
        start_merge_order=start_merge_order,
        max_merge_order=max_merge_order,
        min_module_size=min_module_size,
        max_module_size=max_module_size
    )
    matrix = validate_square_matrix(matrix)

    # position in the pooled submatrix -> index in the caller's matrix
    pooled_indices = np.array(
        [index for module in small_modules for index in module],
        dtype=np.int64
    )
    if pooled_indices.size == 0:
        logger.warning("RIPM: No small modules to merge")
        return None
    A = matrix[np.ix_(pooled_indices, pooled_indices)]
    local_indices = list(range(pooled_indices.size))

    for merge_order in range(start_merge_order, max_merge_order + 1):
        logger.info("RIPM: Merge order: %d", merge_order)
        try_matrix = sum_matrix_power_series(A, merge_order)
        try:
            try_results = refine_modules(try_matrix, local_indices)
        except DegenerateModuleError as e:
            logger.warning("RIPM: Merge abandoned, pooled modules cannot be split: %s", e.message)
            return None

        if check_merge_results(try_results.modules, min_module_size, max_module_size):
            logger.info("RIPM: Merge successful at order %d: %d modules",
                        merge_order, len(try_results.modules))
            return [pooled_indices[module].tolist() for module in try_results.modules]

        logger.debug(
            "RIPM: Merge order %d rejected, module sizes %s",
            merge_order, [len(module) for module in try_results.modules]
        )

    logger.warning(
        "RIPM: No merge order in [%d, %d] satisfied module sizes [%d, %d]",
        start_merge_order, max_merge_order, min_module_size, max_module_size
    )
    return None


def _partition_module(
    matrix: np.ndarray,
    module_indices: List[int],
    settings: RipMSettings,
    depth: int
) -> List[List[int]]:
    logger.info("RIPM: Running Newman modularity on module size: %d (depth %d)",
                len(module_indices), depth)
    try:
        result: ModularityResult = refine_modules(matrix, module_indices)
    except DegenerateModuleError as e:
        logger.warning("RIPM: Cannot split this module, saving as is: %s", e.message)
        return [list(module_indices)]

    logger.info("RIPM: Total modularity Q = %.6f, %d modules", result.q, len(result.modules))
    if len(result.modules) < 2:
        return [list(module_indices)]

    results: List[List[int]] = []
    small_modules: List[List[int]] = []
    for module in result.modules:
        if len(module) > settings.max_module_size:
            logger.info("RIPM: Recursing into module size: %d", len(module))
            results.extend(_partition_module(matrix, module, settings, depth + 1))
        else:
            logger.debug("RIPM: Collecting small module size: %d", len(module))
            small_modules.append(module)

    if small_modules:
        logger.info("RIPM: Merging %d small modules", len(small_modules))
        merged = merge_small_modules(
            matrix,
            small_modules,
            start_merge_order=settings.start_merge_order,
            max_merge_order=settings.max_merge_order,
            min_module_size=settings.min_module_size,
            max_module_size=settings.max_module_size
        )
        if merged is None:
            logger.info("RIPM: Keeping %d small modules unmerged", len(small_modules))
            results.extend(small_modules)
        else:
            results.extend(merged)

    return results


def recursive_partition(
    matrix: np.ndarray,
    settings: Optional[RipMSettings] = None,
    module_indices: Optional[Sequence[int]] = None
) -> List[List[int]]:
    """
    Partition a network with the recursive indirect-paths modularity method.

    Parameters
    ----------
    matrix : np.ndarray
        Square connectivity matrix
    settings : RipMSettings, optional
        Size policy and merge orders; defaults to ``RipMSettings()``
    module_indices : sequence of int, optional
        Restrict the partition to these nodes (all nodes by default)

    Returns
    -------
    List[List[int]]
        Modules covering every node of ``module_indices`` exactly once:
        the results of recursing into oversized modules followed by the
        merged (or unmerged) small modules

    Raises
    ------
    ValidationError
        If the matrix is empty or not square
    ComputationError
        If a transform produces non-finite values
    """
    settings = settings or RipMSettings()
    matrix = validate_square_matrix(matrix)
    check_finite(matrix, "recursive_partition")
    if module_indices is None:
        module_indices = range(matrix.shape[0])

    with LoggingTimer("recursive_partition", {"nodes": len(module_indices)}):
        modules = _partition_module(matrix, [int(i) for i in module_indices], settings, 0)

    logger.info("RIPM: Found %d modules", len(modules))
    for number, module in enumerate(modules):
        logger.debug("RIPM: Module: %d size: %d", number, len(module))
    return modules

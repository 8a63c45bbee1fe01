"""
Input validation utilities for the ripM library.

Checks the structural invariants the algorithms rely on (square, symmetric,
finite matrices and complete, disjoint partitions) before any processing
begins, so that failures surface with a clear message instead of deep inside
an eigen-decomposition.
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from .exceptions import ValidationError, ComputationError


def validate_square_matrix(
    matrix: Any,
    field: str = "matrix",
    allow_empty: bool = False
) -> np.ndarray:
    """
    Validate that a matrix is two-dimensional and square.

    Parameters
    ----------
    matrix : array-like
        Matrix to validate
    field : str, default "matrix"
        Name used in error messages
    allow_empty : bool, default False
        Whether a 0 x 0 matrix is acceptable

    Returns
    -------
    np.ndarray
        The matrix as a float64 array (copied only when conversion is needed)

    Raises
    ------
    ValidationError
        If the matrix is empty, not 2-D, or not square

    Examples
    --------
    >>> validate_square_matrix([[0, 1], [1, 0]]).shape
    (2, 2)
    >>> validate_square_matrix([[0, 1, 2]])  # doctest: +SKIP
    ValidationError: Validation error in field 'matrix': Matrix must be square
    """
    try:
        array = np.asarray(matrix, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Matrix could not be converted to a numeric array",
            field=field,
            details={"error": str(e)}
        )

    if array.ndim != 2:
        raise ValidationError(
            f"Matrix must be two-dimensional, got {array.ndim} dimension(s)",
            field=field,
            details={"shape": array.shape}
        )

    if array.shape[0] != array.shape[1]:
        raise ValidationError(
            "Matrix must be square",
            field=field,
            details={"shape": array.shape}
        )

    if array.shape[0] == 0 and not allow_empty:
        raise ValidationError("Matrix is empty", field=field)

    return array


def check_finite(matrix: np.ndarray, operation: str) -> None:
    """
    Abort an operation whose result contains NaN or infinite values.

    Raises
    ------
    ComputationError
        If any entry is not finite
    """
    finite = np.isfinite(matrix)
    if not finite.all():
        raise ComputationError(
            f"Non-finite values produced by {operation}",
            operation=operation,
            error_type="numerical",
            resource_info={"non_finite_count": int(finite.size - finite.sum())}
        )


def validate_symmetric(
    matrix: np.ndarray,
    field: str = "matrix",
    atol: float = 1e-12
) -> None:
    """
    Validate that a square matrix equals its transpose.

    Raises
    ------
    ValidationError
        If any pair (i, j), (j, i) differs by more than ``atol``
    """
    if not np.allclose(matrix, matrix.T, rtol=0.0, atol=atol):
        max_diff = float(np.max(np.abs(matrix - matrix.T)))
        raise ValidationError(
            "Matrix must be symmetric",
            field=field,
            details={"max_asymmetry": max_diff}
        )


def validate_node_names(names: Sequence[Any], dimension: int) -> None:
    """
    Validate a node name list against the matrix it labels.

    Raises
    ------
    ValidationError
        If the count does not match the dimension or names repeat
    """
    if len(names) != dimension:
        raise ValidationError(
            "Number of node names does not match matrix dimension",
            field="node_names",
            details={"names": len(names), "dimension": dimension}
        )

    seen = set()
    duplicates = []
    for name in names:
        if name in seen:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise ValidationError(
            "Node names must be unique",
            field="node_names",
            details={"duplicates": duplicates[:10]}
        )


def validate_partition(
    modules: Sequence[Sequence[int]],
    num_nodes: int,
    field: str = "modules"
) -> List[List[int]]:
    """
    Validate that modules form a complete, disjoint partition of the nodes.

    Parameters
    ----------
    modules : sequence of sequences of int
        Candidate partition
    num_nodes : int
        Number of nodes every index must be below
    field : str, default "modules"
        Name used in error messages

    Returns
    -------
    List[List[int]]
        The partition with plain ``int`` indices

    Raises
    ------
    ValidationError
        If the partition is empty, contains an empty module, an index out of
        range, a repeated index, or misses any node
    """
    if len(modules) == 0:
        raise ValidationError("Partition contains no modules", field=field)

    normalized: List[List[int]] = []
    seen = np.zeros(num_nodes, dtype=bool)
    for module_number, module in enumerate(modules):
        if len(module) == 0:
            raise ValidationError(
                f"Module {module_number} is empty",
                field=field
            )
        indices = [int(index) for index in module]
        for index in indices:
            if index < 0 or index >= num_nodes:
                raise ValidationError(
                    f"Node index {index} out of range",
                    field=field,
                    details={"module": module_number, "num_nodes": num_nodes}
                )
            if seen[index]:
                raise ValidationError(
                    f"Node index {index} assigned to more than one module",
                    field=field,
                    details={"module": module_number}
                )
            seen[index] = True
        normalized.append(indices)

    missing = np.flatnonzero(~seen)
    if missing.size:
        raise ValidationError(
            "Partition does not cover every node",
            field=field,
            details={"missing_count": int(missing.size),
                     "first_missing": missing[:10].tolist()}
        )

    return normalized


def validate_module_indices(
    module_indices: Sequence[int],
    dimension: int,
    field: str = "module_indices"
) -> np.ndarray:
    """
    Validate a single module against the matrix it indexes.

    Returns
    -------
    np.ndarray
        Indices as an int64 array

    Raises
    ------
    ValidationError
        If an index is out of range or repeated
    """
    indices = np.asarray(module_indices, dtype=np.int64).reshape(-1)
    if indices.size and (indices.min() < 0 or indices.max() >= dimension):
        raise ValidationError(
            "Module index out of range",
            field=field,
            details={"dimension": dimension}
        )
    if np.unique(indices).size != indices.size:
        raise ValidationError("Module contains duplicate indices", field=field)
    return indices


"""
Connectivity matrix construction.

The connectivity matrix is the view of the adjacency matrix that the
partitioning algorithms actually operate on: no self-loops, optionally
thresholded and binarized. Degrees and the edge count are derived from it.
"""

from dataclasses import dataclass

import numpy as np

from ..common.exceptions import ConfigurationError
from ..common.logging_config import get_logger
from ..common.validators import validate_square_matrix, check_finite

logger = get_logger(__name__)

DEFAULT_CONNECTIVITY_THRESHOLD = 0.0


@dataclass(frozen=True)
class ConnectivityMatrix:
    """
    Thresholded connectivity matrix with its derived degree statistics.

    Attributes
    ----------
    matrix : np.ndarray
        N x N matrix with a zero diagonal
    degrees : np.ndarray
        Row sums of ``matrix``
    num_edges : float
        Half the sum of the degrees (m in the modularity formulas)
    """

    matrix: np.ndarray
    degrees: np.ndarray
    num_edges: float

    @property
    def num_nodes(self) -> int:
        return self.matrix.shape[0]


def build_connectivity(
    adjacency: np.ndarray,
    threshold: float = DEFAULT_CONNECTIVITY_THRESHOLD,
    use_threshold: bool = False,
    use_absolute: bool = False,
    use_binary: bool = True
) -> ConnectivityMatrix:
    """
    Derive the connectivity matrix from an adjacency matrix.

    Parameters
    ----------
    adjacency : np.ndarray
        Square adjacency matrix
    threshold : float, default 0.0
        Entries at or below this value are removed when ``use_threshold``
    use_threshold : bool, default False
        Apply ``threshold`` at all. Without it only the diagonal is cleared.
    use_absolute : bool, default False
        Compare ``|value|`` instead of ``value`` against the threshold
    use_binary : bool, default True
        Replace surviving entries with 1 (only when thresholding)

    Returns
    -------
    ConnectivityMatrix
        Matrix, degree vector and edge count

    Raises
    ------
    ValidationError
        If the adjacency matrix is empty or not square
    ComputationError
        If the adjacency matrix holds non-finite values

    Examples
    --------
    >>> conn = build_connectivity(np.array([[1.0, 0.4], [0.4, 1.0]]),
    ...                           threshold=0.5, use_threshold=True)
    >>> conn.num_edges
    0.0
    """
    matrix = validate_square_matrix(adjacency, field="adjacency").copy()
    check_finite(matrix, "build_connectivity")
    if not np.isfinite(threshold):
        raise ConfigurationError(
            f"Connectivity threshold must be finite, got {threshold}",
            parameter="threshold",
            value=threshold
        )

    np.fill_diagonal(matrix, 0.0)

    if use_threshold:
        edge_values = np.abs(matrix) if use_absolute else matrix
        removed = edge_values <= threshold
        np.fill_diagonal(removed, True)
        matrix[removed] = 0.0
        if use_binary:
            matrix[~removed] = 1.0
        logger.debug(
            "Thresholded connectivity at %s (absolute=%s, binary=%s): %d entries removed",
            threshold, use_absolute, use_binary, int(removed.sum())
        )

    degrees = matrix.sum(axis=0)
    num_edges = 0.5 * float(degrees.sum())

    logger.debug("Connectivity matrix finalized: %d nodes, %.4f edges",
                 matrix.shape[0], num_edges)

    return ConnectivityMatrix(matrix=matrix, degrees=degrees, num_edges=num_edges)

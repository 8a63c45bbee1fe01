"""
Network deconvolution.

Observed interaction matrices mix direct edges with correlation that flows
along indirect paths. Deconvolution keeps the strongest edges, rescales the
eigenvalues of the resulting matrix so that the contribution of longer paths
is removed, and maps the reconstruction back onto [0, 1].

Reference: Feizi, S. et al. "Network deconvolution as a general method to
distinguish direct dependencies in networks." Nature Biotechnology 31 (2013).
"""

import numpy as np
import scipy.linalg

from ..common.exceptions import (
    ComputationError,
    ConfigurationError,
    require_in_range,
    validate_parameter
)
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.validators import validate_square_matrix, check_finite

logger = get_logger(__name__)

DEFAULT_ALPHA = 1.0
DEFAULT_BETA = 0.99
DEFAULT_CONTROL = 0
VALID_CONTROL_VALUES = [0, 1]


def _rescale_unit_interval(matrix: np.ndarray, operation: str) -> np.ndarray:
    low = float(matrix.min())
    high = float(matrix.max())
    if high == low:
        raise ComputationError(
            "Cannot rescale a constant matrix to [0, 1]",
            operation=operation,
            error_type="numerical",
            resource_info={"value": low}
        )
    return (matrix - low) / (high - low)


def deconvolve(
    adjacency: np.ndarray,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    control: int = DEFAULT_CONTROL
) -> np.ndarray:
    """
    Remove indirect-path contamination from an adjacency matrix.

    Parameters
    ----------
    adjacency : np.ndarray
        Square adjacency matrix
    alpha : float, default 1.0
        Fraction of edges kept after thresholding, in (0, 1]
    beta : float, default 0.99
        Eigenvalue scaling parameter, in (0, 1)
    control : int, default 0
        0 keeps the original scaled values of non-edges and shifts edges
        above them; 1 shifts the whole reconstruction to be non-negative

    Returns
    -------
    np.ndarray
        Deconvolved matrix with values in [0, 1]

    Raises
    ------
    ConfigurationError
        If alpha, beta or control are out of range (checked first)
    ValidationError
        If the matrix is empty or not square
    ComputationError
        If the matrix is constant or a step produces non-finite values
    """
    log_function_entry("deconvolve", alpha=alpha, beta=beta, control=control)
    require_in_range(alpha, "alpha", 0.0, 1.0, include_upper=True, function_name="deconvolve")
    require_in_range(beta, "beta", 0.0, 1.0, function_name="deconvolve")
    if isinstance(control, bool) or not isinstance(control, (int, np.integer)):
        raise ConfigurationError(
            f"Parameter 'control' must be an integer, got {type(control).__name__}",
            parameter="control",
            value=control,
            valid_options=VALID_CONTROL_VALUES,
            function="deconvolve"
        )
    validate_parameter(control, VALID_CONTROL_VALUES, "control", "deconvolve")

    matrix = validate_square_matrix(adjacency, field="adjacency")
    check_finite(matrix, "deconvolve")
    n = matrix.shape[0]

    with LoggingTimer("deconvolve", {"nodes": n}):
        scaled = _rescale_unit_interval(matrix, "deconvolve")
        np.fill_diagonal(scaled, 0.0)

        off_diagonal = scaled[~np.eye(n, dtype=bool)]
        if off_diagonal.size:
            y = float(np.quantile(off_diagonal, 1.0 - alpha))
        else:
            y = 0.0
        thresholded = np.where(scaled >= y, scaled, 0.0)
        logger.debug("Quantile threshold %.6f keeps %d entries",
                     y, int(np.count_nonzero(thresholded)))

        thresholded = (thresholded + thresholded.T) / 2.0

        D, U = scipy.linalg.eigh(thresholded)
        lam_n = abs(float(D.min()))
        lam_p = abs(float(D.max()))
        m = max(lam_p * (1.0 - beta) / beta, lam_n * (1.0 + beta) / beta)
        logger.debug("Eigenvalue scaling: lam_n=%.6f, lam_p=%.6f, m=%.6f", lam_n, lam_p, m)

        D_new = D / (m + D)
        reconstructed = (U * D_new) @ U.T
        check_finite(reconstructed, "deconvolve")

        if control == 0:
            edges = thresholded > 0
            non_edge_max = float(np.max(np.where(edges, 0.0, scaled)))
            shift = max(non_edge_max - float(reconstructed.min()), 0.0)
            result = np.where(edges, reconstructed + shift, scaled)
        else:
            shift = max(-float(reconstructed.min()), 0.0)
            result = reconstructed + shift

        nd = _rescale_unit_interval(result, "deconvolve")

    check_finite(nd, "deconvolve")
    return nd

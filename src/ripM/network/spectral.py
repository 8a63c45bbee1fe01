"""
Leading-eigenvector bisection.

Newman's spectral method splits a group of nodes in two using the signs of
the eigenvector that belongs to the largest eigenvalue of its modularity
matrix.
"""

from typing import Tuple

import numpy as np
import scipy.linalg

from ..common.exceptions import DegenerateModuleError, ValidationError
from ..common.validators import check_finite


def bisect(B: np.ndarray, m: float) -> Tuple[float, np.ndarray]:
    """
    Best two-way split of a (localized) modularity matrix.

    Parameters
    ----------
    B : np.ndarray
        Real symmetric modularity matrix of the group being split
    m : float
        Edge count of the network B was derived from

    Returns
    -------
    delta_q : float
        Modularity change ``s^T B s / (4 m)`` of the split
    s : np.ndarray
        Indicator vector: +1 where the leading eigenvector is >= 0, -1 elsewhere

    Raises
    ------
    ValidationError
        If B is not a non-empty square matrix
    DegenerateModuleError
        If ``m`` is not positive
    """
    if B.ndim != 2 or B.shape[0] != B.shape[1] or B.shape[0] == 0:
        raise ValidationError(
            "Modularity matrix must be non-empty and square",
            field="B",
            details={"shape": B.shape}
        )
    if not m > 0:
        raise DegenerateModuleError(
            f"Cannot split a group with edge count {m}",
            module_size=B.shape[0]
        )
    check_finite(B, "bisect")

    # eigh returns eigenvalues in ascending order
    _, eigenvectors = scipy.linalg.eigh(B)
    leading = eigenvectors[:, -1]

    s = np.where(leading >= 0, 1.0, -1.0)
    delta_q = float(s @ B @ s) / (4.0 * m)

    return delta_q, s

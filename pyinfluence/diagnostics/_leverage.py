"""
Hat matrix and leverage from the cached QR factorisation.

With X = QR (reduced, Q is n x p), the hat matrix is H = QQ' and the
leverage of observation i is h_ii = sum_k Q_ik². X(X'X)⁻¹X' is never formed.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.compute.tolerances import LEVERAGE_SLACK

if TYPE_CHECKING:
    from pyinfluence.regression.solution import LinearSolution

logger = logging.getLogger(__name__)


def _leading_q(solution: 'LinearSolution') -> NDArray[np.floating[Any]]:
    return solution.qr.Q[:, :solution.p]


def hat_matrix(solution: 'LinearSolution') -> NDArray[np.floating[Any]]:
    """Projection onto the column space of X, H = QQ' (n x n)."""
    Q = _leading_q(solution)
    logger.debug("hat_matrix: forming %d x %d projection", Q.shape[0], Q.shape[0])
    return Q @ Q.T


def leverage(solution: 'LinearSolution') -> NDArray[np.floating[Any]]:
    """
    Diagonal of the hat matrix, h_ii.

    Each value lies in [0, 1] and the values sum to p. Round-off that
    pushes a value past 1 by more than LEVERAGE_SLACK is reported with a
    RuntimeWarning; values are then clipped to [0, 1].
    """
    Q = _leading_q(solution)
    h = np.einsum('ij,ij->i', Q, Q)

    excess = h > 1.0 + LEVERAGE_SLACK
    if np.any(excess):
        warnings.warn(
            f"Leverage exceeds 1 at observations {np.flatnonzero(excess).tolist()}; "
            f"the factorisation lost accuracy (max h={h.max():.6g}).",
            RuntimeWarning,
            stacklevel=2,
        )
    return np.clip(h, 0.0, 1.0)


def high_leverage_threshold(solution: 'LinearSolution') -> float:
    """Conventional high-leverage cut-off 2p/n. Callers compare against it."""
    return 2.0 * solution.p / solution.n


def one_minus_leverage(h: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    1 - h, warning when some observation sits exactly on the fit (h = 1).

    Statistics divided by 1 - h are inf or NaN at those observations.
    """
    complement = 1.0 - h
    pinned = complement <= LEVERAGE_SLACK
    if np.any(pinned):
        warnings.warn(
            f"Observations {np.flatnonzero(pinned).tolist()} have leverage 1; "
            f"their leverage-scaled statistics are not finite.",
            RuntimeWarning,
            stacklevel=3,
        )
    return complement

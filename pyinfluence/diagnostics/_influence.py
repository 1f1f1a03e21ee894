"""
Influence measures: Cook's distance, DFFITS, DFBETA, DFBETAS.

Cook's distance is closed-form. DFFITS and DFBETA are computed from the
brute-force leave-one-out refits in _loo.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.validation import check_residual_capacity
from pyinfluence.diagnostics._leverage import leverage as _leverage, one_minus_leverage
from pyinfluence.diagnostics._loo import LeaveOneOut, leave_one_out

if TYPE_CHECKING:
    from pyinfluence.regression.solution import LinearSolution

# |DFFITS| above this conventionally flags an influential observation.
DFFITS_THRESHOLD = 1.0


def cooks_distance(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Cook's distance D_i = e_i² / (p · MSE) · h_ii / (1 - h_ii)².

    Every D_i depends only on (e_i, h_ii) and shared scalars, so the whole
    vector is one elementwise evaluation.

    Raises:
        InsufficientDataError: If the fit has no residual degrees of freedom
    """
    check_residual_capacity(solution.n, solution.p, 'cooks_distance')
    if h is None:
        h = _leverage(solution)
    e = solution.residuals
    with np.errstate(divide='ignore', invalid='ignore'):
        return (e ** 2 / (solution.p * solution.mean_squared_error)) * (h / one_minus_leverage(h) ** 2)


def dffits(
    solution: 'LinearSolution',
    loo: LeaveOneOut | None = None,
    h: NDArray[np.floating[Any]] | None = None,
    *,
    n_jobs: int = 1,
) -> NDArray[np.floating[Any]]:
    """
    DFFITS_i = (ŷ_i - x_i'β₍ᵢ₎) / √(MSE₍ᵢ₎ · h_ii).

    Args:
        solution: Fitted regression
        loo: Precomputed leave-one-out refits; run here if omitted
        h: Precomputed leverage
        n_jobs: Worker threads for the refits when loo is omitted

    Raises:
        InsufficientDataError: If n <= p + 1
    """
    if loo is None:
        loo = leave_one_out(solution, n_jobs=n_jobs)
    if h is None:
        h = _leverage(solution)
    with np.errstate(divide='ignore', invalid='ignore'):
        return (solution.fitted_values - loo.fitted) / np.sqrt(loo.mean_squared_error * h)


def dfbeta(
    solution: 'LinearSolution',
    loo: LeaveOneOut | None = None,
    *,
    n_jobs: int = 1,
) -> NDArray[np.floating[Any]]:
    """
    DFBETA (n x p): row i is β - β₍ᵢ₎, the coefficient shift when
    observation i is dropped.

    Raises:
        InsufficientDataError: If n <= p + 1
    """
    if loo is None:
        loo = leave_one_out(solution, n_jobs=n_jobs)
    return solution.coefficients[np.newaxis, :] - loo.coefficients


def dfbetas(
    solution: 'LinearSolution',
    loo: LeaveOneOut | None = None,
    *,
    n_jobs: int = 1,
) -> NDArray[np.floating[Any]]:
    """
    DFBETAS (n x p): DFBETA scaled by s₍ᵢ₎ √((X'X)⁻¹_jj), matching R's dfbetas.

    Raises:
        InsufficientDataError: If n <= p + 1
        SingularMatrixError: If R is not invertible
    """
    if loo is None:
        loo = leave_one_out(solution, n_jobs=n_jobs)
    scale = np.sqrt(np.diag(solution.unscaled_covariance))
    s_loo = np.sqrt(loo.mean_squared_error)
    with np.errstate(divide='ignore', invalid='ignore'):
        return dfbeta(solution, loo) / np.outer(s_loo, scale)

"""
Coefficient covariance and variance inflation factors.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pyinfluence.regression.model import OLS
    from pyinfluence.regression.solution import LinearSolution

logger = logging.getLogger(__name__)


def unscaled_covariance(solution: 'LinearSolution') -> NDArray[np.floating[Any]]:
    """
    (X'X)⁻¹ = R⁻¹(R⁻¹)', symmetric.

    Raises:
        SingularMatrixError: If R is not invertible
    """
    return solution.unscaled_covariance.copy()


def variance_covariance_matrix(solution: 'LinearSolution') -> NDArray[np.floating[Any]]:
    """
    Estimated covariance of the coefficients, MSE · (X'X)⁻¹ (R's vcov).

    Raises:
        SingularMatrixError: If R is not invertible
    """
    return solution.mean_squared_error * solution.unscaled_covariance


def variance_inflation_factors(model: 'OLS') -> NDArray[np.floating[Any]]:
    """
    VIF_j = 1 / (1 - R²_j) for each predictor column of the current fit.

    R²_j comes from refitting the model with column j as the response and
    the remaining predictors (plus the intercept, if modelled) as the
    design. Without an intercept R²_j is taken against the uncentred
    sum of squares x_j'x_j, which keeps it in [0, 1]. The p refits run one after another inside model.checkout(),
    so the container and the original fit are restored afterwards, on the
    error path as well.

    Returns:
        One value per predictor column, in design order (no entry for the
        intercept)
    """
    solution = model.solution
    columns = solution.design.columns
    source = model.source
    excluded = tuple(j for j in range(source.n_columns) if j not in columns)

    vifs = np.empty(len(columns), dtype=np.float64)
    with model.checkout():
        for k, j in enumerate(columns):
            if len(columns) == 1 and not model.intercept:
                # nothing left to regress on
                vifs[k] = 1.0
                continue
            target = source.column(j)
            aux = model.fit(target, exclude=excluded + (j,))
            if model.intercept:
                r2 = aux.r_squared
            else:
                # through-origin fit: R² against the uncentred sum of squares
                r2 = 1.0 - aux.rss / float(target @ target)
            logger.debug("vif: column %d auxiliary R²=%.6g", j, r2)
            vifs[k] = np.inf if r2 >= 1.0 else 1.0 / (1.0 - r2)

    if np.any(np.isinf(vifs)):
        names = [solution.names[int(model.intercept) + k]
                 for k in np.flatnonzero(np.isinf(vifs))]
        warnings.warn(
            f"Predictors {names} are exact linear combinations of the others; "
            f"their VIF is infinite.",
            RuntimeWarning,
            stacklevel=2,
        )
    return vifs

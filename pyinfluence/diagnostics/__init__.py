"""
Regression diagnostics.

Quantities derived from a fitted OLS regression: leverage, scaled
residuals, PRESS, coefficient covariance, VIF, and leave-one-out
influence (Cook's distance, DFFITS, DFBETA).

Usage:
    from pyinfluence.diagnostics import influence, leverage

    solution = fit(X, y)
    h = leverage(solution)
    report = influence(solution)
    print(report.summary())

The functions take a LinearSolution. The OLS model wraps them with
caching; see pyinfluence.regression.OLS.
"""

from pyinfluence.diagnostics._leverage import (
    hat_matrix,
    leverage,
    high_leverage_threshold,
)
from pyinfluence.diagnostics._residuals import (
    studentized_residuals,
    externally_studentized_residuals,
    press,
    press_statistic,
    predicted_r_squared,
)
from pyinfluence.diagnostics._collinearity import (
    unscaled_covariance,
    variance_covariance_matrix,
    variance_inflation_factors,
)
from pyinfluence.diagnostics._loo import LeaveOneOut, leave_one_out
from pyinfluence.diagnostics._influence import (
    DFFITS_THRESHOLD,
    cooks_distance,
    dffits,
    dfbeta,
    dfbetas,
)
from pyinfluence.diagnostics.solution import InfluenceParams, InfluenceSolution
from pyinfluence.diagnostics.solvers import influence

__all__ = [
    # Leverage
    "hat_matrix",
    "leverage",
    "high_leverage_threshold",
    # Residuals
    "studentized_residuals",
    "externally_studentized_residuals",
    "press",
    "press_statistic",
    "predicted_r_squared",
    # Collinearity
    "unscaled_covariance",
    "variance_covariance_matrix",
    "variance_inflation_factors",
    # Leave-one-out influence
    "LeaveOneOut",
    "leave_one_out",
    "DFFITS_THRESHOLD",
    "cooks_distance",
    "dffits",
    "dfbeta",
    "dfbetas",
    # Suite
    "InfluenceParams",
    "InfluenceSolution",
    "influence",
]

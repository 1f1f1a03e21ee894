"""
Scaled residuals and the PRESS family.

All of these are closed-form in the residuals and the leverage; none of
them refit the model.

    internal studentized   t_i  = e_i / (s √(1 - h_ii)),        s² = RSS/(n-p)
    external studentized   t*_i = e_i / (s₍ᵢ₎ √(1 - h_ii))
                           s₍ᵢ₎² = ((n-p)s² - e_i²/(1 - h_ii)) / (n-p-1)
    PRESS residual         e_i / (1 - h_ii)
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.validation import (
    check_residual_capacity,
    check_leave_one_out_capacity,
)
from pyinfluence.diagnostics._leverage import leverage as _leverage, one_minus_leverage

if TYPE_CHECKING:
    from pyinfluence.regression.solution import LinearSolution


def _resolve_leverage(solution, h):
    return _leverage(solution) if h is None else h


def studentized_residuals(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Internally studentized residuals (R's rstandard).

    Args:
        solution: Fitted regression
        h: Precomputed leverage; computed from the QR factor if omitted

    Raises:
        InsufficientDataError: If the fit has no residual degrees of freedom
    """
    check_residual_capacity(solution.n, solution.p, 'studentized_residuals')
    h = _resolve_leverage(solution, h)
    sigma = solution.residual_std_error
    with np.errstate(divide='ignore', invalid='ignore'):
        return solution.residuals / (sigma * np.sqrt(one_minus_leverage(h)))


def leave_one_out_sigma(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    s₍ᵢ₎, the residual standard error of the fit without observation i.

    Closed form; agrees with the brute-force refits up to round-off.

    Raises:
        InsufficientDataError: If n <= p + 1
    """
    n, p = solution.n, solution.p
    check_leave_one_out_capacity(n, p, 'leave_one_out_sigma')
    h = _resolve_leverage(solution, h)
    e = solution.residuals
    with np.errstate(divide='ignore', invalid='ignore'):
        s2 = (solution.rss - e ** 2 / one_minus_leverage(h)) / (n - p - 1)
    # round-off can leave tiny negatives when an observation carries all the RSS
    return np.sqrt(np.maximum(s2, 0.0))


def externally_studentized_residuals(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Externally studentized residuals (R's rstudent).

    Raises:
        InsufficientDataError: If n <= p + 1
    """
    h = _resolve_leverage(solution, h)
    s_loo = leave_one_out_sigma(solution, h)
    with np.errstate(divide='ignore', invalid='ignore'):
        return solution.residuals / (s_loo * np.sqrt(1.0 - h))


def press(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    PRESS residuals e_i / (1 - h_ii).

    Equal to y_i minus the prediction of a fit that excluded observation i,
    without performing that fit.
    """
    h = _resolve_leverage(solution, h)
    with np.errstate(divide='ignore', invalid='ignore'):
        return solution.residuals / one_minus_leverage(h)


def press_statistic(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> float:
    """Sum of squared PRESS residuals."""
    return float(np.sum(press(solution, h) ** 2))


def predicted_r_squared(
    solution: 'LinearSolution',
    h: NDArray[np.floating[Any]] | None = None,
) -> float:
    """
    1 - PRESS / TSS.

    NaN when the response is constant (TSS = 0).
    """
    if solution.tss == 0:
        return float('nan')
    return 1.0 - press_statistic(solution, h) / solution.tss

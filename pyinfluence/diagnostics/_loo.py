"""
Brute-force leave-one-out refits.

Refit i drops observation i from a private copy of the design and solves
the reduced problem from scratch. Nothing is shared between refits except
read-only access to the full design, so they fan out over a thread pool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.compute.parallel import fan_out
from pyinfluence.core.validation import check_leave_one_out_capacity
from pyinfluence.regression.backends.cpu import CPUQRBackend

if TYPE_CHECKING:
    from pyinfluence.regression.solution import LinearSolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveOneOut:
    """
    Outcome of the n leave-one-out refits, indexed by the dropped observation.

    Attributes:
        coefficients: (n, p), row i is β₍ᵢ₎
        fitted: (n,), x_i'β₍ᵢ₎, the prediction for the dropped observation
        mean_squared_error: (n,), RSS₍ᵢ₎ / (n - 1 - p)
    """
    coefficients: NDArray[np.floating[Any]]
    fitted: NDArray[np.floating[Any]]
    mean_squared_error: NDArray[np.floating[Any]]


def leave_one_out(solution: 'LinearSolution', *, n_jobs: int = 1) -> LeaveOneOut:
    """
    Run the n leave-one-out refits of a fitted regression.

    Args:
        solution: Fitted regression
        n_jobs: Worker threads (1 = sequential, -1 = all cores)

    Raises:
        InsufficientDataError: If n <= p + 1 (checked before any refit)
        RankDeficiencyError: If some reduced design is rank-deficient
            (lowest failing observation reported)
    """
    design = solution.design
    n, p = design.n, design.p
    check_leave_one_out_capacity(n, p, 'leave_one_out')

    backend = CPUQRBackend()

    def refit(i: int) -> tuple[NDArray[np.floating[Any]], float]:
        params = backend.solve(design.without_row(i)).params
        return params.coefficients, params.rss / params.df_residual

    logger.debug("leave_one_out: %d refits of %d parameters (n_jobs=%d)", n, p, n_jobs)
    outcomes = fan_out(refit, n, n_jobs=n_jobs, label='observation')

    betas = np.vstack([beta for beta, _ in outcomes])
    mse = np.array([m for _, m in outcomes])
    fitted = np.einsum('ij,ij->i', design.X, betas)

    return LeaveOneOut(coefficients=betas, fitted=fitted, mean_squared_error=mse)

"""
Solver dispatch for influence diagnostics.

influence() computes the whole per-observation suite for one fit.
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

import numpy as np

from pyinfluence.core.result import Result
from pyinfluence.core.compute.timing import Timer
from pyinfluence.core.compute.tolerances import LEVERAGE_SLACK
from pyinfluence.regression.solution import LinearSolution
from pyinfluence.diagnostics._leverage import leverage
from pyinfluence.diagnostics._residuals import (
    studentized_residuals,
    externally_studentized_residuals,
    press,
)
from pyinfluence.diagnostics._loo import leave_one_out
from pyinfluence.diagnostics._influence import cooks_distance, dffits, dfbeta, dfbetas
from pyinfluence.diagnostics.solution import InfluenceParams, InfluenceSolution

if TYPE_CHECKING:
    from pyinfluence.regression.model import OLS

logger = logging.getLogger(__name__)


def influence(
    target: 'OLS | LinearSolution',
    *,
    n_jobs: int | None = None,
) -> InfluenceSolution:
    """
    Compute leverage, Cook's distance, studentized residuals, PRESS,
    DFFITS, DFBETA and DFBETAS for a fitted regression.

    Args:
        target: A fitted OLS model (its cached leverage and leave-one-out
            refits are reused) or a LinearSolution from fit()
        n_jobs: Worker threads for the leave-one-out refits. Defaults to
            the model's n_jobs, or 1 for a LinearSolution.

    Returns:
        InfluenceSolution

    Raises:
        ValidationError: If target is an unfitted model
        InsufficientDataError: If n <= p + 1
        RankDeficiencyError: If a leave-one-out design is rank-deficient

    Example:
        >>> from pyinfluence import DataSource, OLS, influence
        >>> model = OLS(DataSource.from_arrays(X))
        >>> model.fit(y)
        >>> report = influence(model)
        >>> print(report.summary())
    """
    timer = Timer()
    timer.start()

    if isinstance(target, LinearSolution):
        solution = target
        jobs = 1 if n_jobs is None else n_jobs
        with timer.section('leverage'):
            h = leverage(solution)
        with timer.section('leave_one_out'):
            loo = leave_one_out(solution, n_jobs=jobs)
    else:
        solution = target.solution
        jobs = target.n_jobs if n_jobs is None else n_jobs
        with timer.section('leverage'):
            h = target.leverage()
        with timer.section('leave_one_out'):
            loo = target.leave_one_out(n_jobs=jobs)

    with timer.section('residuals'):
        student = studentized_residuals(solution, h)
        rstudent = externally_studentized_residuals(solution, h)
        press_residuals = press(solution, h)

    with timer.section('influence'):
        params = InfluenceParams(
            leverage=h,
            cooks_distance=cooks_distance(solution, h),
            studentized_residuals=student,
            externally_studentized_residuals=rstudent,
            press=press_residuals,
            dffits=dffits(solution, loo, h),
            dfbeta=dfbeta(solution, loo),
            dfbetas=dfbetas(solution, loo),
        )

    timer.stop()

    warnings: list[str] = []
    pinned = np.flatnonzero(h >= 1.0 - LEVERAGE_SLACK)
    if pinned.size:
        warnings.append(
            f"observations {pinned.tolist()} have leverage 1; their scaled statistics are not finite"
        )

    info: dict[str, Any] = {
        'method': 'qr_leave_one_out',
        'n_refits': solution.n,
        'n_jobs': jobs,
    }
    logger.debug("influence: n=%d p=%d in %.4fs", solution.n, solution.p,
                 timer.result()['total_seconds'])

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name='cpu_qr',
        warnings=tuple(warnings),
    )
    return InfluenceSolution(_result=result, _fit=solution)

"""
Least squares on the CPU through a reduced QR factorisation.

Q and R are stored on the returned LinearParams; leverage, the hat
matrix and (X'X)⁻¹ are all later read off them without refactoring.
"""

import logging
from typing import Any
import numpy as np

from pyinfluence.core.result import Result
from pyinfluence.core.compute.timing import Timer
from pyinfluence.core.compute.linalg.qr import qr_cpu, qr_solve_cpu
from pyinfluence.regression.design import Design
from pyinfluence.regression.solution import LinearParams

logger = logging.getLogger(__name__)


class CPUQRBackend:
    """Design in, Result[LinearParams] out."""

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Factor X = QR, refuse a deficient R diagonal, back-substitute
        R β = Q'y, then form ŷ, e, RSS and TSS.

        Raises:
            RankDeficiencyError: If X is rank-deficient
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n = design.n

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X, mode='reduced')

        with timer.section('solve'):
            coefficients = qr_solve_cpu(qr_result, y)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            centred = y - y.mean()
            tss = float(centred @ centred)

        timer.stop()
        logger.debug("cpu_qr: n=%d p=%d rank=%d rss=%.6g", n, design.p, qr_result.rank, rss)

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=n - qr_result.rank,
            qr=qr_result,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'intercept': design.intercept,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )

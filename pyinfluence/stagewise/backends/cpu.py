"""
CPU backend for forward-stagewise fitting.

Each round moves the coefficient of the predictor most correlated with
the current residual by epsilon in the direction of that correlation.
"""

import logging
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.result import Result
from pyinfluence.core.compute.timing import Timer
from pyinfluence.core.exceptions import NonConvergenceError
from pyinfluence.stagewise.design import StagewiseDesign
from pyinfluence.stagewise.solution import StagewiseParams, StagewiseState

logger = logging.getLogger(__name__)


def residual_correlations(
    X: NDArray[np.floating[Any]],
    column_norms: NDArray[np.floating[Any]],
    residual: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Pearson correlation of each column of X with the residual.

    X must be column-centred. A zero-norm column or residual has
    correlation 0.
    """
    centred = residual - residual.mean()
    r_norm = np.sqrt(centred @ centred)
    denom = column_norms * r_norm
    cov = X.T @ centred
    return np.divide(cov, denom, out=np.zeros_like(cov), where=denom > 0)


def most_correlated(correlations: NDArray[np.floating[Any]]) -> tuple[int, float]:
    """
    Index and value of the largest |correlation|.

    Linear scan; on ties the lowest index wins.
    """
    best_index = 0
    best_value = -1.0
    for j, c in enumerate(np.abs(correlations)):
        if c > best_value:
            best_index, best_value = j, float(c)
    return best_index, best_value


class CPUStagewiseBackend:
    """Implements StagewiseDesign -> Result[StagewiseParams]."""

    @property
    def name(self) -> str:
        return 'cpu_stagewise'

    def solve(self, design: StagewiseDesign) -> Result[StagewiseParams]:
        """
        Run forward-stagewise rounds until every |correlation| < delta.

        Raises:
            NonConvergenceError: If max_rounds rounds pass without stopping
        """
        timer = Timer()
        timer.start()

        X = design.X
        n, p = X.shape
        eps = design.epsilon

        with timer.section('setup'):
            intercept = float(np.mean(design.y))
            residual = design.y - intercept
            column_norms = np.sqrt(np.einsum('ij,ij->j', X, X))
            beta = np.zeros(p)
            path = [beta.copy()]

        state = StagewiseState.RUNNING
        rounds = 0
        with timer.section('rounds'):
            while state is StagewiseState.RUNNING:
                corr = residual_correlations(X, column_norms, residual)
                j, best = most_correlated(corr) if p > 0 else (0, 0.0)
                if best < design.delta:
                    state = StagewiseState.STOPPED
                    break
                if rounds >= design.max_rounds:
                    raise NonConvergenceError(
                        f"forward stagewise did not stop within {design.max_rounds} rounds: "
                        f"max |correlation| is still {best:.6g} (threshold {design.delta:g}). "
                        f"Try a smaller epsilon (now {eps:g}).",
                        iterations=rounds,
                        final_change=best,
                        reason='max_rounds',
                        threshold=design.delta,
                    )
                step = eps * np.sign(corr[j])
                beta[j] += step
                residual -= step * X[:, j]
                rounds += 1
                path.append(beta.copy())

        timer.stop()
        logger.debug("stagewise: stopped after %d rounds, max |corr|=%.6g, %d active",
                     rounds, best, int(np.count_nonzero(beta)))

        params = StagewiseParams(
            coefficients=beta,
            intercept=intercept,
            residuals=residual,
            path=np.vstack(path),
            n_rounds=rounds,
            max_correlation=best,
            state=state,
        )
        info: dict[str, Any] = {
            'method': 'forward_stagewise',
            'rounds': rounds,
            'epsilon': eps,
            'delta': design.delta,
            'max_rounds': design.max_rounds,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )

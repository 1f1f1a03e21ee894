"""
Forward-stagewise solution types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinfluence.core.result import Result
from pyinfluence.core.exceptions import DimensionError
from pyinfluence.core.validation import check_array, check_finite


class StagewiseState(Enum):
    """Run state. A run starts RUNNING and ends STOPPED (or raises)."""
    RUNNING = 'running'
    STOPPED = 'stopped'


@dataclass(frozen=True)
class StagewiseParams:
    """
    Parameter payload for a forward-stagewise run.

    Coefficients are on the standardised predictor scale.
    """
    coefficients: NDArray[np.floating[Any]]
    intercept: float
    residuals: NDArray[np.floating[Any]]
    path: NDArray[np.floating[Any]]
    n_rounds: int
    max_correlation: float
    state: StagewiseState


@dataclass
class StagewiseSolution:
    """User-facing forward-stagewise results."""
    _result: Result[StagewiseParams]
    _names: tuple[str, ...]

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def intercept(self) -> float:
        """Mean of the response."""
        return self._result.params.intercept

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def path(self) -> NDArray[np.floating[Any]]:
        """Coefficient history, (n_rounds + 1) x p; row 0 is all zeros."""
        return self._result.params.path

    @property
    def n_rounds(self) -> int:
        return self._result.params.n_rounds

    @property
    def max_correlation(self) -> float:
        """Largest |correlation| between a predictor and the final residual."""
        return self._result.params.max_correlation

    @property
    def state(self) -> StagewiseState:
        return self._result.params.state

    @property
    def active(self) -> NDArray[np.intp]:
        """Indices of predictors with a nonzero coefficient."""
        return np.flatnonzero(self.coefficients)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    def predict(self, X_std: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Predict from predictors already on the standardised scale.

        Raises:
            DimensionError: If the column count does not match
        """
        X_arr = check_array(X_std, 'X_std')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(1, -1)
        check_finite(X_arr, 'X_std')
        p = self.coefficients.shape[0]
        if X_arr.shape[1] != p:
            raise DimensionError(f"X_std: expected {p} columns, got {X_arr.shape[1]}")
        return self.intercept + X_arr @ self.coefficients

    def summary(self) -> str:
        lines = [
            "Forward-Stagewise Results",
            "=" * 50,
            f"State: {self.state.value}",
            f"Rounds: {self.n_rounds}",
            f"Step size: {self.info.get('epsilon')}",
            f"Correlation threshold: {self.info.get('delta')}",
            f"Final max |correlation|: {self.max_correlation:.6f}",
            f"Intercept: {self.intercept:.6f}",
            "",
            "Coefficients (standardised scale):",
            "-" * 50,
        ]
        for name, coef in zip(self._names, self.coefficients):
            lines.append(f"{name[:20]:<20} {coef:14.6f}")
        lines.append("-" * 50)
        lines.append(f"Active predictors: {len(self.active)} of {len(self.coefficients)}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"StagewiseSolution(p={len(self.coefficients)}, rounds={self.n_rounds}, "
            f"active={len(self.active)}, state={self.state.value})"
        )

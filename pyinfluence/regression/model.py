"""
Stateful OLS model over a DataSource.

OLS owns a reference to a DataSource, fits a response against its
columns, and caches what diagnostics reuse within one fit session:
the hat matrix, the leverage vector and the leave-one-out refits.
Refitting clears every cache.

Usage:
    from pyinfluence import DataSource, OLS

    model = OLS(DataSource.from_arrays(X, columns=['air', 'temp', 'acid']))
    model.fit(y)
    model.leverage()
    model.cooks_distance()
    model.variance_inflation_factors()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinfluence.core.datasource import DataSource, ColumnKey
from pyinfluence.core.exceptions import ValidationError
from pyinfluence.core.compute.parallel import check_n_jobs
from pyinfluence.regression.design import Design
from pyinfluence.regression.solution import LinearSolution
from pyinfluence.regression.solvers import fit as _fit_design
from pyinfluence.diagnostics import _leverage, _residuals, _collinearity, _influence
from pyinfluence.diagnostics._loo import LeaveOneOut, leave_one_out

logger = logging.getLogger(__name__)


class OLS:
    """
    Ordinary least squares model bound to a DataSource.

    Args:
        source: Predictor table. Held by reference: VIF refits check it
            out and restore it.
        intercept: Prepend a column of ones named 'Intercept' (counted in p)
        n_jobs: Worker threads for leave-one-out refits (1 = sequential,
            -1 = all cores)
    """

    def __init__(self, source: DataSource, *, intercept: bool = True, n_jobs: int = 1):
        if not isinstance(source, DataSource):
            raise ValidationError(
                f"source: expected DataSource, got {type(source).__name__}"
            )
        check_n_jobs(n_jobs)
        self._source = source
        self._intercept = intercept
        self._n_jobs = n_jobs
        self._solution: LinearSolution | None = None
        self._clear_caches()

    def _clear_caches(self) -> None:
        self._hat: NDArray[np.floating[Any]] | None = None
        self._leverage: NDArray[np.floating[Any]] | None = None
        self._loo: LeaveOneOut | None = None

    # === Fitting ===

    def fit(
        self,
        y: ArrayLike | str,
        *,
        exclude: Sequence[ColumnKey] = (),
    ) -> LinearSolution:
        """
        Fit y on the container columns.

        Args:
            y: Response of length n, or the label of a container column
                (which is then left out of the design)
            exclude: Container columns to leave out of the design

        Returns:
            LinearSolution

        Raises:
            DimensionError: If len(y) != n or the design has more columns than rows
            RankDeficiencyError: If the design is rank-deficient
        """
        # a failed refit must not leave the previous session's caches behind
        self._solution = None
        self._clear_caches()

        design = Design.from_datasource(
            self._source, y, intercept=self._intercept, exclude=exclude,
        )
        self._solution = _fit_design(design)
        logger.debug("OLS.fit: n=%d p=%d rss=%.6g",
                     design.n, design.p, self._solution.rss)
        return self._solution

    @contextmanager
    def checkout(self) -> Iterator[OLS]:
        """
        Scoped checkout of the container and the fit state.

        Everything (container contents, fitted solution, caches) is put
        back on exit, including when the block raises.
        """
        state = (self._solution, self._hat, self._leverage, self._loo)
        try:
            with self._source.checkout():
                yield self
        finally:
            self._solution, self._hat, self._leverage, self._loo = state

    # === Accessors ===

    @property
    def source(self) -> DataSource:
        return self._source

    @property
    def intercept(self) -> bool:
        return self._intercept

    @property
    def n_jobs(self) -> int:
        return self._n_jobs

    @property
    def is_fitted(self) -> bool:
        return self._solution is not None

    @property
    def solution(self) -> LinearSolution:
        """
        Current fit.

        Raises:
            ValidationError: If fit() has not succeeded yet
        """
        if self._solution is None:
            raise ValidationError("OLS: model is not fitted; call fit(y) first")
        return self._solution

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self.solution.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self.solution.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self.solution.fitted_values

    @property
    def n_observations(self) -> int:
        return self._source.n_observations

    @property
    def n_parameters(self) -> int:
        """p, the number of design columns of the current fit."""
        return self.solution.p

    def mean_squared_error(self) -> float:
        """RSS / (n - p)."""
        return self.solution.mean_squared_error

    def r_squared(self) -> float:
        return self.solution.r_squared

    # === Leverage ===

    def hat_matrix(self) -> NDArray[np.floating[Any]]:
        """H = QQ' (n x n), cached for the fit session."""
        if self._hat is None:
            self._hat = _leverage.hat_matrix(self.solution)
        return self._hat

    def leverage(self) -> NDArray[np.floating[Any]]:
        """Hat-matrix diagonal, cached for the fit session."""
        if self._leverage is None:
            self._leverage = _leverage.leverage(self.solution)
        return self._leverage

    def high_leverage_threshold(self) -> float:
        """2p/n."""
        return _leverage.high_leverage_threshold(self.solution)

    # === Residual diagnostics ===

    def studentized_residuals(self) -> NDArray[np.floating[Any]]:
        return _residuals.studentized_residuals(self.solution, self.leverage())

    def externally_studentized_residuals(self) -> NDArray[np.floating[Any]]:
        return _residuals.externally_studentized_residuals(self.solution, self.leverage())

    def press(self) -> NDArray[np.floating[Any]]:
        """PRESS residuals e_i / (1 - h_ii); no refits."""
        return _residuals.press(self.solution, self.leverage())

    def press_statistic(self) -> float:
        return _residuals.press_statistic(self.solution, self.leverage())

    def predicted_r_squared(self) -> float:
        return _residuals.predicted_r_squared(self.solution, self.leverage())

    # === Collinearity ===

    def unscaled_covariance(self) -> NDArray[np.floating[Any]]:
        """(X'X)⁻¹ from the cached R factor."""
        return _collinearity.unscaled_covariance(self.solution)

    def variance_covariance_matrix(self) -> NDArray[np.floating[Any]]:
        """MSE · (X'X)⁻¹."""
        return _collinearity.variance_covariance_matrix(self.solution)

    def variance_inflation_factors(self) -> NDArray[np.floating[Any]]:
        """One VIF per predictor column (no entry for the intercept)."""
        return _collinearity.variance_inflation_factors(self)

    # === Influence ===

    def cooks_distance(self) -> NDArray[np.floating[Any]]:
        return _influence.cooks_distance(self.solution, self.leverage())

    def leave_one_out(self, *, n_jobs: int | None = None) -> LeaveOneOut:
        """
        The n leave-one-out refits, run once per fit session and shared by
        dffits(), dfbeta() and dfbetas().

        Raises:
            InsufficientDataError: If n <= p + 1
            RankDeficiencyError: If a reduced design is rank-deficient
        """
        if self._loo is None:
            jobs = self._n_jobs if n_jobs is None else n_jobs
            self._loo = leave_one_out(self.solution, n_jobs=jobs)
        return self._loo

    def dffits(self) -> NDArray[np.floating[Any]]:
        return _influence.dffits(self.solution, self.leave_one_out(), self.leverage())

    def dfbeta(self) -> NDArray[np.floating[Any]]:
        """(n, p) matrix, row i is β - β₍ᵢ₎."""
        return _influence.dfbeta(self.solution, self.leave_one_out())

    def dfbetas(self) -> NDArray[np.floating[Any]]:
        return _influence.dfbetas(self.solution, self.leave_one_out())

    def __repr__(self) -> str:
        n, k = self._source.dimensions()
        state = f"p={self._solution.p}" if self._solution is not None else "unfitted"
        return f"OLS(n={n}, columns={k}, intercept={self._intercept}, {state})"

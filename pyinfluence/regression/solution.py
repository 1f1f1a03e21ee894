"""
What a regression fit returns.

LinearParams is the frozen payload a backend fills in; LinearSolution
wraps it with derived statistics (MSE, standard errors, R²) and
predict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from pyinfluence.core.result import Result
from pyinfluence.core.compute.linalg.qr import QRResult, unscaled_covariance_cpu
from pyinfluence.core.exceptions import DimensionError
from pyinfluence.core.validation import check_array, check_finite

if TYPE_CHECKING:
    from pyinfluence.regression.design import Design


@dataclass(frozen=True)
class LinearParams:
    """Fit output of a backend, QR factors included."""
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int
    qr: QRResult


@dataclass
class LinearSolution:
    """
    A fitted least-squares model.

    Holds the backend Result and the Design it was computed from.
    (X'X)⁻¹ is derived from R on first use and cached.
    """
    _result: Result[LinearParams]
    _design: 'Design'

    _unscaled_cov: NDArray[np.floating[Any]] | None = field(default=None, repr=False)

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        """Residual sum of squares."""
        return self._result.params.rss

    @property
    def tss(self) -> float:
        """Total sum of squares about the mean of y."""
        return self._result.params.tss

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        p = self._result.params.rank
        if n - p <= 0 or self.tss == 0:
            return self.r_squared
        offset = 1 if self._design.intercept else 0
        return 1.0 - (1.0 - self.r_squared) * (n - offset) / (n - p)

    @property
    def mean_squared_error(self) -> float:
        """RSS / (n - p); NaN when there are no residual degrees of freedom."""
        df = self._result.params.df_residual
        if df <= 0:
            return float('nan')
        return self.rss / df

    @property
    def residual_std_error(self) -> float:
        return float(np.sqrt(self.mean_squared_error))

    @property
    def unscaled_covariance(self) -> NDArray[np.floating[Any]]:
        """(X'X)⁻¹ computed from the cached R factor."""
        if self._unscaled_cov is None:
            self._unscaled_cov = unscaled_covariance_cpu(self.qr)
        return self._unscaled_cov

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """sqrt of the diagonal of MSE · (X'X)⁻¹."""
        return np.sqrt(self.mean_squared_error * np.diag(self.unscaled_covariance))

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.coefficients / self.standard_errors

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t with df_residual degrees of freedom."""
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n(self) -> int:
        return self._design.n

    @property
    def p(self) -> int:
        return self._design.p

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def qr(self) -> QRResult:
        return self._result.params.qr

    @property
    def design(self) -> 'Design':
        return self._design

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def predict(self, X_new: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Predict the response for new predictor rows.

        Args:
            X_new: (m, k) predictors in the same column order as the fit,
                WITHOUT the intercept column (it is added automatically)

        Returns:
            Predicted values (m,)
        """
        X_arr = check_array(X_new, 'X_new')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(1, -1)
        check_finite(X_arr, 'X_new')
        if self._design.intercept:
            X_arr = np.column_stack([np.ones(X_arr.shape[0]), X_arr])
        if X_arr.shape[1] != self.p:
            raise DimensionError(
                f"X_new: expected {self.p - int(self._design.intercept)} predictor "
                f"columns, got {X_arr.shape[1] - int(self._design.intercept)}"
            )
        return X_arr @ self.coefficients

    def summary(self) -> str:
        """Coefficient table in the layout of R's summary.lm."""
        lines = [
            "Linear Regression Results",
            "=" * 72,
            f"Observations: {self.n}",
            f"Parameters: {self.p}",
            f"Rank: {self.rank}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'':<14} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 72,
        ]

        for name, coef, se, t, pv in zip(
            self.names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values
        ):
            lines.append(f"{name[:14]:<14} {coef:14.6f} {se:12.6f} {t:10.3f} {pv:12.4g}")

        lines.append("-" * 72)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n}, p={self.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )

"""
Functional entry point for least-squares fits.

fit() turns arrays (or a prepared Design) into a LinearSolution; OLS
uses the same backend through Design.from_datasource.
"""

from typing import Literal
from numpy.typing import ArrayLike

from pyinfluence.regression.design import Design
from pyinfluence.regression.solution import LinearSolution
from pyinfluence.regression.backends.cpu import CPUQRBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    X: ArrayLike | Design,
    y: ArrayLike | None = None,
    *,
    intercept: bool = True,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Least-squares estimate of β in y = Xβ + e.

    Args:
        X: (n, k) predictors without an intercept column, or a Design
            (y and intercept are then taken from it)
        y: (n,) response; mandatory when X is an array
        intercept: Add a leading column of ones
        backend: 'auto', 'cpu' and 'cpu_qr' all select the QR backend

    Raises:
        ValidationError: Non-numeric or non-finite input
        DimensionError: Row counts disagree, or k + intercept > n
        RankDeficiencyError: Collinear columns

    Example:
        >>> rng = np.random.default_rng(0)
        >>> X = rng.standard_normal((50, 2))
        >>> sol = fit(X, 1 + X @ [2.0, -1.0] + rng.standard_normal(50))
        >>> sol.names
        ('Intercept', 'x0', 'x1')
    """
    if isinstance(X, Design):
        design = X
    elif y is None:
        raise ValueError("y required when X is not a Design")
    else:
        design = Design.from_arrays(X, y, intercept=intercept)

    return LinearSolution(_result=_backend_for(backend).solve(design), _design=design)


def _backend_for(choice: BackendChoice) -> CPUQRBackend:
    if choice not in ('auto', 'cpu', 'cpu_qr'):
        raise ValueError(f"Unknown backend: {choice!r}")
    return CPUQRBackend()

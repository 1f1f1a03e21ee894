"""
Ordinary least squares regression.

Public API:
    fit(X, y, ...) -> LinearSolution     functional, stateless
    OLS(source).fit(y)                   stateful model over a DataSource,
                                         with cached diagnostics

fit() handles:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

Example:
    >>> from pyinfluence.regression import fit
    >>> result = fit(X, y)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pyinfluence.regression.design import Design
from pyinfluence.regression.solution import LinearSolution, LinearParams
from pyinfluence.regression.solvers import fit
from pyinfluence.regression.model import OLS

__all__ = [
    "fit",
    "OLS",
    "Design",
    "LinearSolution",
    "LinearParams",
]

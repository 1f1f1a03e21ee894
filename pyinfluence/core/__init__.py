"""
Core infrastructure for pyinfluence.

This module provides shared abstractions and utilities used by the
regression, diagnostics and stagewise subpackages.

Key components:
    datasource: Tabular data container
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, parallel fan-out, linear algebra kernels
"""

from pyinfluence.core.datasource import DataSource
from pyinfluence.core.result import Result
from pyinfluence.core.exceptions import (
    PyInfluenceError,
    ValidationError,
    DimensionError,
    InsufficientDataError,
    NumericalError,
    SingularMatrixError,
    RankDeficiencyError,
    ConvergenceError,
    NonConvergenceError,
)

__all__ = [
    # Data
    "DataSource",
    # Result
    "Result",
    # Exceptions
    "PyInfluenceError",
    "ValidationError",
    "DimensionError",
    "InsufficientDataError",
    "NumericalError",
    "SingularMatrixError",
    "RankDeficiencyError",
    "ConvergenceError",
    "NonConvergenceError",
]

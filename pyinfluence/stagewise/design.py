"""
Design for forward-stagewise fitting.

StagewiseDesign holds a private, standardised copy of the predictors,
the response and the run configuration. Immutable, validated at
construction; the caller's DataSource is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinfluence.core.datasource import DataSource
from pyinfluence.core.exceptions import ValidationError
from pyinfluence.core.validation import (
    check_array,
    check_1d,
    check_finite,
    check_consistent_length,
    check_positive,
)


@dataclass(frozen=True)
class StagewiseDesign:
    """
    Frozen design for a forward-stagewise run.

    Attributes:
        X: Standardised predictors (n x p): zero mean, unit sample
            variance; constant columns are all zeros.
        y: Response (n,), as given.
        names: Predictor names.
        epsilon: Step added to the selected coefficient each round.
        delta: Stop once every |correlation| with the residual is below this.
        max_rounds: Round cap; exceeding it raises NonConvergenceError.
    """
    X: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    names: tuple[str, ...]
    epsilon: float
    delta: float
    max_rounds: int

    @classmethod
    def build(
        cls,
        source: DataSource,
        y: ArrayLike | str,
        *,
        epsilon: float = 0.01,
        delta: float = 0.01,
        max_rounds: int = 10_000,
    ) -> StagewiseDesign:
        """
        Create a stagewise design with validation.

        Args:
            source: Predictor table (left untouched)
            y: Response of length n, or the label of a source column
                (then left out of the predictors)
            epsilon: Step size, > 0
            delta: Correlation threshold, > 0
            max_rounds: Round cap, >= 1

        Raises:
            DimensionError: If len(y) != n
            ValidationError: If an option is out of range or data is non-finite
        """
        if not isinstance(source, DataSource):
            raise ValidationError(
                f"source: expected DataSource, got {type(source).__name__}"
            )
        check_positive(epsilon, 'epsilon')
        check_positive(delta, 'delta')
        if isinstance(max_rounds, bool) or not isinstance(max_rounds, int) or max_rounds < 1:
            raise ValidationError(f"max_rounds: must be an integer >= 1, got {max_rounds!r}")

        names = source.labels or tuple(f"x{j}" for j in range(source.n_columns))
        if isinstance(y, str):
            target = source.column_index(y)
            keep = [j for j in range(source.n_columns) if j != target]
            y_arr = source.column(target)
            work = DataSource.from_arrays(
                source.columns(keep), columns=[names[j] for j in keep],
            )
        else:
            y_arr = check_array(y, 'y')
            work = source.copy()

        check_1d(y_arr, 'y')
        check_finite(y_arr, 'y')
        X = work.to_numpy()
        check_consistent_length(X, y_arr, names=('X', 'y'))

        work.standardize_columns()

        return cls(
            X=work.to_numpy(),
            y=np.array(y_arr, dtype=np.float64, copy=True),
            names=tuple(work.labels or names),
            epsilon=float(epsilon),
            delta=float(delta),
            max_rounds=max_rounds,
        )

    @property
    def n(self) -> int:
        return self.X.shape[0]

    @property
    def p(self) -> int:
        return self.X.shape[1]

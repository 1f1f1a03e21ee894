"""
Regression Design.

Design picks the predictor columns out of a DataSource, adds the
intercept column, and pairs them with the response. The DataSource
only stores numbers; which of them are predictors is decided here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinfluence.core.datasource import DataSource, ColumnKey
from pyinfluence.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_not_wide,
)

INTERCEPT_NAME = 'Intercept'


@dataclass(frozen=True)
class Design:
    """
    Validated design matrix and response for one fit.

    Immutable after construction. When `intercept` is True the first
    column of X is a column of ones named 'Intercept', and p counts it.

    Construction:
        Design.from_datasource(ds, y)                    # X = all columns
        Design.from_datasource(ds, 'target')             # X = all other columns
        Design.from_datasource(ds, y, exclude=['a'])     # X = all but 'a'
        Design.from_arrays(X, y)                         # Direct from arrays
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _intercept: bool
    _names: tuple[str, ...]
    _columns: tuple[int, ...] | None = None
    _source: DataSource | None = None

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        y: ArrayLike | str,
        *,
        intercept: bool = True,
        exclude: Sequence[ColumnKey] = (),
    ) -> Design:
        """
        Build Design from a DataSource.

        Args:
            source: The DataSource holding the predictors
            y: Response vector of length n, or the label of a source column
               (that column is then left out of X)
            intercept: Prepend a column of ones
            exclude: Source columns (labels or positions) to leave out of X

        Returns:
            Design ready for regression
        """
        excluded = {source.column_index(k) for k in exclude}
        if isinstance(y, str):
            excluded.add(source.column_index(y))
            y_arr = source.column(y)
        else:
            y_arr = check_array(y, 'y')

        columns = tuple(j for j in range(source.n_columns) if j not in excluded)
        X_arr = source.columns(columns)

        all_names = source.labels or tuple(f"x{j}" for j in range(source.n_columns))
        names = tuple(all_names[j] for j in columns)

        return cls._build(X_arr, y_arr, intercept=intercept, names=names,
                          columns=columns, source=source)

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        intercept: bool = True,
        names: Sequence[str] | None = None,
    ) -> Design:
        """Build Design directly from arrays."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if names is None:
            names = tuple(f"x{j}" for j in range(X_arr.shape[1] if X_arr.ndim == 2 else 0))
        return cls._build(X_arr, y_arr, intercept=intercept, names=tuple(names),
                          columns=None, source=None)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        intercept: bool,
        names: tuple[str, ...],
        columns: tuple[int, ...] | None,
        source: DataSource | None,
    ) -> Design:
        """Internal builder with validation."""
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n = X.shape[0]
        if intercept:
            X = np.column_stack([np.ones(n), X])
            names = (INTERCEPT_NAME,) + tuple(names)
        else:
            X = np.array(X, dtype=np.float64, copy=True)

        check_not_wide(X, 'X')
        p = X.shape[1]

        return cls(
            _X=X,
            _y=np.array(y, dtype=np.float64, copy=True),
            _n=n,
            _p=p,
            _intercept=intercept,
            _names=tuple(names),
            _columns=columns,
            _source=source,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p), including the intercept column if any."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of design columns (parameters), intercept included."""
        return self._p

    @property
    def intercept(self) -> bool:
        """Whether the first column is an intercept."""
        return self._intercept

    @property
    def names(self) -> tuple[str, ...]:
        """Parameter names, in column order."""
        return self._names

    @property
    def columns(self) -> tuple[int, ...] | None:
        """Source column positions used for X (None when built from arrays)."""
        return self._columns

    @property
    def source(self) -> DataSource | None:
        """Original DataSource, if available."""
        return self._source

    def without_row(self, index: int) -> Design:
        """
        Private copy of this design with observation `index` removed.

        Used by leave-one-out refits; self is left untouched.
        """
        keep = np.arange(self._n) != index
        return Design(
            _X=self._X[keep].copy(),
            _y=self._y[keep].copy(),
            _n=self._n - 1,
            _p=self._p,
            _intercept=self._intercept,
            _names=self._names,
            _columns=self._columns,
            _source=None,
        )

"""
Argument checks shared by the fit, diagnostics and stagewise entry points.

Every check either returns quietly or raises one of the exceptions in
core.exceptions with the offending parameter name and the values that
failed. Nothing here repairs input: NaN rows are not dropped, wide
designs are not regularised, a 2D response is not flattened.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyinfluence.core.exceptions import (
    ValidationError,
    DimensionError,
    InsufficientDataError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Coerce an array-like to float64, refusing anything non-numeric.

    Lists of mixed objects, strings and complex numbers all fail here
    instead of surfacing later as a confusing LAPACK error.

    Raises:
        ValidationError: If the values are not real numbers
    """
    try:
        arr = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: not convertible to an array ({e})") from e

    if arr.dtype == object:
        raise ValidationError(
            f"{name}: got object dtype; values must all be numbers"
        )
    if not np.issubdtype(arr.dtype, np.number):
        raise ValidationError(f"{name}: non-numeric dtype {arr.dtype}")
    if np.issubdtype(arr.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex input cannot be regressed")

    return arr.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """Reject NaN and Inf; the message reports how many of each."""
    finite = np.isfinite(array)
    if finite.all():
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(np.isinf(array).sum())
    raise ValidationError(f"{name}: non-finite values ({n_nan} NaN, {n_inf} Inf)")


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Raises:
        DimensionError: If ``array.ndim != ndim``
    """
    if array.ndim == ndim:
        return
    raise DimensionError(
        f"{name}: expected {ndim}D input, shape is {array.shape}"
    )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Require every array to have the same number of rows.

    ``names`` labels the arrays positionally in the error message; passing
    the wrong number of names is a programming error (ValueError).
    """
    if len(names) != len(arrays):
        raise ValueError(
            f"got {len(arrays)} arrays but {len(names)} names"
        )

    rows = [a.shape[0] for a in arrays]
    if len(set(rows)) <= 1:
        return
    listing = ", ".join(f"{label}={count}" for label, count in zip(names, rows))
    raise DimensionError(f"Row counts differ: {listing}")


def check_not_wide(X: NDArray[np.floating[Any]], name: str) -> None:
    """
    Refuse designs with more columns than rows.

    Raises:
        DimensionError: If X is wide
    """
    n, p = X.shape
    if n >= p:
        return
    raise DimensionError(f"{name}: wide design (n={n}, p={p}); p > n cannot be fitted")


def _require_rows(n: int, p: int, required: int, message: str) -> None:
    if n >= required:
        return
    raise InsufficientDataError(
        f"{message} (n={n}, p={p}, need at least {required} observations)",
        n_observations=n,
        n_parameters=p,
        required=required,
    )


def check_residual_capacity(n: int, p: int, name: str) -> None:
    """Require one residual degree of freedom so the error variance exists."""
    _require_rows(n, p, p + 1, f"{name}: error variance needs n > p")


def check_leave_one_out_capacity(n: int, p: int, name: str) -> None:
    """
    Require n > p + 1.

    A refit without one row must still have a residual degree of
    freedom, otherwise its error variance is 0/0.
    """
    _require_rows(n, p, p + 2, f"{name}: leave-one-out refits need n > p + 1")


def check_positive(value: float, name: str) -> None:
    """
    Raises:
        ValidationError: Unless value is finite and strictly positive
    """
    if np.isfinite(value) and value > 0:
        return
    raise ValidationError(f"{name}: expected a finite value > 0, got {value!r}")

"""
Index-ordered fan-out over independent units of work.

Leave-one-out diagnostics run one refit per observation. Each unit is
self-contained (it builds its own row-removed copy of the data), so the
units can run on a joblib thread pool; LAPACK releases the GIL during
the factorisation, which is where the time goes.

Guarantees:
    - Results come back in unit index order, never completion order.
    - Every unit runs to completion; library errors raised by a unit are
      collected and the lowest-index one is re-raised after the barrier.
    - No partial result list is ever returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from joblib import Parallel, delayed

from pyinfluence.core.exceptions import PyInfluenceError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class UnitOutcome(Generic[T]):
    """What one unit of work produced: a value or a library error."""
    index: int
    value: T | None
    error: PyInfluenceError | None


def _run_unit(func: Callable[[int], T], index: int) -> UnitOutcome[T]:
    try:
        return UnitOutcome(index=index, value=func(index), error=None)
    except PyInfluenceError as exc:
        return UnitOutcome(index=index, value=None, error=exc)


def check_n_jobs(n_jobs: int) -> None:
    """
    Validate a joblib-style worker count.

    Raises:
        ValidationError: If n_jobs is 0 or not an integer
    """
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, int) or n_jobs == 0:
        raise ValidationError(
            f"n_jobs: must be a non-zero integer (negative counts from the CPU count), got {n_jobs!r}"
        )


def fan_out(
    func: Callable[[int], T],
    n_units: int,
    *,
    n_jobs: int = 1,
    label: str = 'unit',
) -> list[T]:
    """
    Evaluate func(i) for i in range(n_units) and return results in index order.

    Args:
        func: Unit of work. Must not mutate state shared with other units.
        n_units: Number of units
        n_jobs: 1 runs a plain loop; anything else uses a joblib thread pool
            (-1 = all cores)
        label: Unit name used in log and error messages

    Returns:
        List of length n_units, element i being func(i)

    Raises:
        PyInfluenceError: The lowest-index error raised by any unit, with a
            note listing every failed index
    """
    check_n_jobs(n_jobs)

    if n_jobs == 1:
        outcomes = [_run_unit(func, i) for i in range(n_units)]
    else:
        logger.debug("fan_out: %d %s units on %d jobs", n_units, label, n_jobs)
        outcomes = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_run_unit)(func, i) for i in range(n_units)
        )

    failures = [o for o in outcomes if o.error is not None]
    if failures:
        failed = [o.index for o in failures]
        logger.debug("fan_out: %d of %d %s units failed: %s",
                     len(failed), n_units, label, failed)
        first = failures[0].error
        first.add_note(
            f"{len(failed)} of {n_units} {label} units failed "
            f"(indices {failed}); reporting {label} {failed[0]}."
        )
        raise first

    results: list[Any] = [None] * n_units
    for outcome in outcomes:
        results[outcome.index] = outcome.value
    return results

"""
Wall-clock bookkeeping for backends.

A backend starts one Timer per call, wraps each phase in a named
section, and stores ``timer.result()`` on the Result it returns.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Total elapsed time plus per-section sums.

        timer = Timer()
        timer.start()
        with timer.section('leave_one_out'):
            loo = leave_one_out(solution)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'leave_one_out': ...}

    Re-entering a section name adds to its previous time.
    """

    def __init__(self):
        self._began: float | None = None
        self._elapsed: float | None = None
        self._sections: dict[str, float] = {}

    def start(self) -> None:
        self._began = time.perf_counter()

    def stop(self) -> None:
        if self._began is None:
            raise RuntimeError("stop() reached before start()")
        self._elapsed = time.perf_counter() - self._began

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Charge the time spent inside the block to ``name``."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            spent = time.perf_counter() - t0
            self._sections[name] = self._sections.get(name, 0.0) + spent

    def result(self) -> dict[str, float]:
        """``{'total_seconds': ..., <section>: ...}``; only valid after stop()."""
        if self._elapsed is None:
            raise RuntimeError("result() requested before stop()")
        return {'total_seconds': self._elapsed, **self._sections}


@contextmanager
def timed() -> Iterator[Timer]:
    """Run a block under a started Timer that is stopped on exit."""
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()

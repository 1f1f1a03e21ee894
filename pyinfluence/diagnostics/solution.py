"""
Influence diagnostics solution types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinfluence.core.result import Result
from pyinfluence.diagnostics._influence import DFFITS_THRESHOLD

if TYPE_CHECKING:
    import pandas as pd
    from pyinfluence.regression.solution import LinearSolution


@dataclass(frozen=True)
class InfluenceParams:
    """
    Per-observation diagnostics of one fit. Vectors have length n;
    dfbeta and dfbetas are (n, p).
    """
    leverage: NDArray[np.floating[Any]]
    cooks_distance: NDArray[np.floating[Any]]
    studentized_residuals: NDArray[np.floating[Any]]
    externally_studentized_residuals: NDArray[np.floating[Any]]
    press: NDArray[np.floating[Any]]
    dffits: NDArray[np.floating[Any]]
    dfbeta: NDArray[np.floating[Any]]
    dfbetas: NDArray[np.floating[Any]]


@dataclass
class InfluenceSolution:
    """
    User-facing influence diagnostics.

    Thresholds are exposed for comparison; nothing is dropped or
    reclassified automatically.
    """
    _result: Result[InfluenceParams]
    _fit: 'LinearSolution'

    @property
    def leverage(self) -> NDArray[np.floating[Any]]:
        return self._result.params.leverage

    @property
    def cooks_distance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cooks_distance

    @property
    def studentized_residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.studentized_residuals

    @property
    def externally_studentized_residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.externally_studentized_residuals

    @property
    def press(self) -> NDArray[np.floating[Any]]:
        return self._result.params.press

    @property
    def press_statistic(self) -> float:
        return float(np.sum(self.press ** 2))

    @property
    def dffits(self) -> NDArray[np.floating[Any]]:
        return self._result.params.dffits

    @property
    def dfbeta(self) -> NDArray[np.floating[Any]]:
        return self._result.params.dfbeta

    @property
    def dfbetas(self) -> NDArray[np.floating[Any]]:
        return self._result.params.dfbetas

    @property
    def high_leverage_threshold(self) -> float:
        """2p/n."""
        return 2.0 * self._fit.p / self._fit.n

    @property
    def dffits_threshold(self) -> float:
        return DFFITS_THRESHOLD

    @property
    def fit(self) -> 'LinearSolution':
        """The regression these diagnostics describe."""
        return self._fit

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

    def to_frame(self) -> 'pd.DataFrame':
        """
        One row per observation: leverage, cooks_distance, student, rstudent,
        press, dffits, then one dfb_<name> column per coefficient.
        """
        import pandas as pd

        columns: dict[str, NDArray] = {
            'leverage': self.leverage,
            'cooks_distance': self.cooks_distance,
            'student': self.studentized_residuals,
            'rstudent': self.externally_studentized_residuals,
            'press': self.press,
            'dffits': self.dffits,
        }
        for j, name in enumerate(self._fit.names):
            columns[f"dfb_{name}"] = self.dfbeta[:, j]

        frame = pd.DataFrame(columns)
        frame.index.name = 'observation'
        return frame

    def summary(self) -> str:
        """Text report listing the observations that cross a threshold."""
        h_cut = self.high_leverage_threshold
        high_h = np.flatnonzero(self.leverage > h_cut)
        big_dffits = np.flatnonzero(np.abs(self.dffits) > DFFITS_THRESHOLD)
        top_cook = np.argsort(self.cooks_distance)[::-1][:5]

        lines = [
            "Influence Diagnostics",
            "=" * 60,
            f"Observations: {self._fit.n}",
            f"Parameters: {self._fit.p}",
            f"PRESS: {self.press_statistic:.6f}",
            "",
            f"High leverage (h > {h_cut:.4f}): {high_h.tolist() or 'none'}",
            f"|DFFITS| > {DFFITS_THRESHOLD:g}: {big_dffits.tolist() or 'none'}",
            "",
            "Largest Cook's distances:",
            "-" * 60,
            f"{'obs':>6} {'cooks':>12} {'leverage':>10} {'rstudent':>10} {'dffits':>10}",
            "-" * 60,
        ]
        for i in top_cook:
            lines.append(
                f"{i:>6d} {self.cooks_distance[i]:12.6f} {self.leverage[i]:10.4f} "
                f"{self.externally_studentized_residuals[i]:10.4f} {self.dffits[i]:10.4f}"
            )
        lines.append("-" * 60)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"InfluenceSolution(n={self._fit.n}, p={self._fit.p})"

"""
Tolerance tiers and rank tolerance.

Defines the precision expectations used by the QR rank check, the
test suite, and the leverage sanity check:
- CPU FP64: machine precision agreement between equivalent algorithms
- Published 3dp: values quoted to three decimals (e.g. R printouts)
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """rtol/atol pair used when comparing numerical results."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, algebraically equivalent computations',
)

# Reference values published to three decimal places
PUBLISHED_3DP = ToleranceTier(
    rtol=0.0,
    atol=5e-4,
    name='published_3dp',
    description='Reference value rounded to three decimals',
)

# Leverage above 1 by at most this much is treated as rounding, not an error.
LEVERAGE_SLACK = 1e-10


def rank_tolerance(shape: tuple[int, int], max_abs_diag: float) -> float:
    """
    Threshold below which an R diagonal entry counts as zero.

    Uses max(n, p) * eps * max|R_ii|, the LAPACK-style convention.
    """
    return max(shape) * np.finfo(np.float64).eps * max_abs_diag

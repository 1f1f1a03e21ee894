"""
Shared compute infrastructure for pyinfluence.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Rank tolerance and numerical comparison tiers
    parallel: Index-ordered fan-out over independent units
    linalg: Linear algebra kernels (QR, triangular inverse)
"""

from pyinfluence.core.compute.timing import Timer, timed
from pyinfluence.core.compute.parallel import fan_out

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Parallel
    "fan_out",
]

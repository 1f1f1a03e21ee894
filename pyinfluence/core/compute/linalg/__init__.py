"""
Linear algebra kernels for pyinfluence.

All functions follow these conventions:
    - CPU functions use NumPy/SciPy (LAPACK under the hood)
    - Each decomposition returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    qr: QR decomposition, back-substitution, triangular inverse
"""

from pyinfluence.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    check_full_rank,
    qr_solve_cpu,
    triangular_inverse_cpu,
    unscaled_covariance_cpu,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "check_full_rank",
    "qr_solve_cpu",
    "triangular_inverse_cpu",
    "unscaled_covariance_cpu",
]

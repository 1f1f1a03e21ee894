"""
QR decomposition and triangular kernels.

Everything the regression and diagnostics code derives from a fit goes
through one reduced factorisation X = QR:

    coefficients    β = R⁻¹ Q'y            (back-substitution, no inverse)
    hat matrix      H = Q Q'
    (X'X)⁻¹          = R⁻¹ (R⁻¹)'

X'X is never formed explicitly.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pyinfluence.core.exceptions import RankDeficiencyError, SingularMatrixError
from pyinfluence.core.compute.tolerances import rank_tolerance


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthonormal matrix (n x k where k = min(n, p) for reduced mode)
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int

    @property
    def n_columns(self) -> int:
        """Number of columns of the factorised matrix."""
        return self.R.shape[1]


def qr_cpu(
    X: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """
    QR decomposition using LAPACK (via NumPy).

    Args:
        X: Matrix to decompose (n x p)
        mode: 'reduced' for economy QR (Q is n x k, R is k x p where k = min(n,p))
              'complete' for full QR (Q is n x n, R is n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode=mode)

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R.max() > 0:
        tol = rank_tolerance(X.shape, float(diag_R.max()))
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank)


def check_full_rank(qr_result: QRResult, matrix_name: str = 'X') -> None:
    """
    Verify the factorised matrix has full column rank.

    Raises:
        RankDeficiencyError: If rank < number of columns
    """
    p = qr_result.n_columns
    if qr_result.rank < p:
        raise RankDeficiencyError(
            f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"This indicates perfect multicollinearity.",
            matrix_name=matrix_name,
            rank=qr_result.rank,
            expected_rank=p
        )


def qr_solve_cpu(
    qr_result: QRResult,
    y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve least squares from an existing QR factorisation.

    The solution is computed as:
        X = QR
        β = R⁻¹ Q'y    (triangular back-substitution)

    Args:
        qr_result: Reduced QR of the design matrix (n >= p, full rank)
        y: Response vector (n,)

    Returns:
        Coefficient vector β (p,)

    Raises:
        RankDeficiencyError: If the factorised matrix is rank-deficient
    """
    check_full_rank(qr_result)

    p = qr_result.n_columns
    Qty = qr_result.Q.T @ y
    return solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)


def triangular_inverse_cpu(
    R: NDArray[np.floating[Any]],
    matrix_name: str = 'R',
) -> NDArray[np.floating[Any]]:
    """
    Invert an upper triangular matrix by back-substitution against I.

    Singularity is detected from the diagonal before solving.

    Raises:
        SingularMatrixError: If any diagonal entry is numerically zero
    """
    p = R.shape[0]
    diag_R = np.abs(np.diag(R))
    max_diag = float(diag_R.max()) if p > 0 else 0.0
    tol = rank_tolerance(R.shape, max_diag)
    rank = int(np.sum(diag_R > tol)) if max_diag > 0 else 0

    if rank < p:
        raise SingularMatrixError(
            f"{matrix_name} is not invertible: rank={rank}, expected={p}. "
            f"The predictors are collinear.",
            matrix_name=matrix_name,
            rank=rank,
            expected_rank=p,
        )

    R_inv = solve_triangular(R, np.eye(p), lower=False)

    # cond_2(R) estimate from the two triangular factors
    condition_number = float(np.linalg.norm(R, 2) * np.linalg.norm(R_inv, 2))
    if not np.isfinite(condition_number):
        raise SingularMatrixError(
            f"{matrix_name} inverse overflowed; matrix is numerically singular.",
            matrix_name=matrix_name,
            condition_number=condition_number,
            rank=rank,
            expected_rank=p,
        )

    return R_inv


def unscaled_covariance_cpu(
    qr_result: QRResult,
) -> NDArray[np.floating[Any]]:
    """
    (X'X)⁻¹ from the R factor: R⁻¹ (R⁻¹)'.

    The product is symmetrised to remove round-off asymmetry.

    Raises:
        SingularMatrixError: If R is not invertible
    """
    p = qr_result.n_columns
    R_inv = triangular_inverse_cpu(qr_result.R[:p, :p])
    cov = R_inv @ R_inv.T
    return 0.5 * (cov + cov.T)

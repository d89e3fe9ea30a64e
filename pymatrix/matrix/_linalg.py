"""
Dense linear algebra kernels.

Shared numeric routines used by every representation that needs a full
factorization: dense matrices directly, sparse matrices on a dense copy.

All functions follow these conventions:
    - Inputs and outputs are float64 numpy arrays; inputs are never mutated
    - LAPACK is reached through NumPy / SciPy
    - numpy.linalg.LinAlgError is translated to SingularMatrixError
    - Tolerances passed in are absolute (``effective_zero``)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sp_linalg

from pymatrix.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Result of a reduced QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k where k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def qr_decompose(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Reduced QR decomposition using LAPACK (via NumPy).

    Computes X = QR where Q is orthogonal and R is upper triangular.

    Args:
        X: Matrix to decompose (n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode='reduced')

    # Numerical rank from the R diagonal, scaled to the largest pivot
    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R.max() > 0:
        tol = max(X.shape) * np.finfo(X.dtype).eps * diag_R.max()
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank)


def least_squares_solve(
    X: NDArray[np.floating[Any]],
    Y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve ``min ||X B - Y||`` for a tall or wide X via QR.

    For n >= p the solution is B = R⁻¹ Q'Y. For n < p the minimum-norm
    solution is taken from the QR decomposition of X'.

    Args:
        X: Coefficient matrix (n x p)
        Y: Right-hand side, shape (n,) or (n, k)

    Returns:
        Solution of shape (p,) or (p, k)

    Raises:
        SingularMatrixError: If X does not have full rank min(n, p)
    """
    n, p = X.shape
    k = min(n, p)
    if k == 0:
        return np.zeros((p,) + Y.shape[1:], dtype=np.float64)

    if n >= p:
        qr_result = qr_decompose(X)
        if qr_result.rank < p:
            raise SingularMatrixError(
                f"Matrix is rank-deficient: rank={qr_result.rank}, expected={p}",
                matrix_name='A',
                rank=qr_result.rank,
                expected_rank=p,
            )
        Qty = qr_result.Q.T @ Y
        return sp_linalg.solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)

    # Wide system: X' = QR, so X = R'Q' and B = Q (R')⁻¹ Y
    qr_result = qr_decompose(X.T)
    if qr_result.rank < n:
        raise SingularMatrixError(
            f"Matrix rows are linearly dependent: rank={qr_result.rank}, expected={n}",
            matrix_name='A',
            rank=qr_result.rank,
            expected_rank=n,
        )
    Z = sp_linalg.solve_triangular(qr_result.R[:n, :n], Y, trans='T', lower=False)
    return qr_result.Q @ Z


def solve(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve ``A X = B``.

    Square systems use an LU factorization; rectangular systems fall back
    to least squares through QR.

    Raises:
        SingularMatrixError: If A cannot span the columns needed
    """
    n, p = A.shape
    if n != p:
        return least_squares_solve(A, B)
    if n == 0:
        return np.zeros(B.shape, dtype=np.float64)
    try:
        return sp_linalg.solve(A, B)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"Can't solve: matrix is singular ({e})",
            matrix_name='A',
            expected_rank=n,
        ) from e


def inverse(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Inverse of a square matrix.

    Raises:
        SingularMatrixError: If A is singular
    """
    if A.shape[0] == 0:
        return np.zeros((0, 0), dtype=np.float64)
    try:
        return sp_linalg.inv(A)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            "Can't invert matrix because it does not span the columns",
            matrix_name='A',
            expected_rank=A.shape[0],
        ) from e


def singular_values(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Singular values of A in descending order (empty for an empty A)."""
    if A.size == 0:
        return np.zeros(0, dtype=np.float64)
    return np.linalg.svd(A, compute_uv=False)


def rank(A: NDArray[np.floating[Any]], effective_zero: float) -> int:
    """Number of singular values strictly greater than ``effective_zero``."""
    return int(np.sum(singular_values(A) > effective_zero))


def pseudo_inverse(
    A: NDArray[np.floating[Any]],
    effective_zero: float,
) -> NDArray[np.floating[Any]]:
    """
    Moore-Penrose pseudo-inverse through the SVD.

    Singular values at or below ``effective_zero`` contribute zero instead
    of their reciprocal.
    """
    n, p = A.shape
    if A.size == 0:
        return np.zeros((p, n), dtype=np.float64)
    U, s, Vt = np.linalg.svd(A, full_matrices=False)
    keep = s > effective_zero
    s_inv = np.zeros_like(s)
    s_inv[keep] = 1.0 / s[keep]
    return (Vt.T * s_inv) @ U.T


def log_determinant(A: NDArray[np.floating[Any]]) -> complex:
    """
    Logarithm of the determinant of a square matrix.

    The real part is the log of the absolute determinant; the imaginary
    part is π when the determinant is negative and 0 otherwise. A singular
    matrix yields a real part of -inf.
    """
    sign, logabsdet = np.linalg.slogdet(A)
    return complex(float(logabsdet), math.pi if sign < 0 else 0.0)

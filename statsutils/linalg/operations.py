# linalg/operations.py
"""
Operations that turn square roots back into full matrices, or recombine a
correlation root with standard deviations into a covariance root.

Square roots here follow the ``A = R.T @ R`` convention used throughout
statsutils. Both functions accept plain arrays or `LinOp` inputs.
"""
from __future__ import annotations

import numpy as np

from ..custom_types import Array, ArrayLike
from ..errors import DimensionMismatchError, ShapeError
from ..array_backend.utils import _ensure_matrix, _ensure_square_matrix
from .linop import (
    LinOp,
    DenseLinOp,
    DiagonalLinOp,
    TriangularLinOp,
    CholeskyLinOp,
)
from .factorizations import qr

__all__ = ["reconstruct", "combine"]


def reconstruct(sqrt_r: LinOp | ArrayLike) -> LinOp | Array:
    """Return ``sqrt_r.T @ sqrt_r``.

    Works identically for covariance roots (giving the covariance) and
    correlation roots (giving the correlation). Structured inputs keep their
    structure where it survives the product:

    - `DiagonalLinOp` -> `DiagonalLinOp` of squared entries
    - upper `TriangularLinOp` -> `CholeskyLinOp`
    - any other `LinOp` -> `DenseLinOp`

    Plain arrays give a plain array.

    Args:
        sqrt_r: (n, m) square root.

    Returns:
        (m, m) symmetric positive semidefinite matrix.
    """
    if isinstance(sqrt_r, DiagonalLinOp):
        return DiagonalLinOp(sqrt_r.diagonal**2)
    if isinstance(sqrt_r, TriangularLinOp) and not sqrt_r.lower:
        return CholeskyLinOp(sqrt_r)
    if isinstance(sqrt_r, LinOp):
        R = sqrt_r.to_dense()
        return DenseLinOp(R.T @ R, copy=False)

    R = _ensure_matrix(sqrt_r, copy=False)
    return R.T @ R


def _as_std_diagonal(stds: LinOp | ArrayLike, m: int) -> Array:
    """Validate `stds` as an (m, m) non-negative diagonal and return its diagonal."""
    if isinstance(stds, DiagonalLinOp):
        d = stds.diag()
    else:
        S = stds.to_dense() if isinstance(stds, LinOp) else np.asarray(stds)
        if S.ndim == 1:
            d = S
        elif S.ndim == 2:
            d = DiagonalLinOp.from_dense(_ensure_square_matrix(S, m, copy=False)).diag()
        else:
            raise ShapeError(f"stds must be a vector or a diagonal matrix. Got ndim={S.ndim}.")

    if d.size != m:
        raise DimensionMismatchError(
            f"stds has dimension {d.size} but the correlation root has {m} columns."
        )
    if np.any(d < 0):
        raise ValueError("Standard deviations must be non-negative.")
    return d


def combine(sqrt_cor: ArrayLike, stds: LinOp | ArrayLike) -> Array:
    """Combine a correlation root and standard deviations into a covariance root.

    Computes the triangular factor of the QR decomposition of
    ``sqrt_cor @ stds``. For an (n, m) `sqrt_cor` with n >= m the result is
    an (m, m) upper triangular matrix `U` with ``U.T @ U`` equal to the
    covariance implied by the correlation structure and the standard
    deviations. The full covariance is never formed.

    No sign convention is imposed on the result: diagonal entries may be
    negative, as produced by the underlying QR step.

    Args:
        sqrt_cor: (n, m) square root of a correlation matrix.
        stds: (m, m) diagonal matrix of standard deviations, as an array or
            a `DiagonalLinOp`. A length-m vector is also accepted.

    Raises:
        DimensionMismatchError: if the dimension of `stds` is not m.
        ShapeError: if `stds` is not diagonal.
        ValueError: if a standard deviation is negative.
    """
    C = _ensure_matrix(sqrt_cor, copy=False)
    d = _as_std_diagonal(stds, C.shape[1])
    return qr(C * d[np.newaxis, :]).sqrt()

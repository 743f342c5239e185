# cov.py
"""
Square roots of weighted covariance matrices.

`sqrtcov` returns a matrix `R` with ``R.T @ R`` equal to a covariance matrix.
Such a root is not unique (``Q @ R`` is another one for any orthogonal `Q`);
which representative you get depends on what you pass in:

- observation data: the centered data scaled row-wise by the square roots of
  the weights, an (n, m) "thin" root computed without ever forming the
  (m, m) covariance;
- a `Factorization`: its (un-pivoted) triangular factor;
- a structured `LinOp`: a root with matching structure.
"""
from __future__ import annotations

from functools import singledispatch

import numpy as np

from .custom_types import Array, ArrayLike
from .errors import ShapeError
from .array_backend.utils import _ensure_data_matrix, _ensure_weights
from .weights import _center, weighted_scale
from .linalg.factorizations import Factorization, cholesky
from .linalg.linop import (
    LinOp,
    DenseLinOp,
    DiagonalLinOp,
    TriangularLinOp,
    RootLinOp,
    CholeskyLinOp,
)
from .linalg.operations import combine, reconstruct

__all__ = ["sqrtcov", "cov", "combine"]


def _sqrtcov_centered(centered: Array, w: Array, sv: float) -> Array:
    """Covariance root from already centered data and scale value `sv`.

    You probably don't want to call this directly.
    """
    return np.sqrt(w)[:, np.newaxis] * centered * np.sqrt(sv)


@singledispatch
def sqrtcov(data: ArrayLike, weights: ArrayLike | None = None, *, corrected: bool = True) -> Array:
    """Compute the square root of a weighted covariance matrix.

    Given an (n, m) matrix of finite values, returns another (n, m) matrix
    `R` such that ``R.T @ R`` is the weighted covariance of `data`.

    Args:
        data: array-like, shape (n, m) or (n,). Rows are observations.
        weights: array-like, shape (n,). If None, every observation has weight one,
            which gives the classical (n - 1)-normalized sample covariance.
        corrected: apply the bias correction of `weighted_scale`. Defaults to True.

    Returns:
        Array of shape (n, m).

    Raises:
        DimensionMismatchError: if the number of weights differs from n.

    Example:
        >>> X = (np.arange(1, 13).reshape(3, 4).T / 12) ** 2
        >>> R = sqrtcov(X)
        >>> np.allclose(R.T @ R, np.cov(X, rowvar=False))
        True
    """
    X = _ensure_data_matrix(data)
    w = _ensure_weights(weights, X.shape[0])
    return _sqrtcov_centered(_center(X, w), w, weighted_scale(w, corrected))


@sqrtcov.register(Factorization)
def _(F: Factorization) -> Array:
    return F.sqrt()


@sqrtcov.register(LinOp)
def _(A: LinOp) -> LinOp:
    if isinstance(A, DiagonalLinOp):
        if np.any(A.diagonal < 0):
            raise np.linalg.LinAlgError("Diagonal has negative entries; square root not defined.")
        return DiagonalLinOp(np.sqrt(A.diagonal))
    if isinstance(A, CholeskyLinOp):
        return TriangularLinOp(A.root.upper(), lower=False)
    if isinstance(A, RootLinOp):
        # A = S @ S.T, so S.T is a root in the R.T @ R convention.
        return DenseLinOp(A.root.to_dense().T)
    A._check_square()
    M = A.to_dense()
    if not A.has_flag("symmetric") and not np.allclose(M, M.T):
        raise ShapeError("Covariance operator is not symmetric.")
    return TriangularLinOp(cholesky(M).sqrt(), lower=False)


def cov(data: ArrayLike, weights: ArrayLike | None = None, *, corrected: bool = True) -> Array:
    """Compute the weighted covariance matrix of `data`.

    Formed as ``R.T @ R`` from ``R = sqrtcov(data, weights, corrected=corrected)``.

    Example:
        >>> X = (np.arange(1, 13).reshape(3, 4).T / 12) ** 2
        >>> cov(X, [1, 2, 3, 4])
        array([[0.00160751, 0.00392233, 0.00623714],
               [0.00392233, 0.0096665 , 0.0154107 ],
               [0.00623714, 0.0154107 , 0.0245842 ]])
    """
    return reconstruct(sqrtcov(data, weights, corrected=corrected))

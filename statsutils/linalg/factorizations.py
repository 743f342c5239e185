# factorizations.py
"""
Factorizations from which a covariance square root can be read off.

Every variant stores an upper triangular factor `U` of some symmetric
positive semidefinite matrix `A`, possibly in a permuted basis, and exposes
`sqrt()` returning a matrix `R` with ``R.T @ R == A`` in the caller's
original variable order:

- `Cholesky`: ``A = U.T @ U``. An optional permutation is honoured the same
  way as for `PivotedCholesky`.
- `PivotedCholesky`: ``A[p][:, p] = U.T @ U`` for the pivot vector `p`. The
  root is un-pivoted by applying the inverse permutation to both the rows and
  the columns of `U`; the result is triangular only in the pivoted basis.
- `QR`: ``X = Q @ R`` so that ``X.T @ X = R.T @ R``.

The constructors `cholesky`, `pivoted_cholesky` and `qr` build these from a
matrix using scipy.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np
from scipy import linalg as sla
from scipy.linalg import lapack

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_matrix, _ensure_square_matrix

__all__ = [
    "Factorization",
    "Cholesky",
    "PivotedCholesky",
    "QR",
    "cholesky",
    "pivoted_cholesky",
    "qr",
]

_LOGGER = logging.getLogger(__name__)


def _unpivot(U: Array, perm: Array) -> Array:
    ip = np.argsort(perm)
    return U[np.ix_(ip, ip)]


def _validate_perm(perm: ArrayLike, n: int) -> Array:
    p = np.asarray(perm, dtype=np.intp).ravel()
    if p.size != n or not np.array_equal(np.sort(p), np.arange(n)):
        raise ValueError(f"perm must be a permutation of range({n}). Got {p.tolist()}.")
    return p


class Factorization(ABC):
    """A factorization of a symmetric positive semidefinite matrix A."""

    @abstractmethod
    def sqrt(self) -> Array:
        """Return R with ``R.T @ R == A`` in the original variable order."""
        ...


@dataclass(frozen=True)
class Cholesky(Factorization):
    """Upper Cholesky factor U with ``A = U.T @ U``.

    Args:
        factor: square upper triangular array.
        perm: optional zero-based pivot vector, with ``A[perm][:, perm] = U.T @ U``.
    """

    factor: Array
    perm: Array | None = None

    def __post_init__(self) -> None:
        U = _ensure_square_matrix(self.factor)
        object.__setattr__(self, "factor", U)
        if self.perm is not None:
            object.__setattr__(self, "perm", _validate_perm(self.perm, U.shape[0]))

    def sqrt(self) -> Array:
        if self.perm is None:
            return self.factor.copy()
        return _unpivot(self.factor, self.perm)


@dataclass(frozen=True)
class PivotedCholesky(Factorization):
    """Pivoted upper Cholesky factor: ``A[perm][:, perm] = U.T @ U``.

    Args:
        factor: square upper triangular array, rows beyond `rank` zeroed.
        perm: zero-based pivot vector.
        rank: numerical rank detected during factorization.
    """

    factor: Array
    perm: Array
    rank: int = field(default=-1)

    def __post_init__(self) -> None:
        U = _ensure_square_matrix(self.factor)
        object.__setattr__(self, "factor", U)
        object.__setattr__(self, "perm", _validate_perm(self.perm, U.shape[0]))
        if self.rank < 0:
            object.__setattr__(self, "rank", int(np.linalg.matrix_rank(U)))

    def sqrt(self) -> Array:
        return _unpivot(self.factor, self.perm)


@dataclass(frozen=True)
class QR(Factorization):
    """Triangular factor R of ``X = Q @ R``; the square root of ``X.T @ X``."""

    factor: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor", _ensure_matrix(self.factor))

    def sqrt(self) -> Array:
        return self.factor.copy()


# ------------------------------------------------------------------------------
# Constructors
# ------------------------------------------------------------------------------

def cholesky(A: ArrayLike) -> Cholesky:
    """Cholesky factorization of a symmetric positive definite matrix.

    Raises:
        numpy.linalg.LinAlgError: if `A` is not positive definite.
    """
    A = _ensure_square_matrix(A, copy=False)
    return Cholesky(sla.cholesky(A, lower=False))


def pivoted_cholesky(A: ArrayLike, tol: float | None = None) -> PivotedCholesky:
    """Cholesky factorization with complete pivoting (LAPACK ``?pstrf``).

    Unlike `cholesky`, this succeeds on positive semidefinite, rank deficient
    input. Rows of the factor beyond the detected rank are set to zero.

    Args:
        A: symmetric positive semidefinite matrix (d, d).
        tol: pivot tolerance below which the remaining block is treated as
            zero. If None, LAPACK's default ``d * eps * max(diag(A))`` is used.

    Raises:
        numpy.linalg.LinAlgError: on an illegal argument reported by LAPACK.
    """
    A = np.asarray(_ensure_square_matrix(A, copy=False), dtype=np.float64)
    pstrf = lapack.get_lapack_funcs("pstrf", (A,))
    c, piv, rank, info = pstrf(A, tol=-1.0 if tol is None else float(tol), lower=0)
    if info < 0:
        raise np.linalg.LinAlgError(f"pstrf: illegal value in argument {-info}.")

    n = A.shape[0]
    U = np.triu(c)
    U[rank:, :] = 0.0
    if rank < n:
        _LOGGER.debug("pivoted_cholesky: matrix of dimension %d has numerical rank %d", n, rank)
    return PivotedCholesky(U, piv - 1, rank=int(rank))


def qr(X: ArrayLike) -> QR:
    """Economic QR decomposition of an (n, m) matrix; keeps only R."""
    X = _ensure_matrix(X, copy=False)
    R = sla.qr(X, mode="r")[0]
    return QR(R[: min(X.shape), :])

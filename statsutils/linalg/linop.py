# linop.py
"""
Structured matrices passed through the square-root and reconstruction
operations.

A `LinOp` is a matrix plus a set of structural flags (diagonal, triangular,
dense, ...). `sqrtcov` and `reconstruct` inspect the concrete type so that a
diagonal covariance yields a diagonal square root, a Cholesky-represented
covariance yields its triangular factor, and so on. Plain arrays are always
accepted too; the structured path is opt-in.

Conventions: `RootLinOp(S)` represents ``A = S @ S.T``. The square roots
produced by statsutils satisfy ``A = R.T @ R``, so ``RootLinOp(R.T)`` wraps
such a root without forming `A`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, FrozenSet, Iterable

import numpy as np

from ..custom_types import Array, ArrayLike
from ..errors import ShapeError
from ..array_backend.utils import (
    _ensure_vector,
    _ensure_matrix,
    _ensure_square_matrix,
    _is_diagonal,
)

__all__ = [
    "LinOp",
    "DenseLinOp",
    "DiagonalLinOp",
    "TriangularLinOp",
    "RootLinOp",
    "CholeskyLinOp",
]


ALLOWED_FLAGS = frozenset({
    "symmetric",
    "positive_definite",
    "diagonal",
    "triangular_lower",
    "triangular_upper",
    "dense",
})


class LinOp(ABC):
    """A matrix with known structure.

    Subclasses pass their shape, dtype and structural flags to
    ``LinOp.__init__`` and implement `to_dense` plus the column-block
    products `_apply` (``A @ X``) and `_apply_transpose` (``A.T @ X``). The
    public `matmat`/`rmatmat` methods canonicalise their argument
    and dispatch to those two hooks.

    Flags are restricted to ALLOWED_FLAGS.
    """

    def __init__(self, shape: tuple[int, int], dtype: Any, flags: Iterable[str] = ()) -> None:
        self._shape = (int(shape[0]), int(shape[1]))
        self._dtype = np.dtype(dtype)
        self._flags: set[str] = set()
        for flag in flags:
            self.add_flag(flag)

    @property
    def shape(self) -> tuple[int, int]:
        """(n_out, n_in)"""
        return self._shape

    @property
    def dtype(self) -> Any:
        return self._dtype

    @abstractmethod
    def to_dense(self) -> Array:
        ...

    def _apply(self, X: Array) -> Array:
        return self.to_dense() @ X

    def _apply_transpose(self, X: Array) -> Array:
        return self.to_dense().T @ X

    def _check_square(self) -> None:
        if self._shape[0] != self._shape[1]:
            raise np.linalg.LinAlgError(f"Linear operator is not square. Has shape {self._shape}")

    def matmat(self, X: ArrayLike) -> Array:
        """A @ X; a 1D `X` is treated as a single column."""
        return self._apply(_ensure_matrix(X, copy=False))

    def rmatmat(self, X: ArrayLike) -> Array:
        """A.T @ X; a 1D `X` is treated as a single column."""
        return self._apply_transpose(_ensure_matrix(X, copy=False))

    def diag(self) -> Array:
        return np.diag(self.to_dense()).copy()

    def add_flag(self, flag: str) -> None:
        if flag not in ALLOWED_FLAGS:
            raise ValueError(f"Unknown flag {flag!r}. Allowed: {sorted(ALLOWED_FLAGS)}")
        self._flags.add(flag)

    def has_flag(self, flag: str) -> bool:
        return flag in self._flags

    @property
    def flags(self) -> FrozenSet[str]:
        return frozenset(self._flags)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self._shape}, flags={sorted(self.flags)})"


class DenseLinOp(LinOp):
    """Unstructured matrix held as a 2D array."""

    def __init__(self, arr: ArrayLike, copy: bool = True) -> None:
        self.array = _ensure_matrix(arr, copy=copy)
        super().__init__(self.array.shape, self.array.dtype, flags=("dense",))

    def to_dense(self) -> Array:
        return self.array

    def _apply(self, X: Array) -> Array:
        return self.array @ X

    def _apply_transpose(self, X: Array) -> Array:
        return self.array.T @ X


class DiagonalLinOp(LinOp):
    """Diagonal matrix stored as the vector of its diagonal entries.

    Flagged symmetric, and positive definite when every entry is positive.
    """

    def __init__(self, diag: ArrayLike, copy: bool = True) -> None:
        self.diagonal = _ensure_vector(np.ravel(diag), copy=copy)
        n = self.diagonal.size
        flags = ["diagonal", "symmetric"]
        if n and np.all(self.diagonal > 0):
            flags.append("positive_definite")
        super().__init__((n, n), self.diagonal.dtype, flags=flags)

    @classmethod
    def from_dense(cls, matrix: ArrayLike) -> DiagonalLinOp:
        """Wrap a dense square matrix that must be diagonal.

        Raises:
            ShapeError: if the matrix is not square or has a non-zero
                off-diagonal entry.
        """
        M = _ensure_square_matrix(matrix, copy=False)
        if not _is_diagonal(M):
            raise ShapeError("Matrix is not diagonal.")
        return cls(np.diag(M))

    def to_dense(self) -> Array:
        return np.diag(self.diagonal)

    def _apply(self, X: Array) -> Array:
        return self.diagonal[:, np.newaxis] * X

    _apply_transpose = _apply

    def diag(self) -> Array:
        return self.diagonal.copy()


class TriangularLinOp(LinOp):
    """Square triangular matrix; `lower` says which triangle `tri` holds."""

    def __init__(self, tri: ArrayLike, *, lower: bool = True, copy: bool = True) -> None:
        self.tri = _ensure_square_matrix(tri, copy=copy)
        self.lower = bool(lower)
        super().__init__(
            self.tri.shape,
            self.tri.dtype,
            flags=("triangular_lower" if self.lower else "triangular_upper",),
        )

    def to_dense(self) -> Array:
        return self.tri.copy()

    def _apply(self, X: Array) -> Array:
        return self.tri @ X

    def _apply_transpose(self, X: Array) -> Array:
        return self.tri.T @ X

    def upper(self) -> Array:
        """The factor as an upper triangular array (a copy)."""
        return self.tri.T.copy() if self.lower else self.tri.copy()


class RootLinOp(LinOp):
    """Symmetric positive semidefinite ``A = S @ S.T`` held through its root `S`.

    `S` may be rectangular (d, k); `A` is (d, d). Products go through `S`
    so `A` is never formed unless `to_dense` is called.
    """

    def __init__(self, root: LinOp | ArrayLike) -> None:
        self.root = root if isinstance(root, LinOp) else DenseLinOp(root)
        d = self.root.shape[0]
        super().__init__((d, d), self.root.dtype, flags=("symmetric",))

    def to_dense(self) -> Array:
        S = self.root.to_dense()
        return S @ S.T

    def _apply(self, X: Array) -> Array:
        return self.root.matmat(self.root.rmatmat(X))

    _apply_transpose = _apply


class CholeskyLinOp(RootLinOp):
    """Positive definite ``A = L @ L.T`` with `L` lower triangular.

    An upper triangular `TriangularLinOp` is accepted and stored transposed,
    so `root` is always lower.
    """

    def __init__(self, root: TriangularLinOp) -> None:
        if not isinstance(root, TriangularLinOp):
            raise ValueError("CholeskyLinOp requires initialization via a TriangularLinOp object.")
        if not root.lower:
            root = TriangularLinOp(root.tri.T, lower=True)
        super().__init__(root)
        self.add_flag("positive_definite")

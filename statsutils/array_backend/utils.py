# array_backend/utils.py
"""
Array canonicalization helpers used throughout statsutils.

The shape helpers take `copy: bool = True`; with `copy=True` the result never
shares memory with the input. Shape violations raise `ShapeError`.

`_ensure_data_matrix` and `_ensure_weights` are the single entry point through
which the weighted statistics validate their inputs. Both consult the active
`StatsConfig` for the finiteness policy, and `_ensure_weights` raises
`DimensionMismatchError` when the weight count does not match the
observation count.
"""

from __future__ import annotations

import numpy as np
from typing import Any

from ..custom_types import Array, ArrayLike
from ..config import get_config
from ..errors import DimensionMismatchError, ShapeError, _check_same_length


def _as_array(x: Any) -> Array:
    try:
        return np.asarray(x)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot interpret {type(x).__name__} as an array: {e}") from e


def _is_numpy_scalar(x: Any) -> bool:
    return np.isscalar(x) or isinstance(x, np.generic)


def _ensure_real_scalar(x: Any) -> float | int:
    """Unwrap a single real number to a Python scalar.

    Python and numpy scalars pass through (numpy ones via ``.item()``); arrays
    must hold exactly one element. Complex input raises ``ValueError``.
    """
    value = x if _is_numpy_scalar(x) else _as_array(x)
    if np.iscomplexobj(value):
        raise ValueError(f"Expected a real scalar, got complex input {value!r}.")
    if isinstance(value, np.ndarray):
        if value.size != 1:
            raise ValueError(f"Expected a single value, got shape {value.shape}.")
        return value.item()
    return value.item() if isinstance(value, np.generic) else value


def _ensure_vector(x: ArrayLike, *, copy: bool = True) -> Array:
    """Return `x` with shape (n,).

    Scalars become length one; (n, 1) and (1, n) matrices are flattened.
    """
    arr = _as_array(x)
    if arr.ndim > 2 or (arr.ndim == 2 and min(arr.shape) != 1):
        raise ShapeError(f"Expected a vector, got shape {arr.shape}.")
    out = arr.reshape(-1) if arr.ndim != 1 else arr
    return out.copy() if copy else out


def _ensure_matrix(x: ArrayLike, *, copy: bool = True) -> Array:
    """Return `x` as a 2D array; scalars are (1, 1), vectors a single column."""
    arr = _as_array(x)
    if arr.ndim > 2:
        raise ShapeError(f"Expected at most two dimensions, got shape {arr.shape}.")
    out = arr if arr.ndim == 2 else arr.reshape(-1, 1)
    return out.copy() if copy else out


def _ensure_square_matrix(x: ArrayLike, n: int | None = None, *, copy: bool = True) -> Array:
    """Return `x` as a square 2D array, of dimension `n` when given.

    Raises:
        ShapeError: if `x` is not square.
        DimensionMismatchError: if the dimension differs from `n`.
    """
    matrix = _ensure_matrix(x, copy=copy)
    if matrix.shape[0] != matrix.shape[1]:
        raise ShapeError(f"Expected a square matrix, got shape {matrix.shape}.")
    if n is not None and matrix.shape[0] != n:
        raise DimensionMismatchError(f"Expected dimension {n}, got {matrix.shape[0]}.")
    return matrix


def _is_diagonal(matrix: Array) -> bool:
    """True if every off-diagonal entry of a square matrix is exactly zero."""
    return not np.any(matrix[~np.eye(matrix.shape[0], dtype=bool)])


# ------------------------------------------------------------------------------
# Weighted statistics inputs
# ------------------------------------------------------------------------------

def _check_finite(arr: Array, name: str) -> None:
    if get_config().check_finite and not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains NaN or Inf values.")


def _ensure_data_matrix(data: ArrayLike) -> Array:
    """Return `data` as a floating point (n_obs, n_vars) matrix.

    A 1D input is treated as n observations of a single variable. Integer
    input is promoted to float64 so that centering is exact.
    """
    X = _ensure_matrix(data, copy=False)
    X = X.astype(np.result_type(X.dtype, np.float64), copy=False)
    _check_finite(X, "data")
    return X


def _ensure_weights(weights: ArrayLike | None, n: int) -> Array:
    """Return weights as a float vector of length `n`; `None` means all ones.

    Raises:
        DimensionMismatchError: if the number of weights differs from `n`.
    """
    if weights is None:
        return np.ones(n, dtype=np.float64)

    w = _ensure_vector(weights, copy=False)
    _check_same_length(n, w.size)
    w = w.astype(np.result_type(w.dtype, np.float64), copy=False)
    _check_finite(w, "weights")
    return w
